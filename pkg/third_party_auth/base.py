"""第三方认证策略抽象基类 - 无业务依赖的通用接口"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any


@dataclass
class AccessToken:
    """授权码换取的令牌信息

    Attributes:
        access_token: 访问令牌
        refresh_token: 刷新令牌
        user_id: 平台用户唯一标识（支付宝 2088 开头的 user_id）
        open_id: 应用维度的用户标识（新应用可能只返回 open_id）
        expires_in: access_token 有效期（秒）
        re_expires_in: refresh_token 有效期（秒）
        auth_start: 授权开始时间
        raw: 原始返回数据
    """

    access_token: str
    refresh_token: str | None = None
    user_id: str | None = None
    open_id: str | None = None
    expires_in: int | None = None
    re_expires_in: int | None = None
    auth_start: str | None = None
    raw: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> "AccessToken":
        def _int_or_none(v: Any) -> int | None:
            try:
                return int(v)
            except (TypeError, ValueError):
                return None

        user_id = payload.get("user_id")
        open_id = payload.get("open_id")
        return cls(
            access_token=payload.get("access_token", ""),
            refresh_token=payload.get("refresh_token"),
            user_id=str(user_id) if user_id is not None else None,
            open_id=str(open_id) if open_id is not None else None,
            expires_in=_int_or_none(payload.get("expires_in")),
            re_expires_in=_int_or_none(payload.get("re_expires_in")),
            auth_start=payload.get("auth_start"),
            raw=payload,
        )

    @property
    def subject(self) -> str | None:
        """用户标识，优先 user_id，其次 open_id"""
        return self.user_id or self.open_id


@dataclass
class Profile:
    """第三方用户信息统一结构

    Attributes:
        id: 平台用户唯一标识
        display_name: 昵称
        avatar: 头像 URL
        photos: 头像列表，形如 [{"value": avatar}]
        provider: 平台标识
        gender: 性别（平台原值）
        province: 省份
        city: 城市
        raw: 原始数据（保留扩展性，供业务方查看）
    """

    id: str
    display_name: str | None = None
    avatar: str | None = None
    photos: list[dict[str, Any]] = field(default_factory=list)
    provider: str = "alipay"
    gender: str | None = None
    province: str | None = None
    city: str | None = None
    raw: dict[str, Any] | None = None


class BaseThirdPartyAuthStrategy(ABC):
    """第三方认证策略抽象基类

    所有第三方登录策略都必须实现此接口。
    策略应该是无状态的，配置通过构造函数注入。
    """

    @abstractmethod
    async def get_access_token(self, code: str) -> AccessToken:
        """
        通过授权码获取 access_token

        Args:
            code: 授权码（支付宝 auth_code 等）

        Returns:
            AccessToken: 令牌信息

        Raises:
            ThirdPartyAuthError: 当网络或平台 API 返回错误时
        """
        pass

    @abstractmethod
    async def get_user_info(self, access_token: str) -> dict[str, Any]:
        """
        获取第三方用户原始信息

        Args:
            access_token: 访问令牌

        Returns:
            平台返回的原始用户信息

        Raises:
            ThirdPartyAuthError: 当网络或平台 API 返回错误时
        """
        pass

    @abstractmethod
    async def get_profile(self, access_token: str) -> Profile:
        """获取并标准化用户信息"""
        pass

    @abstractmethod
    def get_authorize_url(
        self,
        *,
        redirect_uri: str,
        scope: str,
        state: str,
        app_id: str | None = None,
    ) -> str:
        """构造授权页跳转地址"""
        pass

    @abstractmethod
    def get_platform_name(self) -> str:
        """
        获取平台名称

        Returns:
            平台名称，如 'alipay'
        """
        pass

    async def close(self) -> None:
        """
        关闭资源（HTTP 客户端等）

        子类可以重写此方法进行资源清理。
        默认实现为空。
        """
        pass
