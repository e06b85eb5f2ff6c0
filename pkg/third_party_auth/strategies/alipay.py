"""支付宝登录策略实现 - 配置通过参数注入"""

from typing import Any
from urllib.parse import quote

from pkg.logger import logger
from pkg.signature import RSASignatureHandler
from pkg.toolkit.http_cli import AsyncHttpClient
from pkg.toolkit.json import orjson_loads
from pkg.toolkit.timer import format_gateway_timestamp

from .. import profile as profile_parser
from ..base import AccessToken, BaseThirdPartyAuthStrategy, Profile
from ..config import AlipayConfig
from ..exceptions import ConfigurationError, GatewayError, ResponseFormatError, TransportError

# 与 encodeURIComponent 保持一致的保留字符
_URI_COMPONENT_SAFE = "!*'()"


def _mask(token: str | None) -> str:
    if not token:
        return "-"
    return f"{token[:6]}..."


class AlipayAuthStrategy(BaseThirdPartyAuthStrategy):
    """支付宝 OAuth2.0 (用户信息授权) 认证策略

    使用示例:
        ```python
        strategy = AlipayAuthStrategy(
            config=AlipayConfig(
                app_id="2021000000000000",
                app_private_key="/etc/alipay/app_private_key.pem",
                alipay_public_key="/etc/alipay/alipay_public_key.pem",
            )
        )

        token = await strategy.get_access_token(auth_code)
        profile = await strategy.get_profile(token.access_token)
        ```
    """

    TOKEN_METHOD = "alipay.system.oauth.token"
    USER_INFO_METHOD = "alipay.user.info.share"

    # 支付宝业务成功码
    SUCCESS_CODE = "10000"

    def __init__(self, config: AlipayConfig, http_client: AsyncHttpClient | None = None):
        """
        初始化支付宝认证策略

        Args:
            config: 支付宝配置（通过依赖注入）
            http_client: 自定义 HTTP 客户端，默认按 config.timeout 创建
        """
        if not isinstance(config, AlipayConfig):
            raise ConfigurationError("AlipayAuthStrategy requires an AlipayConfig")

        self.config = config
        self.signer = RSASignatureHandler(
            private_key=config.app_private_key,
            public_key=config.alipay_public_key,
        )
        self._http_client = http_client or AsyncHttpClient(
            timeout=config.timeout,
            headers={"Accept": "application/json"},
        )

    # --- 请求构造 ---

    def build_request_params(self, method: str, **biz_params: Any) -> dict[str, Any]:
        """
        构造带签名的网关请求参数

        Args:
            method: 接口名称，如 alipay.system.oauth.token
            **biz_params: 接口特有参数

        Returns:
            追加了 sign 字段的参数字典
        """
        params: dict[str, Any] = {
            "app_id": self.config.app_id,
            "method": method,
            "format": "JSON",
            "charset": self.config.charset,
            "sign_type": self.config.sign_type,
            "timestamp": format_gateway_timestamp(tz_name=self.config.timezone),
            "version": self.config.version,
            **biz_params,
        }
        return self.signer.sign_params(params)

    @staticmethod
    def response_key(method: str) -> str:
        """alipay.system.oauth.token -> alipay_system_oauth_token_response"""
        return method.replace(".", "_") + "_response"

    def _decode_body(self, body: bytes) -> dict[str, Any]:
        """按请求声明的字符集解码响应体，再解析 JSON"""
        try:
            text = body.decode(self.config.charset)
        except (UnicodeDecodeError, LookupError) as e:
            raise ResponseFormatError(f"Failed to decode gateway response as {self.config.charset}: {e}") from e

        try:
            data = orjson_loads(text)
        except ValueError as e:
            raise ResponseFormatError(f"Gateway response is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ResponseFormatError(f"Gateway response must be a JSON object, got {type(data).__name__}")
        return data

    async def _call(self, method: str, **biz_params: Any) -> dict[str, Any]:
        params = self.build_request_params(method, **biz_params)

        result = await self._http_client.post_form(self.config.gateway_url, params)
        if not result.success:
            logger.error(f"Alipay gateway {method} failed: {result.error}")
            raise TransportError(
                f"Alipay gateway request failed: {result.error}",
                status_code=result.status_code,
            )

        data = self._decode_body(result.content)

        if "error_response" in data:
            err = data["error_response"] if isinstance(data["error_response"], dict) else {}
            logger.error(f"Alipay API error: method={method}, error_response={err}")
            raise GatewayError(
                err.get("msg") or "unknown error",
                code=err.get("code"),
                sub_code=err.get("sub_code"),
                sub_msg=err.get("sub_msg"),
                payload=err,
            )

        response = data.get(self.response_key(method))
        if not isinstance(response, dict):
            response = {}

        # 部分接口在成功结构中返回业务失败码
        code = response.get("code")
        if code is not None and str(code) != self.SUCCESS_CODE:
            logger.error(f"Alipay API business error: method={method}, response={response}")
            raise GatewayError(
                response.get("sub_msg") or response.get("msg") or "unknown error",
                code=str(code),
                sub_code=response.get("sub_code"),
                sub_msg=response.get("sub_msg"),
                payload=response,
            )

        return response

    # --- 接口 ---

    async def get_access_token(self, code: str) -> AccessToken:
        """
        通过 auth_code 换取 access_token

        Args:
            code: 支付宝授权码 auth_code

        Returns:
            AccessToken: 包含 access_token、refresh_token、user_id、expires_in 等

        Raises:
            TransportError / ResponseFormatError / GatewayError
        """
        response = await self._call(self.TOKEN_METHOD, grant_type="authorization_code", code=code)
        token = AccessToken.from_payload(response)
        logger.info(f"Alipay access_token fetched, user_id={token.subject}, access_token={_mask(token.access_token)}")
        return token

    async def get_user_info(self, access_token: str) -> dict[str, Any]:
        """
        获取支付宝用户原始信息

        Args:
            access_token: 支付宝 access_token（请求字段为 auth_token）

        Returns:
            alipay_user_info_share_response 原始对象
        """
        response = await self._call(self.USER_INFO_METHOD, auth_token=access_token)
        logger.info(f"Alipay user info fetched, user_id={response.get('user_id') or response.get('open_id')}")
        return response

    async def get_profile(self, access_token: str) -> Profile:
        """获取用户信息并标准化为 Profile（附带 provider 和原始数据）"""
        raw = await self.get_user_info(access_token)
        profile = profile_parser.parse(raw)
        profile.provider = self.get_platform_name()
        profile.raw = raw
        return profile

    def get_authorize_url(
        self,
        *,
        redirect_uri: str,
        scope: str = "auth_user",
        state: str = "ALIPAY",
        app_id: str | None = None,
    ) -> str:
        """
        构造支付宝授权页跳转地址

        参数顺序固定为 app_id、scope、state、redirect_uri，redirect_uri 做 URI 组件编码。
        """
        if not redirect_uri:
            raise ConfigurationError("Alipay authorize url requires a callback url")

        query = "&".join(
            [
                f"app_id={quote(app_id or self.config.app_id, safe=_URI_COMPONENT_SAFE)}",
                f"scope={quote(scope, safe=',' + _URI_COMPONENT_SAFE)}",
                f"state={quote(state, safe=_URI_COMPONENT_SAFE)}",
                f"redirect_uri={quote(redirect_uri, safe=_URI_COMPONENT_SAFE)}",
            ]
        )
        return f"{self.config.authorize_url}?{query}"

    def get_platform_name(self) -> str:
        """获取平台名称"""
        return "alipay"

    async def close(self) -> None:
        """关闭 HTTP 客户端"""
        await self._http_client.close()
