"""第三方认证模块 - 支付宝授权登录

架构设计:
    - base: 抽象基类和数据类（AccessToken、Profile）
    - config: 平台配置数据类
    - exceptions: 错误分类
    - profile: 用户信息标准化
    - strategies: 具体平台网关实现（配置通过参数注入）
    - flow: 授权登录流程控制器（发起授权 / 处理回调 / 调用业务 verify）
    - factory: 策略工厂和平台枚举

使用示例:
    ```python
    from pkg.third_party_auth import AlipayAuthFlow, AlipayAuthStrategy, AlipayConfig

    strategy = AlipayAuthStrategy(
        config=AlipayConfig(
            app_id="2021000000000000",
            app_private_key="/etc/alipay/app_private_key.pem",
            alipay_public_key="/etc/alipay/alipay_public_key.pem",
        )
    )

    def verify(access_token, refresh_token, profile, done):
        done(None, {"id": profile.id, "name": profile.display_name})

    flow = AlipayAuthFlow(strategy, verify, callback_url="https://example.com/v1/auth/alipay")
    result = await flow.authenticate(request, hooks)
    ```
"""

from .base import AccessToken, BaseThirdPartyAuthStrategy, Profile
from .config import AlipayConfig
from .exceptions import (
    ConfigurationError,
    ConsumerCallbackError,
    GatewayError,
    MalformedProfileError,
    ResponseFormatError,
    ThirdPartyAuthError,
    TransportError,
    VerificationRejected,
)
from .factory import ThirdPartyAuthFactory, ThirdPartyPlatform
from .flow import AlipayAuthFlow, AuthHooks, AuthOutcome, AuthResult
from .strategies.alipay import AlipayAuthStrategy

__all__ = [
    # 基础接口
    "AccessToken",
    "BaseThirdPartyAuthStrategy",
    "Profile",
    "AlipayConfig",

    # 异常
    "ThirdPartyAuthError",
    "ConfigurationError",
    "TransportError",
    "ResponseFormatError",
    "GatewayError",
    "MalformedProfileError",
    "VerificationRejected",
    "ConsumerCallbackError",

    # 工厂和枚举
    "ThirdPartyPlatform",
    "ThirdPartyAuthFactory",

    # 具体策略和流程
    "AlipayAuthStrategy",
    "AlipayAuthFlow",
    "AuthHooks",
    "AuthOutcome",
    "AuthResult",
]
