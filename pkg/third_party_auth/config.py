"""第三方认证配置数据类 - 类型安全的配置容器"""

from dataclasses import dataclass

from .exceptions import ConfigurationError

ALIPAY_GATEWAY_URL = "https://openapi.alipay.com/gateway.do"
ALIPAY_AUTHORIZE_URL = "https://openauth.alipay.com/oauth2/publicAppAuthorize.htm"


@dataclass(frozen=True)
class AlipayConfig:
    """支付宝开放平台配置

    Attributes:
        app_id: 支付宝应用 AppID
        app_private_key: 应用私钥（PEM 文本、裸 Base64 或文件路径，用于签名）
        alipay_public_key: 支付宝公钥（PEM 文本、裸 Base64 或文件路径，用于验签/加密）
        gateway_url: 开放平台网关地址
        authorize_url: 用户授权页地址
        charset: 请求字符集，同时决定响应体解码方式
        sign_type: 签名类型，仅支持 RSA2
        version: 接口版本
        timezone: timestamp 字段使用的时区
        timeout: 网关请求超时（秒）
    """

    app_id: str
    app_private_key: str
    alipay_public_key: str
    gateway_url: str = ALIPAY_GATEWAY_URL
    authorize_url: str = ALIPAY_AUTHORIZE_URL
    charset: str = "gbk"
    sign_type: str = "RSA2"
    version: str = "1.0"
    timezone: str = "Asia/Shanghai"
    timeout: float = 15

    def __post_init__(self) -> None:
        """验证配置有效性"""
        if not self.app_id or not self.app_private_key or not self.alipay_public_key:
            raise ConfigurationError("Alipay config requires app_id, app_private_key, and alipay_public_key")
        if self.sign_type != "RSA2":
            raise ConfigurationError(f"Unsupported sign_type: {self.sign_type}, only RSA2 is supported")
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")
