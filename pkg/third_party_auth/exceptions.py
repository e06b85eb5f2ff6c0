"""第三方认证异常定义

所有异常都继承自 ThirdPartyAuthError，宿主框架可以统一捕获。
除 VerificationRejected 走 fail 钩子外，其余异常都通过 error 钩子上报。
"""

from typing import Any


class ThirdPartyAuthError(Exception):
    """第三方认证异常基类"""

    def __init__(self, message: str = ""):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class ConfigurationError(ThirdPartyAuthError, ValueError):
    """缺少必要配置（凭证、verify 回调等），在构造时同步抛出"""


class TransportError(ThirdPartyAuthError):
    """网络错误、超时或网关返回非 2xx 状态码"""

    def __init__(self, message: str = "", *, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class ResponseFormatError(ThirdPartyAuthError):
    """响应无法按声明字符集解码或无法解析为 JSON 对象"""


class GatewayError(ThirdPartyAuthError):
    """网关返回结构化错误 (error_response 或业务失败码)

    Attributes:
        code: 网关返回码，例如 "40002"
        sub_code: 明细错误码，例如 "isv.code-invalid"
        sub_msg: 明细错误描述
        payload: 原始错误对象
    """

    def __init__(
        self,
        message: str = "",
        *,
        code: str | None = None,
        sub_code: str | None = None,
        sub_msg: str | None = None,
        payload: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.sub_code = sub_code
        self.sub_msg = sub_msg
        self.payload = payload or {}


class MalformedProfileError(ThirdPartyAuthError):
    """用户信息载荷不是合法 JSON 或缺少必要字段"""


class VerificationRejected(ThirdPartyAuthError):
    """业务 verify 回调未返回用户（软失败）"""

    def __init__(self, message: str = "", *, info: Any = None):
        super().__init__(message)
        self.info = info


class ConsumerCallbackError(ThirdPartyAuthError):
    """业务 verify 回调内部抛出的异常，原始异常保存在 __cause__"""
