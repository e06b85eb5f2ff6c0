from pkg.toolkit.response import AppError, BaseCodes


class GlobalCodes(BaseCodes):
    """
    全局状态码定义
    """

    # 客户端错误 (40000 - 49999)
    BadRequest = AppError(40000, {"zh": "请求参数错误", "en": "Bad Request"}, http_status=400)
    Unauthorized = AppError(40001, {"zh": "未授权，请登录", "en": "Unauthorized"}, http_status=401)
    NotFound = AppError(40004, {"zh": "资源不存在", "en": "Not Found"}, http_status=404)

    # 服务端错误 (50000 - 59999)
    InternalServerError = AppError(50000, {"zh": "服务器内部错误", "en": "Internal Server Error"}, http_status=500)
    BadGateway = AppError(50200, {"zh": "上游服务异常", "en": "Bad Gateway"}, http_status=502)
    ServiceUnavailable = AppError(50300, {"zh": "服务暂不可用", "en": "Service Unavailable"}, http_status=503)


errors = GlobalCodes()


class AppException(Exception):
    def __init__(self, error: AppError, message: str = ""):
        """
        业务异常，由全局异常处理器转换为 {"code", "message"} 响应

        :param error: 状态码对象，决定业务码与 HTTP 状态码
        :param message: 错误描述，为空时使用状态码默认文案
        """
        self.error = error
        self.message = message or error.get_msg("en")
        super().__init__(self.message)

    def __str__(self):
        return f"AppException: code={self.error.code}, message={self.message}"
