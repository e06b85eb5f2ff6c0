from dataclasses import dataclass
from typing import Any

from starlette.responses import JSONResponse

from pkg.toolkit.json import orjson_dumps_bytes


# =========================================================
# 1. 定义状态码结构
# =========================================================


@dataclass(frozen=True)
class AppStatus:
    """
    应用状态对象基类
    将状态码、HTTP 状态与多语言文案绑定在一起
    """

    code: int
    message: dict[str, str]
    http_status: int = 200

    def get_msg(self, lang: str = "zh") -> str:
        """根据语言获取文案，默认回退到中文"""
        return self.message.get(lang) or self.message.get("zh", "")


@dataclass(frozen=True)
class AppError(AppStatus):
    """
    专门用于表示应用错误的子类
    """

    http_status: int = 500


class BaseCodes:
    """
    全局状态码定义
    不使用 Enum，直接使用类属性，方便代码跳转和类型提示
    """

    success = AppStatus(20000, {"zh": "", "en": ""})


# =========================================================
# 2. 基于 orjson 的 JSON 响应类
# =========================================================


class CustomORJSONResponse(JSONResponse):
    media_type = "application/json"

    def render(self, content: Any) -> bytes:
        return orjson_dumps_bytes(content)


# =========================================================
# 3. 响应构造
# =========================================================


def success_response(data: dict[str, Any] | None = None, *, http_status: int = 200) -> CustomORJSONResponse:
    return CustomORJSONResponse(status_code=http_status, content=data)


def error_response(error: AppError, message: str | None = None, *, lang: str = "en") -> CustomORJSONResponse:
    """错误响应，body 固定为 {"code": ..., "message": ...}"""
    return CustomORJSONResponse(
        status_code=error.http_status,
        content={
            "code": error.code,
            "message": message or error.get_msg(lang),
        },
    )
