"""orjson 封装：网关响应解析、日志 JSON Lines、API 响应渲染共用"""

from decimal import Decimal
from enum import Enum
from typing import Any

import orjson

# 时间统一输出为 UTC 的 Z 结尾格式，允许 int 等非字符串键
DEFAULT_ORJSON_OPTIONS = orjson.OPT_NAIVE_UTC | orjson.OPT_UTC_Z | orjson.OPT_NON_STR_KEYS

type JsonInput = str | bytes | bytearray | memoryview


def _fallback(obj: Any) -> Any:
    """orjson 不认识的类型"""
    if isinstance(obj, Decimal):
        return None if not obj.is_finite() else str(obj)
    if isinstance(obj, (bytes, bytearray)):
        return bytes(obj).decode("utf-8", "replace")
    if isinstance(obj, (set, frozenset)):
        return sorted(obj, key=str)
    if isinstance(obj, Enum):
        return obj.value
    raise TypeError(f"{type(obj).__name__} is not JSON serializable")


def orjson_dumps_bytes(obj: Any, *, default: Any = None, option: int | None = None) -> bytes:
    try:
        return orjson.dumps(obj, default=default or _fallback, option=DEFAULT_ORJSON_OPTIONS if option is None else option)
    except TypeError as e:
        raise ValueError(f"JSON serialization failed for {type(obj).__name__}: {e}") from e


def orjson_dumps(obj: Any, *, default: Any = None, option: int | None = None) -> str:
    return orjson_dumps_bytes(obj, default=default, option=option).decode("utf-8")


def orjson_loads(data: JsonInput) -> Any:
    """解析 JSON，语法错误统一抛 ValueError"""
    try:
        return orjson.loads(data)
    except orjson.JSONDecodeError as e:
        raise ValueError(f"JSON deserialization failed: {e}") from e
