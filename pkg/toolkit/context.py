from contextvars import ContextVar
from typing import Any

_request_ctx_var: ContextVar[dict[str, Any]] = ContextVar("request_ctx")

KEY_TRACE_ID = "trace_id"


def init(trace_id: str) -> None:
    """
    初始化请求上下文，由请求记录中间件在每个请求开始时调用。
    """
    if not trace_id:
        raise ValueError("trace_id is mandatory and cannot be empty or None")

    if not isinstance(trace_id, str):
        raise ValueError("trace_id must be a string")

    _request_ctx_var.set({KEY_TRACE_ID: trace_id})


def get_val(key: str, default: Any = None) -> Any:
    try:
        ctx = _request_ctx_var.get()
    except LookupError:
        return default
    return ctx.get(key, default)


def get_trace_id() -> str:
    """获取当前 trace_id，未初始化时返回 '-'"""
    return get_val(KEY_TRACE_ID) or "-"
