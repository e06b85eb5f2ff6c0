"""访问日志中间件

- 每个请求分配 trace_id (沿用请求头 X-Trace-ID，否则生成 uuid4)
- 响应头追加 X-Trace-ID / X-Process-Time
- 未处理异常转换为统一错误响应
查询串中的 auth_code 由日志 sink 统一脱敏。
"""

import time
import uuid

from starlette.datastructures import Headers, MutableHeaders
from starlette.types import ASGIApp, Message, Receive, Scope, Send

from internal.core.exception import AppException, errors
from pkg.logger import logger
from pkg.toolkit import context
from pkg.toolkit.exc import describe_cause_chain, format_exception_tail
from pkg.toolkit.response import CustomORJSONResponse, error_response

TRACE_HEADER = "X-Trace-ID"


class _Exchange:
    """一次 HTTP 请求/响应往返的记录"""

    __slots__ = ("trace_id", "started_at", "status", "scope")

    def __init__(self, scope: Scope):
        self.scope = scope
        self.trace_id = Headers(scope=scope).get(TRACE_HEADER) or uuid.uuid4().hex
        self.started_at = time.perf_counter()
        self.status: int | None = None

    @property
    def elapsed(self) -> float:
        return time.perf_counter() - self.started_at

    @property
    def summary(self) -> str:
        client = self.scope.get("client") or ("unknown", 0)
        query = self.scope.get("query_string", b"").decode("latin-1")
        target = f"{self.scope['path']}?{query}" if query else self.scope["path"]
        return f"{client[0]} {self.scope['method']} {target}"

    def wrap_send(self, send: Send) -> Send:
        async def _send(message: Message) -> None:
            if message["type"] == "http.response.start":
                self.status = message["status"]
                headers = MutableHeaders(scope=message)
                headers[TRACE_HEADER] = self.trace_id
                headers["X-Process-Time"] = f"{self.elapsed:.6f}"
            await send(message)

        return _send


def _render_error(exc: Exception) -> CustomORJSONResponse:
    if isinstance(exc, AppException):
        logger.warning(f"Business exception: {describe_cause_chain(exc)}")
        return error_response(exc.error, message=exc.message)
    logger.error(f"Unexpected exception: {describe_cause_chain(exc)}\n{format_exception_tail(exc, limit=10)}")
    return error_response(errors.InternalServerError, message=str(exc))


class ASGIRecordMiddleware:
    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            return await self.app(scope, receive, send)

        exchange = _Exchange(scope)
        context.init(trace_id=exchange.trace_id)
        send = exchange.wrap_send(send)

        with logger.contextualize(trace_id=exchange.trace_id):
            logger.info(f"--> {exchange.summary}")
            try:
                await self.app(scope, receive, send)
            except Exception as exc:
                if exchange.status is not None:
                    logger.critical(f"Exception after response started, status={exchange.status}: {exc!r}")
                    raise
                await _render_error(exc)(scope, receive, send)
            logger.info(f"<-- {exchange.status} {exchange.summary} {exchange.elapsed:.4f}s")
