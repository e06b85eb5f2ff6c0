"""
pkg.logger - 进程级日志入口

init_logger() 在启动时调用一次，之后通过 logger 代理对象记录日志:

    from pkg.logger import init_logger, logger

    init_logger(level="DEBUG", log_format="json", write_to_file=False)
    logger.info("Alipay strategy initialized")

所有 sink 在写出前都会对 auth_code / access_token / sign 等字段脱敏。
"""
from typing import TYPE_CHECKING, Any

from pkg.logger.handler import LogFormat, LoggerHandler, RetentionType, RotationType, redact
from pkg.toolkit.types import LazyProxy

if TYPE_CHECKING:
    from loguru import Logger

_handler: "LoggerHandler | None" = None
_logger: "Logger | None" = None


def _get_logger() -> "Logger":
    if _logger is None:
        raise RuntimeError("Logger not initialized. Call init_logger() first.")
    return _logger


def init_logger(*, write_to_file: bool = True, write_to_console: bool = True, **options: Any) -> "Logger":
    """
    创建 LoggerHandler 并挂载 sink，重复调用会替换之前的配置

    :param write_to_file: 是否写入按天切分的日志文件
    :param write_to_console: 是否输出到 stderr
    :param options: 透传给 LoggerHandler，如 level / base_log_dir / log_format / enqueue
    """
    global _handler, _logger

    _handler = LoggerHandler(**options)
    _logger = _handler.setup(write_to_file=write_to_file, write_to_console=write_to_console)
    return _logger


def get_logger_manager() -> "LoggerHandler":
    """当前生效的 LoggerHandler"""
    if _handler is None:
        raise RuntimeError("LoggerHandler not initialized. Call init_logger() first.")
    return _handler


def is_logger_initialized() -> bool:
    return _handler is not None and _handler.is_initialized


logger: "Logger" = LazyProxy(_get_logger)  # type: ignore[assignment]

__all__ = [
    "LoggerHandler",
    "LogFormat",
    "RotationType",
    "RetentionType",
    "init_logger",
    "get_logger_manager",
    "is_logger_initialized",
    "redact",
    "logger",
]
