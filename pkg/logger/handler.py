import re
import sys
from datetime import UTC, time, timedelta
from enum import StrEnum
from pathlib import Path
from typing import Any

import loguru

from pkg.toolkit import context
from pkg.toolkit.json import orjson_dumps
from pkg.toolkit.timer import format_iso_datetime

# 默认日志目录
_DEFAULT_BASE_LOG_DIR = Path("/tmp/alipay_auth_logs")

# 类型别名
RotationType = str | int | time | timedelta
RetentionType = str | int | timedelta

# 授权码、令牌、签名只保留前 6 位
_SENSITIVE_PATTERN = re.compile(r"\b(auth_code|access_token|refresh_token|auth_token|sign)=([^\s&,;)]{7,})")
_PEM_PATTERN = re.compile(r"-----BEGIN [A-Z ]*KEY-----.*?-----END [A-Z ]*KEY-----", re.S)


def redact(message: str) -> str:
    """脱敏日志消息中的授权码、令牌、签名和 PEM 密钥"""
    message = _PEM_PATTERN.sub("<redacted key>", message)
    return _SENSITIVE_PATTERN.sub(lambda m: f"{m.group(1)}={m.group(2)[:6]}...", message)


class LogFormat(StrEnum):
    """日志格式枚举"""

    JSON = "json"
    TEXT = "text"


_TEXT_LAYOUT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSSZ} | {level: <8} | {name}:{function}:{line} | {extra[_trace_id]} - {message}"
)
_COLOR_LAYOUT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss.SSSZ}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<magenta>{extra[_trace_id]}</magenta> - <level>{message}</level>"
)


class LoggerHandler:
    """
    基于 loguru 的日志管理器

    - 控制台 + 按天切分的文件两个 sink
    - TEXT / JSON Lines 两种格式
    - 每行带 trace_id (extra[trace_id] 优先，其次请求上下文)
    - 写出前对敏感字段脱敏
    """

    def __init__(
        self,
        *,
        level: str = "INFO",
        base_log_dir: Path | None = None,
        rotation: RotationType = time(0, 0, 0, tzinfo=UTC),
        retention: RetentionType = timedelta(days=30),
        compression: str | None = None,
        use_utc: bool = True,
        enqueue: bool = True,
        log_format: LogFormat | str = LogFormat.TEXT,
    ):
        """
        :param level: 日志等级
        :param base_log_dir: 日志文件目录，文件名为 YYYY-MM-DD.log
        :param rotation: 轮转策略，默认每天 00:00
        :param retention: 保留策略，默认 30 天
        :param compression: 压缩格式 (e.g., "zip")
        :param use_utc: 日志时间统一转换为 UTC
        :param enqueue: 是否通过队列异步写入
        :param log_format: LogFormat.TEXT 或 LogFormat.JSON
        """
        self._logger = loguru.logger
        self._is_initialized = False

        self.level = level
        self.base_log_dir = base_log_dir or _DEFAULT_BASE_LOG_DIR
        self.retention = retention
        self.compression = compression
        self.use_utc = use_utc
        self.enqueue = enqueue
        self.log_format = LogFormat(log_format)

        # rotation 时刻没有时区时，与日志时间保持同一时区
        if use_utc and isinstance(rotation, time) and rotation.tzinfo is None:
            rotation = rotation.replace(tzinfo=UTC)
        self.rotation = rotation

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized

    def setup(self, *, write_to_file: bool = True, write_to_console: bool = True) -> "loguru.Logger":
        """移除已有 sink，按当前配置重新挂载"""
        self._logger.remove()
        self._logger.configure(extra={"trace_id": None}, patcher=self._patch_record)

        is_json = self.log_format == LogFormat.JSON
        if write_to_console:
            self._logger.add(
                sink=sys.stderr,
                level=self.level,
                enqueue=self.enqueue,
                colorize=not is_json,
                diagnose=False,
                format=self._json_formatter if is_json else self._console_formatter,
            )

        if write_to_file:
            self.base_log_dir.mkdir(parents=True, exist_ok=True)
            self._logger.add(
                sink=self.base_log_dir / "{time:YYYY-MM-DD}.log",
                level=self.level,
                rotation=self.rotation,
                retention=self.retention,
                compression=self.compression,
                enqueue=self.enqueue,
                encoding="utf-8",
                format=self._json_formatter if is_json else self._file_formatter,
            )

        self._is_initialized = True
        self._logger.info(
            f"Logger initialized. utc={self.use_utc} format={self.log_format} level={self.level} "
            f"file={self.base_log_dir if write_to_file else '-'}"
        )
        return self._logger

    # --- record 处理 ---

    def _patch_record(self, record: Any) -> None:
        if self.use_utc:
            record["time"] = record["time"].astimezone(UTC)
        record["message"] = redact(record["message"])
        record["extra"]["_trace_id"] = record["extra"].get("trace_id") or context.get_trace_id()

    # --- 格式化器 ---

    @staticmethod
    def _console_formatter(_record: Any) -> str:
        return _COLOR_LAYOUT + "\n{exception}"

    @staticmethod
    def _file_formatter(_record: Any) -> str:
        return _TEXT_LAYOUT + "\n{exception}"

    @staticmethod
    def _json_formatter(record: Any) -> str:
        """JSON Lines：每条日志一行 JSON"""
        payload = {
            "time": format_iso_datetime(record["time"]),
            "level": record["level"].name,
            "trace_id": record["extra"]["_trace_id"],
            "location": f"{record['name']}.{record['function']}:{record['line']}",
            "message": record["message"],
        }
        payload.update({k: v for k, v in record["extra"].items() if not k.startswith("_") and k != "trace_id"})
        if record["exception"] is not None:
            payload["exception"] = repr(record["exception"].value)

        record["extra"]["_json_out"] = orjson_dumps(payload, default=str)
        return "{extra[_json_out]}\n"
