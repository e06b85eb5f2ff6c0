from pathlib import Path

from internal import BASE_DIR
from internal.config import setting
from pkg.logger import init_logger as _init_logger
from pkg.logger import is_logger_initialized, logger


def init_logger(*, force: bool = False) -> None:
    """按配置初始化应用日志，已初始化时跳过"""
    if is_logger_initialized() and not force:
        return

    _init_logger(
        level=setting.LOG_LEVEL,
        base_log_dir=Path(setting.LOG_DIR) if setting.LOG_DIR else BASE_DIR / "logs",
        log_format=setting.LOG_FORMAT,
        write_to_file=setting.LOG_TO_FILE,
    )
    logger.info(f"Logger initialized for env={setting.APP_ENV}")
