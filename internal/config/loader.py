"""配置加载器"""

import os
from pathlib import Path

from dotenv import dotenv_values
from loguru import logger

from internal import BASE_DIR
from internal.config.settings import Settings

CONFIG_DIR: Path = BASE_DIR / "configs"


def detect_app_env(secrets_path: Path | None = None) -> str:
    """
    检测应用环境

    规则：
    - 系统环境变量 APP_ENV 优先
    - 其次读取 .secrets 文件中的 APP_ENV
    - 都没有时默认 local
    """
    app_env = os.getenv("APP_ENV")
    if app_env:
        return app_env

    secrets_path = secrets_path or CONFIG_DIR / ".secrets"
    if secrets_path.exists():
        app_env = dotenv_values(secrets_path).get("APP_ENV")

    return app_env or "local"


def load_config() -> Settings:
    """
    加载应用配置

    加载顺序：[.env.{env}, .secrets] -> 后者覆盖前者，系统环境变量最高
    """
    logger.info("Loading configuration...")

    app_env = detect_app_env()
    logger.info(f"Detected Environment: {app_env}")

    load_files = [p for p in (CONFIG_DIR / f".env.{app_env}", CONFIG_DIR / ".secrets") if p.exists()]
    if load_files:
        logger.info(f"Loading files: {[f.name for f in load_files]}")

    try:
        _settings = Settings(_env_file=load_files or None)  # type: ignore[call-arg]
    except Exception as e:
        logger.critical(f"Config load failed: {e}")
        raise

    logger.success("Configuration loaded successfully.")
    return _settings


# 全局配置实例（私有）
_settings_instance: Settings | None = None


def get_settings() -> Settings:
    """获取配置实例（首次调用时加载）"""
    global _settings_instance
    if _settings_instance is None:
        _settings_instance = load_config()
    return _settings_instance


def reset_settings():
    """
    重置配置实例（主要用于测试）
    """
    global _settings_instance
    _settings_instance = None
