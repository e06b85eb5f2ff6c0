"""应用配置模型定义"""

from typing import Literal

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from pkg.logger import LogFormat
from pkg.third_party_auth.config import ALIPAY_AUTHORIZE_URL, ALIPAY_GATEWAY_URL, AlipayConfig


class Settings(BaseSettings):
    """
    应用全局配置。

    加载优先级 (从高到低):
    1. 系统环境变量
    2. configs/.secrets
    3. configs/.env.{APP_ENV}
    """

    # --- 核心环境配置 ---
    APP_ENV: Literal["local", "dev", "test", "prod"] = "local"
    DEBUG: bool = False

    # --- 日志配置 ---
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: LogFormat = LogFormat.TEXT  # 日志格式: TEXT 或 JSON
    LOG_DIR: str | None = None  # 不配置时使用 BASE_DIR/logs
    LOG_TO_FILE: bool = True

    # --- 支付宝开放平台 ---
    ALIPAY_APP_ID: str = ""
    ALIPAY_APP_PRIVATE_KEY: SecretStr = SecretStr("")  # PEM 文本或文件路径
    ALIPAY_PUBLIC_KEY: SecretStr = SecretStr("")  # PEM 文本或文件路径
    ALIPAY_GATEWAY_URL: str = ALIPAY_GATEWAY_URL
    ALIPAY_AUTHORIZE_URL: str = ALIPAY_AUTHORIZE_URL
    ALIPAY_SCOPE: str = "auth_user"
    ALIPAY_STATE: str = "ALIPAY"
    ALIPAY_CALLBACK_URL: str | None = None
    ALIPAY_FAILURE_REDIRECT: str | None = None
    ALIPAY_TIMEOUT: float = 15

    model_config = SettingsConfigDict(
        case_sensitive=True,
        extra="ignore",
        env_file_encoding="utf-8",
    )

    @field_validator("ALIPAY_TIMEOUT")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"ALIPAY_TIMEOUT must be positive, got {v}")
        return v

    @property
    def alipay_configured(self) -> bool:
        return bool(
            self.ALIPAY_APP_ID
            and self.ALIPAY_APP_PRIVATE_KEY.get_secret_value()
            and self.ALIPAY_PUBLIC_KEY.get_secret_value()
        )

    def alipay_config(self) -> AlipayConfig:
        """构造支付宝配置，缺少凭证时抛出 ConfigurationError"""
        return AlipayConfig(
            app_id=self.ALIPAY_APP_ID,
            app_private_key=self.ALIPAY_APP_PRIVATE_KEY.get_secret_value(),
            alipay_public_key=self.ALIPAY_PUBLIC_KEY.get_secret_value(),
            gateway_url=self.ALIPAY_GATEWAY_URL,
            authorize_url=self.ALIPAY_AUTHORIZE_URL,
            timeout=self.ALIPAY_TIMEOUT,
        )
