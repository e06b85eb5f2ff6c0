"""第三方认证策略工厂 - 可复用的策略注册表"""

from enum import Enum
from typing import Any

from pkg.logger import logger

from .base import BaseThirdPartyAuthStrategy
from .exceptions import ConfigurationError
from .strategies.alipay import AlipayAuthStrategy


class ThirdPartyPlatform(str, Enum):
    """第三方平台枚举

    添加新平台时在此处声明
    """

    ALIPAY = "alipay"


class ThirdPartyAuthFactory:
    """第三方认证策略工厂

    使用示例:
        ```python
        strategy = ThirdPartyAuthFactory.get_strategy(ThirdPartyPlatform.ALIPAY, config=alipay_config)
        ```
    """

    # 策略注册表
    _strategies: dict[ThirdPartyPlatform, type[BaseThirdPartyAuthStrategy]] = {
        ThirdPartyPlatform.ALIPAY: AlipayAuthStrategy,
    }

    @classmethod
    def register_strategy(
        cls,
        platform: ThirdPartyPlatform,
        strategy_class: type[BaseThirdPartyAuthStrategy],
    ) -> None:
        """
        注册新的认证策略

        Args:
            platform: 平台标识
            strategy_class: 策略类，构造函数需接受 config 参数
        """
        cls._strategies[platform] = strategy_class
        logger.info(f"Registered third-party auth strategy for {platform.value}")

    @classmethod
    def get_strategy(cls, platform: ThirdPartyPlatform | str, config: Any, **kwargs: Any) -> BaseThirdPartyAuthStrategy:
        """
        获取对应平台的认证策略实例

        Args:
            platform: 平台标识（字符串或枚举值）
            config: 平台配置，如 AlipayConfig
            **kwargs: 透传给策略构造函数，如 http_client

        Returns:
            BaseThirdPartyAuthStrategy: 策略实例

        Raises:
            ConfigurationError: 当平台未注册或缺少配置时
        """
        if isinstance(platform, str) and not isinstance(platform, ThirdPartyPlatform):
            try:
                platform = ThirdPartyPlatform(platform.lower())
            except ValueError as e:
                raise ConfigurationError(f"Unsupported third-party platform: {platform}") from e

        strategy_class = cls._strategies.get(platform)
        if not strategy_class:
            raise ConfigurationError(
                f"Third-party platform '{platform.value}' not supported. "
                f"Available platforms: {cls.get_available_platforms()}"
            )
        if config is None:
            raise ConfigurationError(f"Third-party platform '{platform.value}' requires a config")

        return strategy_class(config, **kwargs)

    @classmethod
    def get_available_platforms(cls) -> list[str]:
        """获取所有可用的平台列表"""
        return [platform.value for platform in cls._strategies.keys()]
