from internal.config import setting
from pkg.logger import logger
from pkg.third_party_auth import (
    AlipayAuthStrategy,
    AlipayConfig,
    ThirdPartyAuthFactory,
    ThirdPartyPlatform,
)

_alipay_strategy: AlipayAuthStrategy | None = None


def init_alipay_strategy(config: AlipayConfig | None = None) -> None:
    global _alipay_strategy

    if _alipay_strategy is not None:
        return

    config = config or setting.alipay_config()
    _alipay_strategy = ThirdPartyAuthFactory.get_strategy(ThirdPartyPlatform.ALIPAY, config)  # type: ignore[assignment]

    logger.info(f"Alipay auth strategy initialized successfully, app_id={config.app_id}")


def get_alipay_strategy() -> AlipayAuthStrategy:
    if _alipay_strategy is None:
        raise RuntimeError("Alipay auth strategy not initialized. Call init_alipay_strategy() first.")
    return _alipay_strategy


async def close_alipay_strategy() -> None:
    global _alipay_strategy

    if _alipay_strategy is None:
        return

    await _alipay_strategy.close()
    _alipay_strategy = None
    logger.info("Alipay auth strategy closed.")

