import pytest

from pkg.third_party_auth import (
    AlipayAuthStrategy,
    ConfigurationError,
    ThirdPartyAuthFactory,
    ThirdPartyPlatform,
)


class TestThirdPartyAuthFactory:
    async def test_get_alipay_strategy(self, alipay_config):
        strategy = ThirdPartyAuthFactory.get_strategy(ThirdPartyPlatform.ALIPAY, alipay_config)
        try:
            assert isinstance(strategy, AlipayAuthStrategy)
            assert strategy.config is alipay_config
        finally:
            await strategy.close()

    async def test_platform_as_string(self, alipay_config):
        strategy = ThirdPartyAuthFactory.get_strategy("Alipay", alipay_config)
        try:
            assert strategy.get_platform_name() == "alipay"
        finally:
            await strategy.close()

    def test_unsupported_platform(self, alipay_config):
        with pytest.raises(ConfigurationError, match="Unsupported third-party platform"):
            ThirdPartyAuthFactory.get_strategy("wechat", alipay_config)

    def test_missing_config(self):
        with pytest.raises(ConfigurationError, match="requires a config"):
            ThirdPartyAuthFactory.get_strategy(ThirdPartyPlatform.ALIPAY, None)

    def test_available_platforms(self):
        assert ThirdPartyAuthFactory.get_available_platforms() == ["alipay"]
