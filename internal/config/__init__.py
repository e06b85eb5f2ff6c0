from internal.config.loader import get_settings, load_config, reset_settings
from internal.config.settings import Settings
from pkg.toolkit.types import LazyProxy

setting: Settings = LazyProxy(get_settings)  # type: ignore[assignment]

__all__ = [
    "Settings",
    "get_settings",
    "load_config",
    "reset_settings",
    "setting",
]
