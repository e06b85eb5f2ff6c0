from collections.abc import Callable
from typing import Any, Generic, TypeVar

T = TypeVar("T")


# ==========================================
# LazyProxy (懒加载代理)
# ==========================================


class LazyProxy(Generic[T]):
    """
    通用懒加载代理，用于延迟初始化的单例对象。

    解决问题：
    - 模块导入时对象还未初始化 (None)
    - 需要在运行时动态获取实际对象

    用法示例:
        _strategy: AlipayAuthStrategy | None = None

        def init_strategy():
            global _strategy
            _strategy = AlipayAuthStrategy(...)

        def _get_strategy() -> AlipayAuthStrategy:
            if _strategy is None:
                raise RuntimeError("Strategy not initialized")
            return _strategy

        strategy = LazyProxy(_get_strategy)  # 导出代理对象

        # 使用时自动转发到真实对象
        await strategy.get_access_token(code)  # 等价于 _get_strategy().get_access_token(code)
    """

    __slots__ = ("_getter",)

    def __init__(self, getter: Callable[[], T]):
        object.__setattr__(self, "_getter", getter)

    def __getattr__(self, name: str) -> Any:
        return getattr(self._getter(), name)

    def __setattr__(self, name: str, value: Any) -> None:
        setattr(self._getter(), name, value)

    def __repr__(self) -> str:
        try:
            return repr(self._getter())
        except RuntimeError:
            return "<LazyProxy: uninitialized>"
