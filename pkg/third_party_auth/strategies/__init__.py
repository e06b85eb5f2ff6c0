"""第三方认证策略实现模块"""

from .alipay import AlipayAuthStrategy

__all__ = [
    "AlipayAuthStrategy",
]
