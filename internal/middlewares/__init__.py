from internal.middlewares.recorder import ASGIRecordMiddleware

__all__ = ["ASGIRecordMiddleware"]
