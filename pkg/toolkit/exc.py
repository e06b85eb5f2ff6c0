import traceback


def format_exception_tail(exc: BaseException, limit: int = 5) -> str:
    """只保留 traceback 的最后 limit 段，日志中足够定位问题"""
    frames = traceback.format_exception(exc)
    return "".join(frames[-limit:]).strip()


def describe_cause_chain(exc: BaseException) -> str:
    """把 __cause__ 链压成一行，如 ConsumerCallbackError('...') <- RuntimeError('db down')"""
    parts = []
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        parts.append(repr(current))
        current = current.__cause__
    return " <- ".join(parts)
