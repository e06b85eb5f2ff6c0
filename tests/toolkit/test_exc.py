from pkg.third_party_auth import ConsumerCallbackError
from pkg.toolkit.exc import describe_cause_chain, format_exception_tail


def _raise_chained():
    try:
        raise RuntimeError("database unavailable")
    except RuntimeError as e:
        raise ConsumerCallbackError("verify callback raised RuntimeError") from e


def test_describe_cause_chain():
    try:
        _raise_chained()
    except ConsumerCallbackError as e:
        chain = describe_cause_chain(e)

    assert chain.startswith("ConsumerCallbackError(")
    assert chain.endswith("RuntimeError('database unavailable')")
    assert chain.count(" <- ") == 1


def test_describe_single_exception():
    assert describe_cause_chain(ValueError("x")) == "ValueError('x')"


def test_format_exception_tail_keeps_last_frames():
    try:
        _raise_chained()
    except ConsumerCallbackError as e:
        tail = format_exception_tail(e, limit=2)

    assert "ConsumerCallbackError: verify callback raised RuntimeError" in tail
    assert "database unavailable" not in tail
