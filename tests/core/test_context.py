"""InvocationContext — deadlines and cancel callbacks."""

import time

import pytest

from core.context import InvocationContext
from core.errors import Cancelled


def test_no_timeout_means_no_deadline():
    context = InvocationContext()
    assert context.remaining() is None
    context.check()


def test_expired_deadline_raises_cancelled():
    context = InvocationContext(timeout=0.001)
    time.sleep(0.01)
    assert context.expired
    assert context.remaining() == 0.0
    with pytest.raises(Cancelled, match="deadline"):
        context.check()


def test_cancel_runs_callbacks_once():
    calls = []
    context = InvocationContext()
    context.on_cancel(lambda: calls.append("a"))
    context.cancel()
    context.cancel()
    assert calls == ["a"]
    with pytest.raises(Cancelled, match="cancelled"):
        context.check()


def test_unregistered_callback_is_not_run():
    calls = []
    context = InvocationContext()
    unregister = context.on_cancel(lambda: calls.append("a"))
    unregister()
    context.cancel()
    assert calls == []


def test_callback_registered_after_cancel_runs_immediately():
    calls = []
    context = InvocationContext()
    context.cancel()
    context.on_cancel(lambda: calls.append("late"))
    assert calls == ["late"]


def test_failing_callback_does_not_stop_others():
    calls = []
    context = InvocationContext()

    def broken():
        raise RuntimeError("nope")

    context.on_cancel(broken)
    context.on_cancel(lambda: calls.append("b"))
    context.cancel()
    assert calls == ["b"]
