"""Tests for ragraph.core.context module."""

import asyncio
import time

import pytest

from ragraph.core.context import (
    CancellationToken,
    CancelledError,
    Context,
    DeadlineExceededError,
)


class TestCancellationToken:
    """Tests for CancellationToken."""

    def test_initial_state(self):
        """A new token is not cancelled."""
        token = CancellationToken()

        assert token.is_cancelled is False
        token.check()

    def test_cancel(self):
        """cancel() makes check() raise and may be repeated."""
        token = CancellationToken()
        token.cancel()
        token.cancel()

        assert token.is_cancelled is True
        with pytest.raises(CancelledError):
            token.check()

    @pytest.mark.asyncio
    async def test_wait(self):
        """wait() returns once cancel() is called."""
        token = CancellationToken()

        async def cancel_soon():
            await asyncio.sleep(0.01)
            token.cancel()

        asyncio.create_task(cancel_soon())
        await asyncio.wait_for(token.wait(), timeout=1.0)

        assert token.is_cancelled


class TestContext:
    """Tests for Context."""

    def test_defaults(self):
        """A bare context never fails check()."""
        ctx = Context()

        ctx.check()
        assert ctx.remaining() is None
        assert ctx.expired is False
        assert ctx.cancelled is False
        assert ctx.run_id is None

    def test_with_value(self):
        """with_value derives a new context and leaves the original alone."""
        base = Context()
        ctx = base.with_value("user", "ana").with_value("lang", "en")

        assert ctx.value("user") == "ana"
        assert ctx.value("lang") == "en"
        assert ctx.value("missing", "x") == "x"
        assert base.value("user") is None

    def test_values_are_read_only(self):
        """Values cannot be changed in place."""
        ctx = Context().with_value("a", 1)

        with pytest.raises(TypeError):
            ctx.values["a"] = 2

    def test_cancellation(self):
        """check() raises once the token is cancelled."""
        token = CancellationToken()
        ctx = Context().with_cancellation(token)

        ctx.check()
        token.cancel()

        assert ctx.cancelled is True
        with pytest.raises(CancelledError):
            ctx.check()

    def test_with_timeout(self):
        """with_timeout sets a deadline in the future."""
        ctx = Context().with_timeout(30)

        remaining = ctx.remaining()
        assert remaining is not None
        assert 29 < remaining <= 30
        ctx.check()

    def test_expired_deadline(self):
        """check() raises once the deadline has passed."""
        ctx = Context(deadline=time.monotonic() - 1)

        assert ctx.expired is True
        assert ctx.remaining() == 0.0
        with pytest.raises(DeadlineExceededError):
            ctx.check()

    def test_deadline_error_is_timeout(self):
        """DeadlineExceededError is a TimeoutError."""
        assert issubclass(DeadlineExceededError, TimeoutError)

    def test_with_timeout_keeps_earlier_deadline(self):
        """A longer timeout does not extend an earlier deadline."""
        short = Context().with_timeout(1)
        longer = short.with_timeout(60)

        assert longer.deadline == short.deadline

    def test_with_run_id(self):
        """with_run_id sets the run id."""
        assert Context().with_run_id("r1").run_id == "r1"
