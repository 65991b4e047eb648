"""Context - opaque handle threaded through every node action and edge condition.

A Context carries what an action may need to cooperate with its caller:
- Cancellation token (cooperative; actions decide where to check)
- Deadline derived from a timeout
- A small bag of caller-supplied values
- The run id of the current stream() call

The graph driver never inspects a Context. It passes the same object to
every action and condition of a stream() call. Actions that do slow work
(HTTP calls, retrieval) should call ctx.check() at safe points.

Context is immutable - use the with_* methods to derive modified copies:

    >>> token = CancellationToken()
    >>> ctx = Context(cancellation=token).with_timeout(30).with_value("user", "ana")
    >>> trace = await graph.stream(initial, ctx)
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any

logger = logging.getLogger(__name__)


class CancelledError(Exception):
    """Raised by Context.check() when cancellation was requested."""


class DeadlineExceededError(TimeoutError):
    """Raised by Context.check() when the context deadline has passed."""


class CancellationToken:
    """Token for cooperative cancellation.

    Call cancel() from another task to ask running actions to stop.
    Nothing is interrupted; actions observe the token through their context.

    Example:
        >>> token = CancellationToken()
        >>> task = asyncio.create_task(graph.stream(state, Context(cancellation=token)))
        >>> token.cancel()
    """

    def __init__(self) -> None:
        self._cancelled = False
        self._event = asyncio.Event()

    def cancel(self) -> None:
        """Request cancellation. Safe to call more than once."""
        self._cancelled = True
        self._event.set()

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled

    def check(self) -> None:
        """Raise CancelledError if cancel() has been called."""
        if self._cancelled:
            raise CancelledError("context cancelled")

    async def wait(self) -> None:
        """Block until cancel() is called."""
        await self._event.wait()


@dataclass(frozen=True)
class Context:
    """Per-call context passed to node actions and edge conditions.

    Attributes:
        cancellation: Token checked by check() (optional).
        deadline: time.monotonic() value after which check() fails (optional).
        values: Read-only caller-supplied values.
        run_id: Identifier of the stream() call, filled in by the graph.
    """

    cancellation: CancellationToken | None = None
    deadline: float | None = None
    values: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    run_id: str | None = None

    def with_cancellation(self, token: CancellationToken) -> Context:
        """Derive a context using the given cancellation token."""
        return replace(self, cancellation=token)

    def with_timeout(self, seconds: float) -> Context:
        """Derive a context whose deadline is ``seconds`` from now.

        An existing earlier deadline is kept.
        """
        deadline = time.monotonic() + seconds
        if self.deadline is not None:
            deadline = min(deadline, self.deadline)
        return replace(self, deadline=deadline)

    def with_value(self, key: str, value: Any) -> Context:
        """Derive a context with one more value set."""
        return replace(self, values=MappingProxyType({**self.values, key: value}))

    def with_run_id(self, run_id: str) -> Context:
        return replace(self, run_id=run_id)

    def value(self, key: str, default: Any = None) -> Any:
        """Look up a value set with with_value()."""
        return self.values.get(key, default)

    def remaining(self) -> float | None:
        """Seconds left before the deadline, or None if there is none."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    @property
    def expired(self) -> bool:
        return self.deadline is not None and time.monotonic() >= self.deadline

    @property
    def cancelled(self) -> bool:
        return self.cancellation is not None and self.cancellation.is_cancelled

    def check(self) -> None:
        """Raise if the context was cancelled or its deadline has passed.

        Raises:
            CancelledError: If cancellation was requested.
            DeadlineExceededError: If the deadline has passed.
        """
        if self.cancellation is not None and self.cancellation.is_cancelled:
            logger.debug("context_cancelled: run_id=%s", self.run_id)
            self.cancellation.check()
        if self.expired:
            logger.debug("context_deadline_exceeded: run_id=%s", self.run_id)
            raise DeadlineExceededError("context deadline exceeded")
