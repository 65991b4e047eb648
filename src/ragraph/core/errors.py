"""Exceptions raised while building and streaming state graphs.

Build-time problems are ValueErrors raised from GraphBuilder.
Run-time problems are StreamErrors raised from Graph.stream() and always
carry the trace observed up to the failure, so callers can inspect
what ran before things went wrong.

Messages are stable and safe to match on:

    try:
        trace = await graph.stream(state)
    except StreamError as e:
        print(e)          # "reached dead end after classify"
        print(e.trace)    # [StateItem("START", ...), StateItem("classify", ...)]
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ragraph.core.graph.types import StateItem


class GraphError(Exception):
    """Base class for all graph errors."""


class GraphBuildError(GraphError, ValueError):
    """Raised when a graph description is invalid."""


class DuplicateNodeError(GraphBuildError):
    """Raised when a node name is registered twice.

    Duplicate registration is a wiring bug, so this is raised eagerly from
    add_node() rather than deferred to compile().
    """

    def __init__(self, name: str) -> None:
        super().__init__(f"node with name {name} already exists")
        self.name = name


class CompileError(GraphBuildError):
    """Raised by GraphBuilder.compile() when validation fails."""


class NodeNotFoundError(GraphError, LookupError):
    """Raised when a node name does not resolve in a compiled graph."""

    def __init__(self, name: str) -> None:
        super().__init__(f"node {name} not found")
        self.name = name


class StreamError(GraphError, RuntimeError):
    """Base class for failures while streaming a graph.

    Attributes:
        trace: States recorded before the failure, START sentinel first.
    """

    def __init__(self, message: str, trace: list[StateItem[Any]] | None = None) -> None:
        super().__init__(message)
        self.trace: list[StateItem[Any]] = trace if trace is not None else []


class NilNodeError(StreamError):
    """Raised when the driver has no current node to run."""

    def __init__(self, trace: list[StateItem[Any]] | None = None) -> None:
        super().__init__("current node is nil", trace)


class MissingActionError(StreamError):
    """Raised when a non-END node has no action."""

    def __init__(self, node: str, trace: list[StateItem[Any]] | None = None) -> None:
        super().__init__(f"node {node} has no action", trace)
        self.node = node


class NoEdgesError(StreamError):
    """Raised when a node ran but has nowhere to go."""

    def __init__(self, node: str, trace: list[StateItem[Any]] | None = None) -> None:
        super().__init__(f"node {node} does not have any edges", trace)
        self.node = node


class NodeActionError(StreamError):
    """Raised when a node action fails. The original error is __cause__."""

    def __init__(
        self, node: str, cause: BaseException, trace: list[StateItem[Any]] | None = None
    ) -> None:
        super().__init__(f"error in node {node}: {cause}", trace)
        self.node = node


class EdgeConditionError(StreamError):
    """Raised when resolving an outgoing edge fails."""

    def __init__(
        self, source: str, cause: BaseException | str, trace: list[StateItem[Any]] | None = None
    ) -> None:
        super().__init__(f"error in edge from {source}: {cause}", trace)
        self.source = source


class DeadEndError(StreamError):
    """Raised when no outgoing edge of a node fires."""

    def __init__(self, node: str, trace: list[StateItem[Any]] | None = None) -> None:
        super().__init__(f"reached dead end after {node}", trace)
        self.node = node


class StepLimitError(StreamError):
    """Raised when the step budget runs out before END is reached."""

    def __init__(self, max_steps: int, trace: list[StateItem[Any]] | None = None) -> None:
        super().__init__("reached max step limit", trace)
        self.max_steps = max_steps


class NodeActionFailed(Exception):
    """Raised by a node action to fail while still reporting a state.

    The driver records ``state`` in the trace under the failing node's name
    and then fails the stream with NodeActionError. Use it when a partial
    result is worth keeping, e.g. an error message appended to a chat history.

    Example:
        >>> async def agent(messages, ctx):
        ...     try:
        ...         reply = await client.complete(messages)
        ...     except UpstreamError as e:
        ...         raise NodeActionFailed([*messages, Message.assistant(f"failed: {e}")], e)
        ...     return [*messages, Message.assistant(reply)]
    """

    def __init__(self, state: Any, cause: BaseException | str) -> None:
        super().__init__(str(cause))
        self.state = state
        self.cause = cause
