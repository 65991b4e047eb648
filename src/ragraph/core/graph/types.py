"""Data declarations shared by the graph builder and the compiled graph.

A graph is parameterised by a state type S chosen by the caller. The
executor never looks inside S; it only threads values through node actions
and records them in the trace.

    NodeAction:     (state, ctx) -> state          (sync or async)
    EdgeCondition:  (state, ctx) -> node name       (sync or async, "" = no edge)
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar, Union

if TYPE_CHECKING:
    from ragraph.core.context import Context

S = TypeVar("S")

# Reserved node names. START only ever appears in traces, END is the
# terminal node that every compiled graph contains.
START = "START"
END = "END"

# Hard cap on driver iterations per stream() call.
MAX_STEPS = 10

NodeAction = Callable[[S, "Context"], Union[S, Awaitable[S]]]
EdgeCondition = Callable[[S, "Context"], Union[str, None, Awaitable[Union[str, None]]]]


class EdgeType(Enum):
    """Kinds of outgoing edges."""

    SIMPLE = "simple"
    CONDITIONAL = "conditional"


@dataclass(frozen=True)
class StateItem(Generic[S]):
    """One entry of a stream trace: the node that produced a state.

    The first item of every trace is the START sentinel holding the input.
    """

    node: str
    state: S

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-friendly dict."""
        from ragraph.core.run_logging import safe_repr

        return {"node": self.node, "state": safe_repr(self.state)}


@dataclass(frozen=True, eq=False)
class SimpleEdge(Generic[S]):
    """Edge with a target bound at compile time."""

    target: Node[S]

    @property
    def kind(self) -> EdgeType:
        return EdgeType.SIMPLE

    def __repr__(self) -> str:
        return f"SimpleEdge(target={self.target.name!r})"


@dataclass(frozen=True, eq=False)
class ConditionalEdge(Generic[S]):
    """Edge whose target is chosen at run time by a condition."""

    condition: EdgeCondition[S]

    @property
    def kind(self) -> EdgeType:
        return EdgeType.CONDITIONAL

    def __repr__(self) -> str:
        name = getattr(self.condition, "__name__", type(self.condition).__name__)
        return f"ConditionalEdge(condition={name})"


Edge = Union[SimpleEdge[S], ConditionalEdge[S]]


@dataclass(frozen=True, eq=False)
class Node(Generic[S]):
    """A named action plus its outgoing edges, in registration order.

    Nodes are created by GraphBuilder.compile() and cannot be changed
    afterwards. The END node has no action and no edges.
    """

    name: str
    action: NodeAction[S] | None = None
    edges: tuple[Edge[S], ...] = field(default_factory=tuple)

    @property
    def is_end(self) -> bool:
        return self.name == END

    def __repr__(self) -> str:
        return f"Node(name={self.name!r}, edges={len(self.edges)})"
