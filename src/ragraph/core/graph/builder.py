"""GraphBuilder - accumulate nodes and edges, then compile a Graph.

The builder is used once at wiring time:

    >>> builder = new_state_graph()
    >>> builder.add_node("classify", classify)
    >>> builder.add_node("yes", on_yes).add_node("no", on_no)
    >>> builder.add_conditional_edge("classify", route)
    >>> builder.add_edge("yes", END).add_edge("no", END)
    >>> builder.set_entry_point("classify")
    >>> graph = builder.compile()

Nodes and edges may be registered in any order; names are only resolved
by compile(). The END node is added automatically when it was not
registered explicitly.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic

from ragraph.core.errors import CompileError, DuplicateNodeError, GraphBuildError
from ragraph.core.graph.graph import Graph
from ragraph.core.graph.messages import Message
from ragraph.core.graph.types import (
    END,
    MAX_STEPS,
    START,
    ConditionalEdge,
    Edge,
    EdgeCondition,
    EdgeType,
    Node,
    NodeAction,
    S,
    SimpleEdge,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _NodeSpec(Generic[S]):
    name: str
    action: NodeAction[S] | None


@dataclass(frozen=True)
class _EdgeSpec(Generic[S]):
    kind: EdgeType
    source: str
    target: str | None = None
    condition: EdgeCondition[S] | None = None


class GraphBuilder(Generic[S]):
    """Mutable description of a state graph.

    Not thread-safe; build on one thread, then share the compiled Graph.
    """

    def __init__(self) -> None:
        self._nodes: dict[str, _NodeSpec[S]] = {}
        self._edges: list[_EdgeSpec[S]] = []
        self._entry_point: str | None = None

    @property
    def entry_point(self) -> str | None:
        return self._entry_point

    def list_nodes(self) -> list[str]:
        """Registered node names, in registration order."""
        return list(self._nodes)

    def add_node(self, name: str, action: NodeAction[S] | None) -> GraphBuilder[S]:
        """Register a node.

        Args:
            name: Unique node name. END may be registered; its action is ignored.
            action: Callable (state, ctx) -> state, sync or async.

        Returns:
            Self for chaining.

        Raises:
            DuplicateNodeError: If the name is already registered.
            GraphBuildError: If the name is empty or START.
        """
        if not name:
            raise GraphBuildError("node name cannot be empty")
        if name == START:
            raise GraphBuildError(f"{START} is reserved and cannot be registered as a node")
        if name in self._nodes:
            logger.critical("duplicate_node: name=%s", name)
            raise DuplicateNodeError(name)

        self._nodes[name] = _NodeSpec(name=name, action=action)
        return self

    def add_edge(self, source: str, target: str) -> GraphBuilder[S]:
        """Add a simple edge from source to target. Resolved by compile()."""
        self._edges.append(_EdgeSpec(kind=EdgeType.SIMPLE, source=source, target=target))
        return self

    def add_conditional_edge(
        self, source: str, condition: EdgeCondition[S] | None
    ) -> GraphBuilder[S]:
        """Add an edge whose target is picked at run time.

        The condition returns the name of the next node, or "" when the
        edge should not fire.
        """
        self._edges.append(
            _EdgeSpec(kind=EdgeType.CONDITIONAL, source=source, condition=condition)
        )
        return self

    def set_entry_point(self, name: str) -> GraphBuilder[S]:
        """Set the node where streaming starts. Resolved by compile()."""
        self._entry_point = name
        return self

    def compile(self, max_steps: int = MAX_STEPS) -> Graph[S]:
        """Validate the description and build an immutable Graph.

        Validation order: nodes, then edges, then the entry point. The
        builder itself is never modified, so a failed compile can be fixed
        and retried.

        Args:
            max_steps: Driver step budget for each stream() call.

        Returns:
            The compiled graph.

        Raises:
            CompileError: If any node, edge or the entry point is invalid.
        """
        if max_steps < 1:
            raise CompileError(f"max steps must be at least 1, got {max_steps}")

        nodes = self._compile_nodes()
        edges = self._compile_edges(nodes)
        # Nodes are frozen; edges can only be bound here, after every edge
        # target exists (edges may form cycles).
        for name, node_edges in edges.items():
            object.__setattr__(nodes[name], "edges", tuple(node_edges))

        if not self._entry_point:
            raise CompileError("entry point not set")
        entry_point = nodes.get(self._entry_point)
        if entry_point is None:
            raise CompileError(f"entry point {self._entry_point} not found")

        logger.debug(
            "graph_compiled: nodes=%d, edges=%d, entry=%s, max_steps=%d",
            len(nodes),
            len(self._edges),
            entry_point.name,
            max_steps,
        )
        return Graph(nodes, entry_point, max_steps=max_steps)

    def _compile_nodes(self) -> dict[str, Node[S]]:
        nodes: dict[str, Node[S]] = {}
        for name, spec in self._nodes.items():
            if name == END:
                nodes[name] = Node(name=END)
                continue
            if spec.action is None:
                raise CompileError(f"node {name} does not have an action")
            nodes[name] = Node(name=name, action=spec.action)

        if END not in nodes:
            nodes[END] = Node(name=END)
        return nodes

    def _compile_edges(self, nodes: dict[str, Node[S]]) -> dict[str, list[Edge[S]]]:
        compiled: dict[str, list[Edge[S]]] = {}
        for spec in self._edges:
            if spec.source not in nodes:
                raise CompileError(f"source node {spec.source} not found")

            edge: Edge[S]
            if spec.kind is EdgeType.SIMPLE:
                target = nodes.get(spec.target) if spec.target else None
                if target is None:
                    raise CompileError(f"target node {spec.target} not found")
                edge = SimpleEdge(target=target)
            else:
                if spec.condition is None:
                    raise CompileError("condition function not found")
                edge = ConditionalEdge(condition=spec.condition)

            compiled.setdefault(spec.source, []).append(edge)
        return compiled

    def __repr__(self) -> str:
        return (
            f"GraphBuilder(nodes={self.list_nodes()}, edges={len(self._edges)}, "
            f"entry_point={self._entry_point!r})"
        )


def new_state_graph() -> GraphBuilder[S]:
    """Create a builder for a graph over any caller-chosen state type."""
    return GraphBuilder()


def new_message_graph() -> GraphBuilder[list[Message]]:
    """Create a builder for a graph whose state is a chat history."""
    return GraphBuilder[list[Message]]()
