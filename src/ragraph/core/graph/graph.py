"""Graph - compiled state graph and its streaming driver."""

from __future__ import annotations

import inspect
import logging
import time
from collections.abc import AsyncIterator, Callable, Iterator, Mapping
from types import MappingProxyType
from typing import Any, Generic

from ragraph.core.context import Context
from ragraph.core.errors import (
    DeadEndError,
    EdgeConditionError,
    MissingActionError,
    NilNodeError,
    NoEdgesError,
    NodeActionError,
    NodeActionFailed,
    NodeNotFoundError,
    StepLimitError,
    StreamError,
)
from ragraph.core.graph.events import StepEvent
from ragraph.core.graph.types import (
    END,
    MAX_STEPS,
    START,
    ConditionalEdge,
    Edge,
    Node,
    S,
    SimpleEdge,
    StateItem,
)
from ragraph.core.run_logging import generate_run_id, log_complete, log_error, log_start

logger = logging.getLogger(__name__)


async def _invoke(fn: Callable[..., Any], *args: Any) -> Any:
    """Call a sync or async callable and return its result."""
    result = fn(*args)
    if inspect.isawaitable(result):
        result = await result
    return result


class Graph(Generic[S]):
    """Compiled, read-only state graph.

    Built by GraphBuilder.compile(). Streaming starts at the entry point,
    runs one node action per step and follows outgoing edges until the END
    node is reached, an error occurs, or the step budget runs out.

    A Graph holds no per-call state: every stream() call records its own
    trace, so one Graph can be streamed many times, including concurrently.

    Example:
        >>> graph = builder.compile()
        >>> trace = await graph.stream("hi")
        >>> [(item.node, item.state) for item in trace]
        [('START', 'hi'), ('agent', 'hi!')]
    """

    def __init__(
        self,
        nodes: Mapping[str, Node[S]],
        entry_point: Node[S] | None,
        max_steps: int = MAX_STEPS,
    ) -> None:
        self._nodes: Mapping[str, Node[S]] = MappingProxyType(dict(nodes))
        self._entry_point = entry_point
        self._max_steps = max_steps

    @property
    def nodes(self) -> Mapping[str, Node[S]]:
        """Read-only mapping of node name to node, END included."""
        return self._nodes

    @property
    def entry_point(self) -> Node[S] | None:
        return self._entry_point

    @property
    def max_steps(self) -> int:
        return self._max_steps

    def get_node_by_name(self, name: str) -> Node[S]:
        """Look up a node.

        Raises:
            NodeNotFoundError: If no node has this name.
        """
        node = self._nodes.get(name)
        if node is None:
            raise NodeNotFoundError(name)
        return node

    def edges_of(self, name: str) -> tuple[Edge[S], ...]:
        """Outgoing edges of a node, in registration order."""
        return self.get_node_by_name(name).edges

    def to_dict(self) -> dict[str, Any]:
        """Describe the graph structure as a JSON-friendly dict."""
        nodes: dict[str, list[dict[str, str]]] = {}
        for name, node in self._nodes.items():
            described = []
            for edge in node.edges:
                if isinstance(edge, SimpleEdge):
                    described.append({"type": edge.kind.value, "target": edge.target.name})
                else:
                    condition = getattr(edge.condition, "__name__", repr(edge.condition))
                    described.append({"type": edge.kind.value, "condition": condition})
            nodes[name] = described
        return {
            "entry_point": getattr(self._entry_point, "name", None),
            "max_steps": self._max_steps,
            "nodes": nodes,
        }

    async def stream(self, initial: S, ctx: Context | None = None) -> list[StateItem[S]]:
        """Run the graph from the entry point and return the trace.

        Args:
            initial: Input state, recorded as the START entry of the trace.
            ctx: Context passed to every action and condition. A fresh one
                is used when omitted.

        Returns:
            Trace of (node, state) items, START first. The last item holds
            the state returned by the last action before END.

        Raises:
            StreamError: On any failure; the error's ``trace`` attribute holds
                everything recorded up to that point.
        """
        trace: list[StateItem[S]] = []
        async for _event in self._drive(initial, ctx, trace):
            pass
        return trace

    async def stream_events(
        self, initial: S, ctx: Context | None = None
    ) -> AsyncIterator[StepEvent]:
        """Run the graph and yield events as steps happen.

        Follows exactly the same rules as stream(). On failure a step_error
        event is yielded before the StreamError is raised.

        Example:
            >>> async for event in graph.stream_events(state):
            ...     if event.event_type == "step_complete":
            ...         print(event.node, event.state)
        """
        trace: list[StateItem[S]] = []
        async for event in self._drive(initial, ctx, trace):
            yield event

    async def _drive(
        self, initial: S, ctx: Context | None, trace: list[StateItem[S]]
    ) -> AsyncIterator[StepEvent]:
        ctx = ctx if ctx is not None else Context()
        if ctx.run_id is None:
            ctx = ctx.with_run_id(generate_run_id())
        run_id = ctx.run_id or ""

        trace.append(StateItem(START, initial))
        stream_start_mono = time.monotonic()
        log_start(
            logger,
            run_id,
            "stream_start",
            entry=getattr(self._entry_point, "name", None),
            max_steps=self._max_steps,
            state=initial,
        )
        yield StepEvent("stream_start", START, state=initial)

        current: Node[S] | None = self._entry_point
        state = initial
        step = 0
        node_name = START

        try:
            while step < self._max_steps:
                step += 1

                if current is None:
                    raise NilNodeError(trace)
                node_name = current.name

                if current.is_end:
                    log_complete(
                        logger,
                        run_id,
                        "stream_complete",
                        time.monotonic() - stream_start_mono,
                        steps=step,
                        trace=len(trace),
                    )
                    yield StepEvent("stream_end", END, state=state, step=step)
                    return

                if current.action is None:
                    raise MissingActionError(current.name, trace)

                log_start(logger, run_id, "step_start", node=current.name, step=step)
                yield StepEvent("step_start", current.name, step=step)

                step_start_mono = time.monotonic()
                try:
                    next_state = await _invoke(current.action, state, ctx)
                except NodeActionFailed as e:
                    trace.append(StateItem(current.name, e.state))
                    log_error(logger, run_id, "step_failed", e, node=current.name, step=step)
                    cause = e.cause if isinstance(e.cause, BaseException) else e
                    raise NodeActionError(current.name, e, trace) from cause
                except Exception as e:
                    trace.append(StateItem(current.name, state))
                    log_error(logger, run_id, "step_failed", e, node=current.name, step=step)
                    raise NodeActionError(current.name, e, trace) from e

                trace.append(StateItem(current.name, next_state))
                log_complete(
                    logger,
                    run_id,
                    "step_complete",
                    time.monotonic() - step_start_mono,
                    node=current.name,
                    state=next_state,
                )
                yield StepEvent("step_complete", current.name, state=next_state, step=step)

                if not current.edges:
                    raise NoEdgesError(current.name, trace)

                target = await self._select_target(current, initial, ctx, trace)
                if target is None:
                    raise DeadEndError(current.name, trace)

                current = target
                state = next_state

            raise StepLimitError(self._max_steps, trace)

        except StreamError as e:
            log_error(
                logger,
                run_id,
                "stream_failed",
                e,
                node=node_name,
                steps=step,
                duration_s=f"{time.monotonic() - stream_start_mono:.1f}",
            )
            yield StepEvent("step_error", node_name, data=str(e), step=step)
            raise

    async def _select_target(
        self, node: Node[S], initial: S, ctx: Context, trace: list[StateItem[S]]
    ) -> Node[S] | None:
        """Resolve every outgoing edge; the last one that fires wins."""
        target: Node[S] | None = None
        for edge in node.edges:
            resolved = await self._resolve_target(edge, node, initial, ctx, trace)
            if resolved is not None:
                target = resolved
        return target

    async def _resolve_target(
        self,
        edge: Edge[S],
        node: Node[S],
        initial: S,
        ctx: Context,
        trace: list[StateItem[S]],
    ) -> Node[S] | None:
        if isinstance(edge, SimpleEdge):
            return edge.target

        if not isinstance(edge, ConditionalEdge):
            raise EdgeConditionError(node.name, f"unsupported edge {edge!r}", trace)

        # Conditions see the stream() input, not the state produced by the node.
        try:
            target_name = await _invoke(edge.condition, initial, ctx)
        except Exception as e:
            raise EdgeConditionError(node.name, e, trace) from e

        if target_name is None or target_name == "":
            return None
        if not isinstance(target_name, str):
            raise EdgeConditionError(
                node.name,
                f"condition returned {type(target_name).__name__}, expected a node name",
                trace,
            )

        target = self._nodes.get(target_name)
        if target is None:
            raise EdgeConditionError(node.name, f"{target_name} node not found", trace)
        return target

    def __len__(self) -> int:
        return len(self._nodes)

    def __contains__(self, name: object) -> bool:
        return name in self._nodes

    def __iter__(self) -> Iterator[str]:
        return iter(self._nodes)

    def __repr__(self) -> str:
        entry = getattr(self._entry_point, "name", None)
        return (
            f"Graph(nodes={list(self._nodes)}, entry_point={entry!r}, "
            f"max_steps={self._max_steps})"
        )
