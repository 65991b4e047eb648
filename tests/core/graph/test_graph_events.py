"""Tests for Graph.stream_events()."""

import logging

import pytest

from ragraph.core.context import Context
from ragraph.core.errors import NodeActionError
from ragraph.core.graph import END, GraphBuilder, StepEvent


def build(action) -> GraphBuilder:
    builder = GraphBuilder()
    builder.add_node("agent", action)
    builder.add_edge("agent", END)
    builder.set_entry_point("agent")
    return builder


class TestStreamEvents:
    """Tests for streamed step events."""

    @pytest.mark.asyncio
    async def test_successful_stream(self, echo_builder):
        """A successful stream yields start, step and end events."""
        graph = echo_builder.compile()

        events = [event async for event in graph.stream_events("hi")]

        assert [(e.event_type, e.node) for e in events] == [
            ("stream_start", "START"),
            ("step_start", "agent"),
            ("step_complete", "agent"),
            ("stream_end", "END"),
        ]
        assert events[0].state == "hi"
        assert events[2].state == "hi!"
        assert events[2].step == 1
        assert events[3].step == 2
        assert all(isinstance(e, StepEvent) for e in events)

    @pytest.mark.asyncio
    async def test_failure_yields_step_error_then_raises(self):
        """A failing action produces a step_error event before raising."""

        def fail(state, ctx):
            raise ValueError("boom")

        graph = build(fail).compile()
        events = []

        with pytest.raises(NodeActionError, match="error in node agent: boom"):
            async for event in graph.stream_events("hi"):
                events.append(event)

        assert events[-1].event_type == "step_error"
        assert events[-1].node == "agent"
        assert events[-1].data == "error in node agent: boom"


class TestStreamLogging:
    """Tests for driver log lines."""

    async def test_failure_logged(self, caplog):
        """A failing action logs step_failed and stream_failed with the run id."""

        def fail(state, ctx):
            raise ValueError("boom")

        graph = build(fail).compile()

        with caplog.at_level(logging.DEBUG, logger="ragraph.core.graph.graph"):
            with pytest.raises(NodeActionError):
                await graph.stream("hi", Context(run_id="run1"))

        messages = [r.getMessage() for r in caplog.records if r.name == "ragraph.core.graph.graph"]
        assert messages[0] == "[run1] stream_start: entry=agent, max_steps=10, state=hi"
        assert "[run1] step_failed: node=agent, step=1, error=boom" in messages
        assert messages[-1].startswith("[run1] stream_failed: node=agent, steps=1, duration_s=")
