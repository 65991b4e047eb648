"""Pytest configuration and fixtures."""

import pytest

from ragraph.core.graph import END, GraphBuilder


@pytest.fixture
def echo_builder() -> GraphBuilder:
    """Builder for a one-node graph that appends '!' to its string state."""
    builder = GraphBuilder()
    builder.add_node("agent", lambda state, ctx: state + "!")
    builder.add_edge("agent", END)
    builder.set_entry_point("agent")
    return builder
