"""Graphs wired up by the CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ragraph.core.graph import END, Graph, Message, new_message_graph, new_state_graph
from ragraph.core.llm import chat_agent

if TYPE_CHECKING:
    from ragraph.core.context import Context
    from ragraph.core.llm import ChatClient


def build_agent_graph(client: ChatClient) -> Graph[list[Message]]:
    """agent -> END, where agent answers with one chat completion."""
    builder = new_message_graph()
    builder.add_node("agent", chat_agent(client))
    builder.add_edge("agent", END)
    builder.set_entry_point("agent")
    return builder.compile()


def build_demo_graph() -> Graph[str]:
    """classify -> (yes | no) -> END, routed on the input text.

    Inputs starting with "y" take the yes branch, everything else the no
    branch. Needs no network access.
    """

    def classify(state: str, ctx: Context) -> str:
        return state

    def route(state: str, ctx: Context) -> str:
        return "yes" if state.strip().lower().startswith("y") else "no"

    def yes(state: str, ctx: Context) -> str:
        return f"{state}-Y"

    def no(state: str, ctx: Context) -> str:
        return f"{state}-N"

    builder = new_state_graph()
    builder.add_node("classify", classify)
    builder.add_node("yes", yes)
    builder.add_node("no", no)
    builder.add_conditional_edge("classify", route)
    builder.add_edge("yes", END)
    builder.add_edge("no", END)
    builder.set_entry_point("classify")
    return builder.compile()
