"""Chat agent node action for message graphs."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from ragraph.core.context import DeadlineExceededError
from ragraph.core.errors import NodeActionFailed
from ragraph.core.graph.messages import Message

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from ragraph.core.context import Context
    from ragraph.core.llm.client import ChatClient

logger = logging.getLogger(__name__)


async def _complete(client: ChatClient, messages: list[Message], ctx: Context) -> str:
    """Run one completion, bounded by the context deadline when it has one."""
    try:
        return await asyncio.wait_for(client.complete(messages), timeout=ctx.remaining())
    except TimeoutError as e:
        if ctx.expired:
            raise DeadlineExceededError("context deadline exceeded") from e
        raise


def chat_agent(
    client: ChatClient,
) -> Callable[[list[Message], Context], Awaitable[list[Message]]]:
    """Build a node action that answers the conversation with one model call.

    The action returns the history extended with the assistant reply. When
    the call fails it raises NodeActionFailed carrying the history plus an
    assistant message describing the failure, so the trace shows what the
    user would have seen. A context deadline bounds the whole call,
    retries included.

    Example:
        >>> builder = new_message_graph()
        >>> builder.add_node("agent", chat_agent(client))
        >>> builder.add_edge("agent", END).set_entry_point("agent")
    """

    async def agent(messages: list[Message], ctx: Context) -> list[Message]:
        ctx.check()
        try:
            reply = await _complete(client, messages, ctx)
        except Exception as e:
            logger.warning("chat_agent_failed: run_id=%s, error=%s", ctx.run_id, e)
            failure = Message.assistant(f"Failed to generate answer: {e}")
            raise NodeActionFailed([*messages, failure], e) from e
        return [*messages, Message.assistant(reply)]

    return agent
