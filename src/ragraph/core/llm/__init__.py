"""LLM helpers - chat completions client and the chat agent action."""

from ragraph.core.llm.agent import chat_agent
from ragraph.core.llm.client import ChatClient, ChatClientConfig, UpstreamError

__all__ = ["ChatClient", "ChatClientConfig", "UpstreamError", "chat_agent"]
