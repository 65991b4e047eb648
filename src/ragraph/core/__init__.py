"""Core - state graph executor and the pieces actions use.

Nothing in here knows about HTTP servers, databases or caches. Host
programs compose those around the executor as node actions.

Architecture:
    graph/      GraphBuilder, Graph, trace and event types
    llm/        Chat completions client and chat agent action
    context     Context handed to every action and condition
    errors      Build and stream errors

Example:
    >>> from ragraph.core import END, Context, new_state_graph
    >>>
    >>> async def main():
    ...     builder = new_state_graph()
    ...     builder.add_node("agent", lambda s, ctx: s + "!")
    ...     builder.add_edge("agent", END)
    ...     builder.set_entry_point("agent")
    ...     graph = builder.compile()
    ...     trace = await graph.stream("hi", Context())
"""

from ragraph.core.context import (
    CancellationToken,
    CancelledError,
    Context,
    DeadlineExceededError,
)
from ragraph.core.errors import (
    CompileError,
    DeadEndError,
    DuplicateNodeError,
    EdgeConditionError,
    GraphBuildError,
    GraphError,
    MissingActionError,
    NilNodeError,
    NoEdgesError,
    NodeActionError,
    NodeActionFailed,
    NodeNotFoundError,
    StepLimitError,
    StreamError,
)
from ragraph.core.graph import (
    END,
    MAX_STEPS,
    START,
    ConditionalEdge,
    Edge,
    EdgeType,
    Graph,
    GraphBuilder,
    Message,
    MessageRole,
    Node,
    SimpleEdge,
    StateItem,
    StepEvent,
    last_message,
    new_message_graph,
    new_state_graph,
)

__all__ = [
    # Graph
    "END",
    "MAX_STEPS",
    "START",
    "ConditionalEdge",
    "Edge",
    "EdgeType",
    "Graph",
    "GraphBuilder",
    "Message",
    "MessageRole",
    "Node",
    "SimpleEdge",
    "StateItem",
    "StepEvent",
    "last_message",
    "new_message_graph",
    "new_state_graph",
    # Context
    "CancellationToken",
    "CancelledError",
    "Context",
    "DeadlineExceededError",
    # Errors
    "CompileError",
    "DeadEndError",
    "DuplicateNodeError",
    "EdgeConditionError",
    "GraphBuildError",
    "GraphError",
    "MissingActionError",
    "NilNodeError",
    "NoEdgesError",
    "NodeActionError",
    "NodeActionFailed",
    "NodeNotFoundError",
    "StepLimitError",
    "StreamError",
]
