"""ragraph - state graph executor for retrieval-augmented LLM workflows.

A host program (an HTTP service, a CLI, a notebook) describes a workflow
as a graph of named node actions over a state value of its choosing,
compiles it once and streams it per request.

Layers:
    core/       Graph builder and driver, context, errors, chat client
    frontends/  Command line interface

Quick Start:
    >>> from ragraph import END, new_state_graph
    >>>
    >>> builder = new_state_graph()
    >>> builder.add_node("agent", lambda state, ctx: state + "!")
    >>> builder.add_edge("agent", END)
    >>> builder.set_entry_point("agent")
    >>> graph = builder.compile()
    >>> trace = await graph.stream("hi")
    >>> trace[-1].state
    'hi!'
"""

from ragraph.__version__ import __version__
from ragraph.core import (
    END,
    MAX_STEPS,
    START,
    CancellationToken,
    CompileError,
    Context,
    Graph,
    GraphBuilder,
    GraphError,
    Message,
    NodeActionFailed,
    StateItem,
    StepEvent,
    StreamError,
    new_message_graph,
    new_state_graph,
)

__all__ = [
    "__version__",
    "END",
    "MAX_STEPS",
    "START",
    "CancellationToken",
    "CompileError",
    "Context",
    "Graph",
    "GraphBuilder",
    "GraphError",
    "Message",
    "NodeActionFailed",
    "StateItem",
    "StepEvent",
    "StreamError",
    "new_message_graph",
    "new_state_graph",
]
