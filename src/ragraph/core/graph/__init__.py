"""State graph - directed graph of named node actions with conditional edges.

A graph is described with a GraphBuilder, compiled once into an immutable
Graph, then streamed:
- Each step runs one node action over the current state
- Outgoing edges (simple or conditional) pick the next node
- Streaming stops at END, on the first error, or after max_steps steps
- Every stream() call returns its own trace of (node, state) items
"""

from ragraph.core.graph.builder import GraphBuilder, new_message_graph, new_state_graph
from ragraph.core.graph.events import StepEvent
from ragraph.core.graph.graph import Graph
from ragraph.core.graph.messages import Message, MessageRole, last_message
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
    SimpleEdge,
    StateItem,
)

__all__ = [
    "END",
    "MAX_STEPS",
    "START",
    "ConditionalEdge",
    "Edge",
    "EdgeCondition",
    "EdgeType",
    "Graph",
    "GraphBuilder",
    "Message",
    "MessageRole",
    "Node",
    "NodeAction",
    "SimpleEdge",
    "StateItem",
    "StepEvent",
    "last_message",
    "new_message_graph",
    "new_state_graph",
]
