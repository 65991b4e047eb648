"""StepEvent - events emitted by Graph.stream_events()."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Literal

EventType = Literal["stream_start", "step_start", "step_complete", "step_error", "stream_end"]


@dataclass
class StepEvent:
    """Event emitted while a graph is being streamed.

    Attributes:
        event_type: Type of event.
        node: Node the event relates to (START for stream_start, END for stream_end).
        state: State recorded for step_complete and stream_start, else None.
        data: Event-specific data (the error message for step_error).
        step: Driver step number, 0 for stream_start.
        timestamp: When the event occurred.
    """

    event_type: EventType
    node: str
    state: Any = None
    data: Any = None
    step: int = 0
    timestamp: datetime = field(default_factory=datetime.now)
