"""
Calculation events for an injected analytics collaborator.

The core never owns a global tracker: callers pass any object with a
``record(event)`` method. ``NullRecorder`` is the default.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Protocol

BOND_CALCULATION = "bond_calculation"


@dataclass(frozen=True)
class AnalyticsEvent:
    event_name: str
    parameters: Dict[str, Any] = field(default_factory=dict)
    timestamp: float = field(default_factory=time.time)


class EventRecorder(Protocol):
    def record(self, event: AnalyticsEvent) -> None:
        ...


class NullRecorder:
    def record(self, event: AnalyticsEvent) -> None:
        return None


class MemoryRecorder:
    """Keeps events in order; handy for tests and batch reports."""

    def __init__(self) -> None:
        self.events: List[AnalyticsEvent] = []

    def record(self, event: AnalyticsEvent) -> None:
        self.events.append(event)

    def named(self, event_name: str) -> List[AnalyticsEvent]:
        return [e for e in self.events if e.event_name == event_name]


__all__ = ["BOND_CALCULATION", "AnalyticsEvent", "EventRecorder", "NullRecorder", "MemoryRecorder"]
