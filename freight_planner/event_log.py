"""Append-only, time-ordered record of what every vehicle did."""

from __future__ import annotations

from typing import Iterator, List, Optional

from .models import Event


class EventLog:
    """Events in non-decreasing timestamp order.

    Iteration walks a snapshot, so the log can be re-read any number of times
    and is unaffected by events appended while a reader is part-way through.
    """

    def __init__(self) -> None:
        self._events: List[Event] = []

    def append(self, event: Event) -> None:
        last = self.last
        if last is not None and event.timestamp < last.timestamp:
            raise ValueError(
                f"Event at W={event.timestamp} would precede the last event at W={last.timestamp}"
            )
        self._events.append(event)

    def __iter__(self) -> Iterator[Event]:
        return iter(tuple(self._events))

    def __len__(self) -> int:
        return len(self._events)

    def __getitem__(self, index):
        return self._events[index]

    def __bool__(self) -> bool:
        return bool(self._events)

    @property
    def last(self) -> Optional[Event]:
        return self._events[-1] if self._events else None

    @property
    def makespan(self) -> int:
        return self._events[-1].timestamp if self._events else 0

    def for_vehicle(self, name: str) -> List[Event]:
        return [e for e in self._events if e.vehicle == name]

    def clear(self) -> None:
        self._events.clear()
