from __future__ import annotations

import threading
import time
from collections import deque
from typing import Any

DEFAULT_MAX_EVENTS = 10_000


class EventLog:
    """Bounded in-memory event log; the oldest events drop off once full.

    One instance lives on the app next to the catalog store.
    """

    def __init__(self, maxlen: int = DEFAULT_MAX_EVENTS) -> None:
        self._events: deque[dict[str, Any]] = deque(maxlen=maxlen)
        self._lock = threading.Lock()

    def record(self, event_type: str, data: dict[str, Any]) -> None:
        with self._lock:
            self._events.append({
                "type": event_type,
                "timestamp": time.time(),
                **data,
            })

    def get_events(self, event_type: str | None = None) -> list[dict[str, Any]]:
        with self._lock:
            if event_type is None:
                return list(self._events)
            return [e for e in self._events if e["type"] == event_type]

    def clear(self) -> None:
        with self._lock:
            self._events.clear()
