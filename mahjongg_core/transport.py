from __future__ import annotations

import threading
from collections import deque
from typing import Deque, List, Protocol


class Transport(Protocol):
    """The one capability the session needs from a connection: queue text for delivery."""

    def send(self, text: str) -> None:
        ...


class OutboxTransport:
    """Queues outbound messages for a relay to drain (used by the Flask bridge and the CLI)."""

    def __init__(self) -> None:
        self._queue: Deque[str] = deque()
        self._lock = threading.Lock()

    def send(self, text: str) -> None:
        with self._lock:
            self._queue.append(text)

    def drain(self) -> List[str]:
        """Returns every queued message in send order and empties the queue."""
        with self._lock:
            out = list(self._queue)
            self._queue.clear()
        return out

    def __len__(self) -> int:
        with self._lock:
            return len(self._queue)
