"""Search generation tokens.

Every search is issued a generation number on its channel. When it finishes,
only the newest generation on that channel is delivered; older ones come back
marked stale so that the last issued search wins regardless of which one
completes first.
"""

from __future__ import annotations

import threading


class SearchGenerations:
    """Monotonically increasing counters, one per channel."""

    def __init__(self) -> None:
        self._latest: dict[str, int] = {}
        self._lock = threading.Lock()

    def issue(self, channel: str) -> int:
        with self._lock:
            generation = self._latest.get(channel, 0) + 1
            self._latest[channel] = generation
            return generation

    def is_current(self, channel: str, generation: int) -> bool:
        with self._lock:
            return self._latest.get(channel) == generation

    def latest(self, channel: str) -> int | None:
        with self._lock:
            return self._latest.get(channel)
