"""Bounded blame result cache."""

from __future__ import annotations

import threading
from collections import OrderedDict

import structlog

from gitscope.git.models import FileBlame

log = structlog.get_logger(__name__)

# (resolved repository path, full commit id, file path)
BlameKey = tuple[str, str, str]

DEFAULT_BLAME_CAPACITY = 50


class BlameCache:
    """Thread-safe FIFO cache for FileBlame results.

    Entries are evicted in insertion order once capacity is exceeded. A read
    hit does not move an entry, and re-putting an existing key replaces its
    value in place.
    """

    def __init__(self, capacity: int = DEFAULT_BLAME_CAPACITY) -> None:
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._entries: OrderedDict[BlameKey, FileBlame] = OrderedDict()
        self._lock = threading.Lock()
        self._capacity = capacity

    @property
    def capacity(self) -> int:
        return self._capacity

    def get(self, key: BlameKey) -> FileBlame | None:
        with self._lock:
            return self._entries.get(key)

    def put(self, key: BlameKey, blame: FileBlame) -> None:
        with self._lock:
            self._entries[key] = blame
            while len(self._entries) > self._capacity:
                evicted, _ = self._entries.popitem(last=False)
                log.debug("blame_cache_evict", commit=evicted[1][:8], path=evicted[2])

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._entries
