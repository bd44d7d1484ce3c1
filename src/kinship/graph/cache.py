"""Memoization of relatives traversals keyed by graph version."""
from __future__ import annotations

from collections import OrderedDict
from threading import Lock

from .models import RelationInfo

CacheKey = tuple[int, int, int | None]  # (source_id, graph version, max_degree)


class RelativesCache:
    """Bounded LRU of ``all_relatives`` results.

    Entries are keyed by the graph's edge-set version, so any write to the
    store makes earlier entries unreachable; they age out of the LRU.
    """

    def __init__(self, maxsize: int = 128) -> None:
        if maxsize < 1:
            raise ValueError("maxsize must be at least 1")
        self.maxsize = maxsize
        self._entries: OrderedDict[CacheKey, dict[int, RelationInfo]] = OrderedDict()
        self._lock = Lock()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, key: CacheKey) -> dict[int, RelationInfo] | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return dict(entry)

    def put(self, key: CacheKey, relatives: dict[int, RelationInfo]) -> None:
        with self._lock:
            self._entries[key] = dict(relatives)
            self._entries.move_to_end(key)
            while len(self._entries) > self.maxsize:
                self._entries.popitem(last=False)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0
