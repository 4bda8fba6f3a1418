from __future__ import annotations

import time
from typing import Callable, Dict, Optional, Tuple

from ..config import SETTINGS

# (created_at, mimetype, body)
CacheEntry = Tuple[float, str, bytes]


class ResponseCache:
    def __init__(
        self,
        ttl: float | None = None,
        max_entries: int = 16,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._ttl = SETTINGS.cache_ttl if ttl is None else ttl
        self._max_entries = max_entries
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[Tuple[str, bytes]]:
        entry = self._entries.get(key)
        if not entry:
            return None
        timestamp, mimetype, data = entry
        if self._clock() - timestamp > self._ttl:
            self._entries.pop(key, None)
            return None
        return mimetype, data

    def put(self, key: str, mimetype: str, data: bytes) -> None:
        if key not in self._entries and len(self._entries) >= self._max_entries:
            oldest = min(self._entries.items(), key=lambda item: item[1][0])[0]
            self._entries.pop(oldest, None)
        self._entries[key] = (self._clock(), mimetype, data)

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries


CACHE = ResponseCache()
# Most recent successful output, one entry per mimetype.
_last_good: Dict[str, bytes] = {}


def remember_last_good(mimetype: str, data: bytes) -> None:
    _last_good[mimetype] = data


def last_good(mimetype: str) -> Optional[Tuple[str, bytes]]:
    data = _last_good.get(mimetype)
    if data is None:
        return None
    return mimetype, data
