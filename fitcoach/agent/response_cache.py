"""Short-lived cache of model replies keyed by request fingerprint.

Identical requests (same system prompt, history and outgoing text) sent
within the TTL reuse the previous reply instead of calling the model again,
e.g. a double-tapped send button. The cache is injected into the
orchestrator; nothing here is module-level state.
"""

import hashlib
import json
import os
import threading
import time
from typing import Callable

DEFAULT_TTL_SECONDS = float(os.environ.get("RESPONSE_CACHE_TTL", "5"))
MAX_ENTRIES = 256


def request_fingerprint(system_instruction: str, history: list, user_text: str) -> str:
    """SHA-256 over the full model request."""
    payload = {
        "system": system_instruction,
        "history": [[t.role, t.content] for t in history],
        "user": user_text,
    }
    h = hashlib.sha256()
    h.update(json.dumps(payload, ensure_ascii=False, sort_keys=True).encode("utf-8"))
    return h.hexdigest()


class ResponseCache:
    """Thread-safe TTL cache: fingerprint -> reply text."""

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: dict[str, tuple[float, str]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> str | None:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, value = entry
            if self._clock() - stored_at >= self.ttl_seconds:
                del self._entries[key]
                return None
            return value

    def put(self, key: str, value: str) -> None:
        with self._lock:
            self._evict_expired()
            if len(self._entries) >= self.max_entries:
                oldest = min(self._entries, key=lambda k: self._entries[k][0])
                del self._entries[oldest]
            self._entries[key] = (self._clock(), value)

    def invalidate(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        with self._lock:
            self._evict_expired()
            return len(self._entries)

    def _evict_expired(self) -> None:
        now = self._clock()
        expired = [k for k, (ts, _) in self._entries.items() if now - ts >= self.ttl_seconds]
        for k in expired:
            del self._entries[k]
