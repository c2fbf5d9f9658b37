import json
import logging
import threading
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 60 * 60  # 1 hour
CACHE_KEY_NAMESPACE = "gemini"


@dataclass
class CacheEntry:
    key: str
    value: Any
    expires_at: float


def generate_cache_key(operation: str, params: Sequence[Any]) -> str:
    """Deterministic key for an operation and its ordered arguments."""
    # Serialize with sorted keys so structurally equal args give the same key
    serialized = json.dumps(list(params), sort_keys=True, default=str)
    return f"{CACHE_KEY_NAMESPACE}:{operation}:{serialized}"


class TTLCache:
    """
    Process-local key/value cache with per-entry expiry.
    Expired entries are dropped lazily when read, never in the background.
    """

    def __init__(
        self,
        default_ttl: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.default_ttl = default_ttl
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def set(self, key: str, value: Any, ttl: Optional[float] = None):
        """Store value until now + ttl, replacing any existing entry."""
        ttl = self.default_ttl if ttl is None else ttl
        with self._lock:
            self._entries[key] = CacheEntry(key=key, value=value, expires_at=self._clock() + ttl)
        logger.debug(f"Cache SET for key {key[:60]}")

    def get(self, key: str) -> Optional[Any]:
        """Return the live value for key, or None on miss or expiry."""
        with self._lock:
            entry = self._live_entry(key)
        if entry is None:
            logger.debug(f"Cache MISS for key {key[:60]}")
            return None
        logger.info(f"Cache HIT for key {key[:60]}")
        return entry.value

    def has(self, key: str) -> bool:
        with self._lock:
            return self._live_entry(key) is not None

    def get_all(self, prefix: str) -> List[Any]:
        """Return every live value whose key starts with prefix."""
        with self._lock:
            keys = [key for key in self._entries if key.startswith(prefix)]
            entries = [self._live_entry(key) for key in keys]
        return [entry.value for entry in entries if entry is not None]

    def delete(self, key: str):
        with self._lock:
            self._entries.pop(key, None)

    def clear(self):
        with self._lock:
            self._entries.clear()
        logger.info("Generation cache cleared")

    def __len__(self) -> int:
        return len(self._entries)

    def _live_entry(self, key: str) -> Optional[CacheEntry]:
        # Caller holds the lock
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() > entry.expires_at:
            logger.info(f"Cache EXPIRED for key {key[:60]}")
            del self._entries[key]
            return None
        return entry
