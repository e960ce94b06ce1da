"""In-memory TTL cache for fetched payloads."""

import logging
import time
from typing import Any, Callable, Dict, Optional, Tuple

logger = logging.getLogger(__name__)


class TTLCache:
    """Key/value store whose entries expire *ttl* seconds after being set.

    The clock is injectable so expiry can be tested without sleeping.
    """

    def __init__(self, default_ttl: float = 300.0, clock: Optional[Callable[[], float]] = None):
        self.default_ttl = default_ttl
        self._clock = clock or time.monotonic
        self._items: Dict[str, Tuple[Any, float]] = {}

    def get(self, key: str) -> Optional[Any]:
        """Cached value, or None when missing or expired."""
        item = self._items.get(key)
        if item is None:
            return None

        value, expiry = item
        if self._clock() > expiry:
            del self._items[key]
            logger.debug(f"Cache entry expired: {key}")
            return None
        return value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        ttl = self.default_ttl if ttl is None else ttl
        self._items[key] = (value, self._clock() + ttl)

    def clear(self) -> None:
        self._items.clear()

    def __contains__(self, key: str) -> bool:
        return self.get(key) is not None

    def __len__(self) -> int:
        return len(self._items)
