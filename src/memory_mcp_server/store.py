"""
In-memory key/value store backing the memory tools and resources.

Values are JSON-compatible trees. The store lives for the lifetime of the
server process; nothing is persisted.
"""

import asyncio
import copy
from typing import Any, Dict, List, Optional

import structlog

logger = structlog.get_logger(__name__)


class MemoryStore:
    """
    Shared key/value mapping guarded by an asyncio lock.

    One writer at a time; a read issued after a write completes observes
    that write.
    """

    def __init__(self, initial_data: Optional[Dict[str, Any]] = None):
        """
        Initialize the store.

        Args:
            initial_data: Entries to seed the store with. Copied, so later
                changes to the argument do not leak into the store.
        """
        self._data: Dict[str, Any] = copy.deepcopy(initial_data) if initial_data else {}
        self._lock = asyncio.Lock()

    async def get(self, key: str, default: Any = None) -> Any:
        """Get the value stored under key."""
        async with self._lock:
            return self._data.get(key, default)

    async def set(self, key: str, value: Any) -> None:
        """Store value under key, replacing any previous value."""
        async with self._lock:
            self._data[key] = value
        logger.debug("Stored memory entry", key=key)

    async def has(self, key: str) -> bool:
        """Check whether key has an entry."""
        async with self._lock:
            return key in self._data

    async def delete(self, key: str) -> bool:
        """
        Delete the entry for key.

        Returns:
            True if an entry was removed
        """
        async with self._lock:
            removed = self._data.pop(key, _MISSING) is not _MISSING
        if removed:
            logger.debug("Deleted memory entry", key=key)
        return removed

    async def clear(self) -> None:
        """Remove all entries."""
        async with self._lock:
            self._data.clear()
        logger.debug("Cleared memory store")

    async def keys(self) -> List[str]:
        async with self._lock:
            return list(self._data)

    def __len__(self) -> int:
        return len(self._data)


_MISSING = object()
