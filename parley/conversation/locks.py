"""Per-conversation mutual exclusion.

Ensures a single writer per conversation: turns on the same conversation
run one after another, turns on different conversations run concurrently.
"""

import asyncio
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field


@dataclass
class _LockEntry:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    holders: int = 0


class ConversationLocks:
    """Registry of asyncio locks keyed by conversation identifier.

    Entries are reference counted and dropped once no task holds or waits
    on them, so the registry does not grow with the number of conversations.
    Must be used from a single event loop.
    """

    def __init__(self) -> None:
        self._entries: dict[str, _LockEntry] = {}

    @asynccontextmanager
    async def acquire(self, conversation_id: str) -> AsyncGenerator[None, None]:
        """Hold the lock for a conversation for the duration of the block.

        Usage:
            async with locks.acquire(conversation_id):
                # exclusive access to this conversation
        """
        entry = self._entries.get(conversation_id)
        if entry is None:
            entry = _LockEntry()
            self._entries[conversation_id] = entry
        entry.holders += 1
        try:
            async with entry.lock:
                yield
        finally:
            entry.holders -= 1
            if entry.holders == 0:
                del self._entries[conversation_id]

    def is_locked(self, conversation_id: str) -> bool:
        """Check if a conversation is currently held."""
        entry = self._entries.get(conversation_id)
        return entry is not None and entry.lock.locked()

    def __len__(self) -> int:
        return len(self._entries)
