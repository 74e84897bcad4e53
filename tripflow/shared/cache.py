"""
Session-keyed conversational memory.

One ConversationMemory per session id, shared by every concurrent
session in the process. Entry creation is first-caller-creates under a
lock; a session's own entry is only touched by that session's pipeline.
Entries idle for longer than the TTL are evicted.
"""

import logging
import threading
import time
from collections import deque
from typing import Callable, Deque, Dict, List, Optional


logger = logging.getLogger(__name__)

DEFAULT_MAX_MESSAGES = 20
DEFAULT_TTL_SECONDS = 3600.0


class ConversationMemory:
    """Bounded window of the most recent messages for one session."""

    def __init__(
        self,
        session_id: str,
        max_messages: int = DEFAULT_MAX_MESSAGES,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.session_id = session_id
        self._messages: Deque[Dict[str, str]] = deque(maxlen=max_messages)
        self._clock = clock
        self.last_accessed = clock()

    def touch(self) -> None:
        self.last_accessed = self._clock()

    def add(self, role: str, content: str) -> None:
        self._messages.append({"role": role, "content": content})
        self.touch()

    def recent(self, n: int) -> List[Dict[str, str]]:
        if n <= 0:
            return []
        return list(self._messages)[-n:]

    def messages(self) -> List[Dict[str, str]]:
        return list(self._messages)

    def clear(self) -> None:
        self._messages.clear()

    def __len__(self) -> int:
        return len(self._messages)


class SessionMemoryCache:
    """
    Keyed cache of ConversationMemory entries with TTL eviction.

    Args:
        max_messages: Window size of each session's memory
        ttl_seconds: Idle time after which a session is evicted
        clock: Monotonic time source (injectable for tests)
    """

    def __init__(
        self,
        max_messages: int = DEFAULT_MAX_MESSAGES,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.max_messages = max_messages
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, ConversationMemory] = {}
        self._lock = threading.Lock()

    def _expired(self, memory: ConversationMemory, now: float) -> bool:
        return now - memory.last_accessed > self.ttl_seconds

    def get_or_create(self, session_id: str) -> ConversationMemory:
        """Return the session's memory, creating it on first access."""
        with self._lock:
            now = self._clock()
            memory = self._entries.get(session_id)
            if memory is not None and self._expired(memory, now):
                logger.info(f"[session={session_id}] Memory expired, starting fresh")
                memory = None
            if memory is None:
                memory = ConversationMemory(session_id, self.max_messages, self._clock)
                self._entries[session_id] = memory
                logger.debug(f"[session={session_id}] Created conversation memory")
            memory.touch()
            return memory

    def get(self, session_id: str) -> Optional[ConversationMemory]:
        with self._lock:
            return self._entries.get(session_id)

    def clear(self, session_id: str) -> None:
        with self._lock:
            memory = self._entries.pop(session_id, None)
        if memory is not None:
            memory.clear()
            logger.info(f"[session={session_id}] Cleared conversation memory")

    def evict_inactive(self, now: Optional[float] = None) -> int:
        """
        Drop every session idle for longer than the TTL.

        Returns:
            Number of evicted sessions
        """
        with self._lock:
            now = self._clock() if now is None else now
            stale = [sid for sid, memory in self._entries.items() if self._expired(memory, now)]
            for session_id in stale:
                del self._entries[session_id]
        if stale:
            logger.info(f"Evicted {len(stale)} inactive session(s)")
        return len(stale)

    def active_session_count(self) -> int:
        with self._lock:
            return len(self._entries)
