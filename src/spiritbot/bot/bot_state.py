"""
Process-lifetime volatile state shared by the event handlers.

Nothing here is persisted; a restart starts with empty containers. Event
handlers run as concurrent tasks and may touch these containers from
library callbacks on other threads, so every access goes through a lock.
"""

import threading
from typing import Dict, Optional, Set

from spiritbot.util.logger import get_logger

logger = get_logger("bot_state")


class VolatileState:
    """
    Self-deletion set and ticket-thread ownership map.

    A single instance is created at startup and handed to every component
    that needs it.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ignored_deletions: Set[int] = set()
        self._ticket_threads: Dict[int, int] = {}

    # ---- self-deletion set ----

    def ignore_deletion(self, message_id: int) -> None:
        """Record that the bot is about to delete ``message_id`` itself."""
        with self._lock:
            self._ignored_deletions.add(message_id)

    def consume_ignored_deletion(self, message_id: int) -> bool:
        """Remove ``message_id`` from the set, returning True if it was present."""
        with self._lock:
            if message_id in self._ignored_deletions:
                self._ignored_deletions.remove(message_id)
                return True
            return False

    @property
    def pending_deletions(self) -> int:
        with self._lock:
            return len(self._ignored_deletions)

    # ---- ticket threads ----

    def register_ticket_thread(self, thread_id: int, opener_id: int) -> None:
        with self._lock:
            self._ticket_threads[thread_id] = opener_id
        logger.debug("Tracking ticket thread %s opened by %s", thread_id, opener_id)

    def ticket_opener(self, thread_id: int) -> Optional[int]:
        """Return the opener of a tracked ticket thread, or None if untracked."""
        with self._lock:
            return self._ticket_threads.get(thread_id)

    def forget_ticket_thread(self, thread_id: int) -> None:
        with self._lock:
            self._ticket_threads.pop(thread_id, None)

    @property
    def ticket_thread_count(self) -> int:
        with self._lock:
            return len(self._ticket_threads)
