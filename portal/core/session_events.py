"""
In-process pub/sub for session invalidation.

When a user logs in elsewhere (or logs out) every realtime subscriber of
that user receives an event and can force the stale browser to log out.
"""
import asyncio
import logging
import threading
import time
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)

EVT_SESSION_REPLACED = "session_replaced"
EVT_SESSION_DELETED = "session_deleted"


@dataclass
class SessionEvent:
    type: str
    user_id: int
    session_id: Optional[str] = None
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        return {"type": self.type, "sessionId": self.session_id, "timestamp": self.timestamp}


class SessionEventBus:
    """
    Per-user fan-out of session events to subscriber queues.

    Subscribers live on the event loop that serves their channel; publishers
    may run on another loop or thread, in which case delivery is handed to
    the subscriber's loop.
    """

    def __init__(self, queue_size: int = 10):
        self._subscribers: Dict[int, List[Tuple[asyncio.Queue, asyncio.AbstractEventLoop]]] = {}
        self._queue_size = queue_size
        self._lock = threading.Lock()

    def publish(self, event: SessionEvent) -> int:
        """Deliver an event to all subscribers of the user. Returns delivery count."""
        try:
            current_loop = asyncio.get_running_loop()
        except RuntimeError:
            current_loop = None

        with self._lock:
            entries = list(self._subscribers.get(event.user_id, []))

        delivered = 0
        for q, loop in entries:
            if loop is current_loop:
                if self._deliver(event, q):
                    delivered += 1
            else:
                try:
                    loop.call_soon_threadsafe(self._deliver, event, q)
                    delivered += 1
                except RuntimeError:
                    # Subscriber loop already closed
                    self.unsubscribe(event.user_id, q)
        logger.debug(f"Session event {event.type} for user {event.user_id}: {delivered} subscribers")
        return delivered

    def _deliver(self, event: SessionEvent, q: asyncio.Queue) -> bool:
        try:
            q.put_nowait(event)
            return True
        except asyncio.QueueFull:
            logger.warning(f"Dropping slow session subscriber of user {event.user_id}")
            self.unsubscribe(event.user_id, q)
            return False

    def subscribe(self, user_id: int) -> asyncio.Queue:
        """Register a queue on the running event loop"""
        q: asyncio.Queue = asyncio.Queue(maxsize=self._queue_size)
        loop = asyncio.get_running_loop()
        with self._lock:
            self._subscribers.setdefault(user_id, []).append((q, loop))
        return q

    def unsubscribe(self, user_id: int, q: asyncio.Queue) -> None:
        with self._lock:
            entries = self._subscribers.get(user_id)
            if not entries:
                return
            entries[:] = [entry for entry in entries if entry[0] is not q]
            if not entries:
                del self._subscribers[user_id]

    def subscriber_count(self, user_id: Optional[int] = None) -> int:
        with self._lock:
            if user_id is not None:
                return len(self._subscribers.get(user_id, []))
            return sum(len(entries) for entries in self._subscribers.values())


session_events = SessionEventBus()
