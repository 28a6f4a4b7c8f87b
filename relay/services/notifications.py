"""Real-time notification channel to connected operator consoles.

Each WebSocket connection is an OperatorSession with its own outbound queue.
publish() only enqueues, so the pipeline never waits on a slow or dead
console; the socket handler drains the queue in publish order.

Every session also remembers the last ``newMessage`` it was shown. That
single slot is what a reply without an explicit number is sent to, and it is
overwritten by every new inbound message: if a second sender writes before
the operator answers the first, the reply goes to the second sender.
"""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass, field
from typing import Any

import structlog

logger = structlog.get_logger(__name__)

NEW_MESSAGE_EVENT = "newMessage"


@dataclass
class OperatorSession:
    """One connected operator console."""

    session_id: str
    queue: asyncio.Queue = field(default_factory=asyncio.Queue)
    current_message: dict[str, Any] | None = None


def make_frame(event: str, data: Any) -> dict[str, Any]:
    return {"event": event, "data": data}


class NotificationHub:
    """Registry of operator sessions and fan-out of pushed events."""

    def __init__(self) -> None:
        self._sessions: dict[str, OperatorSession] = {}

    @property
    def session_count(self) -> int:
        return len(self._sessions)

    def connect(self) -> OperatorSession:
        """Register a new operator session and return it."""
        session = OperatorSession(session_id=str(uuid.uuid4()))
        self._sessions[session.session_id] = session
        logger.info("console_connected", session_id=session.session_id)
        return session

    def disconnect(self, session_id: str) -> None:
        if self._sessions.pop(session_id, None) is not None:
            logger.info("console_disconnected", session_id=session_id)

    def get_session(self, session_id: str) -> OperatorSession | None:
        return self._sessions.get(session_id)

    def current_message(self, session_id: str) -> dict[str, Any] | None:
        """Last inbound message pushed to ``session_id``, if any."""
        session = self._sessions.get(session_id)
        return session.current_message if session else None

    async def publish(self, event: str, payload: dict[str, Any]) -> int:
        """Queue ``event`` for every connected session without waiting on delivery.

        Returns the number of sessions the event was queued for.
        """
        frame = make_frame(event, payload)
        sessions = list(self._sessions.values())
        for session in sessions:
            if event == NEW_MESSAGE_EVENT:
                session.current_message = payload
            session.queue.put_nowait(frame)

        logger.debug("event_published", event_name=event, sessions=len(sessions))
        return len(sessions)
