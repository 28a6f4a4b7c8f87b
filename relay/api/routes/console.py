"""Operator console WebSocket.

Frames in both directions are JSON envelopes: {"event": <name>, "data": <payload>}.

Server → console:
  - session     {"sessionId": ...}, sent once on connect
  - newMessage  merged inbound notification
Console → server:
  - join        free text, logged only
"""

import asyncio
import json

import structlog
from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from relay.api.deps import get_notification_hub
from relay.services.notifications import NotificationHub, OperatorSession, make_frame

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["console"])


async def _pump(websocket: WebSocket, session: OperatorSession) -> None:
    """Forward queued events to the socket in publish order."""
    while True:
        frame = await session.queue.get()
        await websocket.send_json(frame)


async def _stop_pump(sender: asyncio.Task, session_id: str) -> None:
    """Cancel the pump and collect its outcome so no exception goes unretrieved."""
    sender.cancel()
    try:
        await sender
    except asyncio.CancelledError:
        pass
    except Exception as e:
        logger.warning("console_send_failed", session_id=session_id, error=str(e))


@router.websocket("/ws")
async def console_socket(
    websocket: WebSocket,
    hub: NotificationHub = Depends(get_notification_hub),
) -> None:
    await websocket.accept()
    session = hub.connect()
    await websocket.send_json(make_frame("session", {"sessionId": session.session_id}))

    sender = asyncio.create_task(_pump(websocket, session))
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                frame = json.loads(raw)
            except ValueError:
                logger.debug("console_frame_undecodable", session_id=session.session_id)
                continue

            event = frame.get("event") if isinstance(frame, dict) else None
            if event == "join":
                logger.info(
                    "console_joined",
                    session_id=session.session_id,
                    data=frame.get("data"),
                )
            else:
                logger.debug(
                    "console_event_ignored",
                    session_id=session.session_id,
                    event_name=event,
                )
    except WebSocketDisconnect:
        pass
    finally:
        await _stop_pump(sender, session.session_id)
        hub.disconnect(session.session_id)
