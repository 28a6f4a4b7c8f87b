"""Integration tests for the operator console WebSocket.

Tests:
  - A session frame with the session id is sent on connect
  - join frames are accepted (logged only)
  - Undecodable frames are ignored without closing the session
  - An inbound SMS is pushed to the connected console as newMessage
  - Disconnecting removes the operator session
"""

from __future__ import annotations

import asyncio

import pytest
from fastapi.testclient import TestClient

from relay.api.routes.console import _stop_pump
from tests.conftest import MockTranslationProvider, RecordingHub


class TestConsoleSocket:
    """GET /ws."""

    def test_session_frame_on_connect(self, client: TestClient, hub: RecordingHub) -> None:
        with client.websocket_connect("/ws") as ws:
            frame = ws.receive_json()
            assert frame["event"] == "session"
            session_id = frame["data"]["sessionId"]
            assert hub.get_session(session_id) is not None

            ws.send_json({"event": "join", "data": "Support interface connected..."})
            ws.send_json({"event": "typing", "data": None})

        assert hub.session_count == 0

    def test_non_json_frame_is_ignored(self, client: TestClient, hub: RecordingHub) -> None:
        with client.websocket_connect("/ws") as ws:
            session_id = ws.receive_json()["data"]["sessionId"]

            ws.send_text("not json at all")
            ws.send_json({"event": "join", "data": "still here"})
            assert hub.get_session(session_id) is not None

        assert hub.session_count == 0

    def test_inbound_sms_is_pushed_to_console(
        self,
        client: TestClient,
        hub: RecordingHub,
        mock_translator: MockTranslationProvider,
    ) -> None:
        mock_translator.detected = "es"
        mock_translator.translations = {"Hola": "Hello"}

        with client.websocket_connect("/ws") as ws:
            session_id = ws.receive_json()["data"]["sessionId"]

            response = client.post("/inbound", json={"text": "Hola", "msisdn": "+1555"})
            assert response.status_code == 200

            frame = ws.receive_json()
            assert frame["event"] == "newMessage"
            assert frame["data"]["translation"] == "Hello"
            assert frame["data"]["msisdn"] == "+1555"
            assert frame["data"]["lang"] == "es"
            assert hub.current_message(session_id)["msisdn"] == "+1555"


class TestHealthAndConsole:
    """GET /health and the static console."""

    def test_health(self, client: TestClient) -> None:
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_console_page_is_served(self, client: TestClient) -> None:
        response = client.get("/")
        assert response.status_code == 200
        assert "reply-box" in response.text


@pytest.mark.asyncio
class TestStopPump:
    """Shutting down the per-session sender task."""

    async def test_pending_pump_is_cancelled(self) -> None:
        sender = asyncio.create_task(asyncio.sleep(10))

        await _stop_pump(sender, "session-1")

        assert sender.cancelled()

    async def test_failed_pump_exception_is_collected(self) -> None:
        async def broken_send() -> None:
            raise RuntimeError("socket closed")

        sender = asyncio.create_task(broken_send())
        await asyncio.sleep(0)

        # must not raise; the failure is logged instead
        await _stop_pump(sender, "session-1")

        assert sender.done()
        assert isinstance(sender.exception(), RuntimeError)
