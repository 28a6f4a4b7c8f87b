"""Shared pytest fixtures for the relay test suite.

Provides:
  - mock_translator: TranslationProvider with configurable detection/translation
  - mock_delivery: DeliveryProvider recording every send
  - hub: NotificationHub recording every published event
  - pipeline: TranslationRelayPipeline wired to the three fakes
  - client: FastAPI TestClient with the pipeline and hub overridden

All external providers are faked; no network calls are made.
"""

from __future__ import annotations

import asyncio
from typing import Any, Iterator

import pytest
from fastapi.testclient import TestClient

from relay.api.deps import get_notification_hub, get_pipeline
from relay.services.delivery.base import DeliveryAck, DeliveryProvider, MessageEncoding
from relay.services.notifications import NotificationHub
from relay.services.pipeline import TranslationRelayPipeline
from relay.services.translation.base import TranslationProvider


# ---------------------------------------------------------------------------
# Mock Translation Provider
# ---------------------------------------------------------------------------


class MockTranslationProvider(TranslationProvider):
    """Detects a fixed language and translates from a lookup table.

    Unknown texts translate to "[<target>] <text>".
    """

    def __init__(
        self,
        detected: str = "en",
        translations: dict[str, str] | None = None,
        detect_error: Exception | None = None,
        translate_error: Exception | None = None,
        translate_delay: float = 0.0,
    ) -> None:
        self.detected = detected
        self.translations = translations or {}
        self.detect_error = detect_error
        self.translate_error = translate_error
        self.translate_delay = translate_delay
        self.detect_calls: list[str] = []
        self.translate_calls: list[dict[str, str]] = []

    async def detect(self, text: str) -> str:
        self.detect_calls.append(text)
        if self.detect_error is not None:
            raise self.detect_error
        return self.detected

    async def translate(self, text: str, source_lang: str, target_lang: str) -> str:
        self.translate_calls.append(
            {"text": text, "source": source_lang, "target": target_lang}
        )
        if self.translate_delay:
            await asyncio.sleep(self.translate_delay)
        if self.translate_error is not None:
            raise self.translate_error
        return self.translations.get(text, f"[{target_lang}] {text}")


# ---------------------------------------------------------------------------
# Mock Delivery Provider
# ---------------------------------------------------------------------------


class MockDeliveryProvider(DeliveryProvider):
    """Records sends; raises ``error`` instead when one is configured."""

    def __init__(self, error: Exception | None = None) -> None:
        self.error = error
        self.sent: list[dict[str, Any]] = []

    async def send(
        self,
        destination: str,
        text: str,
        encoding: MessageEncoding = MessageEncoding.TEXT,
    ) -> DeliveryAck:
        self.sent.append({"to": destination, "text": text, "encoding": encoding})
        if self.error is not None:
            raise self.error
        return DeliveryAck(message_id=f"msg-{len(self.sent)}")


# ---------------------------------------------------------------------------
# Recording Notification Hub
# ---------------------------------------------------------------------------


class RecordingHub(NotificationHub):
    """NotificationHub that also keeps every published (event, payload) pair."""

    def __init__(self) -> None:
        super().__init__()
        self.published: list[tuple[str, dict[str, Any]]] = []

    async def publish(self, event: str, payload: dict[str, Any]) -> int:
        self.published.append((event, payload))
        return await super().publish(event, payload)


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def mock_translator() -> MockTranslationProvider:
    """Mock translation provider fixture (detects English by default)."""
    return MockTranslationProvider()


@pytest.fixture
def mock_delivery() -> MockDeliveryProvider:
    """Mock delivery provider fixture."""
    return MockDeliveryProvider()


@pytest.fixture
def hub() -> RecordingHub:
    """Recording notification hub fixture."""
    return RecordingHub()


@pytest.fixture
def pipeline(
    mock_translator: MockTranslationProvider,
    mock_delivery: MockDeliveryProvider,
    hub: RecordingHub,
) -> TranslationRelayPipeline:
    """Pipeline wired to the mock capabilities."""
    return TranslationRelayPipeline(
        translator=mock_translator,
        delivery=mock_delivery,
        hub=hub,
        operator_language="en",
        timeout_seconds=1.0,
    )


@pytest.fixture
def client(
    pipeline: TranslationRelayPipeline, hub: RecordingHub
) -> Iterator[TestClient]:
    """TestClient with the pipeline and hub swapped for the test doubles."""
    from relay.main import app

    app.dependency_overrides[get_pipeline] = lambda: pipeline
    app.dependency_overrides[get_notification_hub] = lambda: hub
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
