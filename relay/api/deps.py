"""Shared FastAPI dependencies.

The pipeline and notification hub are created once during the FastAPI
lifespan and stored on app.state. Handlers retrieve them via Depends(),
never by direct import, so tests can swap them with dependency overrides.
"""

from fastapi.requests import HTTPConnection

from relay.services.notifications import NotificationHub
from relay.services.pipeline import TranslationRelayPipeline


def get_notification_hub(conn: HTTPConnection) -> NotificationHub:
    """Return the singleton hub (works for both HTTP and WebSocket routes)."""
    return conn.app.state.notification_hub


def get_pipeline(conn: HTTPConnection) -> TranslationRelayPipeline:
    """Return the singleton translation-relay pipeline."""
    return conn.app.state.pipeline
