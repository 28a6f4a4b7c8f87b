"""FastAPI application entrypoint.

The shared httpx client, the Watson translation provider, the Vonage
delivery provider, the notification hub and the pipeline are created once
during the lifespan and stored on app.state for injection via Depends().
The operator console is served as static files from /.
"""

from contextlib import asynccontextmanager
import logging
from pathlib import Path
from typing import AsyncGenerator

import httpx
import structlog
import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from relay.api.routes.console import router as console_router
from relay.api.routes.health import router as health_router
from relay.api.routes.inbound import router as inbound_router
from relay.api.routes.reply import router as reply_router
from relay.core.config import settings
from relay.core.exceptions import RelayError
from relay.services.delivery.vonage import VonageDeliveryProvider
from relay.services.notifications import NotificationHub
from relay.services.pipeline import TranslationRelayPipeline
from relay.services.translation.watson import WatsonTranslationProvider

_STATIC_DIR = Path(__file__).resolve().parent / "static"


def _configure_logging() -> None:
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(level),
        cache_logger_on_first_use=True,
    )
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)


_configure_logging()

logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application startup and shutdown lifecycle."""
    # --- Startup ---
    logger.info("app_startup", env=settings.app_env)

    http_client = httpx.AsyncClient(timeout=settings.provider_timeout_seconds)
    translator = WatsonTranslationProvider(
        client=http_client,
        api_key=settings.translator_api_key,
        url=settings.translator_url,
        version=settings.translator_api_version,
    )
    delivery = VonageDeliveryProvider(
        client=http_client,
        api_key=settings.vonage_api_key,
        api_secret=settings.vonage_api_secret,
        sender=settings.sender,
        base_url=settings.vonage_base_url,
    )
    hub = NotificationHub()

    app.state.notification_hub = hub
    app.state.pipeline = TranslationRelayPipeline(
        translator=translator,
        delivery=delivery,
        hub=hub,
        operator_language=settings.operator_language,
        timeout_seconds=settings.provider_timeout_seconds,
    )

    logger.info("app_providers_ready", operator_language=settings.operator_language)
    yield

    # --- Shutdown ---
    logger.info("app_shutdown")
    await http_client.aclose()


app = FastAPI(
    title="SMS Translation Relay",
    description="Relays SMS through machine translation to a human operator and back.",
    version="1.0.0",
    lifespan=lifespan,
)


@app.exception_handler(RelayError)
async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
    """Structured error response for all relay exceptions."""
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict(),
    )


app.include_router(health_router)
app.include_router(inbound_router)
app.include_router(reply_router)
app.include_router(console_router)

# Mounted last so API routes take precedence over the console assets.
app.mount("/", StaticFiles(directory=_STATIC_DIR, html=True), name="console")


def run() -> None:
    """Console entry point: serve the app with uvicorn."""
    uvicorn.run(
        "relay.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )
