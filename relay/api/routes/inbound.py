"""Inbound SMS webhook.

The provider gets its 200 as soon as the message is parsed. Translation and
publishing run afterwards as a background task, so a slow or failing
translation never delays or changes the acknowledgement.
"""

from typing import Any

import structlog
from fastapi import APIRouter, BackgroundTasks, Depends, Request, Response

from relay.api.deps import get_pipeline
from relay.core.exceptions import InvalidInboundMessageError
from relay.services.pipeline import InboundMessage, TranslationRelayPipeline

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["inbound"])

_FORM_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def _read_fields(request: Request) -> dict[str, Any]:
    """Collect webhook fields from a JSON body, a form body or the query string."""
    content_type = request.headers.get("content-type", "")

    if "application/json" in content_type:
        try:
            body = await request.json()
        except ValueError as e:
            raise InvalidInboundMessageError("Inbound body is not valid UTF-8 JSON") from e
        if not isinstance(body, dict):
            raise InvalidInboundMessageError("Inbound body must be a JSON object")
        return body

    if content_type.startswith(_FORM_TYPES):
        form = await request.form()
        return dict(form)

    return dict(request.query_params)


async def _accept(
    request: Request,
    background_tasks: BackgroundTasks,
    pipeline: TranslationRelayPipeline,
) -> Response:
    fields = await _read_fields(request)
    message = InboundMessage.from_provider(fields)

    background_tasks.add_task(pipeline.handle_inbound, message)
    logger.info("inbound_received", msisdn=message.address, text_len=len(message.text))

    return Response(status_code=200)


@router.post("/inbound", response_class=Response)
async def receive_inbound(
    request: Request,
    background_tasks: BackgroundTasks,
    pipeline: TranslationRelayPipeline = Depends(get_pipeline),
) -> Response:
    """Receive an SMS posted by the provider (JSON or form-encoded)."""
    return await _accept(request, background_tasks, pipeline)


@router.get("/inbound", response_class=Response)
async def receive_inbound_query(
    request: Request,
    background_tasks: BackgroundTasks,
    pipeline: TranslationRelayPipeline = Depends(get_pipeline),
) -> Response:
    """Receive an SMS delivered as query parameters (GET webhook mode)."""
    return await _accept(request, background_tasks, pipeline)
