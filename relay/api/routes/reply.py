"""Operator reply endpoint."""

import structlog
from fastapi import APIRouter, Depends

from relay.api.deps import get_notification_hub, get_pipeline
from relay.core.exceptions import DeliveryFailedError, ReplyTargetMissingError
from relay.schemas.messages import OutboundReplyRequest, OutboundReplyResponse
from relay.services.notifications import NotificationHub
from relay.services.pipeline import OutboundReply, TranslationRelayPipeline

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["reply"])


def _resolve_reply(
    body: OutboundReplyRequest,
    hub: NotificationHub,
    operator_language: str,
) -> OutboundReply:
    """Fill in number/lang from the session's current message when omitted."""
    number = body.number
    lang = body.lang

    if not number and body.session_id:
        current = hub.current_message(body.session_id)
        if current is not None:
            number = current.get("msisdn")
            lang = lang or current.get("lang")

    if not number:
        raise ReplyTargetMissingError()

    return OutboundReply(
        text=body.text,
        destination=str(number),
        lang=(lang or operator_language).lower(),
    )


@router.post("/outbound-reply", response_model=OutboundReplyResponse)
async def outbound_reply(
    body: OutboundReplyRequest,
    pipeline: TranslationRelayPipeline = Depends(get_pipeline),
    hub: NotificationHub = Depends(get_notification_hub),
) -> OutboundReplyResponse:
    """Translate the operator's reply if needed and send it by SMS.

    Translation failures surface as 502/504 from the exception handler.
    Delivery failures surface as 502 with the failed receipt in the body.
    """
    reply = _resolve_reply(body, hub, pipeline.operator_language)
    receipt = await pipeline.send_reply(reply)

    if not receipt.sent:
        message = receipt.error.message if receipt.error else "Message delivery failed"
        raise DeliveryFailedError(message=message, receipt=receipt.to_response())

    return OutboundReplyResponse.model_validate(receipt.to_response())
