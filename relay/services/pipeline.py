"""Translation-relay pipeline.

Two paths share one detect/translate step:

Inbound (SMS → operator):
1. Detect the sender's language
2. Translate into the operator language unless it already is that language
3. Merge the translation fields over the provider's passthrough fields
4. Publish the merged payload to every connected console (fire-and-forget)

Outbound (operator → SMS):
1. Translate the reply from the operator language into the sender's language
   (skipped when the sender already uses the operator language)
2. Send it, as UNICODE when translated and as plain TEXT otherwise
3. Return a DeliveryReceipt describing what was sent

Every capability call is turned into an Ok/Err result and bounded by a
timeout. The inbound path never raises: failures become a degraded
notification plus a log event. The outbound path raises on translation
failure and reports delivery failure as a receipt with status "failed".
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any, Awaitable, Mapping, TypeVar

import structlog

from relay.core.exceptions import (
    DeliveryFailedError,
    DetectionFailedError,
    InvalidInboundMessageError,
    ProviderTimeoutError,
    RelayError,
    TranslationFailedError,
)
from relay.core.result import Err, Ok, Result
from relay.services.delivery.base import DeliveryAck, DeliveryProvider, MessageEncoding
from relay.services.notifications import NEW_MESSAGE_EVENT, NotificationHub
from relay.services.translation.base import TranslationProvider, TranslationResult

logger = structlog.get_logger(__name__)

T = TypeVar("T")

OPERATOR_LANGUAGE = "en"

# Provider fields that may carry the sender's number, in priority order.
_ADDRESS_FIELDS = ("msisdn", "from")

# Typed error for a provider call that fails with an unexpected exception.
_OPERATION_ERRORS: dict[str, type[RelayError]] = {
    "detect": DetectionFailedError,
    "translate": TranslationFailedError,
    "send": DeliveryFailedError,
}


@dataclass(frozen=True)
class InboundMessage:
    """An SMS as handed over by the provider webhook."""

    text: str
    address: str | None
    passthrough: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def from_provider(cls, fields: Mapping[str, Any]) -> InboundMessage:
        """Build from raw webhook fields; every field is kept as passthrough."""
        text = fields.get("text")
        if not isinstance(text, str) or not text.strip():
            raise InvalidInboundMessageError()

        address = None
        for name in _ADDRESS_FIELDS:
            if fields.get(name):
                address = str(fields[name])
                break

        return cls(text=text, address=address, passthrough=dict(fields))


@dataclass(frozen=True)
class OutboundReply:
    """An operator reply bound for the original sender."""

    text: str
    destination: str
    lang: str


@dataclass(frozen=True)
class DeliveryReceipt:
    """What happened to an outbound reply."""

    status: str
    translated: bool
    message: str
    message_id: str | None = None
    error: RelayError | None = None

    @property
    def sent(self) -> bool:
        return self.status == "sent"

    def to_response(self) -> dict[str, Any]:
        return {
            "messageStatus": self.status,
            "translated": self.translated,
            "message": self.message,
        }


def build_notification(
    result: TranslationResult, message: InboundMessage
) -> dict[str, Any]:
    """Merge translation fields over the passthrough fields.

    Translation fields win on key collisions; the sender address is always
    present under ``msisdn`` so the console can reply.
    """
    payload = {**message.passthrough, **result.to_fields()}
    if message.address is not None and not payload.get("msisdn"):
        payload["msisdn"] = message.address
    return payload


def build_degraded_notification(
    message: InboundMessage, error: RelayError, operator_language: str
) -> dict[str, Any]:
    """Untranslated notification for a message the pipeline could not translate.

    The language falls back to the operator language so that a reply is sent
    as-is rather than through a translation pair that just failed.
    """
    fallback = TranslationResult(text=message.text, lang=operator_language)
    payload = build_notification(fallback, message)
    payload["degraded"] = True
    payload["error"] = error.to_dict()["error"]
    return payload


class TranslationRelayPipeline:
    """Orchestrates detect → translate → publish/send for both directions."""

    def __init__(
        self,
        translator: TranslationProvider,
        delivery: DeliveryProvider,
        hub: NotificationHub,
        operator_language: str = OPERATOR_LANGUAGE,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._translator = translator
        self._delivery = delivery
        self._hub = hub
        self._operator_language = operator_language
        self._timeout = timeout_seconds

    @property
    def operator_language(self) -> str:
        return self._operator_language

    async def _attempt(self, call: Awaitable[T], operation: str) -> Result[T]:
        try:
            value = await asyncio.wait_for(call, timeout=self._timeout)
        except asyncio.TimeoutError:
            return Err(
                ProviderTimeoutError(f"{operation} timed out after {self._timeout}s")
            )
        except RelayError as e:
            return Err(e)
        except Exception as e:
            logger.error(
                "provider_call_failed",
                operation=operation,
                error_type=type(e).__name__,
                error=str(e),
            )
            return Err(_OPERATION_ERRORS[operation](f"{operation} failed: {e}"))
        return Ok(value)

    async def _translate(self, text: str, source: str, target: str) -> Result[str]:
        outcome = await self._attempt(
            self._translator.translate(text, source, target), "translate"
        )
        if isinstance(outcome, Ok) and not outcome.value:
            return Err(TranslationFailedError(f"Empty translation for {source}->{target}"))
        return outcome

    async def translate_text(
        self, text: str, target_language: str
    ) -> Result[TranslationResult]:
        """Detect the language of ``text`` and translate it into ``target_language``.

        No translation call is made when both the detected and the target
        language are the operator language.
        """
        detected = await self._attempt(self._translator.detect(text), "detect")
        if isinstance(detected, Err):
            return detected

        source = detected.value.lower()
        if source == self._operator_language and target_language == self._operator_language:
            return Ok(TranslationResult(text=text, lang=source))

        translated = await self._translate(text, source, target_language)
        if isinstance(translated, Err):
            return translated

        return Ok(
            TranslationResult(
                text=text,
                lang=source,
                translated=True,
                translation=translated.value,
            )
        )

    async def handle_inbound(self, message: InboundMessage) -> dict[str, Any] | None:
        """Translate an inbound SMS and push it to the operator consoles.

        Runs detached from the provider's HTTP request, so it never raises:
        failures end up in the log and, where possible, as a degraded
        notification. Returns the published payload, or None if nothing
        could be published.
        """
        try:
            outcome = await self.translate_text(message.text, self._operator_language)

            if isinstance(outcome, Ok):
                payload = build_notification(outcome.value, message)
            else:
                logger.warning(
                    "inbound_degraded",
                    msisdn=message.address,
                    code=outcome.error.code,
                    error=outcome.error.message,
                )
                payload = build_degraded_notification(
                    message, outcome.error, self._operator_language
                )

            sessions = await self._hub.publish(NEW_MESSAGE_EVENT, payload)
            logger.info(
                "inbound_published",
                msisdn=message.address,
                lang=payload.get("lang"),
                translated=payload.get("translated"),
                sessions=sessions,
            )
            return payload
        except Exception as e:
            logger.error(
                "inbound_pipeline_failed",
                msisdn=message.address,
                error=str(e),
            )
            return None

    async def send_reply(self, reply: OutboundReply) -> DeliveryReceipt:
        """Translate (if needed) and deliver an operator reply.

        Raises:
            RelayError: If the reply could not be translated.
        """
        if reply.lang == self._operator_language:
            outgoing, encoding, translated = reply.text, MessageEncoding.TEXT, False
        else:
            outcome = await self._translate(
                reply.text, self._operator_language, reply.lang
            )
            if isinstance(outcome, Err):
                logger.warning(
                    "reply_translation_failed",
                    to=reply.destination,
                    target=reply.lang,
                    code=outcome.error.code,
                    error=outcome.error.message,
                )
                raise outcome.error
            outgoing, encoding, translated = outcome.value, MessageEncoding.UNICODE, True

        sent: Result[DeliveryAck] = await self._attempt(
            self._delivery.send(reply.destination, outgoing, encoding), "send"
        )
        if isinstance(sent, Err):
            logger.error(
                "reply_delivery_failed",
                to=reply.destination,
                code=sent.error.code,
                error=sent.error.message,
            )
            return DeliveryReceipt(
                status="failed",
                translated=translated,
                message=outgoing,
                error=sent.error,
            )

        logger.info(
            "reply_sent",
            to=reply.destination,
            lang=reply.lang,
            translated=translated,
            encoding=encoding.value,
        )
        return DeliveryReceipt(
            status="sent",
            translated=translated,
            message=outgoing,
            message_id=sent.value.message_id,
        )
