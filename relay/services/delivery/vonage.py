"""Vonage (formerly Nexmo) SMS provider.

Uses the SMS REST API: POST {base}/sms/json with form-encoded credentials.
Vonage answers 200 even for rejected messages; the per-part ``status``
field ("0" means accepted) is what decides success.
"""

import httpx
import structlog

from relay.core.exceptions import DeliveryFailedError
from relay.services.delivery.base import DeliveryAck, DeliveryProvider, MessageEncoding

logger = structlog.get_logger(__name__)


class VonageDeliveryProvider(DeliveryProvider):
    """Vonage SMS implementation of DeliveryProvider."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        api_secret: str,
        sender: str,
        base_url: str = "https://rest.nexmo.com",
    ) -> None:
        self._client = client
        self._api_key = api_key
        self._api_secret = api_secret
        self._sender = sender
        self._base_url = base_url.rstrip("/")

    async def send(
        self,
        destination: str,
        text: str,
        encoding: MessageEncoding = MessageEncoding.TEXT,
    ) -> DeliveryAck:
        """Submit one SMS and return the id of its first part."""
        try:
            response = await self._client.post(
                f"{self._base_url}/sms/json",
                data={
                    "api_key": self._api_key,
                    "api_secret": self._api_secret,
                    "from": self._sender,
                    "to": destination,
                    "text": text,
                    "type": encoding.value,
                },
            )
            response.raise_for_status()
            body = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error("vonage_send_failed", error=str(e), to=destination)
            raise DeliveryFailedError(f"Vonage request failed: {e}") from e

        parts = body.get("messages") or []
        if not parts:
            raise DeliveryFailedError("Vonage returned no message parts")

        for part in parts:
            if str(part.get("status")) != "0":
                error_text = part.get("error-text", "unknown error")
                logger.warning(
                    "vonage_message_rejected",
                    to=destination,
                    status=part.get("status"),
                    error=error_text,
                )
                raise DeliveryFailedError(f"Vonage rejected message: {error_text}")

        first = parts[0]
        logger.info(
            "vonage_message_sent",
            to=destination,
            parts=len(parts),
            encoding=encoding.value,
        )
        return DeliveryAck(
            message_id=first.get("message-id"),
            remaining_balance=first.get("remaining-balance"),
        )
