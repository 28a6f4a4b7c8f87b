"""Abstract message delivery capability."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum


class MessageEncoding(str, Enum):
    """Transport encoding for an outbound SMS."""

    TEXT = "text"  # GSM-7, operator-language replies
    UNICODE = "unicode"  # machine-translated replies in any script


@dataclass(frozen=True)
class DeliveryAck:
    """Provider acknowledgement for an accepted message."""

    message_id: str | None = None
    remaining_balance: str | None = None


class DeliveryProvider(ABC):
    """Abstract base class for outbound SMS providers."""

    @abstractmethod
    async def send(
        self,
        destination: str,
        text: str,
        encoding: MessageEncoding = MessageEncoding.TEXT,
    ) -> DeliveryAck:
        """Send ``text`` to ``destination``.

        Raises:
            DeliveryFailedError: If the provider rejects the message or the
                call fails.
        """
        ...
