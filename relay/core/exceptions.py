"""Custom exception classes for structured error handling."""

from typing import Any


class RelayError(Exception):
    """Base exception for all relay errors."""

    def __init__(self, code: str, message: str, status_code: int = 500) -> None:
        self.code = code
        self.message = message
        self.status_code = status_code
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": {"code": self.code, "message": self.message}}


class DetectionFailedError(RelayError):
    def __init__(self, message: str = "Language detection failed") -> None:
        super().__init__(code="DETECTION_FAILED", message=message, status_code=502)


class TranslationFailedError(RelayError):
    def __init__(self, message: str = "Translation failed") -> None:
        super().__init__(code="TRANSLATION_FAILED", message=message, status_code=502)


class DeliveryFailedError(RelayError):
    """Raised by delivery providers; also rendered for failed outbound replies.

    When a failed DeliveryReceipt is attached, its fields are merged into the
    error body so the console can still see what was attempted.
    """

    def __init__(
        self,
        message: str = "Message delivery failed",
        receipt: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(code="DELIVERY_FAILED", message=message, status_code=502)
        self.receipt = receipt

    def to_dict(self) -> dict[str, Any]:
        body = super().to_dict()
        if self.receipt:
            body.update(self.receipt)
        return body


class ProviderTimeoutError(RelayError):
    def __init__(self, message: str = "Upstream provider timed out") -> None:
        super().__init__(code="PROVIDER_TIMEOUT", message=message, status_code=504)


class ReplyTargetMissingError(RelayError):
    def __init__(self, message: str = "No inbound message to reply to") -> None:
        super().__init__(code="REPLY_TARGET_MISSING", message=message, status_code=409)


class InvalidInboundMessageError(RelayError):
    def __init__(self, message: str = "Inbound message has no text") -> None:
        super().__init__(code="INVALID_INBOUND_MESSAGE", message=message, status_code=400)
