"""Outbound reply request/response schemas.

Field names on the wire are camelCase to match the operator console.
"""

from pydantic import BaseModel, ConfigDict, Field


class OutboundReplyRequest(BaseModel):
    """POST /outbound-reply request body."""

    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(min_length=1)
    number: str | None = None
    lang: str | None = None
    session_id: str | None = Field(default=None, alias="sessionId")


class OutboundReplyResponse(BaseModel):
    """POST /outbound-reply response body."""

    model_config = ConfigDict(populate_by_name=True)

    message_status: str = Field(alias="messageStatus")
    translated: bool
    message: str


class HealthResponse(BaseModel):
    status: str
    env: str
