"""Liveness endpoint."""

from fastapi import APIRouter

from relay.core.config import settings
from relay.schemas.messages import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(status="ok", env=settings.app_env)
