"""Health-check endpoint."""

from __future__ import annotations

from fastapi import APIRouter

from azcli_tools import __version__
from azcli_tools.models.responses import HealthResponse

router = APIRouter(tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def service_health() -> HealthResponse:
    """Basic liveness probe (no auth required)."""
    return HealthResponse(status="ok", version=__version__)
