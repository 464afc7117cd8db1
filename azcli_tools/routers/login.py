"""Device-code login status endpoint."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from azcli_tools.auth import require_api_key
from azcli_tools.models.login import LoginStatus
from azcli_tools.services.azure_cli import azure_cli_service

router = APIRouter(
    prefix="/login",
    tags=["login"],
    dependencies=[Depends(require_api_key)],
)


@router.get("/status", response_model=LoginStatus)
async def login_status() -> LoginStatus:
    """State of the most recent ``az login`` started through the tool."""
    return azure_cli_service.login_status()
