"""API key authentication dependency.

Tool calls can run arbitrary ``az`` commands with whatever identity the CLI is
logged in as, so every router except ``/health`` sits behind this check.
"""

from __future__ import annotations

import secrets

from fastapi import HTTPException, Request, Security, status
from fastapi.security import APIKeyHeader

from azcli_tools.config import settings
from azcli_tools.utils.logging import get_logger

log = get_logger(__name__)

_api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


async def require_api_key(
    request: Request,
    api_key: str | None = Security(_api_key_header),
) -> str:
    """FastAPI dependency that enforces the X-API-Key header.

    A blank AZURE_CLI_API_KEY disables the check for local development.
    """
    expected = settings.azure_cli_api_key
    if not expected:
        return "no-key-configured"
    if api_key is None or not secrets.compare_digest(
        api_key.encode(), expected.encode(),
    ):
        log.warning(
            "auth.rejected",
            path=request.url.path,
            client=request.client.host if request.client else None,
            key_present=api_key is not None,
        )
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key",
        )
    return api_key
