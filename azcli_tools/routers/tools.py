"""Tool discovery and execution endpoints for the calling agent."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from azcli_tools.auth import require_api_key
from azcli_tools.models.responses import (
    CliCommandRequest,
    CliCommandResponse,
    ToolDescriptor,
    ToolParameter,
)
from azcli_tools.services.azure_cli import (
    COMMAND_PARAM_DESCRIPTION,
    TOOL_DESCRIPTION,
    TOOL_NAME,
    azure_cli_service,
)

router = APIRouter(
    prefix="/tools",
    tags=["tools"],
    dependencies=[Depends(require_api_key)],
)


@router.get("", response_model=list[ToolDescriptor])
async def list_tools() -> list[ToolDescriptor]:
    """Describe the tools this service exposes."""
    return [
        ToolDescriptor(
            name=TOOL_NAME,
            description=TOOL_DESCRIPTION,
            parameters=[
                ToolParameter(name="command", description=COMMAND_PARAM_DESCRIPTION),
            ],
        ),
    ]


@router.post(f"/{TOOL_NAME}", response_model=CliCommandResponse)
async def execute_azure_cli_command(req: CliCommandRequest) -> CliCommandResponse:
    """Run an Azure CLI command and return its text output.

    Failures are reported in-band: the output starts with ``"Error: "``.
    """
    output = await azure_cli_service.execute_async(req.command)
    return CliCommandResponse(output=output)
