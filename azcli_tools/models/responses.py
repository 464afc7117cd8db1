"""Common API request/response models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str
    version: str


class ToolParameter(BaseModel):
    name: str
    type: str = "string"
    description: str
    required: bool = True


class ToolDescriptor(BaseModel):
    """How the calling agent discovers the tool."""

    name: str
    description: str
    parameters: list[ToolParameter]


class CliCommandRequest(BaseModel):
    command: str = Field(description="Azure CLI command")


class CliCommandResponse(BaseModel):
    """Text output; failures start with ``"Error: "``."""

    output: str
