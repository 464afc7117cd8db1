"""Device-code login and service-principal credential models."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class LoginState(str, Enum):
    not_started = "not-started"
    running = "running"
    prompt_detected = "prompt-detected"
    completed = "completed"
    destroyed = "destroyed"
    failed = "failed"


class DeviceCodePrompt(BaseModel):
    """Sign-in URL and one-time code parsed from a single CLI output line."""

    url: str
    code: str
    line: str = Field(description="The raw CLI line the values came from")

    @property
    def message(self) -> str:
        return f"To sign in, open the URL: {self.url} and enter the code: {self.code}"


class LoginStatus(BaseModel):
    """Snapshot of the current interactive login, if any."""

    state: LoginState = LoginState.not_started
    alive: bool = False
    pid: Optional[int] = None
    command: Optional[str] = None
    detail: Optional[str] = None


class ServicePrincipalCredentials(BaseModel):
    """The JSON blob produced by ``az ad sp create-for-rbac --sdk-auth``."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    tenant_id: str = Field(alias="tenantId", min_length=1)
    client_id: str = Field(alias="clientId", min_length=1)
    client_secret: str = Field(alias="clientSecret", min_length=1)
