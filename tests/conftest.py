"""Shared pytest fixtures."""

from __future__ import annotations

import os

# Force settings to use test-safe defaults before any import
os.environ.setdefault("AZURE_CLI_CREDENTIALS", "")
os.environ.setdefault("AZURE_CLI_API_KEY", "")
os.environ.setdefault("AZURE_CLI_PROGRAM", "az")

import pytest
from httpx import ASGITransport, AsyncClient

from azcli_tools.services.azure_cli import AzureCliService
from azcli_tools.services.login import LoginOrchestrator
from tests.mock_process import ScriptedRunner


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def make_service():
    """Build AzureCliService instances around a ScriptedRunner."""
    created: list[AzureCliService] = []

    def _make(*processes, events=None) -> AzureCliService:
        runner = ScriptedRunner(*processes, events=events)
        service = AzureCliService(runner=runner, login=LoginOrchestrator(runner))
        created.append(service)
        return service

    yield _make

    for service in created:
        service.close()


@pytest.fixture
async def client(monkeypatch):
    """Async test client with a scripted tool service injected.

    Tests queue fake processes on ``client.runner.processes``.
    """
    monkeypatch.setenv("AZURE_CLI_API_KEY", "")

    import azcli_tools.routers.login as rl
    import azcli_tools.routers.tools as rt

    from azcli_tools.main import app as fastapi_app

    runner = ScriptedRunner()
    service = AzureCliService(runner=runner, login=LoginOrchestrator(runner))
    monkeypatch.setattr(rt, "azure_cli_service", service)
    monkeypatch.setattr(rl, "azure_cli_service", service)

    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        ac.runner = runner
        ac.service = service
        yield ac

    service.close()
