"""Integration tests exercising the full API with fake CLI processes."""

from __future__ import annotations

import pytest

from tests.mock_process import (
    DEVICE_CODE,
    DEVICE_CODE_URL,
    GROUP_LIST_OUTPUT,
    LOGIN_OUTPUT,
    FakeProcess,
)

EXECUTE = "/tools/execute-azure-cli-command"


@pytest.mark.asyncio
async def test_health(client):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_list_tools(client):
    resp = await client.get("/tools")
    assert resp.status_code == 200
    tools = resp.json()
    assert len(tools) == 1
    assert tools[0]["name"] == "execute-azure-cli-command"
    assert "--use-device-code" in tools[0]["description"]
    assert tools[0]["parameters"][0]["name"] == "command"


@pytest.mark.asyncio
async def test_execute_command(client):
    client.runner.processes.append(FakeProcess(GROUP_LIST_OUTPUT))
    resp = await client.post(EXECUTE, json={"command": "az group list"})
    assert resp.status_code == 200
    assert resp.json()["output"] == GROUP_LIST_OUTPUT


@pytest.mark.asyncio
async def test_execute_invalid_command(client):
    resp = await client.post(EXECUTE, json={"command": "kubectl get pods"})
    assert resp.status_code == 200
    assert resp.json()["output"] == (
        "Error: Invalid command. Command must start with 'az'."
    )
    assert client.runner.commands == []


@pytest.mark.asyncio
async def test_execute_failure_in_band(client):
    client.runner.processes.append(FakeProcess("boom\n", exit_code=1))
    resp = await client.post(EXECUTE, json={"command": "az vm list"})
    assert resp.status_code == 200
    assert resp.json()["output"] == "Error: boom\n"


@pytest.mark.asyncio
async def test_login_then_status(client):
    process = FakeProcess(LOGIN_OUTPUT, running=True)
    client.runner.processes.append(process)

    resp = await client.post(EXECUTE, json={"command": "az login"})
    output = resp.json()["output"]
    assert DEVICE_CODE_URL in output
    assert DEVICE_CODE in output

    resp = await client.get("/login/status")
    data = resp.json()
    assert data["alive"] is True
    assert data["state"] == "prompt-detected"

    process.finish(0)
    client.service.login.current_session.supervisor.join(timeout=5)

    resp = await client.get("/login/status")
    data = resp.json()
    assert data["state"] == "completed"
    assert data["alive"] is False


@pytest.mark.asyncio
async def test_api_key_enforced(client, monkeypatch):
    from azcli_tools.config import settings

    monkeypatch.setattr(settings, "azure_cli_api_key", "secret")
    resp = await client.get("/tools")
    assert resp.status_code == 401

    resp = await client.get("/tools", headers={"X-API-Key": "secret"})
    assert resp.status_code == 200

    # Health stays open
    resp = await client.get("/health")
    assert resp.status_code == 200
