"""FastAPI application entry-point."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from azcli_tools import __version__
from azcli_tools.routers import health, login, tools
from azcli_tools.services.azure_cli import azure_cli_service
from azcli_tools.utils.logging import setup_logging


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup / shutdown hooks."""
    setup_logging()
    # Service-principal login, when configured; failures are logged only
    await azure_cli_service.authenticate_async()
    yield
    # Shutdown: terminate any interactive login still waiting on the user
    azure_cli_service.close()


app = FastAPI(
    title="Azure CLI Tools API",
    description="Executes Azure CLI commands on behalf of an agent",
    version=__version__,
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(tools.router)
app.include_router(login.router)
