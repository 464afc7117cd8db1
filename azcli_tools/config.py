"""Application settings loaded from environment variables."""

from __future__ import annotations

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """All configuration is driven by environment variables."""

    # Azure CLI
    azure_cli_program: str = "az"
    azure_cli_shell: str = "sh"
    # JSON blob: {"tenantId": ..., "clientId": ..., "clientSecret": ...}
    azure_cli_credentials: str = ""

    # Blocking CLI calls are offloaded to this many threads
    azure_cli_executor_workers: int = 4

    # Server
    listen_host: str = "0.0.0.0"
    listen_port: int = 8000

    # API key
    azure_cli_api_key: str = ""

    # Logging
    log_level: str = "INFO"
    log_json: bool = False

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


# Singleton – import this from anywhere
settings = Settings()
