"""The ``execute-azure-cli-command`` tool.

Validates the command, routes ``az login`` to the login orchestrator and
everything else to the command runner, and flattens the tagged result into the
marker-prefixed text the calling agent sees. Blocking work runs in a thread
pool so the FastAPI event loop is never blocked.
"""

from __future__ import annotations

import asyncio
import shlex
from concurrent.futures import ThreadPoolExecutor

from pydantic import ValidationError

from azcli_tools.config import Settings, settings
from azcli_tools.models.commands import CommandResult
from azcli_tools.models.login import LoginStatus, ServicePrincipalCredentials
from azcli_tools.services.command_filter import (
    check_cli_command,
    invalid_command_message,
    is_login_command,
)
from azcli_tools.services.command_runner import CommandRunner
from azcli_tools.services.login import LoginOrchestrator
from azcli_tools.utils.cli_parser import redact_command
from azcli_tools.utils.logging import get_logger

log = get_logger(__name__)

TOOL_NAME = "execute-azure-cli-command"

TOOL_DESCRIPTION = """\
Your job is to answer questions about an Azure environment by executing Azure CLI commands. You have the following rules:

- You should use the Azure CLI to manage Azure resources and services. Do not use any other tool.
- You should provide a valid Azure CLI command starting with 'az'. For example: 'az vm list'.
- Whenever a command fails, retry it 3 times before giving up with an improved version of the code based on the returned feedback.
- When listing resources, ensure pagination is handled correctly so that all resources are returned.
- When deleting resources, ALWAYS request user confirmation
- This tool can ONLY write code that interacts with Azure. It CANNOT generate charts, tables, graphs, etc.
- Use only non interactive commands. Do not use commands that require user input or deactivate user input using appropriate flags.
- If you need to use the az login command, use the --use-device-code option to authenticate.

Be concise, professional and to the point. Do not give generic advice, always reply with detailed & contextual data sourced from the current Azure environment. Assume user always wants to proceed, do not ask for confirmation.
"""

COMMAND_PARAM_DESCRIPTION = "Azure CLI command"


class AzureCliService:
    """Dispatches tool calls to the runner or the login orchestrator."""

    def __init__(
        self,
        cfg: Settings | None = None,
        runner: CommandRunner | None = None,
        login: LoginOrchestrator | None = None,
    ) -> None:
        self._cfg = cfg or settings
        self.runner = runner or CommandRunner(self._cfg)
        self.login = login or LoginOrchestrator(self.runner, self._cfg)
        self._executor = ThreadPoolExecutor(
            max_workers=self._cfg.azure_cli_executor_workers,
            thread_name_prefix="az",
        )

    # ── tool entry point ──────────────────────────────────────────────

    def execute(self, command: str) -> str:
        log.info("az.execute", command=redact_command(command))
        filt = check_cli_command(command, self._cfg.azure_cli_program)
        if not filt.allowed:
            log.error(
                "az.invalid_command",
                command=redact_command(command),
                reason=filt.reason,
            )
            return invalid_command_message(self._cfg.azure_cli_program)

        result = self._dispatch(command)
        output = result.to_text()
        log.info("az.output", ok=result.ok, output=output)
        return output

    async def execute_async(self, command: str) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self.execute, command)

    def login_status(self) -> LoginStatus:
        return self.login.status()

    # ── service-principal bootstrap ───────────────────────────────────

    def authenticate(self, raw_credentials: str | None = None) -> CommandResult | None:
        """Log in with the configured service principal, if any.

        Missing or malformed configuration is logged, never raised.
        """
        raw = self._cfg.azure_cli_credentials if raw_credentials is None else raw_credentials
        if not raw or not raw.strip():
            log.warning("az.no_credentials")
            return None
        try:
            creds = ServicePrincipalCredentials.model_validate_json(raw)
        except ValidationError as exc:
            log.error("az.credentials_invalid", errors=exc.error_count())
            return None

        command = build_service_principal_login(creds, self._cfg.azure_cli_program)
        result = self.runner.run(command)
        log.info("az.sp_login", ok=result.ok, output=result.to_text())
        return result

    async def authenticate_async(self) -> CommandResult | None:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(self._executor, self.authenticate)

    # ── lifecycle ─────────────────────────────────────────────────────

    def close(self) -> None:
        self.login.shutdown()
        self._executor.shutdown(wait=False)

    # ── internals ─────────────────────────────────────────────────────

    def _dispatch(self, command: str) -> CommandResult:
        if is_login_command(command, self._cfg.azure_cli_program):
            return self.login.handle_login(command)
        return self.runner.run(command)


def build_service_principal_login(
    creds: ServicePrincipalCredentials, program: str = "az",
) -> str:
    return (
        f"{program} login --service-principal"
        f" --tenant {shlex.quote(creds.tenant_id)}"
        f" --username {shlex.quote(creds.client_id)}"
        f" --password {shlex.quote(creds.client_secret)}"
    )


# ── Singleton instance ────────────────────────────────────────────────────

azure_cli_service = AzureCliService()
