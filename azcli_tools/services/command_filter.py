"""Command prefix checks for the Azure CLI tool.

Only invocations of the configured CLI program are executed; anything else is
rejected before a process is spawned.
"""

from __future__ import annotations

from azcli_tools.config import settings
from azcli_tools.utils.cli_parser import redact_command
from azcli_tools.utils.logging import get_logger

log = get_logger(__name__)

LOGIN_VERB = "login"


class CommandFilterResult:
    __slots__ = ("allowed", "reason")

    def __init__(self, allowed: bool, reason: str):
        self.allowed = allowed
        self.reason = reason

    def __bool__(self) -> bool:
        return self.allowed


def invalid_command_message(program: str | None = None) -> str:
    program = program or settings.azure_cli_program
    return f"Error: Invalid command. Command must start with '{program}'."


def check_cli_command(command: str, program: str | None = None) -> CommandFilterResult:
    """Check that *command* invokes the CLI program (``"az "`` prefix)."""
    program = program or settings.azure_cli_program
    if not command:
        return CommandFilterResult(False, "empty command")
    if not command.startswith(f"{program} "):
        log.warning("filter.rejected", command=redact_command(command))
        return CommandFilterResult(False, f"command must start with '{program} '")
    return CommandFilterResult(True, "allowed cli command")


def is_login_command(command: str, program: str | None = None) -> bool:
    program = program or settings.azure_cli_program
    return command.startswith(f"{program} {LOGIN_VERB}")
