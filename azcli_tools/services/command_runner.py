"""Shell subprocess runner for Azure CLI commands.

Every command runs through ``sh -c`` so quoting and globbing behave as they
would in a terminal. stderr is merged into stdout and the combined stream is
drained completely before waiting on the process.
"""

from __future__ import annotations

import subprocess

from azcli_tools.config import Settings, settings
from azcli_tools.models.commands import CommandResult
from azcli_tools.utils.cli_parser import redact_command
from azcli_tools.utils.logging import get_logger

log = get_logger(__name__)


class CommandRunner:
    """Runs one CLI command per call and buffers its combined output."""

    def __init__(self, cfg: Settings | None = None) -> None:
        self._cfg = cfg or settings

    # ── process creation ──────────────────────────────────────────────

    def create_process(self, command: str, *, stdin: bool = False) -> subprocess.Popen:
        """Spawn *command* under the configured shell.

        Overridden in tests to hand back fake process objects.
        """
        return subprocess.Popen(
            [self._cfg.azure_cli_shell, "-c", command],
            stdin=subprocess.PIPE if stdin else subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            encoding="utf-8",
            errors="replace",
            bufsize=1,
        )

    # ── public ────────────────────────────────────────────────────────

    def run(self, command: str) -> CommandResult:
        log.info("az.run", command=redact_command(command))
        process = None
        output: list[str] = []
        try:
            process = self.create_process(command)
            with process.stdout as stream:
                for line in stream:
                    output.append(line.rstrip("\r\n") + "\n")
            exit_code = process.wait()
        except (OSError, ValueError) as exc:
            log.error("az.run_failed", error=str(exc))
            if process is not None:
                reap(process)
            return CommandResult.error(str(exc))

        text = "".join(output)
        if exit_code != 0:
            log.error("az.exit_nonzero", exit_code=exit_code)
            return CommandResult.error(text)
        return CommandResult.success(text)


def reap(process: subprocess.Popen) -> None:
    """Kill *process* if it is still running and collect its exit status."""
    try:
        if process.poll() is None:
            process.kill()
        process.wait()
    except OSError as exc:
        log.warning("az.reap_failed", error=str(exc))
