"""Device-code ``az login`` orchestration.

``az login --use-device-code`` prints a sign-in URL and one-time code, then
blocks until the user finishes signing in from a browser. The orchestrator
streams the process output until that prompt appears, hands the URL and code
back to the caller straight away, and leaves a background thread to supervise
the still-running process.

Only one login is authoritative at a time: a new login terminates the previous
process if it is still alive. The "current login" slot is guarded by a lock;
the supervisor thread only ever touches its own session, so a stale supervisor
never acts on a newer process.
"""

from __future__ import annotations

import subprocess
import threading
from dataclasses import dataclass, field
from typing import Optional

from azcli_tools.config import Settings, settings
from azcli_tools.models.commands import CommandResult
from azcli_tools.models.login import LoginState, LoginStatus
from azcli_tools.services.command_runner import CommandRunner, reap
from azcli_tools.utils.cli_parser import (
    is_device_code_prompt,
    parse_device_code_prompt,
    redact_command,
)
from azcli_tools.utils.logging import get_logger

log = get_logger(__name__)

DEVICE_CODE_FLAG = "--use-device-code"

# Some CLI versions ask for a choice after the device-code line.
ACKNOWLEDGEMENT = "1\n"


def ensure_device_code_flag(command: str) -> str:
    if DEVICE_CODE_FLAG in command:
        return command
    return f"{command} {DEVICE_CODE_FLAG}"


@dataclass
class LoginSession:
    """One interactive login process and where it is in its lifecycle."""

    process: subprocess.Popen
    command: str
    state: LoginState = LoginState.running
    detail: Optional[str] = None
    supervisor: Optional[threading.Thread] = field(default=None, repr=False)

    @property
    def pid(self) -> Optional[int]:
        return getattr(self.process, "pid", None)

    @property
    def alive(self) -> bool:
        return self.process.poll() is None


class LoginOrchestrator:
    """Owns the single in-flight ``az login`` process."""

    def __init__(
        self,
        runner: CommandRunner | None = None,
        cfg: Settings | None = None,
    ) -> None:
        self._cfg = cfg or settings
        self._runner = runner or CommandRunner(self._cfg)
        self._lock = threading.Lock()
        self._session: Optional[LoginSession] = None

    # ── hooks (overridable) ───────────────────────────────────────────

    def create_process(self, command: str) -> subprocess.Popen:
        return self._runner.create_process(command, stdin=True)

    def wait_for_login_process(self, session: LoginSession) -> None:
        """Block until the login process exits.

        Output printed after the prompt is drained first so the process can
        never stall on a full pipe.

        Raises:
            subprocess.CalledProcessError: If the process exits non-zero.
        """
        stream = session.process.stdout
        if stream is not None:
            with stream:
                for line in stream:
                    log.debug("login.output", line=line.rstrip("\r\n"))
        exit_code = session.process.wait()
        if exit_code != 0:
            raise subprocess.CalledProcessError(exit_code, session.command)

    def on_login_success(self, session: LoginSession) -> None:
        with self._lock:
            if session.state is not LoginState.destroyed:
                session.state = LoginState.completed
        log.info("login.completed", pid=session.pid)

    def on_login_failure(self, session: LoginSession, exc: BaseException) -> None:
        with self._lock:
            if session.state is not LoginState.destroyed:
                session.state = LoginState.failed
                session.detail = str(exc)
        log.error("login.failed", pid=session.pid, error=str(exc))

    # ── public ────────────────────────────────────────────────────────

    def handle_login(self, command: str) -> CommandResult:
        """Start a device-code login and return its sign-in instructions.

        Returns as soon as the prompt line is seen; the process keeps running
        under a background supervisor. Never raises.
        """
        command = ensure_device_code_flag(command)
        log.info("login.start", command=redact_command(command))

        try:
            with self._lock:
                self._supersede_locked()
                process = self.create_process(command)
                session = LoginSession(process=process, command=command)
                self._session = session
        except (OSError, ValueError) as exc:
            log.error("login.spawn_failed", error=str(exc))
            return CommandResult.error(str(exc))

        return self._scan(session)

    def status(self) -> LoginStatus:
        with self._lock:
            session = self._session
            if session is None:
                return LoginStatus()
            return LoginStatus(
                state=session.state,
                alive=session.alive,
                pid=session.pid,
                command=redact_command(session.command),
                detail=session.detail,
            )

    @property
    def current_session(self) -> Optional[LoginSession]:
        return self._session

    def shutdown(self) -> None:
        """Terminate the live login process, if any."""
        with self._lock:
            self._supersede_locked()

    # ── internals ─────────────────────────────────────────────────────

    def _supersede_locked(self) -> None:
        previous = self._session
        if previous is None or not previous.alive:
            return
        log.info("login.supersede", pid=previous.pid)
        previous.state = LoginState.destroyed
        previous.detail = "superseded"
        previous.process.terminate()

    def _scan(self, session: LoginSession) -> CommandResult:
        output: list[str] = []
        try:
            for raw in session.process.stdout:
                line = raw.rstrip("\r\n")
                log.debug("login.output", line=line)
                output.append(line + "\n")

                if not is_device_code_prompt(line):
                    continue

                # az blocks on the user from here; unparsed prompts go back raw.
                prompt = parse_device_code_prompt(line)
                if prompt is not None:
                    log.info("login.prompt_detected", url=prompt.url, code=prompt.code)
                    message = prompt.message
                else:
                    log.warning("login.prompt_unparsed", line=line)
                    message = line.strip()

                with self._lock:
                    if session.state is LoginState.running:
                        session.state = LoginState.prompt_detected
                self._start_supervisor(session)
                return CommandResult.success(message)

            exit_code = session.process.wait()
        except (OSError, ValueError) as exc:
            log.error("login.stream_failed", error=str(exc))
            self._mark_failed(session, str(exc))
            reap(session.process)
            return CommandResult.error(str(exc))

        text = "".join(output)
        log.error("login.no_prompt", exit_code=exit_code)
        self._mark_failed(session, f"exited with code {exit_code} before prompting")
        return CommandResult.error(
            f"Unable to extract login URL and code. Output: {text}",
        )

    def _mark_failed(self, session: LoginSession, detail: str) -> None:
        with self._lock:
            if session.state is not LoginState.destroyed:
                session.state = LoginState.failed
                session.detail = detail

    def _start_supervisor(self, session: LoginSession) -> None:
        thread = threading.Thread(
            target=self._supervise,
            args=(session,),
            name=f"az-login-{session.pid}",
            daemon=True,
        )
        session.supervisor = thread
        thread.start()

    def _supervise(self, session: LoginSession) -> None:
        log.info("login.background", pid=session.pid)
        if session.alive:
            self._acknowledge(session)
        try:
            self.wait_for_login_process(session)
        except Exception as exc:  # outcome is only ever logged
            self.on_login_failure(session, exc)
        else:
            self.on_login_success(session)

    def _acknowledge(self, session: LoginSession) -> None:
        stdin = session.process.stdin
        if stdin is None:
            return
        try:
            stdin.write(ACKNOWLEDGEMENT)
            stdin.flush()
            stdin.close()
        except (OSError, ValueError) as exc:
            log.error("login.ack_failed", pid=session.pid, error=str(exc))
