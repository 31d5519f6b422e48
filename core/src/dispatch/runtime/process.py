from __future__ import annotations

import logging
import os
import signal
import subprocess
import threading

from dispatch.contracts import ExitCallback, RunCommand
from dispatch.errors import RunError, SpawnError

logger = logging.getLogger("suite_dispatch.process")


class SubprocessHandle:
    """ProcessHandle over a Popen; popen is None when the launch itself failed."""

    def __init__(self, popen: subprocess.Popen[str] | None) -> None:
        self._popen = popen
        self._killed = False
        self._lock = threading.Lock()

    @property
    def pid(self) -> int | None:
        return None if self._popen is None else self._popen.pid

    @property
    def killed(self) -> bool:
        with self._lock:
            return self._killed

    def kill(self) -> None:
        with self._lock:
            self._killed = True
        if self._popen is None:
            return
        # terminate() is a no-op once the child has been reaped.
        self._popen.terminate()


class SubprocessSpawner:
    """
    Launch suite commands with subprocess.Popen.

    One daemon thread per process waits for exit, then calls on_exit once with
    the fully captured output.
    """

    def spawn(self, command: RunCommand, on_exit: ExitCallback) -> SubprocessHandle:
        env = None
        if command.env is not None:
            env = {**os.environ, **command.env}

        try:
            popen = subprocess.Popen(
                command.argv(),
                cwd=command.cwd,
                env=env,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
            )
        except (OSError, ValueError) as exc:
            logger.warning("Failed to launch %s: %s", command.command, exc)
            error = SpawnError(f"Failed to launch {command.command!r}: {exc}")
            error.__cause__ = exc
            _start_thread(
                _deliver,
                (on_exit, error, "", ""),
                name=f"suite-launch-failed-{command.command}",
            )
            return SubprocessHandle(None)

        _start_thread(_wait, (popen, command, on_exit), name=f"suite-wait-{popen.pid}")
        return SubprocessHandle(popen)


def _start_thread(target, args: tuple, *, name: str) -> None:
    thread = threading.Thread(target=target, args=args, name=name, daemon=True)
    thread.start()


def _wait(popen: subprocess.Popen[str], command: RunCommand, on_exit: ExitCallback) -> None:
    stdout, stderr = popen.communicate()
    stdout = stdout or ""
    stderr = stderr or ""
    error: RunError | None = None
    if popen.returncode != 0:
        error = SpawnError(
            _describe_failure(command, popen.returncode, stderr),
            returncode=popen.returncode,
            stdout=stdout,
            stderr=stderr,
        )
    _deliver(on_exit, error, stdout, stderr)


def _deliver(on_exit: ExitCallback, error: RunError | None, stdout: str, stderr: str) -> None:
    try:
        on_exit(error, stdout, stderr)
    except Exception:
        logger.exception("Exit callback failed")


def _describe_failure(command: RunCommand, returncode: int, stderr: str) -> str:
    cmdline = " ".join(command.argv())
    if returncode < 0:
        try:
            reason = f"terminated by {signal.Signals(-returncode).name}"
        except ValueError:
            reason = f"terminated by signal {-returncode}"
    else:
        reason = f"exit code {returncode}"
    message = f"Command failed ({reason}): {cmdline}"
    if stderr.strip():
        message = f"{message}\n{stderr.strip()}"
    return message
