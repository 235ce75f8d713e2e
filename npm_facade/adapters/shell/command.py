"""
Shell runner — execute rendered npm command lines through the shell.

This is the only place a process is spawned. The command line is run
with ``shell=True`` in the requested working directory; stdout is
captured and, when a stream sink is attached, copied to it line by line
as the child produces it.
"""

from __future__ import annotations

import logging
import os
import shutil
import signal
import subprocess
import threading
import time
from pathlib import Path

from npm_facade.adapters.base import ExecutionContext, Runner
from npm_facade.core.models.command import CommandResult

logger = logging.getLogger(__name__)


def strip_final_newline(text: str) -> str:
    """Drop exactly one trailing line break, keep everything else."""
    if text.endswith("\r\n"):
        return text[:-2]
    if text.endswith("\n"):
        return text[:-1]
    return text


class ShellRunner(Runner):
    """Run command lines with the system shell and capture output."""

    @property
    def name(self) -> str:
        return "shell"

    def is_available(self, binary: str = "npm") -> bool:
        return shutil.which(binary) is not None

    def execute(self, context: ExecutionContext) -> CommandResult:
        if not Path(context.cwd).is_dir():
            return CommandResult.failure(
                command=context.command,
                error=f"Working directory does not exist: {context.cwd}",
                return_code=None,
            )

        logger.debug("Executing: %s (cwd=%s)", context.command, context.cwd)
        start = time.monotonic()

        try:
            if context.stream is not None:
                return_code, stdout, stderr, timed_out = self._run_streaming(context)
            else:
                return_code, stdout, stderr, timed_out = self._run_captured(context)
        except Exception as e:
            return CommandResult.failure(
                command=context.command,
                error=f"Command execution error: {e}",
                return_code=None,
            )

        elapsed_ms = int((time.monotonic() - start) * 1000)
        stdout = strip_final_newline(stdout)
        stderr = stderr.strip()

        if timed_out:
            return CommandResult.failure(
                command=context.command,
                error=f"Command timed out after {context.timeout}s",
                return_code=return_code,
                stdout=stdout,
                stderr=stderr,
                timed_out=True,
                duration_ms=elapsed_ms,
            )

        if return_code == 0:
            return CommandResult.success(
                command=context.command,
                stdout=stdout,
                stderr=stderr,
                duration_ms=elapsed_ms,
            )

        return CommandResult.failure(
            command=context.command,
            error=stderr or f"Exit code {return_code}",
            return_code=return_code,
            stdout=stdout,
            stderr=stderr,
            duration_ms=elapsed_ms,
        )

    # ── Helpers ─────────────────────────────────────────────────

    def _spawn(self, context: ExecutionContext) -> subprocess.Popen:
        # Own session so a timeout can kill npm and everything it started.
        return subprocess.Popen(
            context.command,
            shell=True,
            cwd=context.cwd,
            env=context.child_env(),
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            encoding="utf-8",
            errors="replace",
            start_new_session=True,
        )

    def _run_captured(self, context: ExecutionContext) -> tuple[int | None, str, str, bool]:
        proc = self._spawn(context)
        try:
            stdout, stderr = proc.communicate(timeout=context.timeout)
        except subprocess.TimeoutExpired:
            _kill_group(proc)
            stdout, stderr = proc.communicate()
            return None, stdout or "", stderr or "", True
        except BaseException:
            _kill_group(proc)
            proc.wait()
            raise
        return proc.returncode, stdout, stderr, False

    def _run_streaming(self, context: ExecutionContext) -> tuple[int | None, str, str, bool]:
        proc = self._spawn(context)

        # stderr is drained on its own thread so a chatty child cannot
        # block on a full pipe while we read stdout.
        stderr_chunks: list[str] = []
        drain = threading.Thread(
            target=lambda: stderr_chunks.append(proc.stderr.read() if proc.stderr else ""),
            daemon=True,
        )
        drain.start()

        timed_out = threading.Event()
        timer: threading.Timer | None = None
        if context.timeout is not None:

            def _kill() -> None:
                timed_out.set()
                _kill_group(proc)

            timer = threading.Timer(context.timeout, _kill)
            timer.start()

        stdout_lines: list[str] = []
        try:
            if proc.stdout:
                for line in proc.stdout:
                    stdout_lines.append(line)
                    context.stream.write(line)
            proc.wait()
        except BaseException:
            _kill_group(proc)
            proc.wait()
            raise
        finally:
            if timer is not None:
                timer.cancel()
            drain.join()

        return_code = None if timed_out.is_set() else proc.returncode
        return return_code, "".join(stdout_lines), "".join(stderr_chunks), timed_out.is_set()


def _kill_group(proc: subprocess.Popen) -> None:
    try:
        os.killpg(proc.pid, signal.SIGKILL)
    except (ProcessLookupError, PermissionError):
        # Group already gone; make sure the shell itself is reaped.
        proc.kill()
