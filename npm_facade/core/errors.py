"""
Error types raised by npm bindings.

Runners report process failures in a ``CommandResult`` and never raise.
The command layer turns a failed result into one of these exceptions so
callers see an ordinary Python error.
"""

from __future__ import annotations

from collections.abc import Iterable


class NpmFacadeError(Exception):
    """Base class for every error raised by this package."""


class ConfigError(NpmFacadeError):
    """Raised when facade configuration is invalid or unreadable."""


class InvalidOptionError(NpmFacadeError, ValueError):
    """Raised when a caller passes an option the command does not accept.

    Raised before any subprocess is started.
    """

    def __init__(self, command: str, invalid: Iterable[str]):
        self.command = command
        self.invalid = sorted(invalid)
        super().__init__(
            f"Invalid npm command option for '{command}': {', '.join(self.invalid)}"
        )


class CommandFailedError(NpmFacadeError):
    """Raised when the npm process exits with a non-zero status."""

    def __init__(
        self,
        command: str,
        return_code: int | None,
        stdout: str = "",
        stderr: str = "",
        message: str | None = None,
    ):
        self.command = command
        self.return_code = return_code
        self.stdout = stdout
        self.stderr = stderr
        super().__init__(message or stderr or f"Exit code {return_code}")


class CommandTimeoutError(CommandFailedError):
    """Raised when the npm process outlives the configured timeout."""


class OutputParseError(NpmFacadeError):
    """Raised when command output cannot be turned into a structured value."""

    def __init__(self, command: str, parser: str, output: str, reason: str):
        self.command = command
        self.parser = parser
        self.output = output
        super().__init__(f"Cannot parse output of '{command}' as {parser}: {reason}")
