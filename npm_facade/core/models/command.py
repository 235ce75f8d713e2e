"""
Command and result models — the execution contract.

A CommandSpec describes one npm binding. An Invocation is one resolved
call of it. A CommandResult is what a runner reports back: runners
NEVER raise for process failures, they fill in a failed result.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


def _now_iso() -> str:
    """Current UTC time as ISO string."""
    return datetime.now(UTC).isoformat()


class CommandSpec(BaseModel):
    """Static definition of one npm binding.

    ``name`` holds the npm subcommand words ("install", "dist-tag ls").
    ``possible_options`` of None disables allow-list checking.
    """

    name: str
    possible_options: frozenset[str] | None = None
    fixed_options: dict[str, Any] = Field(default_factory=dict)
    post_process: str = "raw"       # parser name, see services.parsers


class Invocation(BaseModel):
    """A single resolved call: what the caller asked for, rendered."""

    spec: CommandSpec
    arguments: list[str] = Field(default_factory=list)
    options: dict[str, Any] = Field(default_factory=dict)
    command_line: str = ""


class CommandResult(BaseModel):
    """Outcome of running one command line.

    Directly modeled on the adapter Receipt: status plus captured
    output, never an exception.
    """

    command: str
    status: Literal["ok", "failed"] = "ok"

    started_at: str = Field(default_factory=_now_iso)
    ended_at: str = Field(default_factory=_now_iso)
    duration_ms: int = 0

    return_code: int | None = 0
    stdout: str = ""
    stderr: str = ""
    error: str | None = None
    timed_out: bool = False

    metadata: dict[str, Any] = Field(default_factory=dict)

    @property
    def ok(self) -> bool:
        """Whether the command succeeded."""
        return self.status == "ok"

    @property
    def failed(self) -> bool:
        """Whether the command failed."""
        return self.status == "failed"

    @classmethod
    def success(cls, command: str, stdout: str = "", **kwargs: Any) -> CommandResult:
        """Create a success result."""
        return cls(command=command, status="ok", stdout=stdout, **kwargs)

    @classmethod
    def failure(cls, command: str, error: str, **kwargs: Any) -> CommandResult:
        """Create a failure result."""
        return cls(command=command, status="failed", error=error, **kwargs)
