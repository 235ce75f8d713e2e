"""
Runner base — the protocol between command bindings and the process layer.

Bindings never spawn processes themselves. They render a command line
and hand it to a Runner, which executes it and returns a CommandResult.
"""

from __future__ import annotations

import os
from abc import ABC, abstractmethod
from typing import Any

from pydantic import BaseModel, Field

from npm_facade.core.models.command import CommandResult


class ExecutionContext(BaseModel):
    """Everything a runner needs to execute one command line."""

    command: str
    cwd: str = "."
    timeout: float | None = None
    env: dict[str, str] = Field(default_factory=dict)
    stream: Any = None              # object with write(str), receives live stdout

    def child_env(self) -> dict[str, str] | None:
        """Environment for the child process, or None to inherit unchanged."""
        if not self.env:
            return None
        return {**os.environ, **self.env}


class Runner(ABC):
    """Abstract base class for command runners.

    Runners perform the side effect and report the outcome.
    They NEVER raise for process failures — those are captured in the
    CommandResult with status='failed'.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """The runner identifier (e.g., 'shell', 'mock')."""

    @abstractmethod
    def is_available(self, binary: str = "npm") -> bool:
        """Check if the binary this runner would invoke exists.

        Should be fast and never raise.
        """

    @abstractmethod
    def execute(self, context: ExecutionContext) -> CommandResult:
        """Run the command line and return its result."""

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} name={self.name!r}>"
