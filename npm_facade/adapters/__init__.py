"""Runners — process bindings for the npm CLI.

Public re-exports for convenient access.
"""

from npm_facade.adapters.base import ExecutionContext, Runner
from npm_facade.adapters.mock import MockRunner
from npm_facade.adapters.shell.command import ShellRunner

__all__ = [
    "ExecutionContext",
    "MockRunner",
    "Runner",
    "ShellRunner",
]
