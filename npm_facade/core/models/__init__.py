"""Domain models — command definitions, invocations and results."""

from npm_facade.core.models.command import CommandResult, CommandSpec, Invocation

__all__ = ["CommandResult", "CommandSpec", "Invocation"]
