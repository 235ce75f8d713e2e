"""
Mock runner — test double for the process layer.

Records every command line it receives and answers with canned
results, so bindings can be exercised without npm installed.
"""

from __future__ import annotations

from npm_facade.adapters.base import ExecutionContext, Runner
from npm_facade.core.models.command import CommandResult


class MockRunner(Runner):
    """Runner that never spawns a process.

    By default every command succeeds with ``default_output``. Responses
    can be configured per exact command line or per prefix.
    """

    def __init__(
        self,
        available: bool = True,
        default_output: str = "",
    ):
        self._available = available
        self._default_output = default_output
        self._responses: dict[str, CommandResult] = {}
        self._call_log: list[ExecutionContext] = []

    @property
    def name(self) -> str:
        return "mock"

    @property
    def call_log(self) -> list[ExecutionContext]:
        """All execution contexts this mock has received."""
        return self._call_log

    @property
    def call_count(self) -> int:
        """Number of times execute has been called."""
        return len(self._call_log)

    @property
    def commands(self) -> list[str]:
        """Command lines received, in call order."""
        return [ctx.command for ctx in self._call_log]

    @property
    def last(self) -> ExecutionContext | None:
        return self._call_log[-1] if self._call_log else None

    def is_available(self, binary: str = "npm") -> bool:
        return self._available

    def set_output(self, prefix: str, stdout: str) -> None:
        """Answer commands starting with ``prefix`` with ``stdout``."""
        self._responses[prefix] = CommandResult.success(command=prefix, stdout=stdout)

    def set_result(self, prefix: str, result: CommandResult) -> None:
        """Answer commands starting with ``prefix`` with a prepared result."""
        self._responses[prefix] = result

    def set_failure(
        self,
        prefix: str,
        stderr: str = "Mock failure",
        return_code: int = 1,
    ) -> None:
        """Configure commands starting with ``prefix`` to fail."""
        self._responses[prefix] = CommandResult.failure(
            command=prefix,
            error=stderr,
            stderr=stderr,
            return_code=return_code,
        )

    def execute(self, context: ExecutionContext) -> CommandResult:
        self._call_log.append(context)

        # Longest matching prefix wins
        for prefix in sorted(self._responses, key=len, reverse=True):
            if context.command.startswith(prefix):
                canned = self._responses[prefix]
                result = canned.model_copy(update={"command": context.command})
                break
        else:
            result = CommandResult.success(
                command=context.command,
                stdout=self._default_output,
                metadata={"mock": True},
            )

        if context.stream is not None and result.ok and result.stdout:
            for line in result.stdout.splitlines(keepends=True):
                context.stream.write(line)
            if not result.stdout.endswith("\n"):
                context.stream.write("\n")
        return result

    def reset(self) -> None:
        """Clear call log and configured responses."""
        self._call_log.clear()
        self._responses.clear()
