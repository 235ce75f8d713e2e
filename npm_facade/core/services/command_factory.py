"""
Command factory — turn a CommandSpec into a callable npm binding.

A binding call goes through the same steps every time:

    1. Resolve positional/keyword arguments into npm arguments, options
       and an optional completion callback
    2. Check options against the binding's allow-list
    3. Render ``<binary> <subcommand> <--options> <arguments>``
    4. Run it through a Runner
    5. Parse stdout, notify the callback, return or raise
"""

from __future__ import annotations

import concurrent.futures
import logging
import os
import re
import shlex
import threading
from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import Any

from npm_facade.adapters.base import ExecutionContext, Runner
from npm_facade.adapters.shell.command import ShellRunner
from npm_facade.core.errors import (
    CommandFailedError,
    CommandTimeoutError,
    InvalidOptionError,
    OutputParseError,
)
from npm_facade.core.models.command import CommandResult, CommandSpec, Invocation
from npm_facade.core.services.parsers import get_parser

logger = logging.getLogger(__name__)

Callback = Callable[[Exception | None, Any], None]

# npm option names: "save-dev", "@scope:registry", "//host/:_authToken"
_OPTION_NAME = re.compile(r"[A-Za-z0-9@:_/.-]+")

_executor: concurrent.futures.ThreadPoolExecutor | None = None
_executor_lock = threading.Lock()


def _shared_executor() -> concurrent.futures.ThreadPoolExecutor:
    global _executor
    with _executor_lock:
        if _executor is None:
            _executor = concurrent.futures.ThreadPoolExecutor(thread_name_prefix="npm")
        return _executor


# ── Argument handling ───────────────────────────────────────────


def resolve_args(
    args: Iterable[Any],
    kwargs: Mapping[str, Any] | None = None,
) -> tuple[list[str], dict[str, Any], Callback | None]:
    """Sort call arguments into (arguments, options, callback).

    Strings and paths are npm arguments, the first mapping holds the
    options and the first callable is the callback. Keyword names are
    options with underscores turned into dashes.
    """
    arguments: list[str] = []
    options: dict[str, Any] = {}
    options_seen = False
    callback: Callback | None = None

    for arg in args:
        if isinstance(arg, str):
            arguments.append(arg)
        elif isinstance(arg, os.PathLike):
            arguments.append(os.fspath(arg))
        elif isinstance(arg, Mapping):
            if not options_seen:
                options.update(arg)
                options_seen = True
        elif callable(arg):
            if callback is None:
                callback = arg
        else:
            raise TypeError(
                f"Unsupported argument type {type(arg).__name__}: "
                "expected str, path, mapping of options, or callback"
            )

    for key, value in (kwargs or {}).items():
        options[key.replace("_", "-")] = value

    return arguments, options, callback


def check_options(
    command: str,
    possible_options: Iterable[str] | None,
    options: Mapping[str, Any],
) -> None:
    """Raise InvalidOptionError if any option is outside the allow-list."""
    if possible_options is None:
        return
    allowed = set(possible_options)
    invalid = [key for key in options if key not in allowed]
    if invalid:
        raise InvalidOptionError(command, invalid)


def check_option_names(command: str, options: Mapping[str, Any]) -> None:
    """Raise InvalidOptionError for names that are not safe npm flags."""
    malformed = [str(key) for key in options if not _OPTION_NAME.fullmatch(str(key))]
    if malformed:
        raise InvalidOptionError(command, malformed)


def create_options_string(options: Mapping[str, Any]) -> str:
    """Serialize options to npm flags.

    Falsy values are dropped, ``True`` is a bare ``--flag``, anything
    else is ``--flag=value``.
    """
    tokens = []
    for key, value in options.items():
        if not value:
            continue
        if value is True:
            tokens.append(f"--{key}")
        else:
            tokens.append(f"--{key}={shlex.quote(str(value))}")
    return " ".join(tokens)


def render_command(
    binary: str,
    spec: CommandSpec,
    arguments: Iterable[str],
    options: Mapping[str, Any],
) -> str:
    """Build the full shell command line for one call."""
    merged = {**options, **spec.fixed_options}
    check_option_names(spec.name, merged)
    parts = [
        binary,
        spec.name,
        create_options_string(merged),
        " ".join(shlex.quote(arg) for arg in arguments),
    ]
    return " ".join(part for part in parts if part)


# ── Binding ─────────────────────────────────────────────────────


class Command:
    """A callable npm binding.

    Call it like the npm subcommand it wraps::

        install("lodash", "react", save_dev=True)
        install("lodash", {"save-dev": True}, on_done)

    Returns the parsed output, or raises. A callback, if given, is
    called as ``callback(None, result)`` or ``callback(error, None)``
    before the return/raise.
    """

    def __init__(
        self,
        spec: CommandSpec,
        *,
        cwd: str | Path | None = None,
        stream: Any = None,
        runner: Runner | None = None,
        binary: str = "npm",
        timeout: float | None = None,
        env: Mapping[str, str] | None = None,
        strict_options: bool = True,
    ):
        self.spec = spec
        self.cwd = str(cwd) if cwd is not None else None
        self.stream = stream
        self.runner = runner or ShellRunner()
        self.binary = binary
        self.timeout = timeout
        self.env = dict(env or {})
        self.strict_options = strict_options
        self._parse = get_parser(spec.post_process)

    @property
    def name(self) -> str:
        return self.spec.name

    def __repr__(self) -> str:
        return f"<Command {self.binary} {self.spec.name!r}>"

    def invocation(self, *args: Any, **kwargs: Any) -> Invocation:
        """Resolve and render a call without running it."""
        kwargs.pop("callback", None)
        arguments, options, _ = resolve_args(args, kwargs)
        return self._build(arguments, options)

    def __call__(self, *args: Any, callback: Callback | None = None, **kwargs: Any) -> Any:
        arguments, options, positional_callback = resolve_args(args, kwargs)
        callback = callback or positional_callback

        # Option errors surface before anything runs
        invocation = self._build(arguments, options)

        try:
            result = self._run(invocation)
        except Exception as e:
            if callback is not None:
                callback(e, None)
            raise

        if callback is not None:
            callback(None, result)
        return result

    def submit(self, *args: Any, **kwargs: Any) -> concurrent.futures.Future:
        """Run the call on the shared worker pool and return a Future.

        Invalid options are still rejected synchronously.
        """
        callback = kwargs.pop("callback", None)
        arguments, options, positional_callback = resolve_args(args, kwargs)
        callback = callback or positional_callback
        invocation = self._build(arguments, options)

        def _job() -> Any:
            try:
                result = self._run(invocation)
            except Exception as e:
                if callback is not None:
                    callback(e, None)
                raise
            if callback is not None:
                callback(None, result)
            return result

        return _shared_executor().submit(_job)

    # ── Helpers ─────────────────────────────────────────────────

    def _build(self, arguments: list[str], options: dict[str, Any]) -> Invocation:
        if self.strict_options:
            check_options(self.spec.name, self.spec.possible_options, options)
        return Invocation(
            spec=self.spec,
            arguments=arguments,
            options=options,
            command_line=render_command(self.binary, self.spec, arguments, options),
        )

    def _run(self, invocation: Invocation) -> Any:
        context = ExecutionContext(
            command=invocation.command_line,
            cwd=self.cwd or os.getcwd(),
            timeout=self.timeout,
            env=self.env,
            stream=self.stream,
        )
        logger.debug("npm %s → %s", self.spec.name, invocation.command_line)

        result = self.runner.execute(context)
        if result.failed:
            raise self._error(result)

        try:
            return self._parse(result.stdout)
        except ValueError as e:
            raise OutputParseError(
                invocation.command_line, self.spec.post_process, result.stdout, str(e)
            ) from e

    def _error(self, result: CommandResult) -> CommandFailedError:
        logger.info(
            "npm %s failed (exit %s): %s",
            self.spec.name,
            result.return_code,
            result.error,
        )
        error_cls = CommandTimeoutError if result.timed_out else CommandFailedError
        return error_cls(
            command=result.command,
            return_code=result.return_code,
            stdout=result.stdout,
            stderr=result.stderr,
            message=result.error,
        )


def create_command(
    spec: CommandSpec | str,
    *,
    cwd: str | Path | None = None,
    stream: Any = None,
    runner: Runner | None = None,
    binary: str = "npm",
    possible_options: Iterable[str] | None = None,
    post_process: str = "raw",
    fixed_options: Mapping[str, Any] | None = None,
    timeout: float | None = None,
    env: Mapping[str, str] | None = None,
    strict_options: bool = True,
) -> Command:
    """Build a binding from a spec, or from a subcommand name plus parts."""
    if isinstance(spec, str):
        spec = CommandSpec(
            name=spec,
            possible_options=frozenset(possible_options) if possible_options is not None else None,
            fixed_options=dict(fixed_options or {}),
            post_process=post_process,
        )
    return Command(
        spec,
        cwd=cwd,
        stream=stream,
        runner=runner,
        binary=binary,
        timeout=timeout,
        env=env,
        strict_options=strict_options,
    )
