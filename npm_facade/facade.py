"""
npm facade — one attribute per npm subcommand.

``Npm`` turns the command table into an attribute tree bound to a
working directory and an optional stream sink::

    from npm_facade import npm

    npm.install("lodash", save=True)               # default client, cwd at call time
    client = npm(cwd="/srv/app", stream=sys.stdout)
    client.dist_tags.list("react")                 # ["latest: 18.2.0", ...]
    client.config.get("registry")

The module-level ``npm`` is both a ready client and a factory for
configured ones.
"""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

from npm_facade.adapters.base import Runner
from npm_facade.adapters.shell.command import ShellRunner
from npm_facade.core.config.loader import FacadeConfig, load_config
from npm_facade.core.services.catalog import COMMANDS
from npm_facade.core.services.command_factory import Command, create_command

logger = logging.getLogger(__name__)

PACKAGE_FILE = "package.json"


class CommandGroup:
    """Namespace for bindings sharing an npm subcommand ("npm team ...")."""

    def __init__(self, name: str):
        self._name = name
        self._commands: dict[str, Command] = {}

    def _add(self, attr: str, command: Command) -> None:
        self._commands[attr] = command
        setattr(self, attr, command)

    def __iter__(self) -> Iterator[str]:
        return iter(self._commands)

    def __repr__(self) -> str:
        return f"<CommandGroup {self._name} [{', '.join(self._commands)}]>"


class Npm:
    """An npm client bound to a working directory.

    Args:
        cwd: Directory npm runs in. None means the process's current
            directory at call time.
        stream: Optional sink with ``write(str)`` receiving live stdout.
        config: Binary, timeout and environment settings.
        runner: Process runner (default: ShellRunner).
    """

    def __init__(
        self,
        cwd: str | os.PathLike | None = None,
        stream: Any = None,
        *,
        config: FacadeConfig | None = None,
        runner: Runner | None = None,
    ):
        self.cwd = os.fspath(cwd) if cwd is not None else None
        self.stream = stream
        self.settings = config or FacadeConfig()
        self.runner = runner or ShellRunner()
        self._bindings: dict[str, Command] = {}

        for dotted, spec in COMMANDS.items():
            command = create_command(
                spec,
                cwd=self.cwd,
                stream=self.stream,
                runner=self.runner,
                binary=self.settings.binary,
                timeout=self.settings.timeout,
                env=self.settings.env,
                strict_options=self.settings.strict_options,
            )
            self._bindings[dotted] = command

            group_name, _, attr = dotted.rpartition(".")
            if not group_name:
                setattr(self, attr, command)
                continue
            group = getattr(self, group_name, None)
            if not isinstance(group, CommandGroup):
                group = CommandGroup(group_name)
                setattr(self, group_name, group)
            group._add(attr, command)

    @classmethod
    def from_config(
        cls,
        cwd: str | os.PathLike | None = None,
        stream: Any = None,
        *,
        config_path: Path | None = None,
        runner: Runner | None = None,
    ) -> Npm:
        """Build a client from npm-facade.yml and NPMF_* overrides."""
        start = Path(cwd) if cwd is not None else None
        config = load_config(config_path, start_dir=start)
        return cls(cwd, stream, config=config, runner=runner)

    def __call__(
        self,
        cwd: str | os.PathLike | Mapping[str, Any] | None = None,
        stream: Any = None,
        *,
        config: FacadeConfig | None = None,
        runner: Runner | None = None,
    ) -> Npm:
        """Return a new client; config and runner default to this one's.

        ``cwd`` may also be a mapping with ``cwd`` and ``stream`` keys,
        as in ``npm({"cwd": "/srv/app"})``.
        """
        if isinstance(cwd, Mapping):
            options = dict(cwd)
            cwd = options.pop("cwd", None)
            stream = options.pop("stream", stream)
            if options:
                raise TypeError(f"Unsupported client options: {', '.join(sorted(options))}")
        return Npm(cwd, stream, config=config or self.settings, runner=runner or self.runner)

    def __repr__(self) -> str:
        return f"<Npm cwd={self.cwd or '.'!r} binary={self.settings.binary!r}>"

    @property
    def working_dir(self) -> Path:
        return Path(self.cwd) if self.cwd is not None else Path.cwd()

    def binding(self, dotted: str) -> Command:
        """Look up a binding by dotted name ("dist_tags.list")."""
        try:
            return self._bindings[dotted]
        except KeyError:
            raise KeyError(f"Unknown npm binding '{dotted}'") from None

    def commands(self) -> dict[str, str]:
        """Map every binding name to the npm subcommand it runs."""
        return {dotted: command.name for dotted, command in self._bindings.items()}

    def init(self, pkg: Mapping[str, Any]) -> Path:
        """Write ``pkg`` as package.json in the working directory.

        Returns:
            Path of the written file.
        """
        target = self.working_dir / PACKAGE_FILE
        target.write_text(json.dumps(pkg, indent=2), encoding="utf-8")
        logger.info("Wrote %s", target)
        return target


npm = Npm()
