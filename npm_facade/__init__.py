"""npm facade — call the npm CLI from Python.

Public re-exports for convenient access::

    from npm_facade import npm

    npm.install("lodash", save=True)
    tags = npm(cwd="/srv/app").dist_tags.list("react")
"""

__version__ = "0.1.0"

import logging  # noqa: E402

logging.getLogger(__name__).addHandler(logging.NullHandler())

from npm_facade.core.errors import (  # noqa: E402
    CommandFailedError,
    CommandTimeoutError,
    ConfigError,
    InvalidOptionError,
    NpmFacadeError,
    OutputParseError,
)
from npm_facade.facade import Npm, npm  # noqa: E402

__all__ = [
    "CommandFailedError",
    "CommandTimeoutError",
    "ConfigError",
    "InvalidOptionError",
    "Npm",
    "NpmFacadeError",
    "OutputParseError",
    "npm",
]
