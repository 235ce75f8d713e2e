"""
Shared test fixtures and configuration.
"""

from pathlib import Path

import pytest

from npm_facade.adapters.mock import MockRunner
from npm_facade.facade import Npm


@pytest.fixture
def project_root() -> Path:
    """Return the repository root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def mock_runner() -> MockRunner:
    """A runner that records command lines instead of running them."""
    return MockRunner()


@pytest.fixture
def client(tmp_path: Path, mock_runner: MockRunner) -> Npm:
    """An npm client bound to a temp directory, backed by the mock runner."""
    return Npm(cwd=tmp_path, runner=mock_runner)


@pytest.fixture(autouse=True)
def _clean_npmf_env(monkeypatch):
    """Keep the developer's NPMF_* settings out of the tests."""
    for name in ("NPMF_BINARY", "NPMF_TIMEOUT", "NPMF_STRICT_OPTIONS"):
        monkeypatch.delenv(name, raising=False)
