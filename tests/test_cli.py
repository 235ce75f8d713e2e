"""
Tests for CLI commands — commands, call, init, and global options.
"""

import json
from pathlib import Path

import pytest
from click.testing import CliRunner

from npm_facade.main import cli


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


class TestCLIGlobal:
    def test_help(self, runner: CliRunner):
        result = runner.invoke(cli, ["--help"])
        assert result.exit_code == 0
        assert "npm facade" in result.output

    def test_version(self, runner: CliRunner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestCommandsCommand:
    def test_listing(self, runner: CliRunner):
        result = runner.invoke(cli, ["commands"])
        assert result.exit_code == 0
        assert "dist_tags.list" in result.output
        assert "npm dist-tag ls" in result.output

    def test_json(self, runner: CliRunner):
        result = runner.invoke(cli, ["commands", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["who_am_i"] == "whoami"
        assert data["team.remove"] == "team rm"


class TestCallCommand:
    def test_dry_run(self, runner: CliRunner, tmp_path: Path):
        result = runner.invoke(
            cli,
            ["--cwd", str(tmp_path), "call", "install", "lodash", "-f", "save-dev", "--dry-run"],
        )
        assert result.exit_code == 0
        assert result.output.strip() == "npm install --save-dev lodash"

    def test_dry_run_with_value_option(self, runner: CliRunner, tmp_path: Path):
        result = runner.invoke(
            cli,
            ["--cwd", str(tmp_path), "call", "publish", "-o", "tag=next", "--dry-run"],
        )
        assert result.exit_code == 0
        assert result.output.strip() == "npm publish --tag=next"

    def test_runs_configured_binary(self, runner: CliRunner, tmp_path: Path):
        # echo stands in for npm: it prints the subcommand it was given
        result = runner.invoke(
            cli,
            ["--cwd", str(tmp_path), "call", "dist_tags.list", "react"],
            env={"NPMF_BINARY": "echo"},
        )
        assert result.exit_code == 0
        assert json.loads(result.output) == ["dist-tag ls react"]

    def test_raw_output(self, runner: CliRunner, tmp_path: Path):
        result = runner.invoke(
            cli,
            ["--cwd", str(tmp_path), "call", "who_am_i"],
            env={"NPMF_BINARY": "echo"},
        )
        assert result.exit_code == 0
        assert result.output.strip() == "whoami"

    def test_raw_output_as_json(self, runner: CliRunner, tmp_path: Path):
        result = runner.invoke(
            cli,
            ["--cwd", str(tmp_path), "call", "who_am_i", "--json"],
            env={"NPMF_BINARY": "echo"},
        )
        assert json.loads(result.output) == "whoami"

    def test_binary_from_config_file(self, runner: CliRunner, tmp_path: Path):
        config = tmp_path / "npm-facade.yml"
        config.write_text("binary: echo\n")
        result = runner.invoke(
            cli, ["--config", str(config), "--cwd", str(tmp_path), "call", "root"],
        )
        assert result.exit_code == 0
        assert result.output.strip() == "root"

    def test_command_failure(self, runner: CliRunner, tmp_path: Path):
        result = runner.invoke(
            cli,
            ["--cwd", str(tmp_path), "call", "who_am_i"],
            env={"NPMF_BINARY": "false"},
        )
        assert result.exit_code == 1
        assert "Exit code 1" in result.output

    def test_invalid_option(self, runner: CliRunner, tmp_path: Path):
        result = runner.invoke(
            cli, ["--cwd", str(tmp_path), "call", "who_am_i", "-f", "save-dev"],
        )
        assert result.exit_code == 2
        assert "Invalid npm command option" in result.output

    def test_unknown_binding(self, runner: CliRunner, tmp_path: Path):
        result = runner.invoke(cli, ["--cwd", str(tmp_path), "call", "frobnicate"])
        assert result.exit_code == 2
        assert "Unknown binding" in result.output

    def test_bad_option_syntax(self, runner: CliRunner, tmp_path: Path):
        result = runner.invoke(cli, ["--cwd", str(tmp_path), "call", "ping", "-o", "novalue"])
        assert result.exit_code == 2
        assert "KEY=VALUE" in result.output

    def test_bad_config(self, runner: CliRunner, tmp_path: Path):
        config = tmp_path / "npm-facade.yml"
        config.write_text("timeout: soon\n")
        result = runner.invoke(cli, ["--config", str(config), "call", "ping"])
        assert result.exit_code == 1
        assert "Invalid npm-facade configuration" in result.output


class TestInitCommand:
    def test_writes_package_json(self, runner: CliRunner, tmp_path: Path):
        template = tmp_path / "template.json"
        template.write_text(json.dumps({"name": "demo", "version": "0.0.1"}))
        result = runner.invoke(cli, ["--cwd", str(tmp_path), "init", str(template)])
        assert result.exit_code == 0
        written = json.loads((tmp_path / "package.json").read_text())
        assert written == {"name": "demo", "version": "0.0.1"}

    def test_rejects_non_object(self, runner: CliRunner, tmp_path: Path):
        template = tmp_path / "template.json"
        template.write_text("[1, 2]")
        result = runner.invoke(cli, ["--cwd", str(tmp_path), "init", str(template)])
        assert result.exit_code == 1
        assert not (tmp_path / "package.json").exists()

    def test_rejects_invalid_json(self, runner: CliRunner, tmp_path: Path):
        template = tmp_path / "template.json"
        template.write_text("{nope")
        result = runner.invoke(cli, ["--cwd", str(tmp_path), "init", str(template)])
        assert result.exit_code == 1
        assert "Invalid JSON" in result.output
