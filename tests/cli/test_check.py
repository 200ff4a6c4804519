"""Tests for ``forkresolve check``."""

from __future__ import annotations

from pathlib import Path

from click.testing import CliRunner

from forkresolve.cli.main import cli


class TestCheck:
    def test_valid_project(self, runner: CliRunner, platform_split_project: Path) -> None:
        result = runner.invoke(cli, ["check", str(platform_split_project)])
        assert result.exit_code == 0
        assert "2 index(es), 2 requirement(s), 2 split(s)" in result.output

    def test_project_without_forks_counts_one_split(
        self, runner: CliRunner, write_project
    ) -> None:
        path = write_project("indexes: [{url: 'https://a.example'}]\nrequirements: []\n")
        result = runner.invoke(cli, ["check", str(path)])
        assert result.exit_code == 0
        assert "1 split(s)" in result.output

    def test_invalid_project(self, runner: CliRunner, write_project) -> None:
        path = write_project("indexes: [{url: 'ftp://a.example'}]\nrequirements: []\n")
        result = runner.invoke(cli, ["check", str(path)])
        assert result.exit_code == 2
        assert "error: Unsupported index URL" in result.output
