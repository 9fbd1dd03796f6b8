"""Tests for the --examples machinery shared by every command."""

from __future__ import annotations

import click
from click.testing import CliRunner

from appsync_aurora.commands._base import DeployCommand, DeployGroup


@click.group(cls=DeployGroup, examples="  demo ping\n\n  demo ping --loud\n")
def demo() -> None:
    """Demo group."""


@demo.command(examples="demo ping")
def ping() -> None:
    click.echo("pong")


@demo.command()
def bare() -> None:
    click.echo("bare")


class TestExamples:
    def test_one_shell_line_per_example(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(demo, ["--examples"])
        assert result.exit_code == 0
        lines = result.output.splitlines()
        assert lines[0] == "Examples for 'demo':"
        assert lines[-2:] == ["  $ demo ping", "  $ demo ping --loud"]

    def test_subcommands_inherit_command_class(self) -> None:
        assert isinstance(demo.commands["ping"], DeployCommand)
        assert demo.commands["ping"].examples == ("demo ping",)  # type: ignore[attr-defined]

    def test_examples_exit_before_callback(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(demo, ["ping", "--examples"])
        assert result.exit_code == 0
        assert "pong" not in result.output

    def test_help_points_at_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(demo, ["ping", "--help"])
        assert result.exit_code == 0
        assert "--examples" in result.output
        assert "See 'demo ping --examples' for sample invocations." in result.output

    def test_no_flag_without_examples(self, cli_runner: CliRunner) -> None:
        result = cli_runner.invoke(demo, ["bare", "--help"])
        assert result.exit_code == 0
        assert "--examples" not in result.output
