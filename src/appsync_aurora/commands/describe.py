"""Command: show the effective deployment parameters."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from appsync_aurora.commands._base import DeployCommand

if TYPE_CHECKING:
    from appsync_aurora.commands._context import AppContext


@click.command(
    cls=DeployCommand,
    examples="""\
  appsync-aurora describe
  appsync-aurora --json describe
  APPSYNC_CLUSTER__IDENTIFIER=staging appsync-aurora describe""",
)
@click.pass_obj
def describe(app: AppContext) -> None:
    """Show every resource's parameters after config and env overrides."""
    app.emit(app.service.describe())
