"""Subcommand modules for appsync-aurora.

Provides register_commands() which uses deferred imports so
``appsync-aurora --help`` never loads the CDK.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import click


def register_commands(cli: click.Group) -> None:
    """Register the resolvers group and the standalone commands on the root group."""
    from appsync_aurora.commands.describe import describe
    from appsync_aurora.commands.resolvers import resolvers
    from appsync_aurora.commands.synth import synth

    cli.add_command(resolvers)
    cli.add_command(describe)
    cli.add_command(synth)
