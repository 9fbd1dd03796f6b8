"""Command group: inspect and validate resolver mapping templates."""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from appsync_aurora.commands._base import DeployGroup

if TYPE_CHECKING:
    from appsync_aurora.commands._context import AppContext

_RESOLVERS_EXAMPLES = """\
  appsync-aurora resolvers list
  appsync-aurora resolvers show Query listItems
  appsync-aurora resolvers show Mutation updateItem --response
  appsync-aurora resolvers check"""


@click.group(cls=DeployGroup, examples=_RESOLVERS_EXAMPLES)
@click.pass_obj
def resolvers(app: AppContext) -> None:
    """Inspect the GraphQL resolvers and their mapping templates."""


@resolvers.command("list", examples="  appsync-aurora resolvers list\n  appsync-aurora -q resolvers list")
@click.pass_obj
def list_cmd(app: AppContext) -> None:
    """List resolvers with the SQL statement each one runs."""
    app.emit(app.service.list_resolvers())


@resolvers.command(
    examples="""\
  appsync-aurora resolvers show Query listItems
  appsync-aurora resolvers show Mutation createItem --response""",
)
@click.argument("type_name")
@click.argument("field_name")
@click.option("--response", is_flag=True, help="Show the response template instead.")
@click.pass_obj
def show(app: AppContext, type_name: str, field_name: str, response: bool) -> None:
    """Render the mapping template attached to TYPE_NAME.FIELD_NAME."""
    app.emit(app.service.render_template(type_name, field_name, response=response))


@resolvers.command(examples="  appsync-aurora resolvers check")
@click.pass_obj
def check(app: AppContext) -> None:
    """Validate that every request template renders a well-formed payload."""
    app.emit(app.service.check_templates())
