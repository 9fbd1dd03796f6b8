"""Command: synthesize the CloudFormation cloud assembly."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING

import click

from appsync_aurora.commands._base import DeployCommand

if TYPE_CHECKING:
    from appsync_aurora.commands._context import AppContext


@click.command(
    cls=DeployCommand,
    examples="""\
  appsync-aurora synth
  appsync-aurora synth --outdir build/cdk.out
  appsync-aurora synth --skip-check
  appsync-aurora --json synth""",
)
@click.option(
    "--outdir",
    type=click.Path(file_okay=False, path_type=Path),
    default=None,
    help="Cloud assembly directory (default: cdk.out under the project root).",
)
@click.option("--skip-check", is_flag=True, help="Synthesize without validating mapping templates.")
@click.pass_obj
def synth(app: AppContext, outdir: Path | None, skip_check: bool) -> None:
    """Synthesize the stack into a cloud assembly for ``cdk deploy``."""
    if not skip_check:
        checked = app.service.check_templates()
        if not checked.ok:
            app.emit(checked)
    app.emit(app.service.synth(outdir))
