"""CDK entry point: ``cdk synth`` / ``cdk deploy`` run this module.

The target account and region come from ``CDK_DEFAULT_ACCOUNT`` and
``CDK_DEFAULT_REGION`` (exported by the CDK toolkit), unless
``appsync.toml`` or ``APPSYNC_ACCOUNT`` / ``APPSYNC_REGION`` override them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import aws_cdk as cdk

from appsync_aurora.mapping.resolvers import MappingTemplates
from appsync_aurora.stacks.appsync_stack import AppsyncStack

if TYPE_CHECKING:
    from pathlib import Path

    from appsync_aurora.config.settings import DeploySettings

logger = logging.getLogger(__name__)


def build_app(settings: DeploySettings, *, outdir: Path | None = None) -> cdk.App:
    """Create the CDK app holding the single deployable stack."""
    app = cdk.App(outdir=str(outdir)) if outdir is not None else cdk.App()
    templates = MappingTemplates(settings.mapping, project_root=settings.project_root)
    AppsyncStack(
        app,
        settings.stack_id,
        config=settings.deploy_config,
        schema_path=settings.schema_file,
        templates=templates,
        env=cdk.Environment(account=settings.account, region=settings.region),
    )
    logger.debug(
        "Built app for stack %s (account=%s, region=%s)",
        settings.stack_id,
        settings.account,
        settings.region,
    )
    return app


def main() -> None:
    """Synthesize the app into the toolkit-provided output directory."""
    from appsync_aurora.config.logging import configure_logging
    from appsync_aurora.config.settings import DeploySettings

    settings = DeploySettings.from_cli()
    configure_logging(
        verbose=settings.verbose,
        log_json=settings.log_json,
        stack_id=settings.stack_id,
    )
    build_app(settings).synth()


if __name__ == "__main__":
    main()
