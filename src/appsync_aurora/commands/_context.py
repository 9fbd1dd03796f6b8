"""AppContext, the shared Click context for all commands.

Created once by the root CLI group and flows to all subcommands via
``@click.pass_obj``.  Provides lazy service construction and centralized
result emission (stdout/stderr routing + exit codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import click

from appsync_aurora.output.formatters import OutputSettings, format_result

if TYPE_CHECKING:
    from appsync_aurora.config.settings import DeploySettings
    from appsync_aurora.services.deploy import DeployService
    from appsync_aurora.services.result import ServiceResult


class AppContext:
    """Shared context flowing through Click's command hierarchy.

    The deploy service is created on first use so ``--help`` and
    ``--version`` never load the CDK (and its node runtime).
    """

    def __init__(self, settings: DeploySettings) -> None:
        self.settings = settings
        self._service: DeployService | None = None

        from appsync_aurora.config.logging import configure_logging

        configure_logging(
            verbose=settings.verbose,
            log_json=settings.log_json,
            stack_id=settings.stack_id,
        )

        if settings.verbose:
            from appsync_aurora.services.telemetry import enable_telemetry

            enable_telemetry()

    @property
    def service(self) -> DeployService:
        """The deploy service (created lazily on first access)."""
        if self._service is None:
            from appsync_aurora.services.deploy import DeployService

            self._service = DeployService(self.settings)
        return self._service

    def emit(self, result: ServiceResult) -> None:
        """Format and output a ServiceResult with correct exit semantics.

        * Success (``result.ok``): writes to stdout, returns normally.
          Warnings go to stderr so they don't pollute piped output.
        * Failure: writes to stderr, exits with code 1.
        """
        settings = OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )
        output = format_result(result, settings=settings)
        if result.ok:
            click.echo(output)
            # In JSON mode, warnings are already in the serialized payload.
            if not settings.json_output:
                for warning in result.warnings:
                    click.echo(f"WARNING: {warning}", err=True)
        else:
            click.echo(output, err=True)
            raise SystemExit(1)
