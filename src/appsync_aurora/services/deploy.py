"""DeployService: inspect, validate and synthesize the deployment.

Every operation returns a :class:`ServiceResult`; nothing here talks to AWS.
``synth`` drives the CDK in-process to write the cloud assembly, which the
CDK toolkit (``cdk deploy --app <outdir>``) can then deploy.
"""

from __future__ import annotations

import logging
from collections import Counter
from pathlib import Path
from typing import TYPE_CHECKING, Any

from jinja2 import TemplateError

from appsync_aurora.mapping.resolvers import RESOLVERS, MappingTemplates, find_resolver
from appsync_aurora.services.result import ServiceResult
from appsync_aurora.services.telemetry import trace_span, traced

if TYPE_CHECKING:
    from appsync_aurora.config.settings import DeploySettings

logger = logging.getLogger(__name__)

DEFAULT_OUTDIR = Path("cdk.out")


class DeployService:
    """Operations over the single AppsyncStack deployment."""

    def __init__(self, settings: DeploySettings) -> None:
        self._settings = settings
        self._templates: MappingTemplates | None = None

    @property
    def templates(self) -> MappingTemplates:
        if self._templates is None:
            self._templates = MappingTemplates(
                self._settings.mapping, project_root=self._settings.project_root
            )
        return self._templates

    @traced
    def describe(self) -> ServiceResult:
        """Report the effective parameters of every declared resource."""
        s = self._settings
        warnings: list[str] = []
        if s.account is None or s.region is None:
            warnings.append(
                "No account/region resolved; the stack will synthesize as environment-agnostic"
            )
        data: dict[str, Any] = {
            "stack": s.stack_id,
            "account": s.account,
            "region": s.region,
            "config_path": str(s.config_path) if s.config_path else None,
            "api": {
                "name": s.api.name,
                "schema": str(s.schema_file),
                "authorization": "API_KEY",
                "api_key_expiry_days": s.api.api_key_expiry_days,
                "xray_enabled": s.api.xray_enabled,
            },
            "secret": {
                "username": s.secret.username,
                "generate_string_key": s.secret.generate_string_key,
                "password_length": s.secret.password_length,
                "exclude_characters": s.secret.exclude_characters,
            },
            "cluster": {
                "engine": "aurora-mysql",
                "identifier": s.cluster.identifier,
                "default_database_name": s.cluster.default_database_name,
                "username": s.cluster.username,
            },
            "mapping": {"table": s.mapping.table, "version": s.mapping.version},
            "resolvers": [spec.path for spec in RESOLVERS],
            "outputs": ["GraphQLAPIURL", "AuroraClusterEndpoint"],
        }
        return ServiceResult(ok=True, op="describe", data=data, warnings=warnings)

    @traced
    def list_resolvers(self) -> ServiceResult:
        """List every resolver with the SQL statement it runs."""
        items: list[dict[str, Any]] = []
        warnings: list[str] = []
        for spec in RESOLVERS:
            item: dict[str, Any] = {
                "id": spec.construct_id,
                "type": spec.type_name,
                "field": spec.field_name,
                "arguments": list(spec.arguments),
            }
            try:
                item["sql"] = self.templates.statement(spec)
            except (TemplateError, ValueError, KeyError, TypeError) as exc:
                item["sql"] = None
                warnings.append(f"{spec.path}: cannot extract statement ({exc})")
            items.append(item)
        return ServiceResult(
            ok=True,
            op="list_resolvers",
            data={"items": items, "count": len(items)},
            warnings=warnings,
        )

    @traced
    def render_template(
        self, type_name: str, field_name: str, *, response: bool = False
    ) -> ServiceResult:
        """Render one resolver's request (or response) mapping template."""
        op = "render_template"
        spec = find_resolver(type_name, field_name)
        if spec is None:
            known = [s.path for s in RESOLVERS]
            return ServiceResult.failure(
                op,
                "UNKNOWN_RESOLVER",
                f"No resolver attached to {type_name}.{field_name}",
                detail={"known": known},
            )
        kind = "response" if response else "request"
        try:
            body = self.templates.response(spec) if response else self.templates.request(spec)
        except TemplateError as exc:
            logger.debug("Rendering %s template failed for %s", kind, spec.path, exc_info=True)
            problem = f"{spec.path}: {kind} template render failed: {exc}"
            return ServiceResult.failure(
                op, "INVALID_TEMPLATE", problem, detail={"problems": [problem]}
            )
        return ServiceResult(
            ok=True,
            op=op,
            data={"id": spec.construct_id, "path": spec.path, "kind": kind, "template": body},
        )

    @traced
    def check_templates(self) -> ServiceResult:
        """Validate every resolver's rendered templates."""
        op = "check_templates"
        problems: list[str] = []
        for spec in RESOLVERS:
            problems.extend(self.templates.validate(spec))
        data = {"checked": len(RESOLVERS), "problems": problems}
        if problems:
            logger.debug("Template check found %d problem(s)", len(problems))
            return ServiceResult.failure(
                op,
                "INVALID_TEMPLATE",
                f"{len(problems)} template problem(s) found",
                detail={"problems": problems},
                data=data,
            )
        return ServiceResult(ok=True, op=op, data=data)

    @traced
    def synth(self, outdir: Path | None = None) -> ServiceResult:
        """Synthesize the cloud assembly into *outdir* (default ``cdk.out``)."""
        op = "synth"
        s = self._settings
        target = outdir or s.project_root / DEFAULT_OUTDIR

        schema = s.schema_file
        if not schema.is_file():
            return ServiceResult.failure(
                op, "SCHEMA_NOT_FOUND", f"GraphQL schema not found: {schema}"
            )

        from appsync_aurora.app import build_app

        try:
            with trace_span("build"):
                app = build_app(s, outdir=target)
            with trace_span("synth"):
                assembly = app.synth()
            artifact = assembly.get_stack_by_name(s.stack_id)
        except Exception as exc:
            # jsii surfaces node-side construct errors as generic exceptions
            logger.debug("Synthesis failed", exc_info=True)
            return ServiceResult.failure(op, "SYNTH_FAILED", str(exc))

        template: dict[str, Any] = artifact.template
        resources = Counter(r["Type"] for r in template.get("Resources", {}).values())
        return ServiceResult(
            ok=True,
            op=op,
            data={
                "stack": s.stack_id,
                "outdir": assembly.directory,
                "template_file": artifact.template_file,
                "resource_count": sum(resources.values()),
                "resources": dict(sorted(resources.items())),
                "outputs": sorted(template.get("Outputs", {})),
            },
        )
