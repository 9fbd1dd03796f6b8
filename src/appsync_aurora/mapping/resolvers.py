"""The four item resolvers and the mapping templates that back them.

Each resolver maps one GraphQL field onto one SQL statement against the
configured table.  Request templates render to a JSON document whose
``payload.sql`` carries the statement; VTL references to call arguments
(``$ctx.args.*``) are interpolated by AppSync at request time, unescaped.
All resolvers share a pass-through response template that surfaces any
backend error and otherwise returns the raw result as JSON.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from jinja2 import TemplateError

from appsync_aurora.mapping.templates import build_template_environment

if TYPE_CHECKING:
    from pathlib import Path

    from jinja2 import Environment

    from appsync_aurora.config.models import MappingConfig

logger = logging.getLogger(__name__)

RESPONSE_TEMPLATE = "passthrough.vtl.j2"
REQUIRED_REQUEST_KEYS = ("version", "operation", "payload")


@dataclass(frozen=True)
class ResolverSpec:
    """Static description of one resolver.

    Attributes:
        construct_id: CDK construct id of the resolver.
        type_name: GraphQL parent type (``Query`` or ``Mutation``).
        field_name: GraphQL field the resolver attaches to.
        request_template: Packaged request template file name.
        response_template: Packaged response template file name.
        arguments: Call arguments the request template reads.
    """

    construct_id: str
    type_name: str
    field_name: str
    request_template: str
    response_template: str = RESPONSE_TEMPLATE
    arguments: tuple[str, ...] = ()

    @property
    def path(self) -> str:
        """``Type.field`` label used in listings and logs."""
        return f"{self.type_name}.{self.field_name}"


RESOLVERS: tuple[ResolverSpec, ...] = (
    ResolverSpec(
        construct_id="getAllResolver",
        type_name="Query",
        field_name="listItems",
        request_template="list_items.vtl.j2",
    ),
    ResolverSpec(
        construct_id="CreateItemInput",
        type_name="Mutation",
        field_name="createItem",
        request_template="create_item.vtl.j2",
        arguments=("name",),
    ),
    ResolverSpec(
        construct_id="deleteItem",
        type_name="Mutation",
        field_name="deleteItem",
        request_template="delete_item.vtl.j2",
        arguments=("id",),
    ),
    ResolverSpec(
        construct_id="updateItem",
        type_name="Mutation",
        field_name="updateItem",
        request_template="update_item.vtl.j2",
        arguments=("id", "name"),
    ),
)


def find_resolver(type_name: str, field_name: str) -> ResolverSpec | None:
    """Return the resolver attached to ``type_name.field_name``, if any."""
    for spec in RESOLVERS:
        if spec.type_name == type_name and spec.field_name == field_name:
            return spec
    return None


class MappingTemplates:
    """Renders request/response mapping templates for the configured table.

    Usage::

        templates = MappingTemplates(settings.mapping, project_root=root)
        vtl = templates.request(find_resolver("Query", "listItems"))
    """

    def __init__(self, config: MappingConfig, *, project_root: Path | None = None) -> None:
        self._config = config
        self._request_env: Environment = build_template_environment(
            "request", project_root=project_root
        )
        self._response_env: Environment = build_template_environment(
            "response", project_root=project_root
        )

    def _context(self, spec: ResolverSpec) -> dict[str, Any]:
        return {
            "table": self._config.table,
            "version": self._config.version,
            "type_name": spec.type_name,
            "field_name": spec.field_name,
        }

    def request(self, spec: ResolverSpec) -> str:
        """Render the request mapping template for *spec*."""
        template = self._request_env.get_template(spec.request_template)
        return template.render(self._context(spec))

    def response(self, spec: ResolverSpec) -> str:
        """Render the response mapping template for *spec*."""
        template = self._response_env.get_template(spec.response_template)
        return template.render(self._context(spec))

    def statement(self, spec: ResolverSpec) -> str:
        """Return the SQL statement carried by the request template."""
        document = json.loads(self.request(spec))
        return str(document["payload"]["sql"])

    def validate(self, spec: ResolverSpec) -> list[str]:
        """Return the problems found in *spec*'s templates (empty when valid)."""
        problems: list[str] = []
        try:
            request = self.request(spec)
            response = self.response(spec)
        except TemplateError as exc:
            logger.debug("Template render failed for %s", spec.path, exc_info=True)
            return [f"{spec.path}: template render failed: {exc}"]

        try:
            document = json.loads(request)
        except json.JSONDecodeError as exc:
            return [f"{spec.path}: request template is not valid JSON: {exc.msg}"]

        if not isinstance(document, dict):
            return [f"{spec.path}: request template must render a JSON object"]

        missing = [key for key in REQUIRED_REQUEST_KEYS if key not in document]
        if missing:
            problems.append(f"{spec.path}: request template missing {', '.join(missing)}")

        payload = document.get("payload")
        sql = payload.get("sql") if isinstance(payload, dict) else None
        if not isinstance(sql, str) or not sql.strip():
            problems.append(f"{spec.path}: request payload has no sql statement")
        else:
            if self._config.table not in re.split(r"\W+", sql):
                problems.append(f"{spec.path}: statement does not reference table {self._config.table!r}")
            for arg in spec.arguments:
                if f"$ctx.args.{arg}" not in sql:
                    problems.append(f"{spec.path}: statement never reads argument {arg!r}")

        if "$util.toJson($ctx.result)" not in response:
            problems.append(f"{spec.path}: response template does not return $ctx.result")

        return problems
