"""Shared Jinja2 template loading with per-project override support."""

from __future__ import annotations

from pathlib import Path

from jinja2 import BaseLoader, ChoiceLoader, Environment, FileSystemLoader, PackageLoader, StrictUndefined

OVERRIDE_DIR = Path(".appsync") / "templates"


def build_template_environment(group: str, *, project_root: Path | None = None) -> Environment:
    """Build a Jinja2 environment with project overrides before packaged defaults.

    Overrides are loaded from ``.appsync/templates/`` inside the project.
    Both a namespaced directory (for example ``.appsync/templates/request/``)
    and the shared root are searched, so a project can replace a single
    mapping template without copying the rest.

    Jinja only substitutes deployment values (table name, template version);
    the VTL directives (``$ctx``, ``#if``) pass through untouched for AppSync
    to evaluate at request time.
    """

    loaders: list[BaseLoader] = []
    if project_root is not None:
        template_root = project_root / OVERRIDE_DIR
        loaders.append(FileSystemLoader([str(template_root / group), str(template_root)]))

    loaders.append(PackageLoader("appsync_aurora", f"templates/{group}"))
    return Environment(
        loader=ChoiceLoader(loaders),
        keep_trailing_newline=True,
        undefined=StrictUndefined,
        autoescape=False,
    )
