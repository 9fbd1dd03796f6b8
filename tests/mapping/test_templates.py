"""Tests for the Jinja2 template environment."""

from __future__ import annotations

from pathlib import Path

import pytest
from jinja2 import UndefinedError

from appsync_aurora.mapping.templates import build_template_environment
from tests.conftest import write_override


class TestBuildTemplateEnvironment:
    def test_packaged_request_templates(self) -> None:
        env = build_template_environment("request")
        names = set(env.list_templates())
        assert {
            "list_items.vtl.j2",
            "create_item.vtl.j2",
            "update_item.vtl.j2",
            "delete_item.vtl.j2",
        } <= names

    def test_vtl_passes_through(self) -> None:
        env = build_template_environment("response")
        body = env.get_template("passthrough.vtl.j2").render()
        assert "#if($ctx.error)" in body
        assert "$util.error($ctx.error.message, $ctx.error.type)" in body
        assert "$util.toJson($ctx.result)" in body

    def test_missing_variable_is_an_error(self) -> None:
        env = build_template_environment("request")
        with pytest.raises(UndefinedError):
            env.get_template("list_items.vtl.j2").render(version="2017-02-28")

    def test_namespaced_override_wins(self, tmp_path: Path) -> None:
        write_override(tmp_path, "request", "list_items.vtl.j2", "custom {{ table }}")
        env = build_template_environment("request", project_root=tmp_path)
        assert env.get_template("list_items.vtl.j2").render(table="t") == "custom t"

    def test_shared_override_root(self, tmp_path: Path) -> None:
        shared = tmp_path / ".appsync" / "templates" / "passthrough.vtl.j2"
        shared.parent.mkdir(parents=True)
        shared.write_text("$util.toJson($ctx.result)\n")
        env = build_template_environment("response", project_root=tmp_path)
        assert env.get_template("passthrough.vtl.j2").render() == "$util.toJson($ctx.result)\n"

    def test_unrelated_templates_fall_back_to_package(self, tmp_path: Path) -> None:
        write_override(tmp_path, "request", "list_items.vtl.j2", "custom")
        env = build_template_environment("request", project_root=tmp_path)
        body = env.get_template("delete_item.vtl.j2").render(table="ac", version="v")
        assert "DELETE FROM ac" in body
