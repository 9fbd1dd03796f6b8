"""Shared pytest fixtures for appsync-aurora tests."""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path

import pytest
from click.testing import CliRunner

from appsync_aurora.config.settings import DeploySettings
from appsync_aurora.services.telemetry import disable_telemetry

_ENV_VARS = (
    "APPSYNC_CONFIG",
    "APPSYNC_STACK_ID",
    "APPSYNC_ACCOUNT",
    "APPSYNC_REGION",
    "APPSYNC_PROJECT_ROOT",
    "CDK_DEFAULT_ACCOUNT",
    "CDK_DEFAULT_REGION",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator[None]:
    """Keep the developer's AWS/CDK environment out of every test."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
    disable_telemetry()


@pytest.fixture
def cli_runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def project_root(tmp_path: Path) -> Path:
    """Empty project directory with no appsync.toml."""
    return tmp_path


@pytest.fixture
def settings(project_root: Path) -> DeploySettings:
    """Default settings pinned to a concrete account and region."""
    return DeploySettings.from_cli(
        project_root=project_root,
        account="123456789012",
        region="us-east-1",
    )


@pytest.fixture
def _isolated_project(project_root: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    """Change CWD to the temp project so the CLI discovers nothing else."""
    monkeypatch.chdir(project_root)


def write_override(project_root: Path, group: str, name: str, body: str) -> Path:
    """Drop a mapping template override into the project."""
    target = project_root / ".appsync" / "templates" / group / name
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(body, encoding="utf-8")
    return target
