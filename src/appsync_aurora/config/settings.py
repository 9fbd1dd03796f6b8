"""Unified settings: CLI flags, env vars, and TOML config in one object.

Priority chain (highest to lowest):
  1. Init kwargs (CLI flags passed by Click)
  2. Env vars with the ``APPSYNC_`` prefix
  3. ``appsync.toml`` discovered via walk-up
  4. Code defaults baked into the section models

The target account and region additionally fall back to the
``CDK_DEFAULT_ACCOUNT`` / ``CDK_DEFAULT_REGION`` variables the CDK toolkit
exports before running the app.
"""

from __future__ import annotations

import os
import threading
from pathlib import Path
from typing import Any

from pydantic import Field
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource

from appsync_aurora.config.discovery import find_config, read_config
from appsync_aurora.config.models import (
    ApiConfig,
    ClusterConfig,
    DeployConfig,
    MappingConfig,
    SecretConfig,
)


class TomlSettingsSource(PydanticBaseSettingsSource):
    """Read settings from an ``appsync.toml`` file discovered via walk-up."""

    def __init__(self, settings_cls: type[BaseSettings], toml_path: Path | None) -> None:
        super().__init__(settings_cls)
        self._data: dict[str, Any] = {}
        if toml_path and toml_path.is_file():
            self._data = read_config(toml_path)

    def get_field_value(self, field: Any, field_name: str) -> tuple[Any, str, bool]:
        """Return ``(value, field_name, value_is_complex)``."""
        val = self._data.get(field_name)
        return val, field_name, field_name in self._data

    def __call__(self) -> dict[str, Any]:
        """Return the full TOML data dict for Pydantic to merge."""
        return self._data


# Thread-local storage for TOML path during construction.
_tls = threading.local()


class DeploySettings(BaseSettings):
    """Everything needed to build and inspect the deployment.

    Attributes:
        project_root: Directory holding ``appsync.toml`` (or CWD if none was
            found).  Template overrides are looked up beneath it.
        config_path: The TOML file actually loaded, if any.
        stack_id: Construct id (and CloudFormation stack name) of the stack.
        account: Target AWS account, or None for an environment-agnostic stack.
        region: Target AWS region, or None for an environment-agnostic stack.
    """

    model_config = {
        "frozen": True,
        "env_prefix": "APPSYNC_",
        "env_nested_delimiter": "__",
    }

    project_root: Path = Field(default_factory=Path.cwd)
    config_path: Path | None = None

    # --- CLI flags ---
    json_output: bool = False
    quiet: bool = False
    verbose: bool = False
    log_json: bool = False

    # --- Deployment target ---
    stack_id: str = "AppsyncStack"
    account: str | None = Field(default_factory=lambda: os.environ.get("CDK_DEFAULT_ACCOUNT"))
    region: str | None = Field(default_factory=lambda: os.environ.get("CDK_DEFAULT_REGION"))

    # --- TOML sections ---
    api: ApiConfig = Field(default_factory=ApiConfig)
    secret: SecretConfig = Field(default_factory=SecretConfig)
    cluster: ClusterConfig = Field(default_factory=ClusterConfig)
    mapping: MappingConfig = Field(default_factory=MappingConfig)

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Insert TOML source between env vars and defaults."""
        toml_path = getattr(_tls, "toml_path", None)
        return (
            init_settings,
            env_settings,
            TomlSettingsSource(settings_cls, toml_path),
        )

    @classmethod
    def from_cli(
        cls,
        *,
        config_path: str | None = None,
        project_root: Path | None = None,
        **cli_flags: Any,
    ) -> DeploySettings:
        """Construct settings from a CLI (or ``cdk synth``) invocation.

        Discovers ``appsync.toml`` via walk-up (or explicit *config_path*),
        resolves *project_root* from the config file's parent directory,
        and merges CLI flags as highest-priority overrides.
        """
        toml_path: Path | None = None
        if config_path:
            p = Path(config_path)
            if p.is_file():
                toml_path = p
        else:
            toml_path = find_config(project_root)

        resolved_root = project_root
        if resolved_root is None:
            resolved_root = toml_path.parent if toml_path else Path.cwd()

        _tls.toml_path = toml_path
        try:
            return cls(
                project_root=resolved_root,
                config_path=toml_path,
                **cli_flags,
            )
        finally:
            _tls.toml_path = None

    @property
    def deploy_config(self) -> DeployConfig:
        """The resource sections alone, as one frozen model."""
        return DeployConfig(
            api=self.api,
            secret=self.secret,
            cluster=self.cluster,
            mapping=self.mapping,
        )

    @property
    def schema_file(self) -> Path:
        """Schema to upload: the configured path, else the packaged one."""
        path = self.api.schema_path
        if path is None:
            return Path(__file__).resolve().parent.parent / "schema" / "schema.graphql"
        if not path.is_absolute():
            path = self.project_root / path
        return path
