"""Pydantic configuration models with code-baked defaults.

Sparse TOML contract: defaults baked here, appsync.toml only contains overrides.
The defaults reproduce the reference deployment exactly, so an empty (or
missing) config file deploys the same stack.
"""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import BaseModel, Field, field_validator

_IDENTIFIER_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


# --- appsync.toml sections ---


class ApiConfig(BaseModel):
    """[api] section."""

    model_config = {"frozen": True}

    name: str = "cdk-appsync-api"
    schema_path: Path | None = None
    api_key_expiry_days: int = Field(default=365, ge=1, le=365)
    xray_enabled: bool = True


class SecretConfig(BaseModel):
    """[secret] section: generated database credential."""

    model_config = {"frozen": True}

    username: str = "admin"
    generate_string_key: str = "password"
    password_length: int = Field(default=16, ge=8, le=4096)
    exclude_characters: str = '"@/\\'


class ClusterConfig(BaseModel):
    """[cluster] section."""

    model_config = {"frozen": True}

    identifier: str = "ac-sdk-test"
    default_database_name: str = "ac"
    username: str = "admin"


class MappingConfig(BaseModel):
    """[mapping] section: values substituted into resolver templates."""

    model_config = {"frozen": True}

    table: str = "ac"
    version: str = "2017-02-28"

    @field_validator("table")
    @classmethod
    def _plain_identifier(cls, value: str) -> str:
        if not _IDENTIFIER_RE.match(value):
            msg = f"table must be a plain SQL identifier, got {value!r}"
            raise ValueError(msg)
        return value


class DeployConfig(BaseModel):
    """Root configuration composing all sections."""

    model_config = {"frozen": True}

    api: ApiConfig = Field(default_factory=ApiConfig)
    secret: SecretConfig = Field(default_factory=SecretConfig)
    cluster: ClusterConfig = Field(default_factory=ClusterConfig)
    mapping: MappingConfig = Field(default_factory=MappingConfig)
