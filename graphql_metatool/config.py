"""
Runtime settings for the GraphQL Metatool server.

Settings are resolved in two layers:

1. **Settings file** (optional YAML, passed with ``--config``):
   any field of :class:`Settings`.

2. **Environment variables** (take precedence over the file):
   ``GRAPHQL_ENDPOINT``, ``GRAPHQL_HEADER_*``, ``GRAPHQL_AUTH_TOKEN``,
   ``GRAPHQL_COOKIE_HEADER``, ``GRAPHQL_METATOOL_DATA_DIR``,
   ``DISABLE_CORE_TOOLS``, ``GRAPHQL_VALIDATE_QUERIES``,
   ``GRAPHQL_REQUEST_TIMEOUT``, ``GRAPHQL_METATOOL_LOG_LEVEL``.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Literal, Mapping, Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .exceptions import ConfigurationError
from .logging_config import get_logger

logger = get_logger("config")

HEADER_ENV_PREFIX = "GRAPHQL_HEADER_"

DEFAULT_HEADERS = {
    "content-type": "application/json",
    "accept": "*/*",
    "user-agent": "GraphQL-MCP-Server/1.0.0",
}

# Environment variable -> settings field
ENV_FIELDS = {
    "GRAPHQL_ENDPOINT": "graphql_endpoint",
    "GRAPHQL_METATOOL_DATA_DIR": "data_dir",
    "DISABLE_CORE_TOOLS": "disable_core_tools",
    "GRAPHQL_VALIDATE_QUERIES": "validate_queries",
    "GRAPHQL_REQUEST_TIMEOUT": "request_timeout",
    "GRAPHQL_METATOOL_LOG_LEVEL": "log_level",
}

CoreToolsSetting = Literal["none", "management", "all"]


class Settings(BaseModel):
    """Resolved server configuration.

    Attributes:
        graphql_endpoint: URL of the single GraphQL endpoint
        headers: HTTP headers sent with every GraphQL request
        data_dir: Root of the persisted data (tools live in ``data_dir/tools``)
        disable_core_tools: "none", "management" or "all"
        validate_queries: Check saved queries against the endpoint schema
        request_timeout: HTTP timeout in seconds
        log_level: Package log level
    """

    graphql_endpoint: str
    headers: dict[str, str] = Field(default_factory=dict)
    data_dir: Path = Path("./data")
    disable_core_tools: CoreToolsSetting = "none"
    validate_queries: bool = False
    request_timeout: float = Field(default=30.0, gt=0)
    log_level: str = "INFO"

    @field_validator("graphql_endpoint")
    @classmethod
    def _endpoint_not_blank(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("GRAPHQL_ENDPOINT environment variable is required")
        return value.strip()

    @field_validator("disable_core_tools", mode="before")
    @classmethod
    def _lowercase_setting(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().lower() or "none"
        return value

    @property
    def tools_dir(self) -> Path:
        return self.data_dir / "tools"

    def masked(self) -> dict[str, Any]:
        """Settings as a dict with header values hidden, for display."""
        data = self.model_dump(mode="json")
        data["headers"] = {name: "***" for name in self.headers}
        return data


def headers_from_env(environ: Mapping[str, str]) -> dict[str, str]:
    """Collect GraphQL request headers from the environment.

    ``GRAPHQL_HEADER_USER_AGENT=x`` becomes ``user-agent: x``. The legacy
    ``GRAPHQL_AUTH_TOKEN`` and ``GRAPHQL_COOKIE_HEADER`` variables map to
    ``authorization: Bearer <token>`` and ``cookie``.
    """
    headers: dict[str, str] = {}

    for key, value in environ.items():
        if key.startswith(HEADER_ENV_PREFIX) and value:
            name = key[len(HEADER_ENV_PREFIX):].lower().replace("_", "-")
            headers[name] = value

    auth_token = environ.get("GRAPHQL_AUTH_TOKEN", "")
    if auth_token.strip():
        headers["authorization"] = f"Bearer {auth_token}"

    cookie = environ.get("GRAPHQL_COOKIE_HEADER", "")
    if cookie.strip():
        headers["cookie"] = cookie

    return headers


def _load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML settings file.

    Raises:
        ConfigurationError: If the file is missing, unparsable or not a mapping
    """
    if not path.exists():
        raise ConfigurationError(f"Settings file not found: {path}")

    try:
        with open(path) as f:
            raw = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Settings file {path} must contain a mapping")
    return raw


def load_settings(
    config_path: Optional[Path] = None,
    environ: Optional[Mapping[str, str]] = None,
) -> Settings:
    """Resolve settings from an optional YAML file and the environment.

    Args:
        config_path: Optional YAML settings file
        environ: Environment mapping (defaults to ``os.environ``)

    Returns:
        Validated Settings

    Raises:
        ConfigurationError: If the endpoint is missing or a value is invalid
    """
    if environ is None:
        environ = os.environ

    raw: dict[str, Any] = {}
    if config_path is not None:
        raw = _load_yaml_file(Path(config_path))
        logger.debug(f"Loaded settings file {config_path}")

    for env_name, field_name in ENV_FIELDS.items():
        value = environ.get(env_name)
        if value is not None and value != "":
            raw[field_name] = value

    headers = dict(raw.get("headers") or {})
    headers.update(headers_from_env(environ))
    if not headers:
        headers = dict(DEFAULT_HEADERS)
    raw["headers"] = headers

    if not str(raw.get("graphql_endpoint") or "").strip():
        raise ConfigurationError("GRAPHQL_ENDPOINT environment variable is required")

    try:
        return Settings.model_validate(raw)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings: {e}") from e
