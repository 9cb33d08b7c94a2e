"""Explorer configuration.

Defaults, overridden by a YAML file, then by environment variables.
CLI options are applied on top by the caller.
"""

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError

from api_docs_explorer.errors import ConfigError

CONFIG_FILENAME = "docs-explorer.yaml"

ENV_REGISTRY = "API_DOCS_REGISTRY"
ENV_SOURCE_ROOT = "API_DOCS_SOURCE_ROOT"


class ExplorerConfig(BaseModel):
    """Where to find the generated registry and the handler sources."""

    registry_path: Path = Path("src/_sockets/apiTypes.generated.ts")
    source_root: Path = Path("src")
    handler_extensions: list[str] = [".ts", ".tsx", ".js"]
    default_rate_limit: int = 60  # shown when a handler sets none
    indent: int = 2


def load_config(path: Path | None = None) -> ExplorerConfig:
    """Load configuration from ``path`` (or ./docs-explorer.yaml) and the environment."""
    data: dict = {}

    if path is None and Path(CONFIG_FILENAME).exists():
        path = Path(CONFIG_FILENAME)

    if path is not None:
        data = _read_yaml(path)
        for key in ("registry_path", "source_root"):
            if key in data and data[key] is not None and not Path(data[key]).is_absolute():
                data[key] = path.parent / data[key]

    if os.getenv(ENV_REGISTRY):
        data["registry_path"] = os.getenv(ENV_REGISTRY)
    if os.getenv(ENV_SOURCE_ROOT):
        data["source_root"] = os.getenv(ENV_SOURCE_ROOT)

    try:
        return ExplorerConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


def _read_yaml(path: Path) -> dict:
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e

    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigError(f"YAMLError in {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data
