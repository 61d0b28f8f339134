"""Configuration helpers for the NovaExchange client."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Union

try:  # Python 3.11+
    import tomllib  # type: ignore[attr-defined]
except ModuleNotFoundError:  # pragma: no cover - fallback for older versions
    tomllib = None  # type: ignore[assignment]

DEFAULT_SERVER = "https://novaexchange.com"
DEFAULT_USER_AGENT = "python-novaexchange-client"
API_KEY_ENV = "NOVAEXCHANGE_API_KEY"
API_SECRET_ENV = "NOVAEXCHANGE_API_SECRET"


@dataclass(frozen=True, slots=True)
class ClientConfig:
    """Holds credentials and networking parameters for the NovaExchange API."""

    api_key: str = ""
    api_secret: str = ""
    server: str = DEFAULT_SERVER
    timeout: float = 20.0  # seconds
    user_agent: str = DEFAULT_USER_AGENT
    verbose: bool = False
    sort_params: bool = False
    max_workers: int = 4

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ClientConfig":
        """Construct :class:`ClientConfig` from the ``api`` table of a config mapping.

        Credentials absent from ``data`` are read from the
        ``NOVAEXCHANGE_API_KEY`` and ``NOVAEXCHANGE_API_SECRET`` environment
        variables.
        """

        api = dict(data.get("api") or {})
        unknown = set(api) - set(cls.__dataclass_fields__)
        if unknown:
            raise ValueError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        api.setdefault("api_key", os.getenv(API_KEY_ENV, ""))
        api.setdefault("api_secret", os.getenv(API_SECRET_ENV, ""))
        return cls(**api)


def _load_json(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as fh:
        return json.load(fh)


def _load_yaml(path: Path) -> Dict[str, Any]:
    import yaml

    with path.open("r", encoding="utf-8") as fh:
        return yaml.safe_load(fh)


def _load_toml(path: Path) -> Dict[str, Any]:
    if tomllib is None:  # pragma: no cover - Python < 3.11 fallback
        raise RuntimeError("TOML configuration files require Python 3.11 or newer.")
    with path.open("rb") as fh:
        return tomllib.load(fh)


def load_config(path: Union[str, os.PathLike[str]]) -> ClientConfig:
    """Load client configuration from JSON, YAML, or TOML files."""

    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    suffix = file_path.suffix.lower()
    if suffix == ".json":
        data = _load_json(file_path)
    elif suffix in {".yml", ".yaml"}:
        data = _load_yaml(file_path)
    elif suffix == ".toml":
        data = _load_toml(file_path)
    else:
        raise ValueError(f"Unsupported configuration format: {suffix}")

    if not isinstance(data, dict):
        raise ValueError("Configuration file must contain a dictionary at the top level.")

    return ClientConfig.from_dict(data)


__all__ = ["ClientConfig", "load_config"]
