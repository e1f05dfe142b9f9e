"""Configuration for the outfit deck app."""

from dataclasses import dataclass, fields
from pathlib import Path
import os
from typing import Any, Callable, Dict, Optional

DEFAULT_STORAGE_ENDPOINT = "https://fra.cloud.appwrite.io/v1"
DEFAULT_PROFILE_CACHE_DIR = "data/profiles"
DEFAULT_CONFIG_DIR = "config/environments"


def _optional_float(value: Optional[str]) -> Optional[float]:
    if value is None or str(value).strip() == "":
        return None
    return float(value)


def _optional_int(value: Optional[str]) -> Optional[int]:
    if value is None or str(value).strip() == "":
        return None
    return int(value)


def _optional_url(value: Optional[str]) -> Optional[str]:
    if value is None or not str(value).strip():
        return None
    return str(value).strip().rstrip("/")


def read_flat_yaml(path: Path) -> Dict[str, str]:
    """Read ``key: value`` pairs from a flat YAML file.

    Only scalar values are supported; comments and blank lines are skipped and
    surrounding quotes are stripped.
    """

    values: Dict[str, str] = {}
    for raw_line in path.read_text().splitlines():
        line = raw_line.split(" #", 1)[0].strip()
        if not line or line.startswith("#") or ":" not in line:
            continue
        key, _, value = line.partition(":")
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in {"'", '"'}:
            value = value[1:-1]
        values[key.strip()] = value
    return values


def _config_file(env_name: Optional[str]) -> Optional[Path]:
    explicit = os.getenv("APP_CONFIG_PATH")
    if explicit:
        return Path(explicit)
    if env_name:
        return Path(os.getenv("APP_CONFIG_DIR", DEFAULT_CONFIG_DIR)) / f"{env_name}.yaml"
    return None


_PARSERS: Dict[str, Callable[[Optional[str]], Any]] = {
    "backend_url": _optional_url,
    "request_timeout_seconds": _optional_float,
    "shuffle_seed": _optional_int,
}


@dataclass
class AppConfig:
    """Settings for the catalog backend, object storage and the profile cache.

    ``backend_url`` points at the service exposing ``/getAllOutfits``; when it
    is unset the catalog is always served from the bundled static outfits.
    The storage settings are only used to derive preview URLs from file ids.
    ``request_timeout_seconds`` left unset means the HTTP client waits as long
    as the backend takes.
    """

    backend_url: Optional[str] = None
    storage_endpoint: str = DEFAULT_STORAGE_ENDPOINT
    storage_project_id: str = ""
    storage_bucket_id: str = ""
    profile_cache_dir: str = DEFAULT_PROFILE_CACHE_DIR
    request_timeout_seconds: Optional[float] = None
    shuffle_seed: Optional[int] = None
    environment: Optional[str] = None

    @classmethod
    def from_env(cls) -> "AppConfig":
        """Build a config from the environment layered over an optional YAML file.

        ``APP_ENV`` selects ``<APP_CONFIG_DIR>/<env>.yaml``; ``APP_CONFIG_PATH``
        names a file directly. Upper-cased environment variables (for example
        ``BACKEND_URL``) override values read from the file.
        """

        env_name = os.getenv("APP_ENV")
        path = _config_file(env_name)
        file_values = read_flat_yaml(path) if path and path.exists() else {}

        kwargs: Dict[str, Any] = {"environment": env_name}
        for config_field in fields(cls):
            if config_field.name == "environment":
                continue
            raw = os.getenv(config_field.name.upper(), file_values.get(config_field.name))
            parser = _PARSERS.get(config_field.name)
            if parser is not None:
                kwargs[config_field.name] = parser(raw)
            elif raw not in (None, ""):
                kwargs[config_field.name] = str(raw)
        return cls(**kwargs)


__all__ = ["AppConfig", "DEFAULT_STORAGE_ENDPOINT", "read_flat_yaml"]
