"""Configuration loading for pkgcatalog (.pkgcatalog.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".pkgcatalog.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class CatalogerConfig:
    """Cataloger selection; an empty list enables every cataloger."""

    enabled: List[str] = field(default_factory=list)


@dataclass
class PkgCatalogConfig:
    """Represents the settings defined in .pkgcatalog.yml."""

    root: Path
    catalogers: CatalogerConfig = field(default_factory=CatalogerConfig)
    exclude_paths: List[str] = field(default_factory=list)
    workers: int = 1
    output: str = "text"
    log_file: Optional[Path] = None


def load_config(config_path: Path) -> PkgCatalogConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return PkgCatalogConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{config_file.name} must contain a mapping at the root")

    catalogers = CatalogerConfig()
    cataloger_data = _as_dict(data.get("catalogers"))
    if cataloger_data:
        catalogers.enabled = _as_str_list(cataloger_data.get("enabled"))

    workers = _as_int(data.get("workers"))
    if workers is None or workers < 1:
        workers = 1

    output = (_as_str(data.get("output")) or "text").lower()
    log_file_str = _as_str(data.get("log_file"))

    return PkgCatalogConfig(
        root=root,
        catalogers=catalogers,
        exclude_paths=_as_str_list(data.get("exclude_paths")),
        workers=workers,
        output=output,
        log_file=root / log_file_str if log_file_str else None,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = ["CONFIG_FILENAME", "CatalogerConfig", "ConfigError", "PkgCatalogConfig", "load_config"]
