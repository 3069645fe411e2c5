"""Tests for pkgcatalog.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from pkgcatalog.config import ConfigError, PkgCatalogConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, PkgCatalogConfig)
    assert config.root == tmp_path.resolve()
    assert config.catalogers.enabled == []
    assert config.exclude_paths == []
    assert config.workers == 1
    assert config.output == "text"
    assert config.log_file is None


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".pkgcatalog.yml"
    config_file.write_text(
        """
catalogers:
  enabled: [python-package-cataloger]
exclude_paths:
  - "vendor/"
  - "/build"
workers: 4
output: JSON
log_file: "logs/scan.log"
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.catalogers.enabled == ["python-package-cataloger"]
    assert config.exclude_paths == ["vendor/", "/build"]
    assert config.workers == 4
    assert config.output == "json"
    assert config.log_file == tmp_path.resolve() / "logs" / "scan.log"


def test_load_config_from_directory_finds_default_file(tmp_path: Path) -> None:
    (tmp_path / ".pkgcatalog.yml").write_text("exclude_paths: dist/\n", encoding="utf-8")

    config = load_config(tmp_path)

    assert config.exclude_paths == ["dist/"]


def test_load_config_clamps_invalid_workers(tmp_path: Path) -> None:
    config_file = tmp_path / ".pkgcatalog.yml"
    config_file.write_text("workers: 0\n", encoding="utf-8")
    assert load_config(config_file).workers == 1

    config_file.write_text("workers: many\n", encoding="utf-8")
    assert load_config(config_file).workers == 1


def test_load_config_empty_file_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / ".pkgcatalog.yml").write_text("\n", encoding="utf-8")

    assert load_config(tmp_path).output == "text"


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    config_file = tmp_path / ".pkgcatalog.yml"
    config_file.write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(config_file)


def test_load_config_reports_yaml_errors(tmp_path: Path) -> None:
    config_file = tmp_path / ".pkgcatalog.yml"
    config_file.write_text("catalogers: [unterminated\n", encoding="utf-8")

    with pytest.raises(ConfigError, match="Failed to parse"):
        load_config(config_file)
