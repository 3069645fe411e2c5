"""Cataloger for declared (not installed) Python dependencies."""

from __future__ import annotations

import json
import re
import tomllib
from typing import Dict, Iterable, List, Tuple

from ...models import FileReference, Language, Package, PackageType
from ..common import GenericCataloger

_EXTRAS = re.compile(r"\[.*?\]")
_SETUP_PIN = re.compile(r"""['"]([A-Za-z0-9][A-Za-z0-9._\-\[\],]*)\s*==\s*([A-Za-z0-9][^'";\s]*)['"]""")


def _package(ref: FileReference, name: str, version: str) -> Package:
    return Package(
        name=name,
        version=version,
        type=PackageType.PYTHON,
        language=Language.PYTHON,
        found_by="",
        source=[ref],
    )


def _packages(ref: FileReference, pins: Iterable[Tuple[str, str]]) -> List[Package]:
    return [_package(ref, name, version) for name, version in pins]


def parse_requirements(ref: FileReference, content: str) -> List[Package]:
    """Pinned ``name==version`` lines of a requirements file."""
    pins: List[Tuple[str, str]] = []
    for line in content.splitlines():
        stripped = line.split("#", 1)[0].strip()
        if not stripped or stripped.startswith("-"):
            continue
        stripped = stripped.split(";", 1)[0].strip()
        if "==" not in stripped:
            continue
        name, version = stripped.split("==", 1)
        name = _EXTRAS.sub("", name).strip()
        # hash-pinned lines carry "\" continuations and --hash options after the version
        version = version.lstrip("=").strip()
        version = version.split(None, 1)[0] if version else ""
        version = version.split(",", 1)[0].rstrip("\\")
        if name and version:
            pins.append((name, version))
    return _packages(ref, pins)


def parse_poetry_lock(ref: FileReference, content: str) -> List[Package]:
    data = tomllib.loads(content)
    pins: List[Tuple[str, str]] = []
    for entry in data.get("package", []) or []:
        if not isinstance(entry, dict):
            continue
        name = entry.get("name")
        version = entry.get("version")
        if isinstance(name, str) and isinstance(version, str):
            pins.append((name, version))
    return _packages(ref, pins)


def parse_pipfile_lock(ref: FileReference, content: str) -> List[Package]:
    data = json.loads(content)
    if not isinstance(data, dict):
        raise ValueError("Pipfile.lock must contain a JSON object")
    pins: List[Tuple[str, str]] = []
    for section in ("default", "develop"):
        entries: Dict[str, object] = data.get(section) or {}
        if not isinstance(entries, dict):
            continue
        for name, details in entries.items():
            if not isinstance(details, dict):
                continue
            version = details.get("version")
            if isinstance(version, str) and version:
                pins.append((name, version.lstrip("=")))
    return _packages(ref, pins)


def parse_setup(ref: FileReference, content: str) -> List[Package]:
    """Pinned requirement string literals in a setup.py."""
    pins: List[Tuple[str, str]] = []
    for line in content.splitlines():
        stripped = line.strip()
        if stripped.startswith("#"):
            continue
        for name, version in _SETUP_PIN.findall(stripped):
            pins.append((_EXTRAS.sub("", name), version))
    return _packages(ref, pins)


class PythonIndexCataloger(GenericCataloger):
    """Catalogs dependencies pinned in requirements, lock and setup files."""

    name = "python-index-cataloger"

    def __init__(self) -> None:
        super().__init__(
            self.name,
            {
                "**/*requirements*.txt": parse_requirements,
                "**/poetry.lock": parse_poetry_lock,
                "**/Pipfile.lock": parse_pipfile_lock,
                "**/setup.py": parse_setup,
            },
        )


__all__ = [
    "PythonIndexCataloger",
    "parse_pipfile_lock",
    "parse_poetry_lock",
    "parse_requirements",
    "parse_setup",
]
