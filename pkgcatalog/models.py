"""Core data models shared across pkgcatalog components."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, Iterator, List, Optional, Union


class PackageType(str, Enum):
    """Ecosystem tag, one value per cataloger family."""

    PYTHON = "python"


class Language(str, Enum):
    """Human-facing ecosystem label."""

    PYTHON = "python"


class MetadataType(str, Enum):
    """Names the payload variant stored in ``Package.metadata``."""

    PYTHON_PACKAGE = "PythonPackageMetadata"


@dataclass(frozen=True)
class FileReference:
    """Opaque handle for one file inside a scanned tree."""

    path: str

    def __str__(self) -> str:
        return self.path


@dataclass(frozen=True)
class Digest:
    """Content digest as listed by a package manifest."""

    algorithm: str
    value: str


@dataclass(frozen=True)
class PythonFileRecord:
    """One row of a Python RECORD manifest."""

    path: str
    digest: Optional[Digest] = None
    size: Optional[str] = None


@dataclass
class PythonPackageMetadata:
    """Metadata correlated from an installed Python distribution."""

    name: str = ""
    version: str = ""
    license: str = ""
    platform: str = ""
    author: str = ""
    author_email: str = ""
    site_packages_root_path: str = ""
    files: List[PythonFileRecord] = field(default_factory=list)
    top_level_packages: List[str] = field(default_factory=list)


PackageMetadata = Union[PythonPackageMetadata]

_METADATA_CLASSES: Dict[MetadataType, type] = {
    MetadataType.PYTHON_PACKAGE: PythonPackageMetadata,
}


@dataclass
class Package:
    """A discovered software unit and the files that evidence it."""

    name: str
    version: str
    type: PackageType
    language: Language
    found_by: str
    source: List[FileReference]
    licenses: List[str] = field(default_factory=list)
    metadata_type: Optional[MetadataType] = None
    metadata: Optional[PackageMetadata] = None

    def __post_init__(self) -> None:
        if not self.source:
            raise ValueError(f"package {self.name!r} has no source references")
        if self.metadata_type is None:
            if self.metadata is not None:
                raise ValueError("metadata given without a metadata type")
            return
        expected = _METADATA_CLASSES[self.metadata_type]
        if not isinstance(self.metadata, expected):
            raise ValueError(
                f"metadata type {self.metadata_type.value} requires {expected.__name__}, "
                f"got {type(self.metadata).__name__}"
            )

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        data["type"] = self.type.value
        data["language"] = self.language.value
        data["metadata_type"] = self.metadata_type.value if self.metadata_type else None
        data["source"] = [ref.path for ref in self.source]
        return data


@dataclass
class Catalog:
    """Ordered collection of every package found in one run."""

    packages: List[Package] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.packages)

    def __iter__(self) -> Iterator[Package]:
        return iter(self.packages)

    def by_type(self, package_type: PackageType) -> List[Package]:
        return [package for package in self.packages if package.type is package_type]

    def to_dict(self) -> Dict[str, Any]:
        return {"packages": [package.to_dict() for package in self.packages]}
