"""Cataloger for installed Python distributions (wheel and egg layouts)."""

from __future__ import annotations

import posixpath
from typing import List, Optional

from ...logging import get_logger
from ...models import (
    FileReference,
    Language,
    MetadataType,
    Package,
    PackageType,
    PythonFileRecord,
    PythonPackageMetadata,
)
from ...resolver import Resolver, ResolverError
from ..base import Cataloger, CatalogerError
from .parsers import parse_metadata, parse_record, parse_top_level

logger = get_logger("catalogers.python")


class PythonPackageCataloger(Cataloger):
    """Correlates METADATA/PKG-INFO with the RECORD and top_level.txt beside it."""

    name = "python-package-cataloger"

    ANCHOR_GLOBS = (
        "**/*.dist-info/METADATA",
        "**/*.egg-info/PKG-INFO",
    )
    RECORD_FILE = "RECORD"
    TOP_LEVEL_FILE = "top_level.txt"

    def catalog(self, resolver: Resolver) -> List[Package]:
        try:
            anchors = resolver.references_by_glob(*self.ANCHOR_GLOBS)
        except ResolverError as exc:
            raise CatalogerError(f"{self.name}: unable to search for distributions: {exc}") from exc

        packages: List[Package] = []
        for anchor in anchors:
            try:
                package = self.catalog_distribution(resolver, anchor)
            except (ResolverError, OSError, ValueError) as exc:
                logger.warning("Skipping python package at %s: %s", anchor.path, exc)
                continue
            packages.append(package)
        return packages

    def catalog_distribution(self, resolver: Resolver, anchor: FileReference) -> Package:
        """Build one package from ``anchor`` and whichever sibling files exist."""
        fields = parse_metadata(resolver.content_by_reference(anchor))
        source = [anchor]
        files: List[PythonFileRecord] = []
        top_level_packages: List[str] = []

        record_ref = self._sibling(resolver, anchor, self.RECORD_FILE)
        if record_ref is not None:
            files = parse_record(resolver.content_by_reference(record_ref))
            source.append(record_ref)

        top_level_ref = self._sibling(resolver, anchor, self.TOP_LEVEL_FILE)
        if top_level_ref is not None:
            top_level_packages = parse_top_level(resolver.content_by_reference(top_level_ref))
            source.append(top_level_ref)

        metadata = PythonPackageMetadata(
            site_packages_root_path=posixpath.dirname(posixpath.dirname(anchor.path)),
            files=files,
            top_level_packages=top_level_packages,
            **fields,
        )
        return Package(
            name=metadata.name,
            version=metadata.version,
            type=PackageType.PYTHON,
            language=Language.PYTHON,
            licenses=[metadata.license] if metadata.license else [],
            found_by=self.name,
            source=source,
            metadata_type=MetadataType.PYTHON_PACKAGE,
            metadata=metadata,
        )

    @staticmethod
    def _sibling(resolver: Resolver, anchor: FileReference, filename: str) -> Optional[FileReference]:
        ref = resolver.relative_reference(anchor, filename)
        if ref is None:
            logger.debug("No %s beside %s", filename, anchor.path)
        return ref


__all__ = ["PythonPackageCataloger"]
