"""Shared cataloger for ecosystems where one file describes its packages."""

from __future__ import annotations

from dataclasses import replace
from typing import Callable, List, Mapping, Set

from ..logging import get_logger
from ..models import FileReference, Package
from ..resolver import Resolver, ResolverError
from .base import Cataloger, CatalogerError

Parser = Callable[[FileReference, str], List[Package]]

logger = get_logger("catalogers.common")


class GenericCataloger(Cataloger):
    """Dispatches files matching each glob to the parser registered for it.

    Parsers receive the reference and its content and do not know which
    cataloger runs them; ``found_by`` is stamped on every returned package.
    """

    def __init__(self, name: str, parsers: Mapping[str, Parser]) -> None:
        self.name = name
        self._parsers = dict(parsers)

    def catalog(self, resolver: Resolver) -> List[Package]:
        packages: List[Package] = []
        seen: Set[FileReference] = set()
        for pattern, parser in self._parsers.items():
            try:
                refs = resolver.references_by_glob(pattern)
            except ResolverError as exc:
                raise CatalogerError(f"{self.name}: unable to search for {pattern}: {exc}") from exc
            for ref in refs:
                if ref in seen:
                    continue
                seen.add(ref)
                packages.extend(self._catalog_file(resolver, ref, parser))
        return packages

    def _catalog_file(self, resolver: Resolver, ref: FileReference, parser: Parser) -> List[Package]:
        try:
            content = resolver.content_by_reference(ref)
            parsed = parser(ref, content)
        except (ResolverError, OSError, ValueError) as exc:
            logger.warning("%s: skipping %s: %s", self.name, ref.path, exc)
            return []
        logger.debug("%s: %d packages from %s", self.name, len(parsed), ref.path)
        return [replace(package, found_by=self.name) for package in parsed]


__all__ = ["GenericCataloger", "Parser"]
