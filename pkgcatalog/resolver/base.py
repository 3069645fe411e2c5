"""File access contract shared by every cataloger."""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Iterable, List, Optional

from ..models import FileReference


class ResolverError(RuntimeError):
    """Raised when a resolver cannot produce the content of a reference."""


class Resolver(ABC):
    """Read-only view over a scanned filesystem snapshot.

    Implementations are shared between catalogers running on different
    threads and must tolerate concurrent calls.
    """

    @abstractmethod
    def content_by_reference(self, ref: FileReference) -> str:
        """Return the text content of ``ref`` or raise :class:`ResolverError`."""

    def contents_by_references(self, refs: Iterable[FileReference]) -> Dict[FileReference, str]:
        """Return a mapping of each reference to its content."""
        return {ref: self.content_by_reference(ref) for ref in refs}

    @abstractmethod
    def references_by_glob(self, *patterns: str) -> List[FileReference]:
        """Return references whose path matches any of ``patterns``.

        ``*`` matches within one path segment; a ``**`` segment matches any
        directory depth, including none.
        """

    @abstractmethod
    def relative_reference(self, from_ref: FileReference, path: str) -> Optional[FileReference]:
        """Resolve ``path`` in the context of ``from_ref``.

        Returns ``None`` when nothing exists at ``path``; that is an expected
        outcome, not an error.
        """


__all__ = ["Resolver", "ResolverError"]
