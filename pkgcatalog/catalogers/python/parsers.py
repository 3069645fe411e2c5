"""Parsers for the files that describe an installed Python distribution."""

from __future__ import annotations

import csv
from email.parser import HeaderParser
from typing import Dict, List, Optional

from ...logging import get_logger
from ...models import Digest, PythonFileRecord

logger = get_logger("catalogers.python")

# METADATA / PKG-INFO header -> PythonPackageMetadata field
_HEADER_FIELDS = {
    "Name": "name",
    "Version": "version",
    "License": "license",
    "Platform": "platform",
    "Author": "author",
    "Author-email": "author_email",
}

_RECORD_FIELDS = 3


def parse_metadata(content: str) -> Dict[str, str]:
    """Parse the header block of a METADATA or PKG-INFO file.

    Only the ``Key: Value`` block before the first blank line is read. Keys
    are matched case-insensitively and the first occurrence wins; missing
    keys map to an empty string.
    """
    message = HeaderParser().parsestr(content)
    fields: Dict[str, str] = {}
    for header, attribute in _HEADER_FIELDS.items():
        value = message.get(header)
        fields[attribute] = _unfold(value) if value is not None else ""
    return fields


def _unfold(value: str) -> str:
    lines = [line.strip() for line in str(value).splitlines()]
    return "\n".join(line for line in lines if line)


def parse_record(content: str) -> List[PythonFileRecord]:
    """Parse a RECORD manifest into file records.

    Each row is ``path,algorithm=digest,size``; empty digest or size columns
    are absent values. Rows that cannot be read are skipped.
    """
    records: List[PythonFileRecord] = []
    for number, line in enumerate(content.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            row = next(csv.reader([line]))
        except csv.Error as exc:
            logger.debug("Skipping unreadable RECORD line %d: %s", number, exc)
            continue
        if not row or len(row) > _RECORD_FIELDS:
            logger.warning("Skipping RECORD line %d with %d fields: %r", number, len(row), line)
            continue
        row = row + [""] * (_RECORD_FIELDS - len(row))
        path, digest_column, size = row
        if not path:
            logger.warning("Skipping RECORD line %d without a path", number)
            continue
        records.append(
            PythonFileRecord(
                path=path,
                digest=_parse_digest(digest_column, number),
                size=size or None,
            )
        )
    return records


def _parse_digest(column: str, number: int) -> Optional[Digest]:
    if not column:
        return None
    algorithm, separator, value = column.partition("=")
    if not separator:
        logger.warning("Unexpected RECORD digest on line %d: %r", number, column)
        return None
    return Digest(algorithm=algorithm, value=value)


def parse_top_level(content: str) -> List[str]:
    """Return the import names listed in a top_level.txt file."""
    return [line.strip() for line in content.splitlines() if line.strip()]


__all__ = ["parse_metadata", "parse_record", "parse_top_level"]
