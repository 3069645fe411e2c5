"""Handlers invoked by the progress observer when a catalog run finishes."""

from __future__ import annotations

import json
import sys
from typing import IO, Callable, List

from ..event import Event
from ..models import Catalog

OUTPUT_FORMATS = ("text", "json")

_COLUMNS = ("NAME", "VERSION", "TYPE", "FOUND BY")


def render_text(catalog: Catalog) -> str:
    """Render the catalog as an aligned table, one package per row."""
    if not catalog.packages:
        return "No packages discovered\n"
    rows: List[tuple[str, ...]] = [_COLUMNS]
    rows.extend(
        (package.name, package.version, package.type.value, package.found_by)
        for package in catalog
    )
    widths = [max(len(row[index]) for row in rows) for index in range(len(_COLUMNS))]
    lines = ["  ".join(cell.ljust(width) for cell, width in zip(row, widths)).rstrip() for row in rows]
    return "\n".join(lines) + "\n"


def render_json(catalog: Catalog) -> str:
    return json.dumps(catalog.to_dict(), indent=2) + "\n"


def catalog_report_handler(output: str = "text", stream: IO[str] | None = None) -> Callable[[Event], None]:
    """Return a handler that writes the finished catalog to ``stream``."""
    if output not in OUTPUT_FORMATS:
        raise ValueError(f"Unknown output format {output!r}; expected one of {', '.join(OUTPUT_FORMATS)}")
    render = render_json if output == "json" else render_text

    def _handle(event: Event) -> None:
        catalog = event.value
        if not isinstance(catalog, Catalog):
            raise TypeError(f"catalog finished event carried {type(catalog).__name__}, not a Catalog")
        target = stream if stream is not None else sys.stdout
        target.write(render(catalog))
        target.flush()

    return _handle


__all__ = ["OUTPUT_FORMATS", "catalog_report_handler", "render_json", "render_text"]
