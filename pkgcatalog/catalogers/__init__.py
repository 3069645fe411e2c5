"""Cataloger registry: the built-in catalogers plus ``pkgcatalog.catalogers`` plugins."""

from __future__ import annotations

from importlib import metadata
from typing import Callable, Dict, Iterator, List, Sequence, Tuple

from ..logging import get_logger
from .base import Cataloger, CatalogerError
from .common import GenericCataloger
from .python import PythonIndexCataloger, PythonPackageCataloger

PLUGIN_GROUP = "pkgcatalog.catalogers"

# catalog order follows this tuple, then plugins in entry point order
BUILTIN_CATALOGERS: Tuple[type[Cataloger], ...] = (
    PythonPackageCataloger,
    PythonIndexCataloger,
)

CatalogerFactory = Callable[[], Cataloger]

logger = get_logger("catalogers")


def discover_catalogers(enabled: Sequence[str] | None = None) -> List[Cataloger]:
    """Instantiate the registered catalogers in registration order.

    ``enabled`` selects catalogers by name, case-insensitively; an empty or
    missing selection runs all of them. Only selected catalogers are
    instantiated.
    """
    registry = _registry()
    if enabled:
        wanted = {name.lower() for name in enabled}
        unknown = sorted(wanted.difference(registry))
        if unknown:
            raise ValueError(
                f"No cataloger named {', '.join(unknown)} (available: {', '.join(registry)})"
            )
        selected = [key for key in registry if key in wanted]
    else:
        selected = list(registry)
    return [_instantiate(key, registry[key]) for key in selected]


def _registry() -> Dict[str, CatalogerFactory]:
    registry: Dict[str, CatalogerFactory] = {
        cataloger.name.lower(): cataloger for cataloger in BUILTIN_CATALOGERS
    }
    for name, factory in _plugin_factories():
        key = name.lower()
        if key in registry:
            logger.warning("Ignoring cataloger plugin %s: name already registered", name)
            continue
        registry[key] = factory
    return registry


def _plugin_factories() -> Iterator[Tuple[str, CatalogerFactory]]:
    for entry in metadata.entry_points().select(group=PLUGIN_GROUP):
        try:
            loaded = entry.load()
        except Exception as exc:
            raise CatalogerError(f"Cataloger plugin {entry.name} could not be loaded: {exc}") from exc
        yield entry.name, _as_factory(entry.name, loaded)


def _as_factory(name: str, obj: object) -> CatalogerFactory:
    if isinstance(obj, Cataloger):
        return lambda: obj
    if callable(obj):
        return obj
    raise TypeError(f"Cataloger plugin {name} must be a Cataloger, a Cataloger class or a factory")


def _instantiate(name: str, factory: CatalogerFactory) -> Cataloger:
    cataloger = factory()
    if not isinstance(cataloger, Cataloger):
        raise TypeError(f"Cataloger plugin {name} produced {type(cataloger).__name__}, not a Cataloger")
    return cataloger


__all__ = [
    "BUILTIN_CATALOGERS",
    "Cataloger",
    "CatalogerError",
    "GenericCataloger",
    "PLUGIN_GROUP",
    "PythonIndexCataloger",
    "PythonPackageCataloger",
    "discover_catalogers",
]
