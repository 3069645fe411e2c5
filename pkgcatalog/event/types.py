"""Lifecycle events published while a catalog is built."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional

from ..models import Package


class CatalogEventType(str, Enum):
    CATALOG_STARTED = "catalog-started"
    CATALOGER_FINISHED = "cataloger-finished"
    CATALOG_FINISHED = "catalog-finished"


@dataclass(frozen=True)
class Event:
    """A message delivered to every subscription of an :class:`EventBus`."""

    type: CatalogEventType
    source: Optional[str] = None
    value: Any = None


@dataclass
class CatalogerResult:
    """Outcome of one cataloger, carried by ``CATALOGER_FINISHED`` events."""

    name: str
    packages: List[Package] = field(default_factory=list)
    error: Optional[BaseException] = None
    elapsed: float = 0.0

    @property
    def succeeded(self) -> bool:
        return self.error is None
