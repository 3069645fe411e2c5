"""Runs catalogers over a resolver and assembles their packages into a catalog."""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, List

from .catalogers import Cataloger
from .event import CatalogerResult, CatalogEventType, Event, EventBus
from .logging import get_logger
from .models import Catalog
from .resolver import Resolver

_SOURCE = "orchestrator"


class Orchestrator:
    """Coordinates one catalog run across every registered cataloger.

    A failing cataloger is recorded in its ``CATALOGER_FINISHED`` event and
    never stops the others. With ``workers`` above one the catalogers run on
    a thread pool; the catalog is assembled afterwards, in registration
    order, by the calling thread.
    """

    def __init__(
        self,
        catalogers: Iterable[Cataloger],
        *,
        bus: EventBus | None = None,
        workers: int = 1,
    ) -> None:
        if workers < 1:
            raise ValueError("workers must be >= 1")
        self.catalogers: List[Cataloger] = list(catalogers)
        self.bus = bus
        self.workers = workers
        self.logger = get_logger("orchestrator")

    def run(self, resolver: Resolver) -> Catalog:
        """Catalog ``resolver`` with every cataloger and return the merged result."""
        names = [self._name(cataloger) for cataloger in self.catalogers]
        self.logger.info("Cataloging with %d catalogers", len(self.catalogers))
        self._publish(Event(CatalogEventType.CATALOG_STARTED, source=_SOURCE, value=names))

        results = self._execute(resolver)

        catalog = Catalog(packages=[package for result in results for package in result.packages])
        failed = [result.name for result in results if not result.succeeded]
        if failed:
            self.logger.warning("Catalogers failed: %s", ", ".join(failed))
        self.logger.info("Cataloged %d packages", len(catalog))

        self._publish(Event(CatalogEventType.CATALOG_FINISHED, source=_SOURCE, value=catalog))
        return catalog

    def _execute(self, resolver: Resolver) -> List[CatalogerResult]:
        if self.workers == 1 or len(self.catalogers) < 2:
            return [self._run_cataloger(cataloger, resolver) for cataloger in self.catalogers]

        max_workers = min(self.workers, len(self.catalogers))
        with ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="pkgcatalog") as executor:
            futures = [
                executor.submit(self._run_cataloger, cataloger, resolver)
                for cataloger in self.catalogers
            ]
            return [future.result() for future in futures]

    def _run_cataloger(self, cataloger: Cataloger, resolver: Resolver) -> CatalogerResult:
        name = self._name(cataloger)
        self.logger.debug("Running cataloger %s", name)
        started = time.perf_counter()
        try:
            packages = list(cataloger.catalog(resolver))
        except Exception as exc:
            result = CatalogerResult(name=name, error=exc, elapsed=time.perf_counter() - started)
            self._log_exception(f"Cataloger {name} failed", exc)
        else:
            result = CatalogerResult(name=name, packages=packages, elapsed=time.perf_counter() - started)
            self.logger.debug(
                "Cataloger %s found %d packages in %.3fs", name, len(packages), result.elapsed
            )
        self._publish(Event(CatalogEventType.CATALOGER_FINISHED, source=name, value=result))
        return result

    def _publish(self, event: Event) -> None:
        if self.bus is not None:
            self.bus.publish(event)

    def _log_exception(self, message: str, exc: Exception) -> None:
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.exception("%s: %s", message, exc)
        else:
            self.logger.error("%s: %s", message, exc)

    @staticmethod
    def _name(cataloger: Cataloger) -> str:
        return getattr(cataloger, "name", "") or type(cataloger).__name__


__all__ = ["Orchestrator"]
