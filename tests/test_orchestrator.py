"""Tests for pkgcatalog.orchestrator."""

from __future__ import annotations

import threading
from typing import List

import pytest

from pkgcatalog.catalogers import Cataloger, PythonIndexCataloger, PythonPackageCataloger
from pkgcatalog.event import CatalogerResult, CatalogEventType, EventBus
from pkgcatalog.models import Catalog, FileReference, Language, Package, PackageType
from pkgcatalog.orchestrator import Orchestrator


def _package(name: str, found_by: str) -> Package:
    return Package(
        name=name,
        version="1.0",
        type=PackageType.PYTHON,
        language=Language.PYTHON,
        found_by=found_by,
        source=[FileReference(f"{name}.txt")],
    )


class StaticCataloger(Cataloger):
    """Returns a fixed list of packages."""

    def __init__(self, name: str, package_names: List[str]) -> None:
        self.name = name
        self.package_names = package_names

    def catalog(self, resolver):
        return [_package(package_name, self.name) for package_name in self.package_names]


class FailingCataloger(Cataloger):
    name = "failing"

    def catalog(self, resolver):
        raise RuntimeError("cataloger blew up")


class BarrierCataloger(StaticCataloger):
    """Blocks until every peer is running, proving concurrent execution."""

    def __init__(self, name: str, barrier: threading.Barrier) -> None:
        super().__init__(name, [f"{name}-pkg"])
        self.barrier = barrier

    def catalog(self, resolver):
        self.barrier.wait(timeout=5)
        return super().catalog(resolver)


def test_run_merges_packages_in_registration_order(tree_builder) -> None:
    catalogers = [StaticCataloger("first", ["a", "b"]), StaticCataloger("second", ["c"])]

    catalog = Orchestrator(catalogers).run(tree_builder.resolver())

    assert isinstance(catalog, Catalog)
    assert [package.name for package in catalog] == ["a", "b", "c"]
    assert [package.found_by for package in catalog] == ["first", "first", "second"]


def test_failing_cataloger_does_not_stop_others(tree_builder, caplog) -> None:
    catalogers = [FailingCataloger(), StaticCataloger("healthy", ["ok"])]

    with caplog.at_level("WARNING", logger="pkgcatalog"):
        catalog = Orchestrator(catalogers).run(tree_builder.resolver())

    assert [package.name for package in catalog] == ["ok"]
    assert "Cataloger failing failed" in caplog.text


def test_run_publishes_lifecycle_events(tree_builder) -> None:
    bus = EventBus()
    subscription = bus.subscribe()
    catalogers = [StaticCataloger("first", ["a"]), FailingCataloger()]

    catalog = Orchestrator(catalogers, bus=bus).run(tree_builder.resolver())
    bus.close()
    events = list(subscription.events())

    assert [event.type for event in events] == [
        CatalogEventType.CATALOG_STARTED,
        CatalogEventType.CATALOGER_FINISHED,
        CatalogEventType.CATALOGER_FINISHED,
        CatalogEventType.CATALOG_FINISHED,
    ]
    assert events[0].value == ["first", "failing"]

    finished = {event.source: event.value for event in events[1:3]}
    assert isinstance(finished["first"], CatalogerResult)
    assert finished["first"].succeeded
    assert [package.name for package in finished["first"].packages] == ["a"]
    assert not finished["failing"].succeeded
    assert isinstance(finished["failing"].error, RuntimeError)

    assert events[-1].value is catalog


def test_run_is_repeatable(tree_builder) -> None:
    tree_builder.write(
        {
            "requirements.txt": "six==1.15.0\n",
            "lib/six-1.15.0.dist-info/METADATA": "Name: six\nVersion: 1.15.0\n",
        }
    )
    orchestrator = Orchestrator([PythonPackageCataloger(), PythonIndexCataloger()])
    resolver = tree_builder.resolver()

    first = orchestrator.run(resolver)
    second = orchestrator.run(resolver)

    assert first.to_dict() == second.to_dict()
    assert [(package.name, package.found_by) for package in first] == [
        ("six", "python-package-cataloger"),
        ("six", "python-index-cataloger"),
    ]


def test_workers_run_catalogers_concurrently(tree_builder) -> None:
    barrier = threading.Barrier(3)
    catalogers = [BarrierCataloger(name, barrier) for name in ("one", "two", "three")]

    catalog = Orchestrator(catalogers, workers=3).run(tree_builder.resolver())

    assert [package.name for package in catalog] == ["one-pkg", "two-pkg", "three-pkg"]


def test_workers_isolate_failures(tree_builder) -> None:
    catalogers = [StaticCataloger("a", ["x"]), FailingCataloger(), StaticCataloger("b", ["y"])]

    catalog = Orchestrator(catalogers, workers=4).run(tree_builder.resolver())

    assert [package.name for package in catalog] == ["x", "y"]


def test_empty_cataloger_list_yields_empty_catalog(tree_builder) -> None:
    bus = EventBus()
    subscription = bus.subscribe()

    catalog = Orchestrator([], bus=bus).run(tree_builder.resolver())
    bus.close()

    assert len(catalog) == 0
    assert [event.type for event in subscription.events()] == [
        CatalogEventType.CATALOG_STARTED,
        CatalogEventType.CATALOG_FINISHED,
    ]


def test_workers_must_be_positive() -> None:
    with pytest.raises(ValueError):
        Orchestrator([], workers=0)
