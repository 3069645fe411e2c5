from __future__ import annotations

import logging
from pathlib import Path

import pytest

from tests._fixtures.tree_builder import TreeBuilder


@pytest.fixture
def tree_builder(tmp_path: Path) -> TreeBuilder:
    """Provide a reusable tree builder rooted at the pytest tmp_path."""
    return TreeBuilder(tmp_path)


@pytest.fixture(autouse=True)
def reset_pkgcatalog_logger():
    """Undo CLI logging setup so caplog sees pkgcatalog records in every test."""
    yield
    logger = logging.getLogger("pkgcatalog")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
