"""Catalogers for the Python ecosystem."""

from .index import PythonIndexCataloger
from .package import PythonPackageCataloger

__all__ = ["PythonIndexCataloger", "PythonPackageCataloger"]
