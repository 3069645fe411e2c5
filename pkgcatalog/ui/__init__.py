"""Observers that react to catalog lifecycle events."""

from .handlers import OUTPUT_FORMATS, catalog_report_handler
from .observer import FinishedHandler, ProgressObserver

__all__ = ["FinishedHandler", "OUTPUT_FORMATS", "ProgressObserver", "catalog_report_handler"]
