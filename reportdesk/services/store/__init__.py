"""Persistent storage for reports (key-value backends and the report store)."""

from reportdesk.services.store.backends import (
    FileStorage,
    KeyValueStorage,
    MemoryStorage,
    StorageError,
    create_storage,
)
from reportdesk.services.store.report_store import POINTER_KEY, REPORTS_KEY, ReportStore
from reportdesk.services.store.schemas import STATUS_PENDING, Report

__all__ = [
    "POINTER_KEY",
    "REPORTS_KEY",
    "STATUS_PENDING",
    "FileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "Report",
    "ReportStore",
    "StorageError",
    "create_storage",
]
