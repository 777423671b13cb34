"""Report collection and last-created pointer over a key-value backend.

The collection is a JSON array under ``reports`` (oldest first); the pointer
is the bare id text under ``lastReportId``. Storage failures never leave this
module: reads degrade to "empty", writes return False.
"""

import json
import logging

from pydantic import ValidationError

from reportdesk.services.store.backends import KeyValueStorage, StorageError
from reportdesk.services.store.schemas import Report

REPORTS_KEY = "reports"
POINTER_KEY = "lastReportId"

LOG = logging.getLogger("reportdesk.services.store.report_store")


class ReportStore:
    """Persistent store adapter for the report collection."""

    def __init__(
        self,
        storage: KeyValueStorage,
        reports_key: str = REPORTS_KEY,
        pointer_key: str = POINTER_KEY,
    ) -> None:
        self.storage = storage
        self.reports_key = reports_key
        self.pointer_key = pointer_key

    def _read(self, key: str) -> str | None:
        try:
            return self.storage.get_item(key)
        except StorageError as e:
            LOG.warning("Failed to read %s: %s", key, e)
            return None

    def load(self) -> list[Report]:
        """Load the collection. Returns [] if missing or unreadable.

        Items that fail validation, and items repeating an earlier reportId,
        are skipped.
        """
        raw = self._read(self.reports_key)
        if raw is None or not raw.strip():
            return []
        try:
            data = json.loads(raw)
        except json.JSONDecodeError as e:
            LOG.warning("Failed to parse %s: %s", self.reports_key, e)
            return []
        if not isinstance(data, list):
            LOG.warning("Ignoring %s: expected a JSON array, got %s", self.reports_key, type(data).__name__)
            return []

        reports: list[Report] = []
        seen: set[str] = set()
        for index, item in enumerate(data):
            try:
                report = Report.model_validate(item)
            except ValidationError as e:
                LOG.warning("Skipping invalid report at index %s: %s", index, e)
                continue
            if report.report_id in seen:
                LOG.warning("Skipping duplicate report %s at index %s", report.report_id, index)
                continue
            seen.add(report.report_id)
            reports.append(report)
        LOG.debug("Loaded %s reports", len(reports))
        return reports

    def save(self, reports: list[Report]) -> bool:
        """Write the complete collection. Returns False if the write failed.

        On failure the previously persisted collection is left as it was.
        """
        raw = json.dumps([r.to_record() for r in reports], ensure_ascii=False)
        try:
            self.storage.set_item(self.reports_key, raw)
        except StorageError as e:
            LOG.error("Failed to save %s reports: %s", len(reports), e)
            return False
        LOG.debug("Saved %s reports", len(reports))
        return True

    def get_pointer(self) -> str | None:
        """Last-created report id, or None when unset or blank."""
        raw = self._read(self.pointer_key)
        if raw is None:
            return None
        value = raw.strip()
        return value or None

    def set_pointer(self, report_id: str) -> bool:
        """Point at report_id. Returns False if the write failed."""
        try:
            self.storage.set_item(self.pointer_key, report_id)
        except StorageError as e:
            LOG.error("Failed to set %s to %s: %s", self.pointer_key, report_id, e)
            return False
        return True

    def clear_pointer(self) -> bool:
        """Remove the pointer. Returns False if the removal failed."""
        try:
            self.storage.remove_item(self.pointer_key)
        except StorageError as e:
            LOG.error("Failed to clear %s: %s", self.pointer_key, e)
            return False
        return True
