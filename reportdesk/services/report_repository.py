"""CRUD over the report collection.

Every operation re-reads the collection from the store and writes the whole
collection back; nothing is cached between calls. Report ids are
``{prefix}{n}`` with n drawn uniformly from [min_value, max_value] and
unique within the collection.
"""

import logging
import random
from collections.abc import Callable
from datetime import UTC, datetime

from reportdesk.config import ReportIdConfig
from reportdesk.services.store import STATUS_PENDING, Report, ReportStore
from reportdesk.services.validation import clean_report_fields

LOG = logging.getLogger("reportdesk.services.report_repository")


class GenerationExhaustedError(Exception):
    """Raised when every report id in the configured range is taken."""

    pass


def _utc_now() -> datetime:
    return datetime.now(UTC)


class ReportRepository:
    """Create, delete, clear and list reports; owns id generation.

    last_save_ok reflects the most recent mutation: False means the change
    may not have been persisted (e.g. storage quota exceeded).
    """

    def __init__(
        self,
        store: ReportStore,
        id_config: ReportIdConfig | None = None,
        rng: random.Random | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.store = store
        self.id_config = id_config or ReportIdConfig()
        self._rng = rng or random.Random()
        self._clock = clock or _utc_now
        self.last_save_ok = True

    def _candidate(self, n: int) -> str:
        return f"{self.id_config.prefix}{n}"

    def generate_id(self, reports: list[Report] | None = None) -> str:
        """Return a report id not used by any report in the collection.

        Draws at random up to max_attempts times, then picks uniformly among
        the remaining free ids. Raises GenerationExhaustedError when none is free.
        """
        cfg = self.id_config
        if reports is None:
            reports = self.store.load()
        taken = {r.report_id for r in reports}

        for _ in range(cfg.max_attempts):
            candidate = self._candidate(self._rng.randint(cfg.min_value, cfg.max_value))
            if candidate not in taken:
                return candidate

        free = [n for n in range(cfg.min_value, cfg.max_value + 1) if self._candidate(n) not in taken]
        if not free:
            raise GenerationExhaustedError(
                f"all {cfg.space_size} report ids {self._candidate(cfg.min_value)}.."
                f"{self._candidate(cfg.max_value)} are in use"
            )
        LOG.debug("No free id after %s draws; picking from %s free ids", cfg.max_attempts, len(free))
        return self._candidate(self._rng.choice(free))

    def create(self, name: str, address: str, issue: str) -> Report:
        """Append a new Pending report and point the last-created pointer at it.

        Inputs are trimmed; raises ReportValidationError if any is empty or not
        valid text. The pointer is only written once the collection is saved.
        """
        name, address, issue = clean_report_fields(name, address, issue)
        reports = self.store.load()
        report = Report(
            report_id=self.generate_id(reports),
            name=name,
            address=address,
            issue=issue,
            created_at=self._clock(),
            status=STATUS_PENDING,
        )
        reports.append(report)
        saved = self.store.save(reports)
        # The pointer only ever names a persisted report
        self.last_save_ok = saved and self.store.set_pointer(report.report_id)
        LOG.info("Created report %s (%s total)", report.report_id, len(reports))
        if not self.last_save_ok:
            LOG.warning("Report %s may not be persisted", report.report_id)
        return report

    def delete_by_id(self, report_id: str) -> bool:
        """Remove the report whose id equals report_id exactly.

        Clears the last-created pointer if it referenced that report. Returns
        True if a report was removed; a missing id writes nothing.
        """
        reports = self.store.load()
        remaining = [r for r in reports if r.report_id != report_id]
        if len(remaining) == len(reports):
            LOG.debug("Delete: report %s not found", report_id)
            return False
        saved = self.store.save(remaining)
        pointer_ok = True
        if self.store.get_pointer() == report_id:
            pointer_ok = self.store.clear_pointer()
        self.last_save_ok = saved and pointer_ok
        LOG.info("Deleted report %s (%s left)", report_id, len(remaining))
        return True

    def clear_all(self) -> bool:
        """Delete every report and the pointer. Returns False if not persisted."""
        saved = self.store.save([])
        cleared = self.store.clear_pointer()
        self.last_save_ok = saved and cleared
        LOG.info("Cleared all reports")
        return self.last_save_ok

    def list_reports(self) -> list[Report]:
        """All reports, oldest first."""
        return self.store.load()
