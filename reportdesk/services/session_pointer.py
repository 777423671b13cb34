"""Resolve the last-created pointer against the current collection."""

from reportdesk.services.report_repository import ReportRepository
from reportdesk.services.store import Report


def get_last_created(repository: ReportRepository) -> Report | None:
    """Most recently created report, or None if unset or no longer stored."""
    report_id = repository.store.get_pointer()
    if report_id is None:
        return None
    for report in repository.list_reports():
        if report.report_id == report_id:
            return report
    return None
