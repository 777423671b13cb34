"""Status lookup by report id (case-insensitive, whole string)."""

import logging

from reportdesk.services.report_repository import ReportRepository
from reportdesk.services.store import Report
from reportdesk.services.validation import clean_query

LOG = logging.getLogger("reportdesk.services.lookup")


def find_by_id(repository: ReportRepository, query: str | None) -> Report | None:
    """Return the report whose id matches query ignoring case and surrounding spaces.

    Returns None for an empty query or when nothing matches.
    """
    wanted = clean_query(query)
    if wanted is None:
        return None
    wanted = wanted.casefold()
    for report in repository.list_reports():
        if report.report_id.casefold() == wanted:
            return report
    LOG.debug("Lookup: no report for %r", query)
    return None
