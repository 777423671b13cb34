"""ReportDesk: record keeping for citizen-submitted service reports."""

__version__ = "0.1.0"
