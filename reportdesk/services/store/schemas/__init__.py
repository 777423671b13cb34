"""Schemas for stored records."""

from reportdesk.services.store.schemas.report import STATUS_PENDING, Report

__all__ = ["STATUS_PENDING", "Report"]
