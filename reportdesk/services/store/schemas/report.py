"""Single service report as stored under the ``reports`` key."""

from datetime import UTC, datetime
from typing import Annotated, Literal

from pydantic import AfterValidator, BaseModel, Field, field_serializer

STATUS_PENDING = "Pending"

# No operation transitions a report out of Pending
ReportStatus = Literal["Pending"]


def _normalize_timestamp(value: datetime) -> datetime:
    """Naive timestamps are UTC; precision is cut to the persisted milliseconds."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=UTC)
    return value.replace(microsecond=value.microsecond // 1000 * 1000)


def format_timestamp(value: datetime) -> str:
    """ISO-8601 UTC with milliseconds and Z suffix, e.g. 2024-05-01T09:30:00.000Z."""
    return value.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def format_local(value: datetime) -> str:
    """Human-readable local time for report cards."""
    return value.astimezone().strftime("%Y-%m-%d %H:%M:%S")


class Report(BaseModel):
    """Service report (e.g. missed waste pickup) submitted by a citizen."""

    report_id: str = Field(..., alias="reportId", min_length=1, description="Identifier, e.g. RPT1234")
    name: str = Field(..., min_length=1, description="Submitter name")
    address: str = Field(..., min_length=1, description="Submitter location")
    issue: str = Field(..., min_length=1, description="Problem description")
    created_at: Annotated[datetime, AfterValidator(_normalize_timestamp)] = Field(
        ...,
        alias="date",
        description="Creation time, persisted as ISO-8601 UTC",
    )
    status: ReportStatus = Field(default=STATUS_PENDING, description="Report state; always Pending")

    model_config = {"extra": "ignore", "populate_by_name": True}

    @field_serializer("created_at")
    def _serialize_created_at(self, value: datetime) -> str:
        return format_timestamp(value)

    def to_record(self) -> dict[str, str]:
        """Flat dict with the persisted key names."""
        return self.model_dump(mode="json", by_alias=True)

    def to_text(self) -> str:
        """Render the report card shown on confirmation, lookup and history."""
        lines = [
            f"Report ID: {self.report_id}",
            f"Name: {self.name}",
            f"Address: {self.address}",
            f"Issue: {self.issue}",
            f"Date: {format_local(self.created_at)}",
            f"Status: {self.status}",
        ]
        return "\n".join(lines) + "\n"
