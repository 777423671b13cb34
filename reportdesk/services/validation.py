"""Input checks run before touching the repository."""

FIELDS_REQUIRED_MESSAGE = "Please fill all fields before submitting."
INVALID_TEXT_MESSAGE = "Fields contain characters that are not valid text; please retype them."


class ReportValidationError(ValueError):
    """Raised when a required report field is empty or not valid text."""

    pass


def _clean(value: str | None) -> str:
    value = (value or "").strip()
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as e:
        # e.g. undecodable argv bytes arriving as lone surrogates
        raise ReportValidationError(INVALID_TEXT_MESSAGE) from e
    return value


def clean_report_fields(name: str, address: str, issue: str) -> tuple[str, str, str]:
    """Trim name, address and issue; raise ReportValidationError if any is empty or not valid text."""
    name = _clean(name)
    address = _clean(address)
    issue = _clean(issue)
    if not name or not address or not issue:
        raise ReportValidationError(FIELDS_REQUIRED_MESSAGE)
    return name, address, issue


def clean_query(query: str | None) -> str | None:
    """Trimmed lookup query, or None when empty."""
    value = (query or "").strip()
    return value or None
