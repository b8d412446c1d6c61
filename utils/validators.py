"""
utils/validators.py
-------------------
Input validation for the data-access layer.

Two families live here:
    - ``parse_*`` turn raw form strings into typed values.
    - ``require_*`` check already-typed entity fields.

Both raise ``ValidationError`` and never touch the database, so malformed
input is rejected before any write is attempted.
"""

import re
from datetime import date, datetime
from typing import Optional

from dateutil.parser import isoparse

from exceptions import ValidationError

_ISO_DATE = re.compile(r"\d{4}-\d{2}-\d{2}")


# ── PARSERS (form strings -> typed values) ────────────────

def parse_int(raw: Optional[str], field: str) -> int:
    """
    Parse a mandatory integer form value.

    Raises:
        ValidationError: If the value is missing or not an integer.
    """
    if raw is None or not str(raw).strip():
        raise ValidationError(f"Missing {field}")
    try:
        return int(str(raw).strip())
    except ValueError:
        raise ValidationError(f"Invalid {field}: {raw!r}") from None


def parse_count(raw: Optional[str], field: str) -> int:
    """Parse a mandatory non-negative integer (population, deaths, patients)."""
    value = parse_int(raw, field)
    return require_count(value, field)


def parse_optional_int(raw: Optional[str], field: str) -> Optional[int]:
    """An empty form value means absent; anything else must be an integer."""
    if raw is None or not str(raw).strip():
        return None
    return parse_int(raw, field)


def parse_optional_text(raw: Optional[str]) -> Optional[str]:
    """An empty or blank form value means absent."""
    if raw is None:
        return None
    value = raw.strip()
    return value or None


def parse_date(raw: Optional[str], field: str) -> date:
    """
    Parse an ISO calendar date (``YYYY-MM-DD``).

    Raises:
        ValidationError: If the value is missing, not in that format,
            or not a real date (e.g. ``2021-02-30``).
    """
    if raw is None or not _ISO_DATE.fullmatch(raw.strip()):
        raise ValidationError(f"Invalid {field}: use YYYY-MM-DD")
    try:
        return isoparse(raw.strip()).date()
    except ValueError:
        raise ValidationError(f"Invalid {field}: {raw!r} is not a date") from None


# ── CHECKS (typed entity fields) ──────────────────────────

def require_text(value, field: str) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{field} must be a non-empty string")
    return value


def require_int(value, field: str) -> int:
    # bool is an int subclass but never a valid count or id
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"{field} must be an integer")
    return value


def require_count(value, field: str) -> int:
    require_int(value, field)
    if value < 0:
        raise ValidationError(f"{field} must be zero or positive")
    return value


def require_optional_int(value, field: str) -> Optional[int]:
    if value is None:
        return None
    return require_int(value, field)


def require_optional_text(value, field: str) -> Optional[str]:
    """A present optional string must not be empty: absence is ``None`` only."""
    if value is None:
        return None
    return require_text(value, field)


def require_date(value, field: str) -> date:
    # datetime is a date subclass, but DATE columns drop the time part
    if not isinstance(value, date) or isinstance(value, datetime):
        raise ValidationError(f"{field} must be a date")
    return value
