"""Time utilities for timezone-aware datetimes and form/grid date strings."""

from datetime import UTC, date, datetime


def utc_now() -> datetime:
    """Return a timezone-aware UTC datetime."""
    return datetime.now(UTC)


def today_input() -> str:
    """Today's date as a date-input value (YYYY-MM-DD)."""
    return utc_now().date().isoformat()


def parse_datetime(value) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    text = str(value).strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        return None


def to_date_input(value) -> str:
    """Truncate a timestamp (or date) to the YYYY-MM-DD form an editable date field holds."""
    if value is None or value == "":
        return ""
    if isinstance(value, (datetime, date)):
        return value.strftime("%Y-%m-%d")
    text = str(value).strip()
    for separator in ("T", " "):
        if separator in text:
            text = text.split(separator, 1)[0]
            break
    parsed = parse_datetime(text)
    return parsed.strftime("%Y-%m-%d") if parsed else text


def to_iso_timestamp(value) -> str | None:
    """Render a date-input value as a UTC midnight ISO timestamp (2000-01-31T00:00:00.000Z)."""
    if value is None or value == "":
        return None
    day = to_date_input(value)
    return f"{day}T00:00:00.000Z"


def isoformat_utc(value: datetime) -> str:
    return value.astimezone(UTC).strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def format_display_date(value) -> str:
    parsed = parse_datetime(value)
    return parsed.strftime("%d/%m/%Y") if parsed else ""


def format_display_datetime(value) -> str:
    parsed = parse_datetime(value)
    return parsed.strftime("%d/%m/%Y %H:%M") if parsed else ""
