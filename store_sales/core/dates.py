import re
from datetime import date, datetime

_YEAR_MONTH_RE = re.compile(r"^(\d{4})-(\d{2})$")


def normalize_date(value):
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        value_text = value.strip()
        if not value_text:
            return None
        match = _YEAR_MONTH_RE.match(value_text)
        if match:
            try:
                return date(int(match.group(1)), int(match.group(2)), 1)
            except ValueError:
                return None
        try:
            return date.fromisoformat(value_text[:10])
        except ValueError:
            return None
    return None


def first_of_month(value):
    """Bucket date for a sale: the first day of the month ``value`` falls in."""
    day = normalize_date(value)
    if day is None:
        return None
    return day.replace(day=1)


def month_key(value) -> str:
    day = normalize_date(value)
    if day is None:
        raise ValueError("Invalid month value: {!r}".format(value))
    return "{:04d}-{:02d}".format(day.year, day.month)


def month_label(key: str) -> str:
    """'2024-03' -> 'March 2024'."""
    year, month = key.split("-")
    return date(int(year), int(month), 1).strftime("%B %Y")


def current_month_key() -> str:
    return month_key(date.today())
