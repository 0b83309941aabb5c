"""Date parsing and calendar stepping utilities."""

from datetime import date, datetime, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

from fintrack.domain.errors import ValidationError

_FREQUENCY_STEPS = {
    "daily": lambda n: relativedelta(days=n),
    "weekly": lambda n: relativedelta(weeks=n),
    "monthly": lambda n: relativedelta(months=n),
    "yearly": lambda n: relativedelta(years=n),
}


def parse_date(value) -> date:
    """Parse a date from user input or a request payload.

    Supports:
    - date and datetime objects (datetimes are truncated to their date)
    - ISO strings: "2024-01-15", "2024-01-15T00:00:00.000Z"
    - Relative words: "today", "yesterday", "tomorrow"
    - Anything else dateutil understands ("January 15, 2024")

    Raises:
        ValidationError: If the value cannot be parsed
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"Could not parse date {value!r}")

    text = value.strip().lower()
    today = date.today()
    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
        "tomorrow": today + timedelta(days=1),
    }
    if text in relative_dates:
        return relative_dates[text]

    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    try:
        return date_parser.isoparse(value.strip()).date()
    except ValueError:
        pass

    try:
        return date_parser.parse(text).date()
    except (ValueError, OverflowError) as e:
        raise ValidationError(f"Could not parse date '{value}': {e}")


def shift_date(anchor: date, frequency: str, steps: int) -> date:
    """Return ``anchor`` moved forward by ``steps`` units of ``frequency``.

    Stepping is always computed from the anchor, so month ends clamp
    instead of drifting: Jan 31 + 1 month is Feb 29 (leap year), and
    Jan 31 + 2 months is Mar 31.

    Raises:
        ValidationError: If frequency is not recognized
    """
    try:
        step = _FREQUENCY_STEPS[frequency]
    except KeyError:
        raise ValidationError(
            f"Unknown frequency: '{frequency}'. Supported: {', '.join(_FREQUENCY_STEPS)}"
        )
    return anchor + step(steps)


def month_bounds(day: date) -> tuple[date, date]:
    """Return the first and last day of the month containing ``day``."""
    start = day.replace(day=1)
    end = start + relativedelta(months=1) - timedelta(days=1)
    return (start, end)
