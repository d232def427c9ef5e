from datetime import date, datetime, timedelta, timezone
import calendar
from budget_tracker.utils.constants import (
    DATE_FORMAT, MONTH_FORMAT, WEEK_INTERVALS, MIN_DAY_OF_MONTH, MAX_DAY_OF_MONTH, MAX_YEAR,
)
from budget_tracker.utils.errors import ValidationError

# ── Display date format options ───────────────────────────────────────────────

_STRFTIME_MAP = {
    "MM/DD/YYYY": "%m/%d/%Y",
    "DD/MM/YYYY": "%d/%m/%Y",
    "YYYY-MM-DD": "%Y-%m-%d",
    "DD.MM.YYYY": "%d.%m.%Y",
    "MM-DD-YYYY": "%m-%d-%Y",
}


def today() -> date:
    return date.today()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_date(date_str: str) -> date | None:
    """Parse a date string in YYYY-MM-DD format, returning None on failure."""
    if not date_str:
        return None
    for fmt in ("%Y-%m-%d", "%Y/%m/%d", "%Y.%m.%d"):
        try:
            return datetime.strptime(date_str, fmt).date()
        except ValueError:
            continue
    return None


def coerce_date(value, what: str = "date") -> date:
    """Return value as a plain date. Datetimes lose their time of day."""
    if isinstance(value, datetime):
        return value.date()
    if not isinstance(value, date):
        raise ValidationError(f"Invalid {what}.")
    return value


def format_date(d: date) -> str:
    return d.strftime(DATE_FORMAT)


def format_month(d: date) -> str:
    return d.strftime(MONTH_FORMAT)


def parse_month(month_str: str) -> date | None:
    """Return the first day of the given YYYY-MM month string."""
    if not month_str:
        return None
    try:
        return datetime.strptime(month_str, MONTH_FORMAT).date()
    except ValueError:
        return None


def validate_year_month(year: int, month: int):
    if year < 1 or year > MAX_YEAR:
        raise ValidationError(f"Year must be between 1 and {MAX_YEAR}.")
    if month < 1 or month > 12:
        raise ValidationError("Month must be between 1 and 12.")


def month_key(year: int, month: int) -> str:
    """(2025, 6) -> '2025-06', the storage key for monthly budgets."""
    validate_year_month(year, month)
    return f"{year:04d}-{month:02d}"


def split_month_key(month_str: str) -> tuple[int, int]:
    d = parse_month(month_str)
    if d is None:
        raise ValidationError(f"Invalid month: {month_str}")
    return d.year, d.month


def month_range(year: int, month: int) -> tuple[date, date]:
    """Return (first_day, last_day) of the given month."""
    validate_year_month(year, month)
    last_day = calendar.monthrange(year, month)[1]
    return date(year, month, 1), date(year, month, last_day)


def first_of_next_month(year: int, month: int) -> date:
    validate_year_month(year, month)
    if month == 12:
        return date(year + 1, 1, 1)
    return date(year, month + 1, 1)


def prev_month(month_str: str) -> str:
    d = parse_month(month_str)
    if d is None:
        raise ValueError(f"Invalid month: {month_str}")
    if d.month == 1:
        return format_month(d.replace(year=d.year - 1, month=12))
    return format_month(d.replace(month=d.month - 1))


def next_month(month_str: str) -> str:
    d = parse_month(month_str)
    if d is None:
        raise ValueError(f"Invalid month: {month_str}")
    if d.month == 12:
        return format_month(d.replace(year=d.year + 1, month=1))
    return format_month(d.replace(month=d.month + 1))


def friendly_month(month_str: str) -> str:
    """Convert YYYY-MM to e.g. 'February 2026'."""
    d = parse_month(month_str)
    if d is None:
        return month_str
    return d.strftime("%B %Y")


# ── Recurrence cadence ────────────────────────────────────────────────────────

def clamp_day_of_month(day: int) -> int:
    return max(MIN_DAY_OF_MONTH, min(day, MAX_DAY_OF_MONTH))


def advance(d: date, frequency: str, day_of_month: int | None = None) -> date:
    """Return the occurrence one cadence step after d.

    Monthly moves to the first of the next calendar month, then to
    day_of_month. Days above 28 never occur, so every month has the day.
    """
    try:
        if frequency in WEEK_INTERVALS:
            return d + timedelta(days=WEEK_INTERVALS[frequency])
        if frequency == "monthly":
            day = clamp_day_of_month(day_of_month if day_of_month is not None else d.day)
            y, m = d.year, d.month + 1
            if m > 12:
                y, m = y + 1, 1
            return date(y, m, day)
    except (OverflowError, ValueError):
        raise ValidationError(f"No {frequency} occurrence after {d}: date out of range.") from None
    raise ValidationError(f"Invalid frequency: {frequency}")


def initial_next_run(
    start: date, frequency: str, day_of_month: int | None, ref: date
) -> date:
    """First occurrence on or after ref in the series start, advance(start), ...

    Weekly cadences jump straight to the answer; monthly walks one month at
    a time, so the cost is bounded by the months elapsed since start.
    """
    if start >= ref:
        return start
    if frequency in WEEK_INTERVALS:
        interval = WEEK_INTERVALS[frequency]
        steps = -(-(ref - start).days // interval)
        return start + timedelta(days=steps * interval)
    nxt = start
    while nxt < ref:
        nxt = advance(nxt, frequency, day_of_month)
    return nxt


def occurrences_between(
    first: date, frequency: str, day_of_month: int | None, start: date, end: date
) -> list[date]:
    """Occurrences of the series beginning at `first` that fall in [start, end]."""
    result = []
    current = first
    while current <= end:
        if current >= start:
            result.append(current)
        current = advance(current, frequency, day_of_month)
    return result


# ── Display ───────────────────────────────────────────────────────────────────

def format_display_date(value: date | str, fmt_key: str = "MM/DD/YYYY") -> str:
    """Convert a date (or YYYY-MM-DD string) to the user-facing display format."""
    if not value:
        return ""
    d = value if isinstance(value, date) else parse_date(value)
    if d is None:
        return str(value)
    return d.strftime(_STRFTIME_MAP.get(fmt_key, "%m/%d/%Y"))


def parse_display_date(display_str: str, fmt_key: str) -> date | None:
    """Parse a date in the given display format. Returns None on failure.

    Falls back to ISO 8601 parse if the display format doesn't match.
    """
    if not display_str:
        return None
    fmt = _STRFTIME_MAP.get(fmt_key, "%m/%d/%Y")
    try:
        return datetime.strptime(display_str.strip(), fmt).date()
    except ValueError:
        return parse_date(display_str)
