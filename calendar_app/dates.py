from datetime import date, datetime, time, timedelta

from django.utils import timezone

# Dates the grids can page around without week/day arithmetic or
# timezone conversion running off the ends of the datetime range.
MIN_CALENDAR_DATE = date(1900, 1, 1)
MAX_CALENDAR_DATE = date(9998, 12, 31)

def in_calendar_range(d: date) -> bool:
    return MIN_CALENDAR_DATE <= d <= MAX_CALENDAR_DATE

def parse_ymd(date_str: str | None, default: date | None = None) -> date:
    """
    Parse YYYY-MM-DD into a date.

    Missing, malformed or out-of-range input (see MIN_CALENDAR_DATE /
    MAX_CALENDAR_DATE) gives back default, or today when no default is passed.
    """
    if default is None:
        default = timezone.localdate()

    if not date_str:
        return default

    try:
        parsed = parse_ymd_strict(date_str)
    except ValueError:
        return default

    return parsed

def parse_ymd_strict(date_str: str | None) -> date:
    """Like parse_ymd, but raises ValueError instead of falling back."""
    parsed = datetime.strptime(date_str or "", "%Y-%m-%d").date()
    if not in_calendar_range(parsed):
        raise ValueError(f"{parsed} is outside {MIN_CALENDAR_DATE} .. {MAX_CALENDAR_DATE}")
    return parsed

def aware_range(start_d: date, end_d: date) -> tuple[datetime, datetime]:
    """
    Convert an inclusive date range [start_d, end_d] into an *aware* datetime range.

    Returns:
        (start_dt, end_dt) where:
        - start_dt = start_d at 00:00:00 (timezone-aware)
        - end_dt   = end_d at 23:59:59.999999 (timezone-aware)
    """
    start_dt = timezone.make_aware(datetime.combine(start_d, time.min))
    end_dt = timezone.make_aware(datetime.combine(end_d, time.max))
    return start_dt, end_dt

def week_label(week_start: date) -> str:
    """
    Header label for a Monday-first week, e.g.
      "March 2 - 8, 2026", "March 30 - April 5, 2026", "December 28, 2026 - January 3, 2027"
    """
    week_end = week_start + timedelta(days=6)
    if week_start.year != week_end.year:
        return f"{week_start:%B} {week_start.day}, {week_start.year} - {week_end:%B} {week_end.day}, {week_end.year}"
    if week_start.month != week_end.month:
        return f"{week_start:%B} {week_start.day} - {week_end:%B} {week_end.day}, {week_end.year}"
    return f"{week_start:%B} {week_start.day} - {week_end.day}, {week_end.year}"
