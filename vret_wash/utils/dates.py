"""Calendar helpers for Sunday-anchored WASH weeks."""

from datetime import date, datetime, timedelta, timezone


def parse_iso_date(value):
    """Parse a YYYY-MM-DD string (or pass a date through)."""
    if isinstance(value, date):
        return value
    return datetime.strptime(value, '%Y-%m-%d').date()


def week_start_for(day):
    """Return the Sunday that opens the week containing ``day``."""
    day = parse_iso_date(day)
    return day - timedelta(days=(day.weekday() + 1) % 7)


def next_week_start(week_start):
    return parse_iso_date(week_start) + timedelta(days=7)


def week_days(week_start):
    """The seven dates of the week, Sunday first."""
    start = parse_iso_date(week_start)
    return [start + timedelta(days=offset) for offset in range(7)]


def format_long_date(value):
    """'Monday, January 5, 2026'"""
    day = parse_iso_date(value)
    return f"{day.strftime('%A, %B')} {day.day}, {day.year}"


def format_week_range(week_start, week_end=None):
    """'Jan 4 - Jan 10, 2026'"""
    start = parse_iso_date(week_start)
    end = parse_iso_date(week_end) if week_end else start + timedelta(days=6)
    return f"{start.strftime('%b')} {start.day} - {end.strftime('%b')} {end.day}, {end.year}"


def utc_now_iso():
    """Current UTC time as an ISO-8601 string with millisecond precision."""
    now = datetime.now(timezone.utc)
    return now.strftime('%Y-%m-%dT%H:%M:%S.') + f"{now.microsecond // 1000:03d}Z"
