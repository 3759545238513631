"""Time utilities for the domain layer."""

from datetime import date, datetime, timezone, tzinfo


def utc_now() -> datetime:
    """Return current UTC datetime (timezone-aware)."""
    return datetime.now(tz=timezone.utc)


def today_in(tz: tzinfo) -> date:
    """Return the current calendar date in the given timezone."""
    return datetime.now(tz=tz).date()


def years_before(day: date, years: int) -> date:
    """Return the same calendar day `years` years earlier.

    29 February maps to 28 February when the target year is not a leap year.
    """
    try:
        return day.replace(year=day.year - years)
    except ValueError:
        return day.replace(year=day.year - years, day=28)
