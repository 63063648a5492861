"""Wall-clock helpers bound to the configured business timezone."""

from datetime import datetime

import pytz

DEFAULT_TIMEZONE = "America/Bogota"

tz = pytz.timezone(DEFAULT_TIMEZONE)


def configure(timezone: str) -> None:
    """Bind the clock to the timezone of the running application."""
    global tz
    tz = pytz.timezone(timezone)


def now_local() -> datetime:
    """Current naive wall-clock time in the business timezone."""
    return datetime.now(tz).replace(tzinfo=None, microsecond=0)


def current_period() -> tuple[int, int]:
    """(month, year) of the current affiliation period."""
    now = now_local()
    return now.month, now.year


def previous_period(month: int, year: int) -> tuple[int, int]:
    if month == 1:
        return 12, year - 1
    return month - 1, year
