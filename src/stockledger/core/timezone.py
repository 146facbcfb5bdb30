"""Timezone utilities for store-local time."""

from datetime import datetime

import pytz

from stockledger.config.settings import get_settings


def get_store_tz() -> pytz.BaseTzInfo:
    """Return the configured store timezone."""
    return pytz.timezone(get_settings().timezone)


def now_local() -> datetime:
    """Return current time in the store timezone."""
    return datetime.now(get_store_tz())


def to_local(dt: datetime) -> datetime:
    """Convert a datetime to the store timezone."""
    tz = get_store_tz()
    if dt.tzinfo is None:
        # Naive datetimes come back from the store already in local time
        return tz.localize(dt)
    return dt.astimezone(tz)


def to_naive_local(dt: datetime) -> datetime:
    """Convert a datetime to a naive store-local datetime for persistence."""
    return to_local(dt).replace(tzinfo=None)


def start_of_day(dt: datetime) -> datetime:
    """Return local midnight of the day containing dt."""
    local = to_local(dt)
    return get_store_tz().localize(datetime(local.year, local.month, local.day))


def start_of_month(dt: datetime) -> datetime:
    """Return local midnight of the first day of the month containing dt."""
    local = to_local(dt)
    return get_store_tz().localize(datetime(local.year, local.month, 1))
