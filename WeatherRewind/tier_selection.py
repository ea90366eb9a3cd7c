"""Tier selection as a pure decision over calendar day distance and configuration."""
from datetime import datetime, tzinfo
from typing import Optional

from weather_data import Tier

ESTIMATE_WINDOW_DAYS = 5


def local_now(tz: Optional[tzinfo] = None) -> datetime:
    """Current time in the reference zone (system local zone when tz is None)."""
    if tz is None:
        return datetime.now().astimezone()
    return datetime.now(tz)


def days_difference(target: datetime, now: datetime, tz: Optional[tzinfo] = None) -> int:
    """
    Whole calendar days from the target's date back to today's date.

    Both instants are read as dates in the reference zone, so 23:59 yesterday
    and 00:01 yesterday are both 1. Future targets give negative values.
    Naive datetimes are taken to already be in the reference zone.
    """
    return (_local_date(now, tz) - _local_date(target, tz)).days


def _local_date(moment: datetime, tz: Optional[tzinfo]):
    if moment.tzinfo is None:
        return moment.date()
    if tz is None:
        return moment.astimezone().date()
    return moment.astimezone(tz).date()


def select_tier(days: int, historical_enabled: bool, window_days: int = ESTIMATE_WINDOW_DAYS) -> Tier:
    """
    Decide which strategy answers a request `days` calendar days in the past.

    The historical tier is only a first attempt; a failure there falls back to
    Tier.ESTIMATED, which the orchestrator handles.
    """
    if days <= 0:
        return Tier.LIVE
    if days <= window_days:
        return Tier.PROVIDER_HISTORICAL if historical_enabled else Tier.ESTIMATED
    return Tier.SYNTHETIC
