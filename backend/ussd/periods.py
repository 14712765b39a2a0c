"""Local-time period boundaries used by quotas and statistics."""

from __future__ import annotations

from datetime import datetime, timedelta

from django.utils import timezone


def _local(now: datetime | None) -> datetime:
    return timezone.localtime(now or timezone.now())


def local_midnight(now: datetime | None = None) -> datetime:
    """Start of the current day in ``settings.TIME_ZONE``."""
    return _local(now).replace(hour=0, minute=0, second=0, microsecond=0)


def next_local_midnight(now: datetime | None = None) -> datetime:
    """When today's quota resets."""
    return local_midnight(now) + timedelta(days=1)


def start_of_month(now: datetime | None = None) -> datetime:
    return local_midnight(now).replace(day=1)


def rolling_days(days: int, now: datetime | None = None) -> datetime:
    return (now or timezone.now()) - timedelta(days=days)
