"""
USSD gateway configuration.

Reads ``settings.USSD`` (see ``backend/settings.py``) into a frozen
``UssdSettings`` value.  Missing keys fall back to the defaults below, so
tests can override a single key with ``override_settings``.
"""

from __future__ import annotations

from dataclasses import dataclass, fields

from django.conf import settings

from core.constants import USSD_DEFAULT_DAILY_LIMIT


@dataclass(frozen=True)
class UssdSettings:
    #: Sliding session lifetime; refreshed on every session write.
    session_ttl_seconds: int = 180
    session_cache_alias: str = "default"
    #: Upper bound on how long one turn may hold a session lock.
    session_lock_timeout_seconds: int = 10
    #: How long a turn waits for a concurrent turn on the same session.
    session_lock_wait_seconds: float = 3
    default_daily_limit: int = USSD_DEFAULT_DAILY_LIMIT
    #: Availability over enforcement when the quota count cannot be computed.
    rate_limit_fail_open: bool = True
    pin_lockout_enabled: bool = True
    pin_lockout_threshold: int = 5
    pin_lockout_window_minutes: int = 15
    #: Screen budget for one reply, prefix included.
    max_response_length: int = 182
    input_separator: str = "*"


def get_ussd_settings() -> UssdSettings:
    raw = getattr(settings, "USSD", {}) or {}
    known = {f.name for f in fields(UssdSettings)}
    values = {
        key.lower(): value
        for key, value in raw.items()
        if key.lower() in known
    }
    return UssdSettings(**values)
