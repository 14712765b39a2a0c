"""
Per-officer daily query quota.

The quota is derived, not stored: an officer may run another query while
their ``QueryLog`` count since local midnight is below their daily limit.

``fail_open`` decides what happens when that count cannot be computed:
``True`` keeps the service available (``allowed=True, remaining=0``),
``False`` refuses the query.  Either way the error is logged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime

from django.utils import timezone

from .audit import QueryAuditLog
from .conf import UssdSettings, get_ussd_settings
from .periods import local_midnight, next_local_midnight

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RateLimitStatus:
    allowed: bool
    remaining: int
    limit: int
    reset_at: datetime


class RateLimiter:

    def __init__(
        self,
        audit_log: QueryAuditLog,
        *,
        default_limit: int = 50,
        fail_open: bool = True,
    ) -> None:
        self.audit_log = audit_log
        self.default_limit = default_limit
        self.fail_open = fail_open

    @classmethod
    def from_settings(
        cls, audit_log: QueryAuditLog, conf: UssdSettings | None = None,
    ) -> RateLimiter:
        conf = conf or get_ussd_settings()
        return cls(
            audit_log,
            default_limit=conf.default_daily_limit,
            fail_open=conf.rate_limit_fail_open,
        )

    def check(self, officer_id: int, limit: int | None = None) -> RateLimitStatus:
        now = timezone.now()
        limit = self.default_limit if limit is None else limit
        reset_at = next_local_midnight(now)
        try:
            used = self.audit_log.count_since(officer_id, local_midnight(now))
        except Exception:
            logger.exception(
                "USSD quota count failed for officer %s; failing %s",
                officer_id, "open" if self.fail_open else "closed",
            )
            return RateLimitStatus(
                allowed=self.fail_open, remaining=0, limit=limit, reset_at=reset_at,
            )
        remaining = max(limit - used, 0)
        return RateLimitStatus(
            allowed=used < limit, remaining=remaining, limit=limit, reset_at=reset_at,
        )
