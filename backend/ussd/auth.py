"""
AuthenticationGate — phone number + Quick PIN, then quota.

Order of checks for an authenticating turn:

1. PIN format (exactly four digits).
2. Per-handset lockout: too many rejected PIN attempts recently.
3. Credentials via ``django.contrib.auth.authenticate`` (dispatched to
   ``accounts.backends.QuickPinBackend``).  Every failure is reported
   the same way; the caller never learns whether the phone or the PIN
   was wrong.
4. Daily quota via ``RateLimiter``.  A correct PIN with an exhausted
   quota is still a rejection and binds nothing.

The gate has no side effects on the session or the audit trail; the
gateway performs both based on the returned ``AuthOutcome``.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import timedelta

from django.contrib.auth import authenticate
from django.utils import timezone

from accounts.models import User
from records.validators import is_valid_quick_pin

from .audit import QueryAuditLog
from .models import PIN_FAILURE_SUMMARIES
from .ratelimit import RateLimiter, RateLimitStatus

logger = logging.getLogger(__name__)


class PinLockout:
    """Lockout keyed by phone number, derived from the audit trail."""

    def __init__(
        self,
        audit_log: QueryAuditLog,
        *,
        enabled: bool = True,
        threshold: int = 5,
        window_minutes: int = 15,
    ) -> None:
        self.audit_log = audit_log
        self.enabled = enabled
        self.threshold = threshold
        self.window_minutes = window_minutes

    def is_locked(self, phone_number: str) -> bool:
        if not self.enabled:
            return False
        since = timezone.now() - timedelta(minutes=self.window_minutes)
        failures = self.audit_log.failed_attempts(
            phone_number, since, PIN_FAILURE_SUMMARIES,
        )
        return failures >= self.threshold


class AuthStatus(enum.Enum):
    GRANTED = "granted"
    INVALID_FORMAT = "invalid_format"
    LOCKED_OUT = "locked_out"
    FAILED = "failed"
    RATE_LIMITED = "rate_limited"


@dataclass(frozen=True)
class AuthOutcome:
    status: AuthStatus
    officer: User | None = None
    quota: RateLimitStatus | None = None

    @property
    def granted(self) -> bool:
        return self.status is AuthStatus.GRANTED


class AuthenticationGate:

    def __init__(self, rate_limiter: RateLimiter, lockout: PinLockout) -> None:
        self.rate_limiter = rate_limiter
        self.lockout = lockout

    def authenticate(self, phone_number: str, pin: str, request=None) -> AuthOutcome:
        if not is_valid_quick_pin(pin):
            return AuthOutcome(AuthStatus.INVALID_FORMAT)

        if self.lockout.is_locked(phone_number):
            logger.warning("USSD PIN lockout active for %s", phone_number)
            return AuthOutcome(AuthStatus.LOCKED_OUT)

        officer = authenticate(request, ussd_phone_number=phone_number, password=pin)
        if officer is None:
            logger.warning("USSD authentication failed for %s", phone_number)
            return AuthOutcome(AuthStatus.FAILED)

        quota = self.rate_limiter.check(officer.pk, limit=officer.ussd_daily_limit)
        if not quota.allowed:
            logger.warning(
                "USSD daily limit reached for officer %s (%d)", officer.pk, quota.limit,
            )
            return AuthOutcome(AuthStatus.RATE_LIMITED, officer=officer, quota=quota)

        User.objects.filter(pk=officer.pk).update(ussd_last_used=timezone.now())
        return AuthOutcome(AuthStatus.GRANTED, officer=officer, quota=quota)
