"""
USSD app models.

``QueryLog`` is the append-only audit trail of the USSD gateway.  It is
also the single source of truth for derived state: the daily quota
(``ussd.ratelimit``), officer/station statistics (``ussd.audit``), the
PIN lockout (``ussd.auth``) and abuse heuristics (``ussd.abuse``) are all
computed from it rather than stored.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone

from core.domain.exceptions import DomainError
from core.permissions_constants import UssdPerms


# ────────────────────────────────────────────────────────────────────
# Choice enumerations
# ────────────────────────────────────────────────────────────────────

class QueryType(models.TextChoices):
    WANTED = "wanted", "Wanted Person Check"
    MISSING = "missing", "Missing Person Check"
    BACKGROUND = "background", "Background Summary"
    VEHICLE = "vehicle", "Vehicle Check"
    STATS = "stats", "My Stats"


class Feature(models.TextChoices):
    """
    Main-menu selections.  The value is the digit the officer keys in,
    which is what the session stores as ``selected_feature``.
    """

    WANTED = "1", "Wanted Person Check"
    MISSING = "2", "Missing Person Check"
    BACKGROUND = "3", "Background Summary"
    VEHICLE = "4", "Vehicle Check"
    STATS = "5", "My Stats"

    @property
    def query_type(self) -> "QueryType":
        return FEATURE_QUERY_TYPES[self]


FEATURE_QUERY_TYPES = {
    Feature.WANTED: QueryType.WANTED,
    Feature.MISSING: QueryType.MISSING,
    Feature.BACKGROUND: QueryType.BACKGROUND,
    Feature.VEHICLE: QueryType.VEHICLE,
    Feature.STATS: QueryType.STATS,
}


class ResultSummary(models.TextChoices):
    """Closed, PII-free vocabulary stored on every audit entry."""

    # Domain outcomes
    WANTED = "WANTED", "Wanted"
    NOT_WANTED = "NOT_WANTED", "Not wanted"
    NOT_FOUND = "NOT_FOUND", "Not found"
    MISSING = "MISSING", "Missing"
    NOT_MISSING = "NOT_MISSING", "Not missing"
    CLEAR = "CLEAR", "Clear"
    RECORD_FOUND = "RECORD_FOUND", "Record found"
    ACTIVE = "ACTIVE", "Vehicle active"
    STOLEN = "STOLEN", "Vehicle stolen"
    IMPOUNDED = "IMPOUNDED", "Vehicle impounded"
    RECOVERED = "RECOVERED", "Vehicle recovered"
    OK = "OK", "OK"
    # Rejections
    INVALID_NIN = "INVALID_NIN", "Invalid NIN"
    INVALID_PLATE = "INVALID_PLATE", "Invalid license plate"
    INVALID_OPTION = "INVALID_OPTION", "Invalid menu option"
    INVALID_PIN = "INVALID_PIN", "Invalid PIN format"
    INVALID_REQUEST = "INVALID_REQUEST", "Invalid request"
    AUTH_FAILED = "AUTH_FAILED", "Authentication failed"
    LOCKED_OUT = "LOCKED_OUT", "Locked out"
    RATE_LIMITED = "RATE_LIMITED", "Daily limit reached"
    SESSION_BUSY = "SESSION_BUSY", "Session busy"
    ERROR = "ERROR", "Error"


#: Summaries that count as a failed PIN attempt for the lockout.
PIN_FAILURE_SUMMARIES = (ResultSummary.AUTH_FAILED, ResultSummary.INVALID_PIN)


# ────────────────────────────────────────────────────────────────────
# Audit log
# ────────────────────────────────────────────────────────────────────

class QueryLogQuerySet(models.QuerySet):
    """Bulk mutation is refused; the audit trail only grows."""

    def update(self, **kwargs):
        raise DomainError("USSD query log entries cannot be modified.")

    def delete(self):
        raise DomainError("USSD query log entries cannot be deleted.")


class QueryLog(models.Model):
    """
    One resolved USSD attempt.

    ``officer`` is null only when the caller's identity was never
    established (bad option, bad PIN, failed authentication, lockout).
    ``search_term`` keeps the raw NIN / plate / ``"self"`` for
    accountability; the PIN is never stored.
    """

    officer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="ussd_queries",
    )
    phone_number = models.CharField(max_length=16)
    query_type = models.CharField(
        max_length=12,
        choices=QueryType.choices,
        null=True,
        blank=True,
    )
    search_term = models.CharField(max_length=64, blank=True, default="")
    result_summary = models.CharField(
        max_length=20,
        choices=ResultSummary.choices,
    )
    success = models.BooleanField(default=True)
    error_message = models.CharField(max_length=255, blank=True, default="")
    session_id = models.CharField(max_length=128, blank=True, default="")
    timestamp = models.DateTimeField(default=timezone.now)

    objects = QueryLogQuerySet.as_manager()

    class Meta:
        verbose_name = "USSD Query Log"
        verbose_name_plural = "USSD Query Logs"
        ordering = ["-timestamp", "-id"]
        indexes = [
            models.Index(fields=["officer", "timestamp"], name="ussd_qlog_officer_ts_idx"),
            models.Index(fields=["phone_number", "timestamp"], name="ussd_qlog_phone_ts_idx"),
            models.Index(fields=["query_type"], name="ussd_qlog_type_idx"),
            models.Index(fields=["timestamp"], name="ussd_qlog_ts_idx"),
        ]
        permissions = [
            (UssdPerms.CAN_VIEW_USSD_AUDIT, "Can view USSD statistics and abuse reports"),
        ]

    def __str__(self):
        who = self.officer_id or self.phone_number
        return f"{self.query_type or '-'} by {who} → {self.result_summary}"

    def save(self, *args, **kwargs):
        if not self._state.adding:
            raise DomainError("USSD query log entries cannot be modified.")
        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise DomainError("USSD query log entries cannot be deleted.")
