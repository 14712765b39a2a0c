"""
USSD app Service Layer (operator side).

The webhook itself is served by ``ussd.gateway``; this module holds the
business logic behind the JSON endpoints used by officers and station
commanders to manage USSD access and read the audit trail.

Architecture
------------
- ``UssdOfficerService``    — phone registration, enable/disable,
                              Quick PIN reset.
- ``UssdMonitoringService`` — officer statistics + quota + abuse report,
                              recent audit entries, station statistics.

Permission checks live here, not in the views, and raise
``core.domain.exceptions.PermissionDenied`` (mapped to 403).
"""

from __future__ import annotations

import logging
import secrets
from dataclasses import dataclass
from typing import Any

from django.contrib.auth import authenticate
from django.db import IntegrityError, transaction
from django.db.models import QuerySet
from django.utils import timezone

from accounts.models import Station, User
from core.domain.exceptions import (
    Conflict,
    DomainError,
    InvalidTransition,
    NotFound,
    PermissionDenied,
)
from core.domain.transactions import lock_for_update, locked_update
from core.permissions_constants import AccountsPerms, UssdPerms
from records.validators import is_valid_quick_pin

from .abuse import AbuseDetector
from .audit import QueryAuditLog
from .ratelimit import RateLimiter

logger = logging.getLogger(__name__)

MANAGE_PERM = f"accounts.{AccountsPerms.CAN_MANAGE_USSD_OFFICERS}"
AUDIT_PERM = f"ussd.{UssdPerms.CAN_VIEW_USSD_AUDIT}"


def generate_quick_pin() -> str:
    """Random 4-digit PIN in 1000–9999 (never a leading zero)."""
    return str(1000 + secrets.randbelow(9000))


def _require(user: User, perm: str, message: str) -> None:
    if not user.has_perm(perm):
        raise PermissionDenied(message)


@dataclass(frozen=True)
class PinIssued:
    """A freshly set Quick PIN; ``quick_pin`` is shown exactly once."""

    officer: User
    quick_pin: str


# ═══════════════════════════════════════════════════════════════════
#  Officer management
# ═══════════════════════════════════════════════════════════════════


class UssdOfficerService:
    """Binds phones to officers and manages their USSD access."""

    @staticmethod
    def register_phone(
        identifier: str,
        password: str,
        phone_number: str,
        request=None,
    ) -> PinIssued:
        """
        Bind ``phone_number`` to the officer identified by
        ``identifier`` + ``password`` and issue a new Quick PIN.

        Re-registering the same officer replaces the previous binding
        and PIN.  USSD access is enabled on registration.

        Raises
        ------
        DomainError
            Invalid credentials.
        Conflict
            The phone is already bound to another officer.
        """
        user = authenticate(request, identifier=identifier, password=password)
        if user is None:
            raise DomainError("Invalid credentials.")

        taken = (
            User.objects
            .filter(ussd_phone_number=phone_number)
            .exclude(pk=user.pk)
            .exists()
        )
        if taken:
            raise Conflict("Phone number already registered to another officer.")

        quick_pin = generate_quick_pin()
        try:
            with transaction.atomic():
                officer = lock_for_update(User, user.pk)
                officer.set_quick_pin(quick_pin)
                officer.ussd_phone_number = phone_number
                officer.ussd_enabled = True
                officer.ussd_registered_at = timezone.now()
                officer.save(update_fields=[
                    "ussd_phone_number",
                    "ussd_quick_pin_hash",
                    "ussd_enabled",
                    "ussd_registered_at",
                ])
        except IntegrityError:
            raise Conflict("Phone number already registered to another officer.")

        logger.info("Officer %s registered a phone for USSD", officer.pk)
        return PinIssued(officer=officer, quick_pin=quick_pin)

    @staticmethod
    def list_officers(requesting_user: User) -> QuerySet[User]:
        _require(
            requesting_user, MANAGE_PERM,
            "You do not have permission to view USSD officers.",
        )
        return (
            User.objects
            .select_related("station", "role")
            .filter(ussd_phone_number__isnull=False)
            .order_by("badge_number", "id")
        )

    @staticmethod
    def get_officer(officer_id: int) -> User:
        try:
            return User.objects.select_related("station").get(pk=officer_id)
        except User.DoesNotExist:
            raise NotFound(f"Officer with id {officer_id} not found.")

    @classmethod
    def toggle_access(cls, officer_id: int, requesting_user: User) -> User:
        """
        Flip ``ussd_enabled``.

        Raises
        ------
        InvalidTransition
            Enabling an officer who never registered a phone.
        """
        _require(
            requesting_user, MANAGE_PERM,
            "You do not have permission to manage USSD access.",
        )
        officer = cls.get_officer(officer_id)
        if not officer.ussd_phone_number and not officer.ussd_enabled:
            raise InvalidTransition(
                current="unregistered",
                target="enabled",
                reason="Officer must be registered for USSD first",
            )
        officer = locked_update(User, officer.pk, ussd_enabled=not officer.ussd_enabled)
        logger.info(
            "USSD access %s for officer %s by user %s",
            "enabled" if officer.ussd_enabled else "disabled",
            officer.pk, requesting_user.pk,
        )
        return officer

    @classmethod
    def reset_pin(
        cls,
        officer_id: int,
        requesting_user: User,
        new_pin: str | None = None,
    ) -> PinIssued:
        """
        Replace an officer's Quick PIN with ``new_pin`` or a random one.

        Raises
        ------
        InvalidTransition
            The officer has no USSD phone binding.
        DomainError
            ``new_pin`` is not four digits.
        """
        _require(
            requesting_user, MANAGE_PERM,
            "You do not have permission to reset Quick PINs.",
        )
        officer = cls.get_officer(officer_id)
        if not officer.ussd_phone_number:
            raise InvalidTransition(
                current="unregistered",
                target="pin_reset",
                reason="Officer does not have USSD configured",
            )
        if new_pin and not is_valid_quick_pin(new_pin):
            raise DomainError("Invalid Quick PIN format. Must be 4 digits.")

        quick_pin = new_pin or generate_quick_pin()
        with transaction.atomic():
            officer = lock_for_update(User, officer.pk)
            officer.set_quick_pin(quick_pin)
            officer.save(update_fields=["ussd_quick_pin_hash"])

        logger.info(
            "User %s reset the Quick PIN of officer %s", requesting_user.pk, officer.pk,
        )
        return PinIssued(officer=officer, quick_pin=quick_pin)


# ═══════════════════════════════════════════════════════════════════
#  Monitoring
# ═══════════════════════════════════════════════════════════════════


class UssdMonitoringService:
    """Read-only views over the USSD audit trail."""

    audit_log_class = QueryAuditLog

    @classmethod
    def officer_report(cls, officer_id: int, requesting_user: User) -> dict[str, Any]:
        """
        Statistics, today's quota and the abuse scan for one officer.

        Officers may always read their own report; everyone else needs
        ``ussd.can_view_ussd_audit``.
        """
        if requesting_user.pk != officer_id:
            _require(
                requesting_user, AUDIT_PERM,
                "You do not have permission to view this officer's USSD activity.",
            )
        officer = UssdOfficerService.get_officer(officer_id)
        audit_log = cls.audit_log_class()
        limiter = RateLimiter.from_settings(audit_log)
        return {
            "officer": officer,
            "statistics": audit_log.statistics(officer.pk),
            "quota": limiter.check(officer.pk, limit=officer.ussd_daily_limit),
            "abuse": AbuseDetector(audit_log).report(officer.pk),
        }

    @classmethod
    def recent_queries(
        cls,
        requesting_user: User,
        officer_id: int | None = None,
        limit: int = 50,
    ):
        _require(
            requesting_user, AUDIT_PERM,
            "You do not have permission to view the USSD audit log.",
        )
        return cls.audit_log_class().recent(officer_id=officer_id, limit=limit)

    @classmethod
    def station_report(cls, station_id: int, requesting_user: User):
        _require(
            requesting_user, AUDIT_PERM,
            "You do not have permission to view station USSD statistics.",
        )
        if not Station.objects.filter(pk=station_id).exists():
            raise NotFound(f"Station with id {station_id} not found.")
        return cls.audit_log_class().station_statistics(station_id)
