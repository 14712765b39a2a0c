"""
Records app Service Layer.

The **only** entry point the USSD gateway uses to read records.  Each
lookup returns a small frozen snapshot holding exactly the fields a USSD
screen may show, never a model instance, so no handler can accidentally
render an address or criminal-history text onto the narrow channel.

Architecture
------------
- ``RecordLookupService``    — person / wanted / missing-alert / vehicle
                               lookups (read-only).
- ``BackgroundCheckService`` — runs and persists a background check by
                               NIN, classifying risk from linked cases.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from django.db.models import Q
from django.utils import timezone

from core.constants import BACKGROUND_CHECK_VALIDITY_DAYS
from core.domain.exceptions import DomainError

from .models import (
    AlertStatus,
    BackgroundCheck,
    BackgroundCheckRequestType,
    BackgroundCheckStatus,
    CaseRecord,
    CaseSeverity,
    MissingPersonAlert,
    Person,
    RiskLevel,
    Vehicle,
    WantedPerson,
    WantedStatus,
)
from .validators import is_valid_nin, normalize_license_plate

logger = logging.getLogger(__name__)


# ════════════════════════════════════════════════════════════════════
#  Curated snapshots
# ════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class PersonSnapshot:
    id: int
    full_name: str
    is_wanted: bool
    is_deceased_or_missing: bool


@dataclass(frozen=True)
class WantedSnapshot:
    charges: tuple[str, ...]
    danger_level: str
    warrant_number: str


@dataclass(frozen=True)
class MissingAlertSnapshot:
    person_name: str
    last_seen_location: str
    last_seen_date: datetime | None
    contact_phone: str


@dataclass(frozen=True)
class VehicleSnapshot:
    license_plate: str
    status: str
    summary: str


@dataclass(frozen=True)
class BackgroundCheckOutcome:
    status: str
    records_count: int
    risk_level: str | None
    message: str = ""
    check_id: int | None = field(default=None, compare=False)


# ════════════════════════════════════════════════════════════════════
#  Lookups
# ════════════════════════════════════════════════════════════════════

class RecordLookupService:
    """
    Read-only lookups used by the USSD feature handlers.

    All methods are static; the class only groups them and gives tests
    a single seam to patch.
    """

    @staticmethod
    def find_person_by_nin(nin: str) -> PersonSnapshot | None:
        """Return identity + wanted flag for a NIN, or ``None``."""
        person = (
            Person.objects
            .only("id", "first_name", "middle_name", "last_name",
                  "is_wanted", "is_deceased_or_missing")
            .filter(national_id=nin)
            .first()
        )
        if person is None:
            return None
        return PersonSnapshot(
            id=person.id,
            full_name=person.full_name,
            is_wanted=person.is_wanted,
            is_deceased_or_missing=person.is_deceased_or_missing,
        )

    @staticmethod
    def find_active_wanted_record(person_id: int) -> WantedSnapshot | None:
        """Most recent *active* wanted notice for a person."""
        record = (
            WantedPerson.objects
            .filter(person_id=person_id, status=WantedStatus.ACTIVE)
            .order_by("-created_at", "-id")
            .first()
        )
        if record is None:
            return None
        return WantedSnapshot(
            charges=tuple(str(c) for c in (record.charges or [])),
            danger_level=record.danger_level,
            warrant_number=record.warrant_number,
        )

    @staticmethod
    def find_active_missing_alert(person_id: int) -> MissingAlertSnapshot | None:
        """Most recent live missing-person alert linked to a person."""
        now = timezone.now()
        alert = (
            MissingPersonAlert.objects
            .filter(person_id=person_id, status=AlertStatus.ACTIVE)
            .filter(Q(expires_at__isnull=True) | Q(expires_at__gt=now))
            .order_by("-created_at", "-id")
            .first()
        )
        if alert is None:
            return None
        return MissingAlertSnapshot(
            person_name=alert.person_name,
            last_seen_location=alert.last_seen_location,
            last_seen_date=alert.last_seen_date,
            contact_phone=alert.contact_phone,
        )

    @staticmethod
    def find_vehicle_by_plate(plate: str) -> VehicleSnapshot | None:
        """Look a vehicle up by plate (normalized before querying)."""
        vehicle = Vehicle.objects.filter(
            license_plate=normalize_license_plate(plate),
        ).first()
        if vehicle is None:
            return None
        return VehicleSnapshot(
            license_plate=vehicle.license_plate,
            status=vehicle.status,
            summary=vehicle.ussd_summary(),
        )


# ════════════════════════════════════════════════════════════════════
#  Background checks
# ════════════════════════════════════════════════════════════════════

class BackgroundCheckService:
    """
    Runs a background check for a NIN and stores the result.

    Risk classification from linked ``CaseRecord`` severities:
        any critical → high, else any major → medium, else low.
    A NIN with no person or no cases is ``clear``.
    """

    @staticmethod
    def classify_risk(severities: list[str]) -> str:
        if CaseSeverity.CRITICAL in severities:
            return RiskLevel.HIGH
        if CaseSeverity.MAJOR in severities:
            return RiskLevel.MEDIUM
        return RiskLevel.LOW

    @classmethod
    def perform(
        cls,
        nin: str,
        *,
        requested_by_id: int | None = None,
        request_type: str = BackgroundCheckRequestType.OFFICER,
        phone_number: str = "",
    ) -> BackgroundCheckOutcome:
        """
        Execute and persist a background check.

        Raises
        ------
        core.domain.exceptions.DomainError
            If ``nin`` is not an 11-digit NIN.
        """
        if not is_valid_nin(nin):
            raise DomainError("NIN must be exactly 11 digits.")

        person = Person.objects.filter(national_id=nin).only("id").first()
        severities: list[str] = []
        if person is not None:
            severities = list(
                CaseRecord.objects
                .filter(person_id=person.id)
                .values_list("severity", flat=True)
            )

        if person is None:
            result = {
                "status": "clear",
                "message": "No records found for this NIN",
                "records_count": 0,
                "risk_level": None,
            }
        elif not severities:
            result = {
                "status": "clear",
                "message": "No criminal records found",
                "records_count": 0,
                "risk_level": RiskLevel.LOW.value,
            }
        else:
            result = {
                "status": "record_found",
                "message": f"{len(severities)} criminal record(s) found",
                "records_count": len(severities),
                "risk_level": str(cls.classify_risk(severities)),
            }

        now = timezone.now()
        check = BackgroundCheck.objects.create(
            nin=nin,
            requested_by_id=requested_by_id,
            request_type=request_type,
            result=result,
            status=BackgroundCheckStatus.COMPLETED,
            issued_at=now,
            expires_at=now + timedelta(days=BACKGROUND_CHECK_VALIDITY_DAYS),
            phone_number=phone_number,
        )
        logger.info(
            "Background check %s completed: %s (%d records)",
            check.pk, result["status"], result["records_count"],
        )
        return BackgroundCheckOutcome(
            status=result["status"],
            records_count=result["records_count"],
            risk_level=result["risk_level"],
            message=result["message"],
            check_id=check.pk,
        )
