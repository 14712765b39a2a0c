"""
Records app models.

The narrow slice of the records-management domain that field officers
can query over USSD: persons (keyed by NIN), wanted-person records,
missing-person alerts, vehicles, criminal case records, and the
background checks derived from them.

Fields such as ``Person.address`` and ``Person.criminal_history`` exist
for the web dashboard only.  They must never be rendered on the USSD
channel; ``records.services.RecordLookupService`` returns curated
snapshots instead of model instances for that reason.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone

from core.models import TimeStampedModel

from .validators import normalize_license_plate


# ────────────────────────────────────────────────────────────────────
# Choice enumerations
# ────────────────────────────────────────────────────────────────────

class DangerLevel(models.TextChoices):
    LOW = "low", "Low"
    MEDIUM = "medium", "Medium"
    HIGH = "high", "High"
    EXTREME = "extreme", "Extreme"


class WantedStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    CAPTURED = "captured", "Captured"
    CANCELLED = "cancelled", "Cancelled"


class AlertStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    RESOLVED = "resolved", "Resolved"
    EXPIRED = "expired", "Expired"


class VehicleStatus(models.TextChoices):
    ACTIVE = "active", "Active"
    STOLEN = "stolen", "Stolen"
    IMPOUNDED = "impounded", "Impounded"
    RECOVERED = "recovered", "Recovered"


class VehicleType(models.TextChoices):
    CAR = "car", "Car"
    TRUCK = "truck", "Truck"
    MOTORCYCLE = "motorcycle", "Motorcycle"
    BUS = "bus", "Bus"
    VAN = "van", "Van"
    TRICYCLE = "tricycle", "Tricycle"
    OTHER = "other", "Other"


class CaseSeverity(models.TextChoices):
    MINOR = "minor", "Minor"
    MAJOR = "major", "Major"
    CRITICAL = "critical", "Critical"


class CaseRecordStatus(models.TextChoices):
    OPEN = "open", "Open"
    INVESTIGATING = "investigating", "Investigating"
    CLOSED = "closed", "Closed"


class BackgroundCheckRequestType(models.TextChoices):
    OFFICER = "officer", "Officer"
    CITIZEN = "citizen", "Citizen"
    EMPLOYER = "employer", "Employer"
    VISA = "visa", "Visa"


class BackgroundCheckStatus(models.TextChoices):
    PENDING = "pending", "Pending"
    COMPLETED = "completed", "Completed"
    FAILED = "failed", "Failed"


class RiskLevel(models.TextChoices):
    LOW = "low", "Low"
    MEDIUM = "medium", "Medium"
    HIGH = "high", "High"


# ────────────────────────────────────────────────────────────────────
# Models
# ────────────────────────────────────────────────────────────────────

class Person(TimeStampedModel):
    """An individual known to the system, keyed by National ID (NIN)."""

    national_id = models.CharField(
        max_length=11,
        unique=True,
        null=True,
        blank=True,
        verbose_name="National ID (NIN)",
    )
    first_name = models.CharField(max_length=100)
    middle_name = models.CharField(max_length=100, blank=True, default="")
    last_name = models.CharField(max_length=100)
    date_of_birth = models.DateField(null=True, blank=True)
    gender = models.CharField(max_length=20, blank=True, default="")

    is_wanted = models.BooleanField(default=False, db_index=True)
    wanted_since = models.DateTimeField(null=True, blank=True)
    is_deceased_or_missing = models.BooleanField(default=False)

    # Web-only PII (never on USSD)
    address = models.TextField(blank=True, default="")
    criminal_history = models.TextField(blank=True, default="")

    class Meta:
        verbose_name = "Person"
        verbose_name_plural = "Persons"
        ordering = ["last_name", "first_name"]

    def __str__(self):
        return f"{self.full_name} ({self.national_id or 'no NIN'})"

    @property
    def full_name(self) -> str:
        parts = [self.first_name, self.middle_name, self.last_name]
        return " ".join(p for p in parts if p)


class WantedPerson(TimeStampedModel):
    """An active (or historical) wanted notice against a person."""

    person = models.ForeignKey(
        Person,
        on_delete=models.CASCADE,
        related_name="wanted_records",
    )
    charges = models.JSONField(default=list, blank=True)
    danger_level = models.CharField(
        max_length=10,
        choices=DangerLevel.choices,
        default=DangerLevel.MEDIUM,
    )
    status = models.CharField(
        max_length=10,
        choices=WantedStatus.choices,
        default=WantedStatus.ACTIVE,
        db_index=True,
    )
    warrant_number = models.CharField(max_length=50, blank=True, default="")
    last_seen_location = models.CharField(max_length=255, blank=True, default="")
    captured_at = models.DateTimeField(null=True, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="+",
    )

    class Meta:
        verbose_name = "Wanted Person"
        verbose_name_plural = "Wanted Persons"
        ordering = ["-created_at"]

    def __str__(self):
        return f"Wanted: {self.person.full_name} [{self.status}]"


class MissingPersonAlert(TimeStampedModel):
    """A published missing-person alert, optionally linked to a ``Person``."""

    person = models.ForeignKey(
        Person,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="missing_alerts",
    )
    person_name = models.CharField(max_length=255)
    age = models.PositiveSmallIntegerField(null=True, blank=True)
    gender = models.CharField(max_length=20, blank=True, default="")
    description = models.TextField(blank=True, default="")
    last_seen_location = models.CharField(max_length=255, blank=True, default="")
    last_seen_date = models.DateTimeField(null=True, blank=True)
    contact_phone = models.CharField(max_length=20)
    status = models.CharField(
        max_length=10,
        choices=AlertStatus.choices,
        default=AlertStatus.ACTIVE,
        db_index=True,
    )
    expires_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = "Missing Person Alert"
        verbose_name_plural = "Missing Person Alerts"
        ordering = ["-created_at"]

    def __str__(self):
        return f"Missing: {self.person_name} [{self.status}]"

    @property
    def is_live(self) -> bool:
        """Active and not past its expiry."""
        if self.status != AlertStatus.ACTIVE:
            return False
        return self.expires_at is None or self.expires_at > timezone.now()


class Vehicle(TimeStampedModel):
    """A registered vehicle; ``license_plate`` is stored normalized."""

    license_plate = models.CharField(max_length=12, unique=True)
    owner_nin = models.CharField(max_length=11, blank=True, default="")
    owner_name = models.CharField(max_length=255, blank=True, default="")
    vehicle_type = models.CharField(
        max_length=20,
        choices=VehicleType.choices,
        default=VehicleType.CAR,
    )
    make = models.CharField(max_length=50, blank=True, default="")
    model = models.CharField(max_length=50, blank=True, default="")
    color = models.CharField(max_length=30, blank=True, default="")
    year = models.PositiveSmallIntegerField(null=True, blank=True)
    status = models.CharField(
        max_length=10,
        choices=VehicleStatus.choices,
        default=VehicleStatus.ACTIVE,
        db_index=True,
    )
    stolen_date = models.DateTimeField(null=True, blank=True)
    recovered_date = models.DateTimeField(null=True, blank=True)

    class Meta:
        verbose_name = "Vehicle"
        verbose_name_plural = "Vehicles"
        ordering = ["license_plate"]

    def __str__(self):
        return f"{self.license_plate} ({self.status})"

    def save(self, *args, **kwargs):
        self.license_plate = normalize_license_plate(self.license_plate)
        super().save(*args, **kwargs)

    @property
    def description_line(self) -> str:
        parts = [str(self.year) if self.year else "", self.make, self.model]
        text = " ".join(p for p in parts if p)
        if self.color:
            text = f"{text} ({self.color})" if text else self.color
        return text or self.get_vehicle_type_display()

    def ussd_summary(self) -> str:
        """
        Short status text for a USSD screen (fits well inside 160 chars).
        Owner names only appear for impounded / clean vehicles.
        """
        vtype = self.vehicle_type.upper()
        if self.status == VehicleStatus.STOLEN:
            reported = self.stolen_date.strftime("%d/%m/%Y") if self.stolen_date else "N/A"
            days = (timezone.now() - self.stolen_date).days if self.stolen_date else None
            tail = f"\n{days}d ago" if days is not None else ""
            return (
                f"STOLEN - {self.license_plate}\n{vtype}\n"
                f"{self.description_line}\nReported: {reported}{tail}"
            )
        if self.status == VehicleStatus.IMPOUNDED:
            return (
                f"IMPOUNDED - {self.license_plate}\n{vtype}\n"
                f"Owner: {self.owner_name or 'Unknown'}"
            )
        if self.status == VehicleStatus.RECOVERED:
            recovered = (
                self.recovered_date.strftime("%d/%m/%Y") if self.recovered_date else "N/A"
            )
            return f"RECOVERED - {self.license_plate}\n{vtype}\nRecovered: {recovered}"
        return (
            f"{self.license_plate}\nOwner: {self.owner_name or 'Unknown'}\n"
            f"Type: {vtype}\nStatus: CLEAN"
        )


class CaseRecord(TimeStampedModel):
    """A criminal case a person is linked to (counted by background checks)."""

    person = models.ForeignKey(
        Person,
        on_delete=models.CASCADE,
        related_name="case_records",
    )
    case_number = models.CharField(max_length=50, unique=True)
    category = models.CharField(max_length=100)
    severity = models.CharField(
        max_length=10,
        choices=CaseSeverity.choices,
        default=CaseSeverity.MINOR,
    )
    status = models.CharField(
        max_length=15,
        choices=CaseRecordStatus.choices,
        default=CaseRecordStatus.OPEN,
    )
    incident_date = models.DateField(null=True, blank=True)

    class Meta:
        verbose_name = "Case Record"
        verbose_name_plural = "Case Records"
        ordering = ["-incident_date"]

    def __str__(self):
        return f"{self.case_number} ({self.severity})"


class BackgroundCheck(models.Model):
    """
    The stored outcome of one background check by NIN.

    ``result`` shape::

        {"status": "clear" | "record_found", "message": str,
         "records_count": int, "risk_level": "low" | "medium" | "high" | None}
    """

    nin = models.CharField(max_length=11, db_index=True)
    requested_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="background_checks",
    )
    request_type = models.CharField(
        max_length=10,
        choices=BackgroundCheckRequestType.choices,
        default=BackgroundCheckRequestType.OFFICER,
    )
    result = models.JSONField(default=dict)
    status = models.CharField(
        max_length=10,
        choices=BackgroundCheckStatus.choices,
        default=BackgroundCheckStatus.PENDING,
    )
    issued_at = models.DateTimeField(null=True, blank=True)
    expires_at = models.DateTimeField(null=True, blank=True)
    phone_number = models.CharField(max_length=16, blank=True, default="")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Background Check"
        verbose_name_plural = "Background Checks"
        ordering = ["-created_at"]

    def __str__(self):
        return f"Background check {self.nin} [{self.status}]"
