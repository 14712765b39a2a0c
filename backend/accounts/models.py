"""
Accounts app models.

Defines the dynamic Role system, police ``Station`` records, and the
custom ``User`` model that doubles as the officer directory.  An officer
becomes reachable over USSD once a phone number and Quick PIN hash are
bound to their account (``ussd_*`` fields) and ``ussd_enabled`` is set.
"""

from django.contrib.auth.hashers import check_password, make_password
from django.contrib.auth.models import AbstractUser, Permission
from django.db import models

from core.constants import USSD_DEFAULT_DAILY_LIMIT
from core.models import TimeStampedModel
from core.permissions_constants import AccountsPerms


class Role(models.Model):
    """
    Dynamic, admin-manageable role.

    ``hierarchy_level`` encodes the relative power within the police
    hierarchy (e.g. Inspector General > Station Commander > Sergeant >
    Constable).  Permissions are linked by the ``setup_rbac`` command.
    """

    name = models.CharField(
        max_length=100,
        unique=True,
        verbose_name="Role Name",
    )
    description = models.TextField(
        blank=True,
        default="",
        verbose_name="Description",
    )
    hierarchy_level = models.PositiveSmallIntegerField(
        default=0,
        verbose_name="Hierarchy Level",
        help_text="Higher value = more authority.",
    )
    permissions = models.ManyToManyField(
        Permission,
        blank=True,
        verbose_name="Permissions",
        help_text="Specific permissions for this role.",
    )

    class Meta:
        verbose_name = "Role"
        verbose_name_plural = "Roles"
        ordering = ["-hierarchy_level"]

    def __str__(self):
        return self.name


class Station(TimeStampedModel):
    """A police station; officers and USSD statistics are grouped by it."""

    name = models.CharField(max_length=255, verbose_name="Station Name")
    code = models.CharField(
        max_length=20,
        unique=True,
        verbose_name="Station Code",
    )
    location = models.CharField(max_length=255, blank=True, default="")
    district = models.CharField(max_length=100, blank=True, default="")
    region = models.CharField(max_length=100, blank=True, default="")
    active = models.BooleanField(default=True)

    class Meta:
        verbose_name = "Station"
        verbose_name_plural = "Stations"
        ordering = ["code"]

    def __str__(self):
        return f"{self.code} — {self.name}"


class User(AbstractUser):
    """
    Custom user model; every officer account is a ``User``.

    Login to the web API is supported via *any one* of username /
    national_id / phone_number / email together with the password.
    USSD login instead uses the bound ``ussd_phone_number`` (supplied by
    the gateway) plus a 4-digit Quick PIN.
    """

    national_id = models.CharField(
        max_length=11,
        unique=True,
        verbose_name="National ID",
        help_text="11-digit National Identification Number.",
        db_index=True,
    )
    phone_number = models.CharField(
        max_length=16,
        unique=True,
        verbose_name="Phone Number",
        db_index=True,
    )
    email = models.EmailField(
        unique=True,
        verbose_name="Email Address",
    )
    badge_number = models.CharField(
        max_length=20,
        unique=True,
        null=True,
        blank=True,
        verbose_name="Badge Number",
    )
    station = models.ForeignKey(
        Station,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="officers",
        verbose_name="Station",
    )

    # ── Single-role assignment (dynamic RBAC) ────────────────────────
    role = models.ForeignKey(
        Role,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="users",
        verbose_name="Assigned Role",
    )

    # ── USSD access ──────────────────────────────────────────────────
    ussd_phone_number = models.CharField(
        max_length=16,
        unique=True,
        null=True,
        blank=True,
        verbose_name="USSD Phone Number",
        help_text="E.164 number the USSD gateway reports for this officer.",
    )
    ussd_quick_pin_hash = models.CharField(
        max_length=128,
        blank=True,
        default="",
        verbose_name="Quick PIN Hash",
    )
    ussd_enabled = models.BooleanField(
        default=False,
        verbose_name="USSD Enabled",
    )
    ussd_registered_at = models.DateTimeField(null=True, blank=True)
    ussd_last_used = models.DateTimeField(null=True, blank=True)
    ussd_daily_limit = models.PositiveIntegerField(
        default=USSD_DEFAULT_DAILY_LIMIT,
        verbose_name="USSD Daily Query Limit",
    )

    REQUIRED_FIELDS = ["email", "national_id", "phone_number",
                       "first_name", "last_name"]

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"
        permissions = [
            (AccountsPerms.CAN_MANAGE_USSD_OFFICERS, "Manage officers' USSD access"),
        ]

    def __str__(self):
        role_name = self.role.name if self.role else "No Role"
        return f"{self.username} ({self.get_full_name()}) - {role_name}"

    # ── Quick PIN ────────────────────────────────────────────────────

    def set_quick_pin(self, raw_pin: str) -> None:
        """Hash and store a Quick PIN (does not save)."""
        self.ussd_quick_pin_hash = make_password(raw_pin)

    def check_quick_pin(self, raw_pin: str) -> bool:
        """Constant-time verification of a Quick PIN against the stored hash."""
        if not self.ussd_quick_pin_hash:
            return False
        return check_password(raw_pin, self.ussd_quick_pin_hash)

    @property
    def is_ussd_ready(self) -> bool:
        """Registered, whitelisted, and active."""
        return bool(
            self.ussd_phone_number
            and self.ussd_quick_pin_hash
            and self.ussd_enabled
            and self.is_active
        )

    # ── Helper predicates for role checks ────────────────────────────

    def has_role(self, role_name: str) -> bool:
        """Check if the user's current role matches the given name."""
        return self.role is not None and self.role.name == role_name

    @property
    def hierarchy_level(self) -> int:
        """Return the hierarchy_level of the user's role (0 if none)."""
        return self.role.hierarchy_level if self.role else 0

    # ── RBAC Permission Overrides ────────────────────────────────────

    def get_all_permissions(self, obj=None) -> set:
        """
        Return a set of permission strings ('app_label.codename') the user has.
        """
        if not self.is_active:
            return set()

        if self.is_superuser:
            if not hasattr(self, "_superuser_perm_cache"):
                perms = Permission.objects.select_related("content_type").all()
                self._superuser_perm_cache = {f"{p.content_type.app_label}.{p.codename}" for p in perms}
            return self._superuser_perm_cache

        if not self.role:
            return set()

        if not hasattr(self, "_perm_cache"):
            perms = self.role.permissions.select_related("content_type")
            self._perm_cache = {f"{p.content_type.app_label}.{p.codename}" for p in perms}

        return self._perm_cache

    def has_perm(self, perm: str, obj=None) -> bool:
        """
        Superusers always have all permissions; otherwise the assigned
        role must carry the permission.
        """
        if self.is_active and self.is_superuser:
            return True

        return perm in self.get_all_permissions(obj)

    def has_perms(self, perm_list, obj=None) -> bool:
        return all(self.has_perm(perm, obj) for perm in perm_list)

    def has_module_perms(self, app_label: str) -> bool:
        if self.is_active and self.is_superuser:
            return True

        return any(perm.startswith(f"{app_label}.") for perm in self.get_all_permissions())

    @property
    def permissions_list(self) -> list[str]:
        """Flat list of permission strings, embedded in JWT claims."""
        return sorted(self.get_all_permissions())
