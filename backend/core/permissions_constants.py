"""
Permissions Constants — **Single Source of Truth**

Every permission referenced in code (views, ``setup_rbac``, DRF
permission classes) MUST use one of the constants defined here.

Organisation
------------
- **Standard CRUD** permissions follow Django's auto-generated naming:
  ``<action>_<model_lowercase>``. They are listed here for reference so
  that the ``setup_rbac`` command can map them to roles without typos.

- **Custom workflow** permissions are constants that map to codenames
  registered via each model's ``Meta.permissions`` tuple. Adding a new
  custom permission requires:
    1. Add the constant below.
    2. Add the ``(codename, description)`` to the related model's
       ``Meta.permissions``.
    3. Run ``makemigrations`` + ``migrate`` to insert it into Django's
       ``auth_permission`` table.
    4. Add the constant to the appropriate role lists in ``setup_rbac``.

All constants store the **codename only** (no ``app_label.`` prefix).
"""


# ════════════════════════════════════════════════════════════════════
#  ACCOUNTS APP
# ════════════════════════════════════════════════════════════════════

class AccountsPerms:
    """Standard CRUD + custom permissions for accounts models."""

    VIEW_USER = "view_user"
    CHANGE_USER = "change_user"
    VIEW_STATION = "view_station"

    # ── Custom workflow permissions ─────────────────────────────────
    CAN_MANAGE_USSD_OFFICERS = "can_manage_ussd_officers"
    """Enable/disable USSD access and reset officers' Quick PINs."""


# ════════════════════════════════════════════════════════════════════
#  RECORDS APP
# ════════════════════════════════════════════════════════════════════

class RecordsPerms:
    """Standard CRUD permissions for the records collaborators."""

    VIEW_PERSON = "view_person"
    VIEW_WANTEDPERSON = "view_wantedperson"
    VIEW_MISSINGPERSONALERT = "view_missingpersonalert"
    VIEW_VEHICLE = "view_vehicle"
    VIEW_BACKGROUNDCHECK = "view_backgroundcheck"


# ════════════════════════════════════════════════════════════════════
#  USSD APP
# ════════════════════════════════════════════════════════════════════

class UssdPerms:
    """Standard + custom permissions for the USSD audit trail."""

    VIEW_QUERYLOG = "view_querylog"

    # ── Custom workflow permissions ─────────────────────────────────
    CAN_VIEW_USSD_AUDIT = "can_view_ussd_audit"
    """Read officer/station USSD statistics and abuse reports."""
