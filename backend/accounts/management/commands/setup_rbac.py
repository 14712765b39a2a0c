"""
Management command: setup_rbac
~~~~~~~~~~~~~~~~~~~~~~~~~~~~~~

Seeds the police rank **Roles** and links each role to the Django
permissions it needs for the USSD operator endpoints and the records
admin.

This command does NOT create Permission objects.  Standard CRUD
permissions are created by ``migrate``; custom ones
(``can_manage_ussd_officers``, ``can_view_ussd_audit``) come from the
models' ``Meta.permissions``.

Idempotent: existing roles are updated and their permission sets
replaced to match the mapping below.

Usage::

    python manage.py migrate
    python manage.py setup_rbac
"""

from django.contrib.auth.models import Permission
from django.core.management.base import BaseCommand

from accounts.models import Role
from core.permissions_constants import AccountsPerms, RecordsPerms, UssdPerms

# ────────────────────────────────────────────────────────────────────
# Role → Permission mapping
# ────────────────────────────────────────────────────────────────────
# Key:   (role_name, description, hierarchy_level)
# Value: list of codenames from ``core.permissions_constants``

_RECORDS_READ = [
    RecordsPerms.VIEW_PERSON,
    RecordsPerms.VIEW_WANTEDPERSON,
    RecordsPerms.VIEW_MISSINGPERSONALERT,
    RecordsPerms.VIEW_VEHICLE,
    RecordsPerms.VIEW_BACKGROUNDCHECK,
]

ROLE_PERMISSIONS_MAP: dict[tuple[str, str, int], list[str]] = {
    (
        "System Admin",
        "Full system access, including officer USSD management.",
        100,
    ): [
        AccountsPerms.VIEW_USER, AccountsPerms.CHANGE_USER,
        AccountsPerms.VIEW_STATION,
        AccountsPerms.CAN_MANAGE_USSD_OFFICERS,
        UssdPerms.VIEW_QUERYLOG, UssdPerms.CAN_VIEW_USSD_AUDIT,
        *_RECORDS_READ,
    ],
    (
        "Inspector General",
        "National oversight of USSD usage across all stations.",
        90,
    ): [
        AccountsPerms.VIEW_USER, AccountsPerms.VIEW_STATION,
        UssdPerms.VIEW_QUERYLOG, UssdPerms.CAN_VIEW_USSD_AUDIT,
        *_RECORDS_READ,
    ],
    (
        "Station Commander",
        "Enables officers' USSD access, resets Quick PINs, reviews activity.",
        60,
    ): [
        AccountsPerms.VIEW_USER, AccountsPerms.VIEW_STATION,
        AccountsPerms.CAN_MANAGE_USSD_OFFICERS,
        UssdPerms.VIEW_QUERYLOG, UssdPerms.CAN_VIEW_USSD_AUDIT,
        *_RECORDS_READ,
    ],
    (
        "Sergeant",
        "Field supervisor.",
        30,
    ): [
        AccountsPerms.VIEW_STATION,
        *_RECORDS_READ,
    ],
    (
        "Constable",
        "Field officer; queries records over USSD.",
        10,
    ): [
        RecordsPerms.VIEW_PERSON,
        RecordsPerms.VIEW_VEHICLE,
    ],
}
class Command(BaseCommand):
    help = (
        "Seeds the database with base Roles and maps each role to its "
        "Django permissions.  Safe to run multiple times (idempotent).  "
        "Does NOT create permissions — run `migrate` first."
    )

    def handle(self, *args, **options):
        self.stdout.write(self.style.MIGRATE_HEADING(
            "\n══════════════════════════════════════════"
            "\n  RBAC Setup — Police Ranks & Permissions"
            "\n══════════════════════════════════════════\n"
        ))

        # Pre-fetch ALL permissions into a dict for fast look-up
        all_permissions: dict[str, Permission] = {
            p.codename: p
            for p in Permission.objects.select_related("content_type").all()
        }

        roles_created = 0
        roles_updated = 0
        warnings = 0

        for (role_name, description, hierarchy_level), codenames in ROLE_PERMISSIONS_MAP.items():
            # ── 1. Idempotent role creation / update ────────────────
            role, created = Role.objects.get_or_create(
                name=role_name,
                defaults={
                    "description": description,
                    "hierarchy_level": hierarchy_level,
                },
            )

            if not created:
                changed = False
                if role.description != description:
                    role.description = description
                    changed = True
                if role.hierarchy_level != hierarchy_level:
                    role.hierarchy_level = hierarchy_level
                    changed = True
                if changed:
                    role.save(update_fields=["description", "hierarchy_level"])

            # ── 2. Resolve permission codenames ─────────────────────
            resolved_permissions: list[Permission] = []
            for codename in codenames:
                perm = all_permissions.get(codename)
                if perm is not None:
                    resolved_permissions.append(perm)
                else:
                    warnings += 1
                    self.stdout.write(self.style.WARNING(
                        f"  ⚠  Permission '{codename}' not found — "
                        f"skipped for role '{role_name}'.  "
                        f"(Run makemigrations & migrate first?)"
                    ))

            # ── 3. Set permissions (replaces old set entirely) ──────
            role.permissions.set(resolved_permissions)

            # ── 4. Console output ───────────────────────────────────
            action = "Created" if created else "Updated"
            if created:
                roles_created += 1
            else:
                roles_updated += 1

            self.stdout.write(self.style.SUCCESS(
                f"  ✔  {action} role: {role_name:<20s} "
                f"(hierarchy={hierarchy_level}, "
                f"permissions={len(resolved_permissions)})"
            ))

        # ── Summary ─────────────────────────────────────────────────
        self.stdout.write(self.style.MIGRATE_HEADING(
            "\n──────────────────────────────────────────"
        ))
        summary = (
            f"  Done!  {roles_created} role(s) created, "
            f"{roles_updated} role(s) updated.  "
            f"Total: {roles_created + roles_updated} role(s)."
        )
        if warnings:
            summary += f"  ({warnings} permission warning(s) — see above.)"
        self.stdout.write(self.style.SUCCESS(summary + "\n"))
