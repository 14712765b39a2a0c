"""
Core constants — **Single Source of Truth** for project-wide magic numbers.

Any validation rule or business limit that references a numeric constant
should import it from here instead of hardcoding.  This avoids drift
between the ``records`` collaborators and the ``ussd`` gateway, which both
validate the same identifiers.
"""

# ── Identifiers ─────────────────────────────────────────────────────
# National Identification Number: exactly 11 digits.
NIN_LENGTH: int = 11

# Normalized licence plate: 3–12 uppercase alphanumerics.
LICENSE_PLATE_MIN_LENGTH: int = 3
LICENSE_PLATE_MAX_LENGTH: int = 12

# Quick PIN used on the USSD channel: exactly 4 digits.
QUICK_PIN_LENGTH: int = 4

# ── USSD quotas ─────────────────────────────────────────────────────
# Default number of USSD queries an officer may run per local day.
# Overridable per officer via ``User.ussd_daily_limit``.
USSD_DEFAULT_DAILY_LIMIT: int = 50

# ── Background checks ───────────────────────────────────────────────
# Days a completed background check stays valid.
BACKGROUND_CHECK_VALIDITY_DAYS: int = 90
