"""
Identifier normalisation and validation shared by the records
collaborators and the USSD gateway.

All helpers are pure functions so they can be called from model
``save()`` hooks, serializers, and USSD feature handlers alike.
"""

from __future__ import annotations

import re

from core.constants import (
    LICENSE_PLATE_MAX_LENGTH,
    LICENSE_PLATE_MIN_LENGTH,
    NIN_LENGTH,
    QUICK_PIN_LENGTH,
)

_NIN_RE = re.compile(rf"^\d{{{NIN_LENGTH}}}$")
_QUICK_PIN_RE = re.compile(rf"^\d{{{QUICK_PIN_LENGTH}}}$")
_PLATE_RE = re.compile(
    rf"^[A-Z0-9]{{{LICENSE_PLATE_MIN_LENGTH},{LICENSE_PLATE_MAX_LENGTH}}}$"
)
# Delimiters people type inside plates: spaces, hyphens, dots, slashes.
_PLATE_SEPARATORS_RE = re.compile(r"[\s\-./]+")
_E164_RE = re.compile(r"^\+[1-9]\d{1,14}$")


def is_valid_nin(value: str) -> bool:
    """``True`` for exactly 11 ASCII digits."""
    return bool(_NIN_RE.match(value or ""))


def is_valid_quick_pin(value: str) -> bool:
    """``True`` for exactly 4 ASCII digits."""
    return bool(_QUICK_PIN_RE.match(value or ""))


def normalize_license_plate(plate: str) -> str:
    """
    Uppercase and strip separators: ``"ab-123 cd"`` → ``"AB123CD"``.

    Idempotent: ``normalize_license_plate(normalize_license_plate(x))``
    always equals ``normalize_license_plate(x)``.
    """
    return _PLATE_SEPARATORS_RE.sub("", (plate or "").strip().upper())


def is_valid_license_plate(plate: str) -> bool:
    """Validate *after* normalisation: 3–12 uppercase alphanumerics."""
    return bool(_PLATE_RE.match(normalize_license_plate(plate)))


def is_valid_phone_number(phone: str) -> bool:
    """E.164 format, e.g. ``+23276123456``."""
    return bool(_E164_RE.match(phone or ""))
