"""Builders shared by the USSD test modules."""

from __future__ import annotations

import itertools

from django.contrib.auth import get_user_model
from django.utils import timezone

from accounts.models import Station
from ussd.models import QueryLog, ResultSummary

User = get_user_model()

QUICK_PIN = "1234"

_seq = itertools.count(1)


def make_station(code: str = "FT-CEN", name: str = "Central Police Station") -> Station:
    return Station.objects.create(code=code, name=name)


def make_officer(
    *,
    ussd_phone_number: str | None = "+23276000001",
    pin: str | None = QUICK_PIN,
    ussd_enabled: bool = True,
    **fields,
):
    """Create an officer; pass ``ussd_phone_number=None`` for an unregistered one."""
    n = next(_seq)
    fields.setdefault("username", f"officer{n}")
    fields.setdefault("email", f"officer{n}@police.test")
    fields.setdefault("national_id", f"9{n:010d}")
    fields.setdefault("phone_number", f"+2327799{n:04d}")
    fields.setdefault("first_name", "Amara")
    fields.setdefault("last_name", "Kamara")
    password = fields.pop("password", "Str0ng!Pass99")

    officer = User.objects.create_user(
        password=password,
        ussd_phone_number=ussd_phone_number,
        ussd_enabled=ussd_enabled,
        ussd_registered_at=timezone.now() if ussd_phone_number else None,
        **fields,
    )
    if pin is not None:
        officer.set_quick_pin(pin)
        officer.save(update_fields=["ussd_quick_pin_hash"])
    return officer


def log_entry(
    *,
    officer=None,
    phone_number: str = "+23276000001",
    query_type: str | None = "wanted",
    search_term: str = "",
    result_summary: str = ResultSummary.NOT_FOUND,
    success: bool = True,
    timestamp=None,
) -> QueryLog:
    return QueryLog.objects.create(
        officer=officer,
        phone_number=phone_number,
        query_type=query_type,
        search_term=search_term,
        result_summary=result_summary,
        success=success,
        timestamp=timestamp or timezone.now(),
    )
