"""
Root conftest.py — shared fixtures for the entire test suite.

Provides:
  - ``api_client`` fixture returning a DRF ``APIClient``.
  - ``create_user`` factory fixture for creating test users.
  - ``auth_header`` fixture for authenticated requests (JWT).
  - ``station`` / ``ussd_officer`` fixtures for USSD gateway tests.
  - an autouse fixture that empties the session cache between tests.
"""

from __future__ import annotations

import pytest
from django.core.cache import caches
from rest_framework.test import APIClient

#: Quick PIN given to every officer built by ``ussd_officer``.
TEST_QUICK_PIN = "1234"


@pytest.fixture(autouse=True)
def _clear_caches():
    """USSD sessions live in the cache; never leak one into the next test."""
    for cache in caches.all():
        cache.clear()
    yield


@pytest.fixture()
def api_client() -> APIClient:
    """Unauthenticated DRF test client."""
    return APIClient()


@pytest.fixture()
def create_user(db):
    """
    Factory fixture that creates a user with sensible defaults.

    Usage::

        def test_something(create_user):
            user = create_user(username="alice")
            # or with all fields:
            user = create_user(
                username="bob",
                password="Str0ng!Pass",
                email="bob@example.com",
                national_id="12345678901",
                phone_number="+23276123456",
            )
    """
    from accounts.models import User

    _counter = 0

    def _factory(
        *,
        username: str | None = None,
        password: str = "TestPass123!",
        email: str | None = None,
        national_id: str | None = None,
        phone_number: str | None = None,
        role=None,
        is_active: bool = True,
        **kwargs,
    ) -> User:
        nonlocal _counter
        _counter += 1
        if username is None:
            username = f"testuser{_counter}"
        if email is None:
            email = f"{username}@test.local"
        if national_id is None:
            national_id = f"{_counter:011d}"
        if phone_number is None:
            phone_number = f"+2327600{_counter:05d}"

        user = User.objects.create_user(
            username=username,
            password=password,
            email=email,
            national_id=national_id,
            phone_number=phone_number,
            is_active=is_active,
            **kwargs,
        )
        if role is not None:
            user.role = role
            user.save(update_fields=["role"])
        return user

    return _factory


@pytest.fixture()
def auth_header(create_user, api_client):
    """
    Returns a helper function that creates a user and returns an
    ``Authorization`` header dict with a valid JWT access token.

    Usage::

        def test_protected(auth_header, api_client):
            header = auth_header(username="alice")
            api_client.credentials(HTTP_AUTHORIZATION=header["Authorization"])
            resp = api_client.get("/api/ussd/logs/")
            assert resp.status_code != 401

    The returned dict looks like::

        {"Authorization": "Bearer eyJ..."}
    """
    from rest_framework_simplejwt.tokens import AccessToken

    def _make(
        *,
        username: str | None = None,
        role=None,
        **user_kwargs,
    ) -> dict[str, str]:
        user = create_user(username=username, role=role, **user_kwargs)
        token = AccessToken.for_user(user)
        return {"Authorization": f"Bearer {token}"}

    return _make


@pytest.fixture()
def station(db):
    from accounts.models import Station

    return Station.objects.create(name="Central Police Station", code="FT-CEN")


@pytest.fixture()
def ussd_officer(create_user, station):
    """
    Factory for officers already registered on USSD (PIN ``1234``).

    Usage::

        officer = ussd_officer(ussd_phone_number="+23276000001")
    """
    from django.utils import timezone

    def _make(
        *,
        ussd_phone_number: str = "+23276000001",
        pin: str = TEST_QUICK_PIN,
        ussd_enabled: bool = True,
        **user_kwargs,
    ):
        user_kwargs.setdefault("station", station)
        user_kwargs.setdefault("first_name", "Amara")
        user_kwargs.setdefault("last_name", "Kamara")
        officer = create_user(
            ussd_phone_number=ussd_phone_number,
            ussd_enabled=ussd_enabled,
            ussd_registered_at=timezone.now(),
            **user_kwargs,
        )
        officer.set_quick_pin(pin)
        officer.save(update_fields=["ussd_quick_pin_hash"])
        return officer

    return _make
