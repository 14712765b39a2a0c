"""
Smoke tests — verify that Django boots, URL routing resolves, and
the core domain modules are importable.

These tests require a DB (they use ``@pytest.mark.django_db`` where
needed) but do NOT require real data — they just prove the plumbing
works.
"""

from __future__ import annotations

import pytest
from django.urls import resolve, reverse


# ════════════════════════════════════════════════════════════════════
#  URL Routing Smoke Tests
# ════════════════════════════════════════════════════════════════════

class TestURLRouting:
    """Ensure all top-level app URL namespaces resolve without 404."""

    EXPECTED_URLS = [
        # (url_name, expected_path)
        ("accounts:login",         "/api/accounts/auth/login/"),
        ("accounts:token-refresh", "/api/accounts/auth/token/refresh/"),
        ("ussd:callback",          "/api/ussd/callback/"),
        ("ussd:register",          "/api/ussd/register/"),
        ("ussd:query-logs",        "/api/ussd/logs/"),
        ("ussd:officer-list",      "/api/ussd/officers/"),
        ("schema",                 "/api/schema/"),
    ]

    @pytest.mark.parametrize("url_name,expected_path", EXPECTED_URLS)
    def test_url_resolves(self, url_name: str, expected_path: str):
        """Named URL reverses to the expected path."""
        url = reverse(url_name)
        assert url == expected_path, (
            f"{url_name} resolved to {url}, expected {expected_path}"
        )

    @pytest.mark.parametrize("url_name,expected_path", EXPECTED_URLS)
    def test_url_resolve_matches_view(self, url_name: str, expected_path: str):
        """Path resolves to a view function (not a 404)."""
        match = resolve(expected_path)
        assert match.func is not None

    def test_detail_routes(self):
        assert reverse("ussd:station-stats", args=[3]) == "/api/ussd/stations/3/stats/"
        assert reverse("ussd:officer-toggle", args=[7]) == "/api/ussd/officers/7/toggle/"
        assert reverse("ussd:officer-reset-pin", args=[7]) == "/api/ussd/officers/7/reset-pin/"
        assert reverse("ussd:officer-stats", args=[7]) == "/api/ussd/officers/7/stats/"


@pytest.mark.django_db
class TestSchema:

    def test_openapi_schema_lists_ussd_endpoints(self, api_client):
        resp = api_client.get(reverse("schema"), {"format": "json"})

        assert resp.status_code == 200
        paths = resp.json()["paths"]
        assert "/api/ussd/callback/" in paths
        assert "/api/ussd/logs/" in paths


# ════════════════════════════════════════════════════════════════════
#  Core Domain Module Import Tests
# ════════════════════════════════════════════════════════════════════

class TestCoreDomainImports:
    """Verify that shared domain utility modules are importable."""

    def test_import_exceptions(self):
        from core.domain.exceptions import (
            DomainError,
            PermissionDenied,
            NotFound,
            Conflict,
            InvalidTransition,
        )
        # Ensure they form an inheritance chain
        assert issubclass(InvalidTransition, Conflict)
        assert issubclass(Conflict, DomainError)
        assert issubclass(PermissionDenied, DomainError)
        assert issubclass(NotFound, DomainError)

    def test_import_transactions(self):
        from core.domain.transactions import lock_for_update, locked_update
        assert callable(lock_for_update)
        assert callable(locked_update)

    def test_ussd_exceptions_map_onto_domain(self):
        from core.domain.exceptions import Conflict, NotFound
        from ussd.exceptions import SessionBusy, SessionNotFound

        assert issubclass(SessionBusy, Conflict)
        assert issubclass(SessionNotFound, NotFound)


# ════════════════════════════════════════════════════════════════════
#  Exception Behaviour Tests
# ════════════════════════════════════════════════════════════════════

class TestDomainExceptions:
    """Unit tests for domain exception classes."""

    def test_domain_error_message(self):
        from core.domain.exceptions import DomainError
        err = DomainError("test message")
        assert str(err) == "test message"

    def test_invalid_transition_structured(self):
        from core.domain.exceptions import InvalidTransition
        err = InvalidTransition(
            current="unregistered",
            target="enabled",
            reason="No USSD phone bound",
        )
        assert "unregistered" in str(err)
        assert "enabled" in str(err)
        assert "No USSD phone bound" in str(err)
        assert err.current == "unregistered"
        assert err.target == "enabled"

    def test_invalid_transition_plain_message(self):
        from core.domain.exceptions import InvalidTransition
        err = InvalidTransition("Officer is not registered for USSD.")
        assert str(err) == "Officer is not registered for USSD."


# ════════════════════════════════════════════════════════════════════
#  Exception Handler Tests
# ════════════════════════════════════════════════════════════════════

class TestDomainExceptionHandler:
    """``domain_exception_handler`` maps each domain error to a status."""

    @pytest.mark.parametrize("exc_name,expected", [
        ("DomainError", 400),
        ("PermissionDenied", 403),
        ("NotFound", 404),
        ("Conflict", 409),
        ("InvalidTransition", 409),
    ])
    def test_status_mapping(self, exc_name: str, expected: int):
        from core.domain import exceptions
        from core.domain.exception_handler import domain_exception_handler

        exc = getattr(exceptions, exc_name)("boom")
        resp = domain_exception_handler(exc, {"view": None})
        assert resp.status_code == expected
        assert resp.data == {"detail": "boom"}

    def test_unknown_exceptions_pass_through(self):
        from core.domain.exception_handler import domain_exception_handler

        assert domain_exception_handler(RuntimeError("x"), {"view": None}) is None
