"""
Integration tests — AuthenticationGate (phone + Quick PIN, lockout, quota)
and the ``QuickPinBackend`` it dispatches to.

Every credential failure must look identical to the caller: unknown
number, wrong PIN, disabled USSD access and inactive account all map to
``AuthStatus.FAILED``.
"""

from __future__ import annotations

from datetime import timedelta

from django.contrib.auth import authenticate
from django.test import TestCase
from django.utils import timezone

from ussd.audit import QueryAuditLog
from ussd.auth import AuthenticationGate, AuthStatus, PinLockout
from ussd.models import ResultSummary
from ussd.ratelimit import RateLimiter

from .helpers import QUICK_PIN, log_entry, make_officer

PHONE = "+23276000001"


class TestQuickPinBackend(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.officer = make_officer(ussd_phone_number=PHONE)

    def test_correct_pin(self):
        user = authenticate(None, ussd_phone_number=PHONE, password=QUICK_PIN)
        self.assertEqual(user, self.officer)

    def test_wrong_pin(self):
        self.assertIsNone(authenticate(None, ussd_phone_number=PHONE, password="9999"))

    def test_unknown_phone(self):
        self.assertIsNone(
            authenticate(None, ussd_phone_number="+23276999999", password=QUICK_PIN),
        )

    def test_web_password_is_not_a_pin(self):
        self.assertIsNone(
            authenticate(None, ussd_phone_number=PHONE, password="Str0ng!Pass99"),
        )

    def test_pin_hash_is_not_the_raw_pin(self):
        self.assertNotEqual(self.officer.ussd_quick_pin_hash, QUICK_PIN)
        self.assertTrue(self.officer.check_quick_pin(QUICK_PIN))


class TestAuthenticationGate(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.officer = make_officer(ussd_phone_number=PHONE, ussd_daily_limit=3)

    def setUp(self):
        audit_log = QueryAuditLog()
        self.gate = AuthenticationGate(
            RateLimiter(audit_log, default_limit=50),
            PinLockout(audit_log, threshold=5, window_minutes=15),
        )

    def _auth(self, pin=QUICK_PIN, phone=PHONE):
        return self.gate.authenticate(phone, pin)

    def test_granted(self):
        outcome = self._auth()

        self.assertTrue(outcome.granted)
        self.assertEqual(outcome.officer, self.officer)
        self.assertEqual(outcome.quota.remaining, 3)

    def test_granted_records_last_use(self):
        self._auth()
        self.officer.refresh_from_db()
        self.assertIsNotNone(self.officer.ussd_last_used)

    def test_bad_format_short_circuits(self):
        for pin in ["123", "12345", "12a4", "", "    "]:
            with self.subTest(pin=pin):
                outcome = self.gate.authenticate(PHONE, pin)
                self.assertIs(outcome.status, AuthStatus.INVALID_FORMAT)
                self.assertIsNone(outcome.officer)

    def test_wrong_pin_fails(self):
        with self.assertLogs("ussd.auth", level="WARNING") as logs:
            outcome = self._auth(pin="9999")
        self.assertIs(outcome.status, AuthStatus.FAILED)
        self.assertIsNone(outcome.officer)
        self.assertTrue(any("authentication failed" in line for line in logs.output))

    def test_failures_are_indistinguishable(self):
        disabled = make_officer(ussd_phone_number="+23276000002", ussd_enabled=False)
        inactive = make_officer(ussd_phone_number="+23276000003", is_active=False)
        cases = {
            "unknown number": "+23276999999",
            "disabled": disabled.ussd_phone_number,
            "inactive": inactive.ussd_phone_number,
        }
        for label, phone in cases.items():
            with self.subTest(case=label):
                outcome = self._auth(phone=phone)
                self.assertIs(outcome.status, AuthStatus.FAILED)
                self.assertIsNone(outcome.officer)

    def test_lockout_after_repeated_failures(self):
        for _ in range(5):
            log_entry(phone_number=PHONE, query_type=None,
                      result_summary=ResultSummary.AUTH_FAILED, success=False)

        outcome = self._auth()
        self.assertIs(outcome.status, AuthStatus.LOCKED_OUT)

    def test_lockout_window_expires(self):
        old = timezone.now() - timedelta(minutes=16)
        for _ in range(5):
            log_entry(phone_number=PHONE, query_type=None,
                      result_summary=ResultSummary.INVALID_PIN, success=False,
                      timestamp=old)

        outcome = self._auth()
        self.assertTrue(outcome.granted)

    def test_lockout_can_be_disabled(self):
        for _ in range(5):
            log_entry(phone_number=PHONE, query_type=None,
                      result_summary=ResultSummary.AUTH_FAILED, success=False)
        self.gate.lockout.enabled = False

        outcome = self._auth()
        self.assertTrue(outcome.granted)

    def test_exhausted_quota_is_rate_limited(self):
        for _ in range(3):
            log_entry(officer=self.officer)

        outcome = self._auth()

        self.assertIs(outcome.status, AuthStatus.RATE_LIMITED)
        self.assertFalse(outcome.granted)
        self.assertEqual(outcome.officer, self.officer)
        self.assertEqual(outcome.quota.limit, 3)
        self.officer.refresh_from_db()
        self.assertIsNone(self.officer.ussd_last_used)
