"""
Tests — abuse heuristics over an officer's last hour of queries.
"""

from __future__ import annotations

from datetime import timedelta

from django.test import TestCase
from django.utils import timezone

from ussd.abuse import AbuseDetector
from ussd.audit import QueryAuditLog
from ussd.models import ResultSummary

from .helpers import log_entry, make_officer


class TestAbuseDetector(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.officer = make_officer()

    def setUp(self):
        self.detector = AbuseDetector(QueryAuditLog())

    def _log(self, n, **kwargs):
        for _ in range(n):
            kwargs.setdefault("search_term", "")
            log_entry(officer=self.officer, **kwargs)

    def test_quiet_officer_is_not_suspicious(self):
        self._log(3, search_term="12345678901")
        report = self.detector.report(self.officer.pk)

        self.assertEqual(report, {
            "suspicious": False,
            "patterns": [],
            "recommendation": "No suspicious activity detected",
        })

    def test_high_failure_rate(self):
        self._log(4, success=False, result_summary=ResultSummary.INVALID_NIN)
        self._log(2, success=True)

        patterns = self.detector.scan(self.officer.pk)
        self.assertIn("High failure rate: 4 of last 6 queries failed", patterns)

    def test_failure_rate_needs_five_entries(self):
        self._log(4, success=False, result_summary=ResultSummary.INVALID_NIN)
        self.assertEqual(self.detector.scan(self.officer.pk), [])

    def test_half_failures_is_not_flagged(self):
        self._log(3, success=False, result_summary=ResultSummary.INVALID_NIN)
        self._log(3, success=True)
        self.assertEqual(self.detector.scan(self.officer.pk), [])

    def test_repeated_search_term(self):
        self._log(5, search_term="12345678901")

        patterns = self.detector.scan(self.officer.pk)
        self.assertEqual(
            patterns, ["Repeated search: '12345678901' queried 5 times in 1 hour"],
        )

    def test_high_volume(self):
        for i in range(21):
            log_entry(officer=self.officer, search_term=f"{i:011d}")

        patterns = self.detector.scan(self.officer.pk)
        self.assertEqual(patterns, ["High volume: 21 queries in 1 hour"])

    def test_entries_older_than_an_hour_are_ignored(self):
        old = timezone.now() - timedelta(hours=2)
        self._log(25, search_term="12345678901", success=False, timestamp=old)
        self.assertEqual(self.detector.scan(self.officer.pk), [])

    def test_report_recommends_review_when_flagged(self):
        self._log(5, search_term="AB123CD")
        report = self.detector.report(self.officer.pk)

        self.assertTrue(report["suspicious"])
        self.assertEqual(len(report["patterns"]), 1)
        self.assertNotEqual(report["recommendation"], "No suspicious activity detected")
