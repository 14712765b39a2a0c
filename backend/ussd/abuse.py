"""
On-demand abuse heuristics over an officer's last hour of USSD queries.

Findings are advisory text for operators; nothing here blocks a caller.
"""

from __future__ import annotations

from collections import Counter
from datetime import datetime, timedelta

from django.utils import timezone

from .audit import QueryAuditLog

WINDOW = timedelta(hours=1)
FAILURE_SAMPLE = 10
FAILURE_MIN_ENTRIES = 5
FAILURE_RATE_THRESHOLD = 0.5
REPEATED_TERM_THRESHOLD = 5
VOLUME_THRESHOLD = 20


class AbuseDetector:

    def __init__(self, audit_log: QueryAuditLog) -> None:
        self.audit_log = audit_log

    def scan(self, officer_id: int, now: datetime | None = None) -> list[str]:
        now = now or timezone.now()
        entries = list(
            self.audit_log.window(officer_id, now - WINDOW)
            .values_list("success", "search_term")
        )
        findings: list[str] = []

        sample = entries[:FAILURE_SAMPLE]
        if len(sample) >= FAILURE_MIN_ENTRIES:
            failures = sum(1 for success, _ in sample if not success)
            if failures / len(sample) > FAILURE_RATE_THRESHOLD:
                findings.append(
                    f"High failure rate: {failures} of last {len(sample)} queries failed"
                )

        terms = Counter(term for _, term in entries if term)
        for term, count in terms.most_common():
            if count < REPEATED_TERM_THRESHOLD:
                break
            findings.append(f"Repeated search: '{term}' queried {count} times in 1 hour")

        if len(entries) > VOLUME_THRESHOLD:
            findings.append(f"High volume: {len(entries)} queries in 1 hour")

        return findings

    def report(self, officer_id: int, now: datetime | None = None) -> dict:
        patterns = self.scan(officer_id, now)
        if patterns:
            recommendation = "Review this officer's recent USSD activity."
        else:
            recommendation = "No suspicious activity detected"
        return {
            "suspicious": bool(patterns),
            "patterns": patterns,
            "recommendation": recommendation,
        }
