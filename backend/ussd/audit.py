"""
QueryAuditLog — the append-only USSD audit trail.

``append`` is best-effort: a failed audit write is logged with its
traceback and swallowed, so it can never abort the reply already
computed for the handset.  All read methods are plain ORM aggregates
over ``QueryLog``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime

from django.db.models import Count, Max, Q
from django.utils import timezone

from .models import QueryLog
from .periods import local_midnight, rolling_days, start_of_month

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditEntry:
    phone_number: str
    result_summary: str
    success: bool
    officer_id: int | None = None
    query_type: str | None = None
    search_term: str = ""
    error_message: str = ""
    session_id: str = ""


@dataclass(frozen=True)
class QueryStatistics:
    today: int
    this_week: int
    this_month: int
    all_time: int
    by_type: dict[str, int] = field(default_factory=dict)
    last_query: datetime | None = None
    success_rate: float = 0.0


@dataclass(frozen=True)
class StationStatistics:
    total_queries: int
    queries_today: int
    queries_this_week: int
    active_officers: int
    top_query_types: list[dict] = field(default_factory=list)


class QueryAuditLog:
    """Writes and aggregates ``QueryLog`` rows."""

    def append(self, entry: AuditEntry) -> QueryLog | None:
        try:
            return QueryLog.objects.create(
                officer_id=entry.officer_id,
                phone_number=entry.phone_number,
                query_type=entry.query_type,
                search_term=entry.search_term[:64],
                result_summary=entry.result_summary,
                success=entry.success,
                error_message=entry.error_message[:255],
                session_id=entry.session_id,
            )
        except Exception:
            logger.exception(
                "USSD audit write failed (session=%s, summary=%s)",
                entry.session_id, entry.result_summary,
            )
            return None

    # ── Reads ───────────────────────────────────────────────────────

    def count_since(self, officer_id: int, since: datetime) -> int:
        return QueryLog.objects.filter(
            officer_id=officer_id, timestamp__gte=since,
        ).count()

    def statistics(self, officer_id: int, now: datetime | None = None) -> QueryStatistics:
        """
        Time-bucketed counts for one officer.

        ``today`` starts at local midnight, ``this_week`` is the rolling
        last 7 days, ``this_month`` starts on the 1st of the calendar month.
        """
        now = now or timezone.now()
        qs = QueryLog.objects.filter(officer_id=officer_id)
        totals = qs.aggregate(
            today=Count("id", filter=Q(timestamp__gte=local_midnight(now))),
            this_week=Count("id", filter=Q(timestamp__gte=rolling_days(7, now))),
            this_month=Count("id", filter=Q(timestamp__gte=start_of_month(now))),
            all_time=Count("id"),
            succeeded=Count("id", filter=Q(success=True)),
            last_query=Max("timestamp"),
        )
        by_type = {
            row["query_type"]: row["n"]
            for row in (
                qs.exclude(query_type__isnull=True)
                .values("query_type")
                .annotate(n=Count("id"))
                .order_by()
            )
        }
        all_time = totals["all_time"]
        success_rate = (totals["succeeded"] / all_time * 100) if all_time else 0.0
        return QueryStatistics(
            today=totals["today"],
            this_week=totals["this_week"],
            this_month=totals["this_month"],
            all_time=all_time,
            by_type=by_type,
            last_query=totals["last_query"],
            success_rate=round(success_rate, 1),
        )

    def recent(self, officer_id: int | None = None, limit: int = 50):
        qs = QueryLog.objects.select_related("officer")
        if officer_id is not None:
            qs = qs.filter(officer_id=officer_id)
        return qs.order_by("-timestamp", "-id")[:limit]

    def window(self, officer_id: int, since: datetime):
        """Entries for ``officer_id`` since ``since``, newest first."""
        return (
            QueryLog.objects
            .filter(officer_id=officer_id, timestamp__gte=since)
            .order_by("-timestamp", "-id")
        )

    def station_statistics(
        self, station_id: int, now: datetime | None = None,
    ) -> StationStatistics:
        now = now or timezone.now()
        qs = QueryLog.objects.filter(officer__station_id=station_id)
        totals = qs.aggregate(
            total=Count("id"),
            today=Count("id", filter=Q(timestamp__gte=local_midnight(now))),
            week=Count("id", filter=Q(timestamp__gte=rolling_days(7, now))),
            officers=Count(
                "officer",
                filter=Q(timestamp__gte=rolling_days(7, now)),
                distinct=True,
            ),
        )
        top = (
            qs.exclude(query_type__isnull=True)
            .values("query_type")
            .annotate(count=Count("id"))
            .order_by("-count", "query_type")[:5]
        )
        return StationStatistics(
            total_queries=totals["total"],
            queries_today=totals["today"],
            queries_this_week=totals["week"],
            active_officers=totals["officers"],
            top_query_types=[
                {"type": row["query_type"], "count": row["count"]} for row in top
            ],
        )

    def failed_attempts(self, phone_number: str, since: datetime, summaries) -> int:
        """Rejected PIN attempts from one handset since ``since``."""
        return QueryLog.objects.filter(
            phone_number=phone_number,
            timestamp__gte=since,
            result_summary__in=list(summaries),
        ).count()
