"""
USSD feature handlers.

Each handler validates its input, calls the narrow ``records`` lookups it
needs, and returns a ``Success`` or ``Failure`` carrying the screen text
and the ``ResultSummary`` to audit.  Handlers never write to the audit
log themselves: ``FeatureDispatcher.dispatch`` is the single place that
records exactly one ``QueryLog`` entry per attempt, including attempts
that raise, and clips the reply to the screen budget.

Only curated snapshot fields reach the handset.  Addresses and
criminal-history text are never part of a snapshot, so they cannot
appear here.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Union

from records.models import BackgroundCheckRequestType
from records.services import BackgroundCheckService, RecordLookupService
from records.validators import (
    is_valid_license_plate,
    is_valid_nin,
    normalize_license_plate,
)

from . import messages
from .audit import AuditEntry, QueryAuditLog
from .formatting import fit_lines, fit_screen, summarize_charges
from .models import Feature, QueryType, ResultSummary

logger = logging.getLogger(__name__)

STATS_SEARCH_TERM = "self"


# ════════════════════════════════════════════════════════════════════
#  Result types
# ════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Success:
    response: str
    result_summary: str


@dataclass(frozen=True)
class Failure:
    response: str
    result_summary: str
    error_message: str = ""


HandlerResult = Union[Success, Failure]


@dataclass(frozen=True)
class QueryContext:
    """Who is asking, and over which session."""

    officer_id: int
    phone_number: str
    session_id: str


# ════════════════════════════════════════════════════════════════════
#  Handlers
# ════════════════════════════════════════════════════════════════════

class FeatureHandlers:
    """
    One method per feature; all share the signature
    ``(ctx, search_term) -> HandlerResult``.
    """

    def __init__(
        self,
        audit_log: QueryAuditLog,
        lookups=RecordLookupService,
        background_checks=BackgroundCheckService,
        *,
        screen_width: int = 182,
    ) -> None:
        self.audit_log = audit_log
        self.lookups = lookups
        self.background_checks = background_checks
        self.screen_width = screen_width

    @staticmethod
    def _invalid_nin() -> Failure:
        return Failure(
            messages.INVALID_NIN, ResultSummary.INVALID_NIN, "NIN must be 11 digits",
        )

    def wanted(self, ctx: QueryContext, nin: str) -> HandlerResult:
        if not is_valid_nin(nin):
            return self._invalid_nin()
        person = self.lookups.find_person_by_nin(nin)
        if person is None:
            return Success(f"END No record found for NIN: {nin}", ResultSummary.NOT_FOUND)

        record = self.lookups.find_active_wanted_record(person.id)
        if record is None:
            return Success(
                f"END No active warrants\nName: {person.full_name}",
                ResultSummary.NOT_WANTED,
            )
        lines = [
            "END WANTED PERSON",
            f"Name: {person.full_name}",
            f"Charges: {summarize_charges(record.charges)}",
            f"Danger: {record.danger_level.upper()}",
            f"Warrant: {record.warrant_number or 'N/A'}",
            messages.WANTED_INSTRUCTION,
        ]
        # Charges give way first, then the name.
        return Success(
            fit_lines(lines, self.screen_width, shrinkable=(2, 1)),
            ResultSummary.WANTED,
        )

    def missing(self, ctx: QueryContext, nin: str) -> HandlerResult:
        if not is_valid_nin(nin):
            return self._invalid_nin()
        person = self.lookups.find_person_by_nin(nin)
        if person is None:
            return Success(f"END No record found for NIN: {nin}", ResultSummary.NOT_FOUND)

        alert = self.lookups.find_active_missing_alert(person.id)
        if alert is None and not person.is_deceased_or_missing:
            return Success(
                f"END Not reported missing\nName: {person.full_name}",
                ResultSummary.NOT_MISSING,
            )

        lines = ["END MISSING PERSON", f"Name: {person.full_name}"]
        if alert is not None:
            seen = alert.last_seen_location or "Unknown"
            if alert.last_seen_date:
                seen = f"{seen}, {alert.last_seen_date:%d/%m/%Y}"
            lines.append(f"Last seen: {seen}")
            lines.append(f"Tips: {alert.contact_phone}")
        else:
            lines.append("Status: Missing or deceased")
        lines.append(messages.MISSING_INSTRUCTION)
        return Success(
            fit_lines(lines, self.screen_width, shrinkable=(2, 1)),
            ResultSummary.MISSING,
        )

    def background(self, ctx: QueryContext, nin: str) -> HandlerResult:
        if not is_valid_nin(nin):
            return self._invalid_nin()
        outcome = self.background_checks.perform(
            nin,
            requested_by_id=ctx.officer_id,
            request_type=BackgroundCheckRequestType.OFFICER,
            phone_number=ctx.phone_number,
        )
        summary = outcome.status.upper()
        if summary == ResultSummary.CLEAR:
            return Success(
                f"END BACKGROUND: CLEAR\nNIN: {nin}\nNo criminal record",
                ResultSummary.CLEAR,
            )
        return Success(
            "END BACKGROUND: RECORD FOUND\n"
            f"NIN: {nin}\n"
            f"Records: {outcome.records_count}\n"
            f"Risk: {(outcome.risk_level or 'unknown').upper()}",
            ResultSummary.RECORD_FOUND,
        )

    def vehicle(self, ctx: QueryContext, plate: str) -> HandlerResult:
        if not is_valid_license_plate(plate):
            return Failure(
                messages.INVALID_PLATE,
                ResultSummary.INVALID_PLATE,
                "License plate must be 3-12 letters or digits",
            )
        normalized = normalize_license_plate(plate)
        vehicle = self.lookups.find_vehicle_by_plate(normalized)
        if vehicle is None:
            return Success(
                f"END No record found for plate: {normalized}", ResultSummary.NOT_FOUND,
            )
        return Success(f"END {vehicle.summary}", vehicle.status.upper())

    def stats(self, ctx: QueryContext, search_term: str = STATS_SEARCH_TERM) -> HandlerResult:
        stats = self.audit_log.statistics(ctx.officer_id)
        return Success(
            "END Your USSD Stats\n"
            f"Today: {stats.today}\n"
            f"This week: {stats.this_week}\n"
            f"This month: {stats.this_month}\n"
            f"Total: {stats.all_time}\n"
            f"Success rate: {stats.success_rate:.1f}%",
            ResultSummary.OK,
        )


# ════════════════════════════════════════════════════════════════════
#  Dispatch
# ════════════════════════════════════════════════════════════════════

class FeatureDispatcher:
    """Runs a handler and owns the one-audit-entry-per-attempt rule."""

    def __init__(
        self,
        handlers: FeatureHandlers,
        audit_log: QueryAuditLog,
        *,
        max_response_length: int = 182,
    ) -> None:
        self.handlers = handlers
        self.audit_log = audit_log
        self.max_response_length = max_response_length

    def handler_for(self, feature: Feature) -> Callable[[QueryContext, str], HandlerResult]:
        return {
            Feature.WANTED: self.handlers.wanted,
            Feature.MISSING: self.handlers.missing,
            Feature.BACKGROUND: self.handlers.background,
            Feature.VEHICLE: self.handlers.vehicle,
            Feature.STATS: self.handlers.stats,
        }[feature]

    def dispatch(self, feature: Feature, ctx: QueryContext, search_term: str) -> str:
        query_type: QueryType = feature.query_type
        if feature == Feature.STATS:
            search_term = STATS_SEARCH_TERM
        try:
            result = self.handler_for(feature)(ctx, search_term)
        except Exception as exc:
            logger.exception(
                "USSD %s handler failed (session=%s)", query_type, ctx.session_id,
            )
            result = Failure(
                messages.SERVICE_ERROR, ResultSummary.ERROR, type(exc).__name__,
            )

        self.audit_log.append(AuditEntry(
            officer_id=ctx.officer_id,
            phone_number=ctx.phone_number,
            query_type=query_type,
            search_term=search_term,
            result_summary=result.result_summary,
            success=isinstance(result, Success),
            error_message=getattr(result, "error_message", ""),
            session_id=ctx.session_id,
        ))
        logger.info(
            "USSD %s query by officer %s → %s",
            query_type, ctx.officer_id, result.result_summary,
        )
        return fit_screen(result.response, self.max_response_length)
