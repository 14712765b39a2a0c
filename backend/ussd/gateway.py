"""
UssdGateway — one webhook POST, one conversational turn.

    parse tokens → lock session → resolve_state → execute state
        → (auth gate → quota) → feature dispatch → audit → session write/clear

Every ``END`` reply is backed by exactly one ``QueryLog`` entry:
rejections are audited here, feature outcomes by ``FeatureDispatcher``.
``CON`` replies write no audit entry.  An ``END`` reply clears the
session, except when the turn never owned it: a concurrent turn that
finds the lock taken, or a replay from a different phone number.

Collaborators are injected; ``build_gateway()`` assembles the production
wiring from ``settings.USSD``.
"""

from __future__ import annotations

import logging

from . import messages
from .audit import AuditEntry, QueryAuditLog
from .auth import AuthenticationGate, AuthStatus, PinLockout
from .conf import UssdSettings, get_ussd_settings
from .exceptions import SessionBusy
from .formatting import fit_screen
from .handlers import FeatureDispatcher, FeatureHandlers, QueryContext
from .menu import (
    Authenticated,
    Authenticating,
    AwaitingSearchTerm,
    FeatureSelect,
    MainMenu,
    MenuState,
    parse_input,
    resolve_state,
)
from .models import Feature, ResultSummary
from .ratelimit import RateLimiter
from .sessions import OfficerSnapshot, SessionStore, UssdSession

logger = logging.getLogger(__name__)

AUTH_REJECTIONS = {
    AuthStatus.INVALID_FORMAT: (ResultSummary.INVALID_PIN, messages.INVALID_PIN_FORMAT),
    AuthStatus.LOCKED_OUT: (ResultSummary.LOCKED_OUT, messages.LOCKED_OUT),
    AuthStatus.FAILED: (ResultSummary.AUTH_FAILED, messages.AUTH_FAILED),
}


def prompt_for(feature: Feature) -> str | None:
    """Search-term prompt for a feature; ``None`` for stats."""
    if feature == Feature.STATS:
        return None
    if feature == Feature.VEHICLE:
        return messages.PROMPT_PLATE
    return messages.PROMPT_NIN


class UssdGateway:

    def __init__(
        self,
        *,
        sessions: SessionStore,
        gate: AuthenticationGate,
        dispatcher: FeatureDispatcher,
        audit_log: QueryAuditLog,
        separator: str = "*",
        max_response_length: int = 182,
    ) -> None:
        self.sessions = sessions
        self.gate = gate
        self.dispatcher = dispatcher
        self.audit_log = audit_log
        self.separator = separator
        self.max_response_length = max_response_length

    # ── Entry point ─────────────────────────────────────────────────

    def handle_turn(
        self,
        session_id: str,
        phone_number: str,
        text: str,
        request=None,
    ) -> str:
        tokens = parse_input(text, self.separator)
        try:
            with self.sessions.lock(session_id):
                response = self._turn(session_id, phone_number, tokens, request)
        except SessionBusy:
            # The session belongs to the turn holding the lock; leave it alone.
            return self._reject(
                session_id, phone_number, ResultSummary.SESSION_BUSY,
                messages.SESSION_BUSY, error="concurrent turn in progress",
            )
        return fit_screen(response, self.max_response_length)

    def _turn(self, session_id, phone_number, tokens, request) -> str:
        session = self.sessions.get(session_id)
        if session is not None and session.phone_number != phone_number:
            logger.warning(
                "USSD session %s replayed from a different number", session_id,
            )
            return self._reject(
                session_id, phone_number, ResultSummary.INVALID_REQUEST,
                messages.INVALID_REQUEST, error="phone number mismatch",
            )
        if session is None:
            session = self.sessions.create(session_id, phone_number)

        state = resolve_state(tokens, session)
        try:
            response = self._execute(state, session, request)
        except Exception:
            logger.exception("USSD turn failed (session=%s)", session_id)
            response = self._reject(
                session_id, phone_number, ResultSummary.ERROR,
                messages.SERVICE_ERROR, officer_id=session.officer_id,
                error="unhandled error",
            )

        if messages.is_terminal(response):
            self.sessions.clear(session_id)
        logger.info(
            "USSD turn session=%s level=%d state=%s terminal=%s",
            session_id, len(tokens), type(state).__name__,
            messages.is_terminal(response),
        )
        return response

    # ── State execution ─────────────────────────────────────────────

    def _execute(self, state: MenuState, session: UssdSession, request) -> str:
        if isinstance(state, MainMenu):
            return messages.MAIN_MENU

        if isinstance(state, FeatureSelect):
            feature = state.feature
            if feature is None:
                return self._reject(
                    session.session_id, session.phone_number,
                    ResultSummary.INVALID_OPTION, messages.INVALID_OPTION,
                    search_term=state.choice, error="unknown menu option",
                )
            self.sessions.update(session.session_id, selected_feature=feature.value)
            return messages.PROMPT_PIN

        if isinstance(state, Authenticating):
            return self._authenticate(state, session, request)

        if isinstance(state, AwaitingSearchTerm):
            prompt = prompt_for(state.feature)
            if prompt is not None:
                return prompt
            return self.dispatcher.dispatch(
                state.feature, self._context(session), "",
            )

        if isinstance(state, Authenticated):
            return self.dispatcher.dispatch(
                state.feature, self._context(session), state.search_term,
            )

        # InvalidRequest
        feature = session.feature
        return self._reject(
            session.session_id, session.phone_number,
            ResultSummary.INVALID_REQUEST, messages.INVALID_REQUEST,
            officer_id=session.officer_id,
            query_type=feature.query_type if feature else None,
            error=state.reason,
        )

    def _authenticate(self, state: Authenticating, session: UssdSession, request) -> str:
        feature = state.feature
        if session.selected_feature != feature.value:
            session = self.sessions.update(
                session.session_id, selected_feature=feature.value,
            )

        outcome = self.gate.authenticate(session.phone_number, state.pin, request)

        if outcome.status in AUTH_REJECTIONS:
            summary, response = AUTH_REJECTIONS[outcome.status]
            return self._reject(
                session.session_id, session.phone_number, summary, response,
                query_type=feature.query_type, error=summary.label,
            )

        if outcome.status is AuthStatus.RATE_LIMITED:
            return self._reject(
                session.session_id, session.phone_number,
                ResultSummary.RATE_LIMITED,
                messages.DAILY_LIMIT.format(limit=outcome.quota.limit),
                officer_id=outcome.officer.pk,
                query_type=feature.query_type,
                error=ResultSummary.RATE_LIMITED.label,
            )

        officer = outcome.officer
        session = self.sessions.bind_officer(
            session.session_id, officer.pk, OfficerSnapshot.from_user(officer),
        )
        logger.info(
            "USSD officer %s authenticated (session=%s, remaining=%d)",
            officer.pk, session.session_id, outcome.quota.remaining,
        )
        prompt = prompt_for(feature)
        if prompt is not None:
            return prompt
        return self.dispatcher.dispatch(feature, self._context(session), "")

    # ── Helpers ─────────────────────────────────────────────────────

    @staticmethod
    def _context(session: UssdSession) -> QueryContext:
        return QueryContext(
            officer_id=session.officer_id,
            phone_number=session.phone_number,
            session_id=session.session_id,
        )

    def _reject(
        self,
        session_id: str,
        phone_number: str,
        summary: ResultSummary,
        response: str,
        *,
        officer_id: int | None = None,
        query_type: str | None = None,
        search_term: str = "",
        error: str = "",
    ) -> str:
        self.audit_log.append(AuditEntry(
            officer_id=officer_id,
            phone_number=phone_number,
            query_type=query_type,
            search_term=search_term,
            result_summary=summary,
            success=False,
            error_message=error,
            session_id=session_id,
        ))
        logger.info("USSD session %s rejected: %s", session_id, summary)
        return response


def build_gateway(conf: UssdSettings | None = None) -> UssdGateway:
    """Production wiring from ``settings.USSD``."""
    conf = conf or get_ussd_settings()
    audit_log = QueryAuditLog()
    rate_limiter = RateLimiter.from_settings(audit_log, conf)
    lockout = PinLockout(
        audit_log,
        enabled=conf.pin_lockout_enabled,
        threshold=conf.pin_lockout_threshold,
        window_minutes=conf.pin_lockout_window_minutes,
    )
    dispatcher = FeatureDispatcher(
        FeatureHandlers(audit_log, screen_width=conf.max_response_length),
        audit_log,
        max_response_length=conf.max_response_length,
    )
    return UssdGateway(
        sessions=SessionStore.from_settings(conf),
        gate=AuthenticationGate(rate_limiter, lockout),
        dispatcher=dispatcher,
        audit_log=audit_log,
        separator=conf.input_separator,
        max_response_length=conf.max_response_length,
    )
