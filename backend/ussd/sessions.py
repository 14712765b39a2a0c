"""
USSD session store.

The gateway re-POSTs the whole accumulated input on every keystroke, but
some facts must survive between turns: the selected feature and, once
the Quick PIN is verified, the officer's identity.  ``SessionStore`` keeps
them in a Django cache alias with a sliding TTL.

Design
------
- Sessions are plain frozen dataclasses, stored as dicts so any cache
  backend (LocMem, Redis) can hold them.
- ``bind_officer`` writes ``officer_id`` and ``officer_snapshot`` in one
  cache write, so a session is never partially authenticated.
- ``lock`` serialises the turns of one ``session_id`` (gateway retries
  of a timed-out request can otherwise interleave).  It uses the atomic
  ``cache.add`` primitive, which both LocMem and Redis honour.
- Nothing here is module-level state; ``ussd.gateway.build_gateway``
  injects a store into the gateway and tests pass their own.
"""

from __future__ import annotations

import logging
import time
import uuid
from contextlib import contextmanager
from dataclasses import asdict, dataclass, replace
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Iterator

from django.core.cache import caches
from django.utils import timezone

from .conf import UssdSettings, get_ussd_settings
from .exceptions import SessionBusy, SessionNotFound
from .models import Feature

if TYPE_CHECKING:
    from django.core.cache.backends.base import BaseCache

    from accounts.models import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OfficerSnapshot:
    """Officer fields cached for the rest of a conversation."""

    officer_id: int
    badge: str
    name: str
    station_id: int | None
    station_name: str
    station_code: str
    daily_limit: int

    @classmethod
    def from_user(cls, user: User) -> OfficerSnapshot:
        station = user.station
        return cls(
            officer_id=user.pk,
            badge=user.badge_number or "",
            name=user.get_full_name() or user.username,
            station_id=station.pk if station else None,
            station_name=station.name if station else "",
            station_code=station.code if station else "",
            daily_limit=user.ussd_daily_limit,
        )


@dataclass(frozen=True)
class UssdSession:
    session_id: str
    phone_number: str
    created_at: datetime
    expires_at: datetime
    officer_id: int | None = None
    selected_feature: str | None = None
    officer_snapshot: OfficerSnapshot | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.officer_id is not None

    @property
    def feature(self) -> Feature | None:
        if self.selected_feature is None:
            return None
        return Feature(self.selected_feature)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict) -> UssdSession:
        data = dict(data)
        snapshot = data.pop("officer_snapshot", None)
        return cls(
            officer_snapshot=OfficerSnapshot(**snapshot) if snapshot else None,
            **data,
        )


class SessionStore:
    """
    Keyed, expiring store of in-progress USSD conversations.

    Every write refreshes the TTL (sliding expiry); a read after
    ``expires_at`` behaves exactly like a missing session.
    """

    KEY_PREFIX = "ussd:session:"
    LOCK_PREFIX = "ussd:lock:"
    LOCK_POLL_SECONDS = 0.05

    def __init__(
        self,
        cache: BaseCache,
        *,
        ttl_seconds: int = 180,
        lock_timeout_seconds: int = 10,
        lock_wait_seconds: float = 3,
    ) -> None:
        self.cache = cache
        self.ttl_seconds = ttl_seconds
        self.lock_timeout_seconds = lock_timeout_seconds
        self.lock_wait_seconds = lock_wait_seconds

    @classmethod
    def from_settings(cls, conf: UssdSettings | None = None) -> SessionStore:
        conf = conf or get_ussd_settings()
        return cls(
            caches[conf.session_cache_alias],
            ttl_seconds=conf.session_ttl_seconds,
            lock_timeout_seconds=conf.session_lock_timeout_seconds,
            lock_wait_seconds=conf.session_lock_wait_seconds,
        )

    def _key(self, session_id: str) -> str:
        return f"{self.KEY_PREFIX}{session_id}"

    def _write(self, session: UssdSession) -> UssdSession:
        self.cache.set(
            self._key(session.session_id),
            session.to_dict(),
            timeout=self.ttl_seconds,
        )
        return session

    # ── CRUD ────────────────────────────────────────────────────────

    def get(self, session_id: str) -> UssdSession | None:
        data = self.cache.get(self._key(session_id))
        if data is None:
            return None
        session = UssdSession.from_dict(data)
        if session.expires_at <= timezone.now():
            self.clear(session_id)
            return None
        return session

    def create(self, session_id: str, phone_number: str) -> UssdSession:
        now = timezone.now()
        session = UssdSession(
            session_id=session_id,
            phone_number=phone_number,
            created_at=now,
            expires_at=now + timedelta(seconds=self.ttl_seconds),
        )
        logger.debug("USSD session %s created", session_id)
        return self._write(session)

    def update(self, session_id: str, **patch) -> UssdSession:
        """
        Apply ``patch`` to a live session and refresh its TTL.

        Raises
        ------
        SessionNotFound
            If the session expired or never existed.
        TypeError
            If ``patch`` names a field ``UssdSession`` does not have.
        """
        current = self.get(session_id)
        if current is None:
            raise SessionNotFound(session_id)
        patch["expires_at"] = timezone.now() + timedelta(seconds=self.ttl_seconds)
        return self._write(replace(current, **patch))

    def clear(self, session_id: str) -> None:
        self.cache.delete(self._key(session_id))

    def bind_officer(
        self,
        session_id: str,
        officer_id: int,
        snapshot: OfficerSnapshot,
    ) -> UssdSession:
        """Attach identity and snapshot in a single write."""
        return self.update(
            session_id,
            officer_id=officer_id,
            officer_snapshot=snapshot,
        )

    # ── Turn lock ───────────────────────────────────────────────────

    @contextmanager
    def lock(self, session_id: str) -> Iterator[None]:
        """
        Hold the per-session turn lock for the duration of the block.

        Raises
        ------
        SessionBusy
            If another turn keeps the lock past ``lock_wait_seconds``.
        """
        key = f"{self.LOCK_PREFIX}{session_id}"
        token = uuid.uuid4().hex
        deadline = time.monotonic() + self.lock_wait_seconds
        while not self.cache.add(key, token, timeout=self.lock_timeout_seconds):
            if time.monotonic() >= deadline:
                logger.warning("USSD session %s busy; turn rejected", session_id)
                raise SessionBusy(session_id)
            time.sleep(self.LOCK_POLL_SECONDS)
        try:
            yield
        finally:
            if self.cache.get(key) == token:
                self.cache.delete(key)
