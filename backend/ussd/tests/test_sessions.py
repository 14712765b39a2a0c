"""
Unit tests — SessionStore (cache-backed USSD sessions).

Each test builds its own ``LocMemCache`` so nothing is shared with the
``default`` alias or with other tests.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import timedelta

import pytest
from django.core.cache.backends.locmem import LocMemCache
from django.utils import timezone

from ussd.conf import UssdSettings
from ussd.exceptions import SessionBusy, SessionNotFound
from ussd.models import Feature
from ussd.sessions import OfficerSnapshot, SessionStore, UssdSession

PHONE = "+23276000001"


@pytest.fixture()
def store() -> SessionStore:
    cache = LocMemCache(f"ussd-test-{uuid.uuid4().hex}", {})
    return SessionStore(cache, ttl_seconds=180, lock_timeout_seconds=5, lock_wait_seconds=0)


def _snapshot(officer_id: int = 7) -> OfficerSnapshot:
    return OfficerSnapshot(
        officer_id=officer_id,
        badge="SLP-0007",
        name="Amara Kamara",
        station_id=1,
        station_name="Central Police Station",
        station_code="FT-CEN",
        daily_limit=50,
    )


class TestSessionLifecycle:

    def test_missing_session_is_none(self, store):
        assert store.get("nope") is None

    def test_create_then_get(self, store):
        created = store.create("s1", PHONE)
        fetched = store.get("s1")

        assert fetched == created
        assert fetched.phone_number == PHONE
        assert not fetched.is_authenticated
        assert fetched.feature is None
        assert fetched.expires_at - fetched.created_at == timedelta(seconds=180)

    def test_update_applies_patch_and_slides_expiry(self, store):
        created = store.create("s1", PHONE)
        updated = store.update("s1", selected_feature=Feature.VEHICLE.value)

        assert updated.selected_feature == "4"
        assert updated.feature is Feature.VEHICLE
        assert updated.expires_at >= created.expires_at
        assert store.get("s1").selected_feature == "4"

    def test_update_missing_session_raises(self, store):
        with pytest.raises(SessionNotFound) as excinfo:
            store.update("ghost", selected_feature="1")
        assert excinfo.value.session_id == "ghost"

    def test_update_unknown_field_raises(self, store):
        store.create("s1", PHONE)
        with pytest.raises(TypeError):
            store.update("s1", pin="1234")

    def test_clear(self, store):
        store.create("s1", PHONE)
        store.clear("s1")
        assert store.get("s1") is None

    def test_expired_session_reads_as_absent(self, store):
        session = store.create("s1", PHONE)
        stale = replace(session, expires_at=timezone.now() - timedelta(seconds=1))
        store.cache.set(store._key("s1"), stale.to_dict(), timeout=180)

        assert store.get("s1") is None
        assert store.cache.get(store._key("s1")) is None

    def test_update_after_expiry_raises(self, store):
        session = store.create("s1", PHONE)
        stale = replace(session, expires_at=timezone.now() - timedelta(seconds=1))
        store.cache.set(store._key("s1"), stale.to_dict(), timeout=180)

        with pytest.raises(SessionNotFound):
            store.update("s1", selected_feature="1")


class TestBindOfficer:

    def test_bind_sets_identity_and_snapshot_together(self, store):
        store.create("s1", PHONE)
        store.update("s1", selected_feature="1")

        bound = store.bind_officer("s1", 7, _snapshot())

        assert bound.is_authenticated
        assert bound.officer_id == 7
        assert bound.officer_snapshot == _snapshot()
        assert bound.selected_feature == "1"

        fetched = store.get("s1")
        assert fetched.officer_id == 7
        assert fetched.officer_snapshot.station_code == "FT-CEN"

    def test_bind_missing_session_raises(self, store):
        with pytest.raises(SessionNotFound):
            store.bind_officer("ghost", 7, _snapshot())

    def test_dict_round_trip_keeps_snapshot(self):
        now = timezone.now()
        session = UssdSession(
            session_id="s1",
            phone_number=PHONE,
            created_at=now,
            expires_at=now + timedelta(seconds=180),
            officer_id=7,
            selected_feature="5",
            officer_snapshot=_snapshot(),
        )
        assert UssdSession.from_dict(session.to_dict()) == session


class TestSessionLock:

    def test_lock_can_be_taken_again_after_release(self, store):
        with store.lock("s1"):
            pass
        with store.lock("s1"):
            pass

    def test_concurrent_turn_is_busy(self, store):
        with store.lock("s1"):
            with pytest.raises(SessionBusy) as excinfo:
                with store.lock("s1"):
                    pass
        assert excinfo.value.session_id == "s1"

    def test_other_sessions_are_not_blocked(self, store):
        with store.lock("s1"):
            with store.lock("s2"):
                pass

    def test_lock_released_on_error(self, store):
        with pytest.raises(RuntimeError):
            with store.lock("s1"):
                raise RuntimeError("boom")
        with store.lock("s1"):
            pass

    def test_foreign_lock_token_is_not_released(self, store):
        key = f"{SessionStore.LOCK_PREFIX}s1"
        with store.lock("s1"):
            # Lock expired and another turn took it over.
            store.cache.set(key, "someone-else", timeout=5)
        assert store.cache.get(key) == "someone-else"


class TestFromSettings:

    def test_uses_configured_values(self):
        conf = UssdSettings(session_ttl_seconds=60, session_lock_wait_seconds=1)
        built = SessionStore.from_settings(conf)
        assert built.ttl_seconds == 60
        assert built.lock_wait_seconds == 1

    def test_officer_snapshot_from_user(self, ussd_officer):
        officer = ussd_officer(badge_number="SLP-0042")
        snapshot = OfficerSnapshot.from_user(officer)

        assert snapshot.officer_id == officer.pk
        assert snapshot.badge == "SLP-0042"
        assert snapshot.name == "Amara Kamara"
        assert snapshot.station_code == "FT-CEN"
        assert snapshot.daily_limit == officer.ussd_daily_limit
