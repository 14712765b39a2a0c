"""
Integration tests — USSD operator endpoints.

Endpoints under test (app_name="ussd"):
    POST /api/ussd/register/                 ussd:register
    GET  /api/ussd/officers/                 ussd:officer-list
    POST /api/ussd/officers/{id}/toggle/     ussd:officer-toggle
    POST /api/ussd/officers/{id}/reset-pin/  ussd:officer-reset-pin
    GET  /api/ussd/officers/{id}/stats/      ussd:officer-stats
    GET  /api/ussd/logs/                     ussd:query-logs
    GET  /api/ussd/stations/{id}/stats/      ussd:station-stats

Permissions:
    accounts.can_manage_ussd_officers — list / toggle / reset-pin
    ussd.can_view_ussd_audit          — logs, station stats, others' stats
"""

from __future__ import annotations

from django.contrib.auth.models import Permission
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from accounts.models import Role
from ussd.models import QueryLog, QueryType, ResultSummary

from .helpers import log_entry, make_officer, make_station

_PASSWORD = "Str0ng!Pass99"


class OperatorApiTestCase(TestCase):

    @classmethod
    def setUpTestData(cls):
        cls.station = make_station()
        commander_role = Role.objects.create(name="Station Commander", hierarchy_level=60)
        commander_role.permissions.set(Permission.objects.filter(
            codename__in=["can_manage_ussd_officers", "can_view_ussd_audit"],
        ))
        cls.commander = make_officer(
            username="commander",
            ussd_phone_number=None,
            pin=None,
            ussd_enabled=False,
            role=commander_role,
            station=cls.station,
        )
        cls.officer = make_officer(
            username="constable",
            ussd_phone_number="+23276000001",
            station=cls.station,
            badge_number="SLP-0001",
        )
        cls.unregistered = make_officer(
            username="recruit",
            ussd_phone_number=None,
            pin=None,
            ussd_enabled=False,
        )

    def setUp(self):
        self.client = APIClient()

    def login(self, username: str) -> None:
        resp = self.client.post(
            reverse("accounts:login"),
            {"identifier": username, "password": _PASSWORD},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        self.client.credentials(HTTP_AUTHORIZATION=f"Bearer {resp.data['access']}")


class TestPhoneRegistration(OperatorApiTestCase):

    def _register(self, identifier="recruit", password=_PASSWORD, phone="+23276123456"):
        return self.client.post(
            reverse("ussd:register"),
            {"identifier": identifier, "password": password, "phone_number": phone},
            format="json",
        )

    def test_register_issues_quick_pin(self):
        resp = self._register()

        self.assertEqual(resp.status_code, status.HTTP_201_CREATED, msg=resp.data)
        pin = resp.data["quick_pin"]
        self.assertRegex(pin, r"^[1-9]\d{3}$")
        self.assertEqual(resp.data["officer"]["ussd_phone_number"], "+23276123456")
        self.assertTrue(resp.data["officer"]["ussd_enabled"])

        self.unregistered.refresh_from_db()
        self.assertTrue(self.unregistered.check_quick_pin(pin))
        self.assertIsNotNone(self.unregistered.ussd_registered_at)

    def test_register_with_bad_credentials(self):
        resp = self._register(password="wrong")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_register_rejects_non_e164_phone(self):
        resp = self._register(phone="076123456")
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("phone_number", resp.data)

    def test_phone_taken_by_another_officer(self):
        resp = self._register(phone=self.officer.ussd_phone_number)
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)

    def test_reregistering_replaces_pin(self):
        old_hash = self.officer.ussd_quick_pin_hash
        resp = self._register(identifier="constable", phone="+23276000001")

        self.assertEqual(resp.status_code, status.HTTP_201_CREATED)
        self.officer.refresh_from_db()
        self.assertNotEqual(self.officer.ussd_quick_pin_hash, old_hash)


class TestOfficerManagement(OperatorApiTestCase):

    def test_list_requires_manage_permission(self):
        self.login("constable")
        resp = self.client.get(reverse("ussd:officer-list"))
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_list_requires_authentication(self):
        resp = self.client.get(reverse("ussd:officer-list"))
        self.assertEqual(resp.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_list_only_registered_officers(self):
        self.login("commander")
        resp = self.client.get(reverse("ussd:officer-list"))

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        usernames = [row["username"] for row in resp.data]
        self.assertEqual(usernames, ["constable"])
        self.assertEqual(resp.data[0]["station_code"], "FT-CEN")
        self.assertNotIn("ussd_quick_pin_hash", resp.data[0])

    def test_toggle_disables_then_enables(self):
        self.login("commander")
        url = reverse("ussd:officer-toggle", args=[self.officer.pk])

        resp = self.client.post(url)
        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        self.assertFalse(resp.data["officer"]["ussd_enabled"])
        self.assertIn("disabled", resp.data["message"])

        resp = self.client.post(url)
        self.assertTrue(resp.data["officer"]["ussd_enabled"])

    def test_toggle_unregistered_officer_conflicts(self):
        self.login("commander")
        resp = self.client.post(reverse("ussd:officer-toggle", args=[self.unregistered.pk]))
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)

    def test_toggle_unknown_officer(self):
        self.login("commander")
        resp = self.client.post(reverse("ussd:officer-toggle", args=[999999]))
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_toggle_forbidden_without_permission(self):
        self.login("constable")
        resp = self.client.post(reverse("ussd:officer-toggle", args=[self.officer.pk]))
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_reset_pin_random(self):
        self.login("commander")
        resp = self.client.post(
            reverse("ussd:officer-reset-pin", args=[self.officer.pk]), {}, format="json",
        )

        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        self.officer.refresh_from_db()
        self.assertTrue(self.officer.check_quick_pin(resp.data["quick_pin"]))

    def test_reset_pin_explicit(self):
        self.login("commander")
        resp = self.client.post(
            reverse("ussd:officer-reset-pin", args=[self.officer.pk]),
            {"new_pin": "5678"},
            format="json",
        )

        self.assertEqual(resp.data["quick_pin"], "5678")
        self.officer.refresh_from_db()
        self.assertTrue(self.officer.check_quick_pin("5678"))

    def test_reset_pin_rejects_bad_format(self):
        self.login("commander")
        resp = self.client.post(
            reverse("ussd:officer-reset-pin", args=[self.officer.pk]),
            {"new_pin": "12"},
            format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_reset_pin_for_unregistered_officer(self):
        self.login("commander")
        resp = self.client.post(
            reverse("ussd:officer-reset-pin", args=[self.unregistered.pk]), {}, format="json",
        )
        self.assertEqual(resp.status_code, status.HTTP_409_CONFLICT)


class TestMonitoring(OperatorApiTestCase):

    @classmethod
    def setUpTestData(cls):
        super().setUpTestData()
        for _ in range(3):
            log_entry(officer=cls.officer, query_type=QueryType.WANTED,
                      result_summary=ResultSummary.WANTED)
        log_entry(officer=cls.officer, query_type=QueryType.VEHICLE,
                  result_summary=ResultSummary.INVALID_PLATE, success=False)
        log_entry(phone_number="+23276999999", query_type=None,
                  result_summary=ResultSummary.AUTH_FAILED, success=False)

    def test_officer_reads_own_stats(self):
        self.login("constable")
        resp = self.client.get(reverse("ussd:officer-stats", args=[self.officer.pk]))

        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        self.assertEqual(resp.data["statistics"]["today"], 4)
        self.assertEqual(resp.data["statistics"]["by_type"], {"wanted": 3, "vehicle": 1})
        self.assertEqual(resp.data["statistics"]["success_rate"], 75.0)
        self.assertEqual(resp.data["quota"]["remaining"], 46)
        self.assertFalse(resp.data["abuse"]["suspicious"])

    def test_officer_cannot_read_others_stats(self):
        self.login("constable")
        resp = self.client.get(reverse("ussd:officer-stats", args=[self.commander.pk]))
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_auditor_reads_any_stats(self):
        self.login("commander")
        resp = self.client.get(reverse("ussd:officer-stats", args=[self.officer.pk]))
        self.assertEqual(resp.status_code, status.HTTP_200_OK)

    def test_logs_newest_first(self):
        self.login("commander")
        resp = self.client.get(reverse("ussd:query-logs"))

        self.assertEqual(resp.status_code, status.HTTP_200_OK)
        self.assertEqual(len(resp.data), 5)
        ids = [row["id"] for row in resp.data]
        self.assertEqual(ids, sorted(ids, reverse=True))

    def test_logs_filtered_and_limited(self):
        self.login("commander")
        resp = self.client.get(
            reverse("ussd:query-logs"), {"officer": self.officer.pk, "limit": 2},
        )

        self.assertEqual(len(resp.data), 2)
        self.assertTrue(all(row["officer"] == self.officer.pk for row in resp.data))
        self.assertEqual(resp.data[0]["officer_badge"], "SLP-0001")

    def test_logs_bad_params(self):
        self.login("commander")
        resp = self.client.get(reverse("ussd:query-logs"), {"limit": "lots"})
        self.assertEqual(resp.status_code, status.HTTP_400_BAD_REQUEST)

    def test_logs_forbidden_without_audit_permission(self):
        self.login("constable")
        resp = self.client.get(reverse("ussd:query-logs"))
        self.assertEqual(resp.status_code, status.HTTP_403_FORBIDDEN)

    def test_station_stats(self):
        self.login("commander")
        resp = self.client.get(reverse("ussd:station-stats", args=[self.station.pk]))

        self.assertEqual(resp.status_code, status.HTTP_200_OK, msg=resp.data)
        self.assertEqual(resp.data["total_queries"], 4)
        self.assertEqual(resp.data["active_officers"], 1)
        self.assertEqual(resp.data["top_query_types"][0], {"type": "wanted", "count": 3})

    def test_station_stats_unknown_station(self):
        self.login("commander")
        resp = self.client.get(reverse("ussd:station-stats", args=[999999]))
        self.assertEqual(resp.status_code, status.HTTP_404_NOT_FOUND)

    def test_audit_trail_unchanged_by_reads(self):
        self.login("commander")
        before = QueryLog.objects.count()
        self.client.get(reverse("ussd:query-logs"))
        self.client.get(reverse("ussd:station-stats", args=[self.station.pk]))
        self.assertEqual(QueryLog.objects.count(), before)
