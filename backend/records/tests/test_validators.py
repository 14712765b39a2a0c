"""
Unit tests for ``records.validators`` — pure functions, no database.
"""

from __future__ import annotations

import pytest

from records.validators import (
    is_valid_license_plate,
    is_valid_nin,
    is_valid_phone_number,
    is_valid_quick_pin,
    normalize_license_plate,
)


class TestNin:

    @pytest.mark.parametrize("value", ["12345678901", "00000000000"])
    def test_valid(self, value):
        assert is_valid_nin(value)

    @pytest.mark.parametrize("value", [
        "1234567890",      # 10 digits
        "123456789012",    # 12 digits
        "1234567890A",
        " 12345678901",
        "",
        None,
    ])
    def test_invalid(self, value):
        assert not is_valid_nin(value)


class TestQuickPin:

    def test_valid(self):
        assert is_valid_quick_pin("0420")

    @pytest.mark.parametrize("value", ["123", "12345", "12a4", "", None])
    def test_invalid(self, value):
        assert not is_valid_quick_pin(value)


class TestLicensePlate:

    @pytest.mark.parametrize("raw, expected", [
        ("ab-123 cd", "AB123CD"),
        ("AB 123 CD", "AB123CD"),
        ("  ab.123/cd ", "AB123CD"),
        ("ABC123", "ABC123"),
        ("", ""),
    ])
    def test_normalize(self, raw, expected):
        assert normalize_license_plate(raw) == expected

    @pytest.mark.parametrize("raw", ["ab-123 cd", "x y z", "  Ab 1  ", "A-B"])
    def test_normalize_is_idempotent(self, raw):
        once = normalize_license_plate(raw)
        assert normalize_license_plate(once) == once

    @pytest.mark.parametrize("plate", ["ABC", "AB 123 CD", "abcdefghijkl"])
    def test_valid(self, plate):
        assert is_valid_license_plate(plate)

    @pytest.mark.parametrize("plate", ["AB", "ABCDEFGHIJKLM", "AB#123", "", "--"])
    def test_invalid(self, plate):
        assert not is_valid_license_plate(plate)


class TestPhoneNumber:

    @pytest.mark.parametrize("phone", ["+23276123456", "+12025550123", "+44"])
    def test_valid(self, phone):
        assert is_valid_phone_number(phone)

    @pytest.mark.parametrize("phone", [
        "23276123456",
        "076123456",
        "+0123456",
        "+2327612345678901",
        "+232 76 123456",
        "",
    ])
    def test_invalid(self, phone):
        assert not is_valid_phone_number(phone)
