"""
USSD app serializers.

``UssdCallbackSerializer`` validates the gateway's form body; the rest
shape the operator endpoints.  Validation only; the rules live in
``services.py`` and ``gateway.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from accounts.models import User
from records.validators import is_valid_phone_number, is_valid_quick_pin

from .models import QueryLog


# ═══════════════════════════════════════════════════════════════════
#  Webhook
# ═══════════════════════════════════════════════════════════════════


class UssdCallbackSerializer(serializers.Serializer):
    """Form-encoded body POSTed by the USSD gateway on every turn."""

    sessionId = serializers.CharField(max_length=128)
    serviceCode = serializers.CharField(required=False, allow_blank=True, default="")
    phoneNumber = serializers.CharField(max_length=16)
    text = serializers.CharField(
        required=False, allow_blank=True, default="", trim_whitespace=False,
    )


# ═══════════════════════════════════════════════════════════════════
#  Officer management
# ═══════════════════════════════════════════════════════════════════


class PhoneRegistrationSerializer(serializers.Serializer):
    identifier = serializers.CharField(
        help_text="Username, National ID, Phone Number, or Email.",
    )
    password = serializers.CharField(
        write_only=True,
        style={"input_type": "password"},
    )
    phone_number = serializers.CharField(
        help_text="Handset to bind, E.164 (e.g. +23276123456).",
    )

    def validate_phone_number(self, value: str) -> str:
        value = value.strip()
        if not is_valid_phone_number(value):
            raise serializers.ValidationError(
                "Invalid phone number format. Use E.164 format (e.g. +23276123456)."
            )
        return value


class ResetPinSerializer(serializers.Serializer):
    new_pin = serializers.CharField(
        required=False,
        allow_blank=True,
        help_text="Optional 4-digit PIN; a random one is generated if omitted.",
    )

    def validate_new_pin(self, value: str) -> str:
        if value and not is_valid_quick_pin(value):
            raise serializers.ValidationError("Quick PIN must be exactly 4 digits.")
        return value


class UssdOfficerSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(source="get_full_name", read_only=True)
    station_name = serializers.CharField(
        source="station.name", read_only=True, default=None,
    )
    station_code = serializers.CharField(
        source="station.code", read_only=True, default=None,
    )

    class Meta:
        model = User
        fields = [
            "id",
            "username",
            "badge_number",
            "full_name",
            "station",
            "station_name",
            "station_code",
            "ussd_phone_number",
            "ussd_enabled",
            "ussd_registered_at",
            "ussd_last_used",
            "ussd_daily_limit",
        ]
        read_only_fields = fields


class PinIssuedSerializer(serializers.Serializer):
    """The one and only time a Quick PIN is returned in clear."""

    quick_pin = serializers.CharField()
    officer = UssdOfficerSerializer()


# ═══════════════════════════════════════════════════════════════════
#  Monitoring
# ═══════════════════════════════════════════════════════════════════


class QueryLogSerializer(serializers.ModelSerializer):
    officer_badge = serializers.CharField(
        source="officer.badge_number", read_only=True, default=None,
    )

    class Meta:
        model = QueryLog
        fields = [
            "id",
            "officer",
            "officer_badge",
            "phone_number",
            "query_type",
            "search_term",
            "result_summary",
            "success",
            "error_message",
            "session_id",
            "timestamp",
        ]
        read_only_fields = fields


class QueryStatisticsSerializer(serializers.Serializer):
    today = serializers.IntegerField()
    this_week = serializers.IntegerField()
    this_month = serializers.IntegerField()
    all_time = serializers.IntegerField()
    by_type = serializers.DictField(child=serializers.IntegerField())
    last_query = serializers.DateTimeField(allow_null=True)
    success_rate = serializers.FloatField()


class RateLimitStatusSerializer(serializers.Serializer):
    allowed = serializers.BooleanField()
    remaining = serializers.IntegerField()
    limit = serializers.IntegerField()
    reset_at = serializers.DateTimeField()


class AbuseReportSerializer(serializers.Serializer):
    suspicious = serializers.BooleanField()
    patterns = serializers.ListField(child=serializers.CharField())
    recommendation = serializers.CharField()


class OfficerReportSerializer(serializers.Serializer):
    officer = UssdOfficerSerializer()
    statistics = QueryStatisticsSerializer()
    quota = RateLimitStatusSerializer()
    abuse = AbuseReportSerializer()


class QueryTypeCountSerializer(serializers.Serializer):
    type = serializers.CharField()
    count = serializers.IntegerField()


class StationStatisticsSerializer(serializers.Serializer):
    total_queries = serializers.IntegerField()
    queries_today = serializers.IntegerField()
    queries_this_week = serializers.IntegerField()
    active_officers = serializers.IntegerField()
    top_query_types = QueryTypeCountSerializer(many=True)
