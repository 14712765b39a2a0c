"""
USSD app views.

``UssdCallbackView`` is the gateway webhook.  It always answers 200 with
a ``text/plain`` body starting ``CON `` or ``END ``; failures never
surface as HTTP errors because the gateway cannot render them.

The remaining views are thin operator endpoints: validate with a
serializer, delegate to ``services.py``, serialize the result.

View Map
--------
- ``UssdCallbackView``     — POST /callback/
- ``PhoneRegistrationView`` — POST /register/
- ``UssdOfficerViewSet``   — /officers/ (list, toggle, reset-pin, stats)
- ``QueryLogListView``     — GET /logs/
- ``StationStatsView``     — GET /stations/{id}/stats/
"""

from __future__ import annotations

import logging

from django.http import HttpResponse
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import ParseError, UnsupportedMediaType
from rest_framework.parsers import FormParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from core.domain.exceptions import DomainError

from . import messages
from .gateway import build_gateway
from .serializers import (
    OfficerReportSerializer,
    PhoneRegistrationSerializer,
    PinIssuedSerializer,
    QueryLogSerializer,
    ResetPinSerializer,
    StationStatisticsSerializer,
    UssdCallbackSerializer,
    UssdOfficerSerializer,
)
from .services import UssdMonitoringService, UssdOfficerService

logger = logging.getLogger(__name__)

MAX_LOG_LIMIT = 500


# ═══════════════════════════════════════════════════════════════════
#  Gateway webhook
# ═══════════════════════════════════════════════════════════════════


class UssdCallbackView(APIView):
    """
    POST /api/ussd/callback/

    Public endpoint: the caller is authenticated by phone + Quick PIN
    inside the conversation, not at the transport level.

    Form fields: ``sessionId``, ``serviceCode``, ``phoneNumber``, ``text``.
    """

    authentication_classes = []
    permission_classes = [AllowAny]
    parser_classes = [FormParser, MultiPartParser]
    gateway_factory = staticmethod(build_gateway)

    @staticmethod
    def _reply(body: str) -> HttpResponse:
        return HttpResponse(body, content_type="text/plain", status=200)

    def post(self, request: Request) -> HttpResponse:
        try:
            data = request.data
        except (ParseError, UnsupportedMediaType):
            # No identity is known yet, so this turn cannot be audited.
            logger.warning(
                "Unparseable USSD callback from %s (content-type=%s)",
                request.META.get("REMOTE_ADDR"), request.content_type,
            )
            return self._reply(messages.SERVICE_UNAVAILABLE)

        serializer = UssdCallbackSerializer(data=data)
        if not serializer.is_valid():
            logger.warning(
                "Rejected USSD callback missing fields %s from %s",
                sorted(serializer.errors), request.META.get("REMOTE_ADDR"),
            )
            return self._reply(messages.INVALID_REQUEST)

        payload = serializer.validated_data
        try:
            body = self.gateway_factory().handle_turn(
                session_id=payload["sessionId"],
                phone_number=payload["phoneNumber"],
                text=payload["text"],
                request=request,
            )
        except Exception:
            logger.exception(
                "USSD gateway failure (session=%s)", payload["sessionId"],
            )
            body = messages.SERVICE_UNAVAILABLE
        return self._reply(body)


# ═══════════════════════════════════════════════════════════════════
#  Officer management
# ═══════════════════════════════════════════════════════════════════


class PhoneRegistrationView(APIView):
    """
    POST /api/ussd/register/

    Public endpoint.  The officer proves identity with their web
    credentials and receives a one-time Quick PIN (201 Created).
    """

    permission_classes = [AllowAny]

    def post(self, request: Request) -> Response:
        serializer = PhoneRegistrationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        issued = UssdOfficerService.register_phone(
            identifier=serializer.validated_data["identifier"],
            password=serializer.validated_data["password"],
            phone_number=serializer.validated_data["phone_number"],
            request=request,
        )
        return Response(PinIssuedSerializer(issued).data, status=status.HTTP_201_CREATED)


class UssdOfficerViewSet(viewsets.ViewSet):
    """
    /api/ussd/officers/

    Station-commander tooling for USSD-registered officers.
    """

    permission_classes = [IsAuthenticated]
    lookup_value_regex = r"\d+"

    def list(self, request: Request) -> Response:
        officers = UssdOfficerService.list_officers(request.user)
        return Response(UssdOfficerSerializer(officers, many=True).data)

    @action(detail=True, methods=["post"], url_path="toggle")
    def toggle(self, request: Request, pk: str = None) -> Response:
        officer = UssdOfficerService.toggle_access(int(pk), request.user)
        state = "enabled" if officer.ussd_enabled else "disabled"
        return Response({
            "officer": UssdOfficerSerializer(officer).data,
            "message": f"USSD {state} for {officer.get_full_name() or officer.username}",
        })

    @action(detail=True, methods=["post"], url_path="reset-pin")
    def reset_pin(self, request: Request, pk: str = None) -> Response:
        serializer = ResetPinSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        issued = UssdOfficerService.reset_pin(
            int(pk),
            request.user,
            new_pin=serializer.validated_data.get("new_pin") or None,
        )
        return Response(PinIssuedSerializer(issued).data)

    @action(detail=True, methods=["get"], url_path="stats")
    def stats(self, request: Request, pk: str = None) -> Response:
        report = UssdMonitoringService.officer_report(int(pk), request.user)
        return Response(OfficerReportSerializer(report).data)


# ═══════════════════════════════════════════════════════════════════
#  Monitoring
# ═══════════════════════════════════════════════════════════════════


class QueryLogListView(APIView):
    """
    GET /api/ussd/logs/?officer=<id>&limit=<n>

    Most recent audit entries, newest first (default 50, max 500).
    """

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        try:
            officer_id = request.query_params.get("officer")
            officer_id = int(officer_id) if officer_id else None
            limit = int(request.query_params.get("limit", 50))
        except ValueError:
            raise DomainError("'officer' and 'limit' must be integers.")
        limit = max(1, min(limit, MAX_LOG_LIMIT))

        entries = UssdMonitoringService.recent_queries(
            request.user, officer_id=officer_id, limit=limit,
        )
        return Response(QueryLogSerializer(entries, many=True).data)


class StationStatsView(APIView):
    """GET /api/ussd/stations/{id}/stats/"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request, pk: int) -> Response:
        stats = UssdMonitoringService.station_report(pk, request.user)
        return Response(StationStatisticsSerializer(stats).data)
