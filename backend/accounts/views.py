"""
Accounts app views.

Thin views: validate input via serializers and return the result
wrapped in a DRF ``Response``.

View Map
--------
- ``LoginView`` — POST /auth/login/
"""

from __future__ import annotations

from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from .serializers import CustomTokenObtainPairSerializer, UserDetailSerializer


class LoginView(APIView):
    """
    POST /api/accounts/auth/login/

    Public endpoint.  Authenticates an officer via any of the four
    unique identifiers (username, national_id, phone_number, email)
    plus password.

    Response body: ``{"access": ..., "refresh": ..., "user": {...}}``.
    Invalid credentials → 400 (serializer validation error).
    """

    permission_classes = [AllowAny]

    def post(self, request: Request) -> Response:
        serializer = CustomTokenObtainPairSerializer(
            data=request.data,
            context={"request": request},
        )
        serializer.is_valid(raise_exception=True)

        payload = serializer.validated_data  # contains 'access' and 'refresh'
        payload["user"] = UserDetailSerializer(serializer.user).data

        return Response(payload, status=status.HTTP_200_OK)
