"""
USSD app URL configuration.

Included in the project-level ``urls.py`` as::

    path('api/ussd/', include('ussd.urls')),

Endpoint Map
------------
Gateway
    POST   /callback/                    → UssdCallbackView

Officer management
    POST   /register/                    → PhoneRegistrationView
    GET    /officers/                    → UssdOfficerViewSet.list
    POST   /officers/{id}/toggle/        → UssdOfficerViewSet.toggle
    POST   /officers/{id}/reset-pin/     → UssdOfficerViewSet.reset_pin
    GET    /officers/{id}/stats/         → UssdOfficerViewSet.stats

Monitoring
    GET    /logs/                        → QueryLogListView
    GET    /stations/{id}/stats/         → StationStatsView
"""

from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import (
    PhoneRegistrationView,
    QueryLogListView,
    StationStatsView,
    UssdCallbackView,
    UssdOfficerViewSet,
)

app_name = "ussd"

router = DefaultRouter()
router.register(r"officers", UssdOfficerViewSet, basename="officer")

urlpatterns = [
    path("callback/", UssdCallbackView.as_view(), name="callback"),
    path("register/", PhoneRegistrationView.as_view(), name="register"),
    path("logs/", QueryLogListView.as_view(), name="query-logs"),
    path(
        "stations/<int:pk>/stats/",
        StationStatsView.as_view(),
        name="station-stats",
    ),
    path("", include(router.urls)),
]
