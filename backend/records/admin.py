from django.contrib import admin

from .models import (
    BackgroundCheck,
    CaseRecord,
    MissingPersonAlert,
    Person,
    Vehicle,
    WantedPerson,
)


@admin.register(Person)
class PersonAdmin(admin.ModelAdmin):
    list_display = ("id", "national_id", "first_name", "last_name",
                    "is_wanted", "is_deceased_or_missing")
    list_filter = ("is_wanted", "is_deceased_or_missing")
    search_fields = ("national_id", "first_name", "last_name")


@admin.register(WantedPerson)
class WantedPersonAdmin(admin.ModelAdmin):
    list_display = ("id", "person", "danger_level", "status",
                    "warrant_number", "created_at")
    list_filter = ("status", "danger_level")
    search_fields = ("warrant_number", "person__national_id")


@admin.register(MissingPersonAlert)
class MissingPersonAlertAdmin(admin.ModelAdmin):
    list_display = ("id", "person_name", "status", "last_seen_location",
                    "contact_phone", "expires_at")
    list_filter = ("status",)
    search_fields = ("person_name",)


@admin.register(Vehicle)
class VehicleAdmin(admin.ModelAdmin):
    list_display = ("id", "license_plate", "vehicle_type", "make",
                    "model", "status")
    list_filter = ("status", "vehicle_type")
    search_fields = ("license_plate", "owner_nin")


@admin.register(CaseRecord)
class CaseRecordAdmin(admin.ModelAdmin):
    list_display = ("id", "case_number", "person", "category",
                    "severity", "status")
    list_filter = ("severity", "status")
    search_fields = ("case_number",)


@admin.register(BackgroundCheck)
class BackgroundCheckAdmin(admin.ModelAdmin):
    list_display = ("id", "nin", "request_type", "status", "created_at")
    list_filter = ("status", "request_type")
    readonly_fields = ("nin", "requested_by", "request_type", "result",
                       "status", "issued_at", "expires_at",
                       "phone_number", "created_at")
