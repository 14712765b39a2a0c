from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import Role, Station, User


@admin.register(Role)
class RoleAdmin(admin.ModelAdmin):
    list_display = ("name", "hierarchy_level", "description")
    search_fields = ("name",)
    ordering = ("-hierarchy_level",)
    filter_horizontal = ("permissions",)


@admin.register(Station)
class StationAdmin(admin.ModelAdmin):
    list_display = ("code", "name", "district", "region", "active")
    search_fields = ("code", "name")
    list_filter = ("active", "region")


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ("username", "badge_number", "national_id", "station",
                    "role", "ussd_phone_number", "ussd_enabled", "is_active")
    search_fields = ("username", "email", "national_id", "phone_number",
                     "badge_number", "ussd_phone_number")
    list_filter = ("is_active", "ussd_enabled", "role", "station")
    filter_horizontal = ("groups", "user_permissions")
    readonly_fields = ("ussd_quick_pin_hash", "ussd_registered_at", "ussd_last_used")
    fieldsets = BaseUserAdmin.fieldsets + (
        ("Officer", {"fields": ("national_id", "phone_number", "badge_number",
                                "station", "role")}),
        ("USSD", {"fields": ("ussd_phone_number", "ussd_enabled", "ussd_daily_limit",
                             "ussd_quick_pin_hash", "ussd_registered_at",
                             "ussd_last_used")}),
    )
    add_fieldsets = BaseUserAdmin.add_fieldsets + (
        ("Officer", {"fields": ("email", "national_id", "phone_number",
                                "first_name", "last_name", "badge_number",
                                "station", "role")}),
    )
