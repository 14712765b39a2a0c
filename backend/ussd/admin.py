from django.contrib import admin

from .models import QueryLog


@admin.register(QueryLog)
class QueryLogAdmin(admin.ModelAdmin):
    """Read-only: the audit trail is append-only."""

    list_display = ("timestamp", "officer", "phone_number", "query_type",
                    "result_summary", "success")
    list_filter = ("query_type", "result_summary", "success")
    search_fields = ("phone_number", "search_term", "session_id",
                     "officer__badge_number")
    date_hierarchy = "timestamp"

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
