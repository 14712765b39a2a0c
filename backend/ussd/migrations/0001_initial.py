import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="QueryLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("phone_number", models.CharField(max_length=16)),
                ("query_type", models.CharField(blank=True, choices=[("wanted", "Wanted Person Check"), ("missing", "Missing Person Check"), ("background", "Background Summary"), ("vehicle", "Vehicle Check"), ("stats", "My Stats")], max_length=12, null=True)),
                ("search_term", models.CharField(blank=True, default="", max_length=64)),
                ("result_summary", models.CharField(choices=[("WANTED", "Wanted"), ("NOT_WANTED", "Not wanted"), ("NOT_FOUND", "Not found"), ("MISSING", "Missing"), ("NOT_MISSING", "Not missing"), ("CLEAR", "Clear"), ("RECORD_FOUND", "Record found"), ("ACTIVE", "Vehicle active"), ("STOLEN", "Vehicle stolen"), ("IMPOUNDED", "Vehicle impounded"), ("RECOVERED", "Vehicle recovered"), ("OK", "OK"), ("INVALID_NIN", "Invalid NIN"), ("INVALID_PLATE", "Invalid license plate"), ("INVALID_OPTION", "Invalid menu option"), ("INVALID_PIN", "Invalid PIN format"), ("INVALID_REQUEST", "Invalid request"), ("AUTH_FAILED", "Authentication failed"), ("LOCKED_OUT", "Locked out"), ("RATE_LIMITED", "Daily limit reached"), ("SESSION_BUSY", "Session busy"), ("ERROR", "Error")], max_length=20)),
                ("success", models.BooleanField(default=True)),
                ("error_message", models.CharField(blank=True, default="", max_length=255)),
                ("session_id", models.CharField(blank=True, default="", max_length=128)),
                ("timestamp", models.DateTimeField(default=django.utils.timezone.now)),
                ("officer", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.PROTECT, related_name="ussd_queries", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "USSD Query Log",
                "verbose_name_plural": "USSD Query Logs",
                "ordering": ["-timestamp", "-id"],
                "permissions": [("can_view_ussd_audit", "Can view USSD statistics and abuse reports")],
                "indexes": [
                    models.Index(fields=["officer", "timestamp"], name="ussd_qlog_officer_ts_idx"),
                    models.Index(fields=["phone_number", "timestamp"], name="ussd_qlog_phone_ts_idx"),
                    models.Index(fields=["query_type"], name="ussd_qlog_type_idx"),
                    models.Index(fields=["timestamp"], name="ussd_qlog_ts_idx"),
                ],
            },
        ),
    ]
