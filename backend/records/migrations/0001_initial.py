import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Person",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                ("national_id", models.CharField(blank=True, max_length=11, null=True, unique=True, verbose_name="National ID (NIN)")),
                ("first_name", models.CharField(max_length=100)),
                ("middle_name", models.CharField(blank=True, default="", max_length=100)),
                ("last_name", models.CharField(max_length=100)),
                ("date_of_birth", models.DateField(blank=True, null=True)),
                ("gender", models.CharField(blank=True, default="", max_length=20)),
                ("is_wanted", models.BooleanField(db_index=True, default=False)),
                ("wanted_since", models.DateTimeField(blank=True, null=True)),
                ("is_deceased_or_missing", models.BooleanField(default=False)),
                ("address", models.TextField(blank=True, default="")),
                ("criminal_history", models.TextField(blank=True, default="")),
            ],
            options={
                "verbose_name": "Person",
                "verbose_name_plural": "Persons",
                "ordering": ["last_name", "first_name"],
            },
        ),
        migrations.CreateModel(
            name="Vehicle",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                ("license_plate", models.CharField(max_length=12, unique=True)),
                ("owner_nin", models.CharField(blank=True, default="", max_length=11)),
                ("owner_name", models.CharField(blank=True, default="", max_length=255)),
                ("vehicle_type", models.CharField(choices=[("car", "Car"), ("truck", "Truck"), ("motorcycle", "Motorcycle"), ("bus", "Bus"), ("van", "Van"), ("tricycle", "Tricycle"), ("other", "Other")], default="car", max_length=20)),
                ("make", models.CharField(blank=True, default="", max_length=50)),
                ("model", models.CharField(blank=True, default="", max_length=50)),
                ("color", models.CharField(blank=True, default="", max_length=30)),
                ("year", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("status", models.CharField(choices=[("active", "Active"), ("stolen", "Stolen"), ("impounded", "Impounded"), ("recovered", "Recovered")], db_index=True, default="active", max_length=10)),
                ("stolen_date", models.DateTimeField(blank=True, null=True)),
                ("recovered_date", models.DateTimeField(blank=True, null=True)),
            ],
            options={
                "verbose_name": "Vehicle",
                "verbose_name_plural": "Vehicles",
                "ordering": ["license_plate"],
            },
        ),
        migrations.CreateModel(
            name="BackgroundCheck",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("nin", models.CharField(db_index=True, max_length=11)),
                ("request_type", models.CharField(choices=[("officer", "Officer"), ("citizen", "Citizen"), ("employer", "Employer"), ("visa", "Visa")], default="officer", max_length=10)),
                ("result", models.JSONField(default=dict)),
                ("status", models.CharField(choices=[("pending", "Pending"), ("completed", "Completed"), ("failed", "Failed")], default="pending", max_length=10)),
                ("issued_at", models.DateTimeField(blank=True, null=True)),
                ("expires_at", models.DateTimeField(blank=True, null=True)),
                ("phone_number", models.CharField(blank=True, default="", max_length=16)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("requested_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="background_checks", to=settings.AUTH_USER_MODEL)),
            ],
            options={
                "verbose_name": "Background Check",
                "verbose_name_plural": "Background Checks",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="CaseRecord",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                ("case_number", models.CharField(max_length=50, unique=True)),
                ("category", models.CharField(max_length=100)),
                ("severity", models.CharField(choices=[("minor", "Minor"), ("major", "Major"), ("critical", "Critical")], default="minor", max_length=10)),
                ("status", models.CharField(choices=[("open", "Open"), ("investigating", "Investigating"), ("closed", "Closed")], default="open", max_length=15)),
                ("incident_date", models.DateField(blank=True, null=True)),
                ("person", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="case_records", to="records.person")),
            ],
            options={
                "verbose_name": "Case Record",
                "verbose_name_plural": "Case Records",
                "ordering": ["-incident_date"],
            },
        ),
        migrations.CreateModel(
            name="MissingPersonAlert",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                ("person_name", models.CharField(max_length=255)),
                ("age", models.PositiveSmallIntegerField(blank=True, null=True)),
                ("gender", models.CharField(blank=True, default="", max_length=20)),
                ("description", models.TextField(blank=True, default="")),
                ("last_seen_location", models.CharField(blank=True, default="", max_length=255)),
                ("last_seen_date", models.DateTimeField(blank=True, null=True)),
                ("contact_phone", models.CharField(max_length=20)),
                ("status", models.CharField(choices=[("active", "Active"), ("resolved", "Resolved"), ("expired", "Expired")], db_index=True, default="active", max_length=10)),
                ("expires_at", models.DateTimeField(blank=True, null=True)),
                ("person", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.CASCADE, related_name="missing_alerts", to="records.person")),
            ],
            options={
                "verbose_name": "Missing Person Alert",
                "verbose_name_plural": "Missing Person Alerts",
                "ordering": ["-created_at"],
            },
        ),
        migrations.CreateModel(
            name="WantedPerson",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                ("charges", models.JSONField(blank=True, default=list)),
                ("danger_level", models.CharField(choices=[("low", "Low"), ("medium", "Medium"), ("high", "High"), ("extreme", "Extreme")], default="medium", max_length=10)),
                ("status", models.CharField(choices=[("active", "Active"), ("captured", "Captured"), ("cancelled", "Cancelled")], db_index=True, default="active", max_length=10)),
                ("warrant_number", models.CharField(blank=True, default="", max_length=50)),
                ("last_seen_location", models.CharField(blank=True, default="", max_length=255)),
                ("captured_at", models.DateTimeField(blank=True, null=True)),
                ("created_by", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="+", to=settings.AUTH_USER_MODEL)),
                ("person", models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name="wanted_records", to="records.person")),
            ],
            options={
                "verbose_name": "Wanted Person",
                "verbose_name_plural": "Wanted Persons",
                "ordering": ["-created_at"],
            },
        ),
    ]
