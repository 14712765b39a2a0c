import django.contrib.auth.models
import django.contrib.auth.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("auth", "0012_alter_user_first_name_max_length"),
    ]

    operations = [
        migrations.CreateModel(
            name="Role",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100, unique=True, verbose_name="Role Name")),
                ("description", models.TextField(blank=True, default="", verbose_name="Description")),
                ("hierarchy_level", models.PositiveSmallIntegerField(default=0, help_text="Higher value = more authority.", verbose_name="Hierarchy Level")),
                ("permissions", models.ManyToManyField(blank=True, help_text="Specific permissions for this role.", to="auth.permission", verbose_name="Permissions")),
            ],
            options={
                "verbose_name": "Role",
                "verbose_name_plural": "Roles",
                "ordering": ["-hierarchy_level"],
            },
        ),
        migrations.CreateModel(
            name="Station",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Created At")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Updated At")),
                ("name", models.CharField(max_length=255, verbose_name="Station Name")),
                ("code", models.CharField(max_length=20, unique=True, verbose_name="Station Code")),
                ("location", models.CharField(blank=True, default="", max_length=255)),
                ("district", models.CharField(blank=True, default="", max_length=100)),
                ("region", models.CharField(blank=True, default="", max_length=100)),
                ("active", models.BooleanField(default=True)),
            ],
            options={
                "verbose_name": "Station",
                "verbose_name_plural": "Stations",
                "ordering": ["code"],
            },
        ),
        migrations.CreateModel(
            name="User",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("password", models.CharField(max_length=128, verbose_name="password")),
                ("last_login", models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                ("is_superuser", models.BooleanField(default=False, help_text="Designates that this user has all permissions without explicitly assigning them.", verbose_name="superuser status")),
                ("username", models.CharField(error_messages={"unique": "A user with that username already exists."}, help_text="Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.", max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name="username")),
                ("first_name", models.CharField(blank=True, max_length=150, verbose_name="first name")),
                ("last_name", models.CharField(blank=True, max_length=150, verbose_name="last name")),
                ("is_staff", models.BooleanField(default=False, help_text="Designates whether the user can log into this admin site.", verbose_name="staff status")),
                ("is_active", models.BooleanField(default=True, help_text="Designates whether this user should be treated as active. Unselect this instead of deleting accounts.", verbose_name="active")),
                ("date_joined", models.DateTimeField(default=django.utils.timezone.now, verbose_name="date joined")),
                ("national_id", models.CharField(db_index=True, help_text="11-digit National Identification Number.", max_length=11, unique=True, verbose_name="National ID")),
                ("phone_number", models.CharField(db_index=True, max_length=16, unique=True, verbose_name="Phone Number")),
                ("email", models.EmailField(max_length=254, unique=True, verbose_name="Email Address")),
                ("badge_number", models.CharField(blank=True, max_length=20, null=True, unique=True, verbose_name="Badge Number")),
                ("ussd_phone_number", models.CharField(blank=True, help_text="E.164 number the USSD gateway reports for this officer.", max_length=16, null=True, unique=True, verbose_name="USSD Phone Number")),
                ("ussd_quick_pin_hash", models.CharField(blank=True, default="", max_length=128, verbose_name="Quick PIN Hash")),
                ("ussd_enabled", models.BooleanField(default=False, verbose_name="USSD Enabled")),
                ("ussd_registered_at", models.DateTimeField(blank=True, null=True)),
                ("ussd_last_used", models.DateTimeField(blank=True, null=True)),
                ("ussd_daily_limit", models.PositiveIntegerField(default=50, verbose_name="USSD Daily Query Limit")),
                ("groups", models.ManyToManyField(blank=True, help_text="The groups this user belongs to. A user will get all permissions granted to each of their groups.", related_name="user_set", related_query_name="user", to="auth.group", verbose_name="groups")),
                ("user_permissions", models.ManyToManyField(blank=True, help_text="Specific permissions for this user.", related_name="user_set", related_query_name="user", to="auth.permission", verbose_name="user permissions")),
                ("role", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="users", to="accounts.role", verbose_name="Assigned Role")),
                ("station", models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name="officers", to="accounts.station", verbose_name="Station")),
            ],
            options={
                "verbose_name": "User",
                "verbose_name_plural": "Users",
                "permissions": [("can_manage_ussd_officers", "Manage officers' USSD access")],
            },
            managers=[
                ("objects", django.contrib.auth.models.UserManager()),
            ],
        ),
    ]
