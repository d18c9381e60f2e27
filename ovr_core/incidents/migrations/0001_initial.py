import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
        ("facilities", "0001_initial"),
        ("categories", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="OvrSequence",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("bucket", models.CharField(max_length=8, unique=True)),
                ("last_value", models.PositiveIntegerField(default=0)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "db_table": "incidents_ovr_sequence",
            },
        ),
        migrations.CreateModel(
            name="Incident",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                ("ovr_id", models.CharField(editable=False, max_length=32, unique=True)),
                ("incident_date", models.DateField(db_index=True)),
                ("incident_time", models.TimeField()),
                ("description", models.TextField()),
                ("reporting_department", models.CharField(max_length=255)),
                ("responding_department", models.CharField(max_length=255)),
                ("patient_name", models.CharField(blank=True, default="", max_length=255)),
                ("medical_record", models.CharField(max_length=64)),
                (
                    "what_is_being_reported",
                    models.CharField(
                        choices=[
                            ("incident", "Incident"),
                            ("near_miss", "Near miss"),
                            ("mandatory_reportable_event", "Mandatory reportable event"),
                            ("sentinel_event", "Sentinel event"),
                        ],
                        max_length=32,
                    ),
                ),
                ("ovr_category", models.CharField(max_length=128)),
                ("type_of_injury", models.JSONField(default=list)),
                (
                    "level_of_harm",
                    models.CharField(
                        choices=[
                            ("no_harm", "No harm"),
                            ("low", "Low"),
                            ("moderate", "Moderate"),
                            ("severe", "Severe"),
                            ("death", "Death"),
                        ],
                        max_length=16,
                    ),
                ),
                (
                    "likelihood_category",
                    models.CharField(
                        choices=[
                            ("rare", "Rare"),
                            ("unlikely", "Unlikely"),
                            ("possible", "Possible"),
                            ("likely", "Likely"),
                            ("almost_certain", "Almost certain"),
                        ],
                        max_length=16,
                    ),
                ),
                ("medication_error_details", models.TextField(blank=True, default="")),
                ("action_taken", models.TextField()),
                ("reporter_name", models.CharField(blank=True, default="", max_length=255)),
                ("reporter_mobile", models.CharField(blank=True, default="", max_length=32)),
                ("reporter_email", models.EmailField(blank=True, default="", max_length=254)),
                ("reporter_position", models.CharField(blank=True, default="", max_length=128)),
                ("is_anonymous", models.BooleanField(default=False)),
                ("contact_info", models.CharField(blank=True, default="", max_length=255)),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("open", "Open"),
                            ("in_review", "In review"),
                            ("pending_closure", "Pending closure"),
                            ("closed", "Closed"),
                        ],
                        db_index=True,
                        default="open",
                        max_length=20,
                    ),
                ),
                (
                    "priority",
                    models.CharField(
                        choices=[("low", "Low"), ("medium", "Medium"), ("high", "High")],
                        db_index=True,
                        default="medium",
                        max_length=8,
                    ),
                ),
                ("is_flagged", models.BooleanField(db_index=True, default=False)),
                ("closure_requested_at", models.DateTimeField(blank=True, null=True)),
                ("closure_approved_at", models.DateTimeField(blank=True, null=True)),
                ("closure_reason", models.TextField(blank=True, default="")),
                (
                    "facility",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="incidents",
                        to="facilities.facility",
                    ),
                ),
                (
                    "category",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="incidents",
                        to="categories.category",
                    ),
                ),
                (
                    "reported_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="reported_incidents",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "assigned_to",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="assigned_incidents",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "closure_requested_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="closure_requests",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
                (
                    "closure_approved_by",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="closure_approvals",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "incidents_incident",
                "indexes": [
                    models.Index(fields=["facility", "status"], name="incident_facility_status_idx"),
                    models.Index(fields=["facility", "created_at"], name="incident_facility_created_idx"),
                ],
            },
        ),
    ]
