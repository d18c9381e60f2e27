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
            name="AuditLog",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("actor_email", models.CharField(blank=True, default="", max_length=254)),
                (
                    "action",
                    models.CharField(
                        choices=[
                            ("create_incident", "Create incident"),
                            ("update_incident", "Update incident"),
                            ("edit_incident", "Edit incident"),
                            ("delete_incident", "Delete incident"),
                            ("request_closure", "Request closure"),
                            ("approve_closure", "Approve closure"),
                            ("reject_closure", "Reject closure"),
                            ("add_comment", "Add comment"),
                            ("approve_registration", "Approve registration"),
                            ("reject_registration", "Reject registration"),
                            ("update_user", "Update user"),
                            ("delete_user", "Delete user"),
                            ("update_facility", "Update facility"),
                        ],
                        db_index=True,
                        max_length=64,
                    ),
                ),
                (
                    "entity_type",
                    models.CharField(
                        choices=[
                            ("incident", "Incident"),
                            ("user", "User"),
                            ("user_registration", "User registration"),
                            ("facility", "Facility"),
                        ],
                        db_index=True,
                        max_length=64,
                    ),
                ),
                ("entity_id", models.CharField(db_index=True, max_length=64)),
                ("details", models.JSONField(blank=True, default=dict)),
                ("ip_address", models.GenericIPAddressField(blank=True, null=True)),
                ("user_agent", models.CharField(blank=True, default="", max_length=512)),
                ("created_at", models.DateTimeField(auto_now_add=True, db_index=True)),
                (
                    "actor",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="audit_logs",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "db_table": "audit_log",
                "indexes": [
                    models.Index(fields=["entity_type", "entity_id"], name="audit_entity_idx"),
                    models.Index(fields=["actor", "created_at"], name="audit_actor_created_idx"),
                ],
            },
        ),
    ]
