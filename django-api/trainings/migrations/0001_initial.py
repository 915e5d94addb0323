import uuid

import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Person",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("full_name", models.CharField(max_length=200)),
                ("email", models.CharField(max_length=255)),
                ("membership_id", models.UUIDField(blank=True, null=True)),
                ("is_trainer", models.BooleanField(default=False)),
            ],
            options={
                "ordering": ["full_name"],
                "indexes": [
                    models.Index(fields=["is_trainer"], name="person_is_trainer_idx")
                ],
            },
        ),
        migrations.CreateModel(
            name="Training",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("topic", models.CharField(max_length=500)),
                ("description", models.TextField(blank=True, max_length=2000, null=True)),
                ("created_by_user_id", models.CharField(max_length=64)),
                ("created_at", models.DateTimeField()),
                ("version", models.PositiveIntegerField(default=1)),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["-created_at"], name="training_created_at_idx"),
                    models.Index(
                        fields=["created_by_user_id"], name="training_created_by_idx"
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="TrainingSession",
            fields=[
                (
                    "id",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, primary_key=True, serialize=False
                    ),
                ),
                ("title", models.CharField(max_length=500)),
                ("date", models.DateTimeField()),
                ("trainer_id", models.UUIDField()),
                ("max_attendees", models.PositiveIntegerField()),
                ("position", models.PositiveIntegerField(default=0)),
                (
                    "training",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="sessions",
                        to="trainings.training",
                    ),
                ),
            ],
            options={
                "ordering": ["position"],
                "indexes": [
                    models.Index(
                        fields=["training", "position"], name="session_training_pos_idx"
                    ),
                    models.Index(fields=["date"], name="session_date_idx"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(max_attendees__gt=0),
                        name="training_session_max_attendees_positive",
                    )
                ],
            },
        ),
        migrations.CreateModel(
            name="SessionAttendee",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                ("person_id", models.UUIDField()),
                ("position", models.PositiveIntegerField(default=0)),
                (
                    "session",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="attendees",
                        to="trainings.trainingsession",
                    ),
                ),
            ],
            options={
                "ordering": ["position"],
                "constraints": [
                    models.UniqueConstraint(
                        fields=("session", "person_id"), name="unique_session_attendee"
                    )
                ],
            },
        ),
    ]
