"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
Derived flags (is_full, is_upcoming, is_member, ...) are never stored.
"""

import uuid

from django.db import models


class Person(models.Model):
    """Persistence model for persons."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    full_name = models.CharField(max_length=200)
    email = models.CharField(max_length=255)
    membership_id = models.UUIDField(blank=True, null=True)
    is_trainer = models.BooleanField(default=False)

    class Meta:
        ordering = ["full_name"]
        indexes = [
            models.Index(fields=["is_trainer"], name="person_is_trainer_idx"),
        ]

    def __str__(self) -> str:
        return self.full_name


class Training(models.Model):
    """Persistence model for trainings (aggregate root row)."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    topic = models.CharField(max_length=500)
    description = models.TextField(max_length=2000, blank=True, null=True)
    created_by_user_id = models.CharField(max_length=64)
    created_at = models.DateTimeField()
    version = models.PositiveIntegerField(default=1)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"], name="training_created_at_idx"),
            models.Index(fields=["created_by_user_id"], name="training_created_by_idx"),
        ]

    def __str__(self) -> str:
        return self.topic


class TrainingSession(models.Model):
    """Persistence model for training sessions."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    training = models.ForeignKey(
        Training, on_delete=models.CASCADE, related_name="sessions"
    )
    title = models.CharField(max_length=500)
    date = models.DateTimeField()
    trainer_id = models.UUIDField()
    max_attendees = models.PositiveIntegerField()
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["position"]
        indexes = [
            models.Index(fields=["training", "position"], name="session_training_pos_idx"),
            models.Index(fields=["date"], name="session_date_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(max_attendees__gt=0),
                name="training_session_max_attendees_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.training.topic} - {self.title} ({self.date})"


class SessionAttendee(models.Model):
    """One roster entry: a person registered for a session."""

    session = models.ForeignKey(
        TrainingSession, on_delete=models.CASCADE, related_name="attendees"
    )
    person_id = models.UUIDField()
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["position"]
        constraints = [
            models.UniqueConstraint(
                fields=["session", "person_id"],
                name="unique_session_attendee",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.person_id} @ {self.session_id}"
