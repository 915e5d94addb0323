"""Serializers for request parsing and for rendering service projections.

Request serializers only check shape and types. Content rules (empty topic,
non-positive capacity, malformed ids) are left to the domain so there is one
source of truth for them.
"""

from rest_framework import serializers

from trainings.services.dtos import (
    CreatePersonRequest,
    CreateSessionRequest,
    CreateTrainingRequest,
    RegisterAttendeeRequest,
    UpdateSessionRequest,
    UpdateTrainingRequest,
)


class CreateTrainingSerializer(serializers.Serializer):
    """Input for POST /api/trainings and PATCH /api/trainings/{id}."""

    topic = serializers.CharField(allow_blank=True, trim_whitespace=False)
    description = serializers.CharField(
        required=False, allow_null=True, allow_blank=True, default=None
    )

    def to_create_request(self) -> CreateTrainingRequest:
        return CreateTrainingRequest(**self.validated_data)

    def to_update_request(self) -> UpdateTrainingRequest:
        return UpdateTrainingRequest(**self.validated_data)


class SessionDetailsSerializer(serializers.Serializer):
    """Input for PATCH /api/sessions/{id}."""

    title = serializers.CharField(allow_blank=True, trim_whitespace=False)
    date = serializers.DateTimeField()
    max_attendees = serializers.IntegerField()

    def to_update_request(self) -> UpdateSessionRequest:
        return UpdateSessionRequest(**self.validated_data)


class CreateSessionSerializer(SessionDetailsSerializer):
    """Input for POST /api/trainings/{id}/sessions."""

    trainer_id = serializers.CharField()

    def to_create_request(self, training_id: str) -> CreateSessionRequest:
        return CreateSessionRequest(training_id=training_id, **self.validated_data)


class AttendeeSerializer(serializers.Serializer):
    """Input for POST/DELETE /api/sessions/{id}/attendees."""

    person_id = serializers.CharField()

    def to_request(self, session_id: str) -> RegisterAttendeeRequest:
        return RegisterAttendeeRequest(
            session_id=session_id, person_id=self.validated_data["person_id"]
        )


class CreatePersonSerializer(serializers.Serializer):
    """Input for POST /api/persons."""

    full_name = serializers.CharField(allow_blank=True, trim_whitespace=False)
    email = serializers.CharField(allow_blank=True)
    membership_id = serializers.CharField(required=False, allow_null=True, default=None)
    is_trainer = serializers.BooleanField(default=False)

    def to_create_request(self) -> CreatePersonRequest:
        return CreatePersonRequest(**self.validated_data)


class TrainerStatusSerializer(serializers.Serializer):
    is_trainer = serializers.BooleanField()


class MembershipSerializer(serializers.Serializer):
    membership_id = serializers.CharField()


class TrainingSerializer(serializers.Serializer):
    """Serializer for TrainingDTO."""

    id = serializers.CharField()
    topic = serializers.CharField()
    description = serializers.CharField(allow_null=True)
    created_by_user_id = serializers.CharField()
    created_at = serializers.DateTimeField()


class TrainingSessionSerializer(serializers.Serializer):
    """Serializer for TrainingSessionDTO."""

    id = serializers.CharField()
    training_id = serializers.CharField()
    title = serializers.CharField()
    date = serializers.DateTimeField()
    trainer_id = serializers.CharField()
    max_attendees = serializers.IntegerField()
    current_attendees = serializers.IntegerField()
    available_spots = serializers.IntegerField()
    is_full = serializers.BooleanField()
    is_upcoming = serializers.BooleanField()
    attendee_ids = serializers.ListField(child=serializers.CharField())


class TrainingDetailSerializer(TrainingSerializer):
    """Serializer for TrainingWithSessionsDTO."""

    sessions = TrainingSessionSerializer(many=True)


class PersonSerializer(serializers.Serializer):
    """Serializer for PersonDTO."""

    id = serializers.CharField()
    full_name = serializers.CharField()
    email = serializers.CharField()
    membership_id = serializers.CharField(allow_null=True)
    is_member = serializers.BooleanField()
    is_trainer = serializers.BooleanField()
