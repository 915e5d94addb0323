"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

import logging

from django.core.cache import cache
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from trainings.cache import (
    PERSONS_LIST_KEY,
    TRAINERS_LIST_KEY,
    TRAININGS_LIST_KEY,
    cache_timeout,
)
from trainings.domain import UserId
from trainings.domain.errors import DomainError, ErrorCode
from trainings.handlers.serializers import (
    AttendeeSerializer,
    CreatePersonSerializer,
    CreateSessionSerializer,
    CreateTrainingSerializer,
    MembershipSerializer,
    PersonSerializer,
    SessionDetailsSerializer,
    TrainerStatusSerializer,
    TrainingDetailSerializer,
    TrainingSerializer,
    TrainingSessionSerializer,
)
from trainings.services import PersonService, TrainingService, TrainingSessionService
from trainings.stores.django_store import DjangoPersonStore, DjangoTrainingStore

logger = logging.getLogger(__name__)

_STATUS_BY_CODE = {
    ErrorCode.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_ID: status.HTTP_400_BAD_REQUEST,
    ErrorCode.TRAINING_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.SESSION_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.PERSON_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCode.CAPACITY_EXCEEDED: status.HTTP_409_CONFLICT,
    ErrorCode.DUPLICATE_REGISTRATION: status.HTTP_409_CONFLICT,
    ErrorCode.NOT_REGISTERED: status.HTTP_409_CONFLICT,
    ErrorCode.CAPACITY_REDUCTION: status.HTTP_409_CONFLICT,
    ErrorCode.CONCURRENT_MODIFICATION: status.HTTP_409_CONFLICT,
}


def training_service() -> TrainingService:
    return TrainingService(DjangoTrainingStore())


def session_service() -> TrainingSessionService:
    return TrainingSessionService(DjangoTrainingStore(), DjangoPersonStore())


def person_service() -> PersonService:
    return PersonService(DjangoPersonStore())


def actor_id(request: Request) -> UserId:
    """The identity provider's view of who is calling."""
    return UserId(str(request.user.pk))


def error_body(code: str, message: str, **extra) -> dict:
    return {"error": {"code": code, "message": message, **extra}}


class DomainAPIView(APIView):
    """APIView that renders domain errors as JSON error bodies."""

    def handle_exception(self, exc: Exception) -> Response:
        if isinstance(exc, DomainError):
            logger.debug("Mapping %s to HTTP response", exc.code.value)
            return Response(
                error_body(exc.code.value, exc.message),
                status=_STATUS_BY_CODE.get(exc.code, status.HTTP_400_BAD_REQUEST),
            )
        return super().handle_exception(exc)

    def parse(self, serializer_class, request: Request, **kwargs):
        """Validate request.data, returning (serializer, error_response)."""
        serializer = serializer_class(data=request.data, **kwargs)
        if not serializer.is_valid():
            return serializer, Response(
                error_body(
                    ErrorCode.VALIDATION_ERROR.value,
                    "Invalid request body",
                    fields=serializer.errors,
                ),
                status=status.HTTP_400_BAD_REQUEST,
            )
        return serializer, None


class TrainingListView(DomainAPIView):
    """Handler for GET/POST /api/trainings"""

    def get_permissions(self):
        if self.request.method == "POST":
            return [IsAuthenticated()]
        return [AllowAny()]

    def get(self, request: Request) -> Response:
        data = cache.get(TRAININGS_LIST_KEY)
        if data is None:
            trainings = training_service().list_trainings()
            data = list(TrainingSerializer(trainings, many=True).data)
            cache.set(TRAININGS_LIST_KEY, data, cache_timeout())
        return Response(data)

    def post(self, request: Request) -> Response:
        serializer, error = self.parse(CreateTrainingSerializer, request)
        if error:
            return error
        training = training_service().create_training(
            serializer.to_create_request(), actor_id(request)
        )
        return Response(TrainingSerializer(training).data, status=status.HTTP_201_CREATED)


class MyTrainingListView(DomainAPIView):
    """Handler for GET /api/trainings/mine"""

    permission_classes = [IsAuthenticated]

    def get(self, request: Request) -> Response:
        trainings = training_service().list_user_trainings(actor_id(request))
        return Response(TrainingSerializer(trainings, many=True).data)


class TrainingDetailView(DomainAPIView):
    """Handler for GET/PATCH /api/trainings/{training_id}"""

    def get(self, request: Request, training_id: str) -> Response:
        training = training_service().get_training(training_id)
        return Response(TrainingDetailSerializer(training).data)

    def patch(self, request: Request, training_id: str) -> Response:
        serializer, error = self.parse(CreateTrainingSerializer, request)
        if error:
            return error
        training = training_service().update_training(
            training_id, serializer.to_update_request()
        )
        return Response(TrainingSerializer(training).data)


class TrainingSessionListView(DomainAPIView):
    """Handler for GET/POST /api/trainings/{training_id}/sessions"""

    def get(self, request: Request, training_id: str) -> Response:
        sessions = session_service().list_sessions_for_training(training_id)
        return Response(TrainingSessionSerializer(sessions, many=True).data)

    def post(self, request: Request, training_id: str) -> Response:
        serializer, error = self.parse(CreateSessionSerializer, request)
        if error:
            return error
        session = session_service().create_session(serializer.to_create_request(training_id))
        return Response(
            TrainingSessionSerializer(session).data, status=status.HTTP_201_CREATED
        )


class UpcomingSessionListView(DomainAPIView):
    """Handler for GET /api/sessions/upcoming"""

    def get(self, request: Request) -> Response:
        sessions = session_service().list_upcoming_sessions()
        return Response(TrainingSessionSerializer(sessions, many=True).data)


class SessionDetailView(DomainAPIView):
    """Handler for GET/PATCH /api/sessions/{session_id}"""

    def get(self, request: Request, session_id: str) -> Response:
        session = session_service().get_session(session_id)
        return Response(TrainingSessionSerializer(session).data)

    def patch(self, request: Request, session_id: str) -> Response:
        serializer, error = self.parse(SessionDetailsSerializer, request)
        if error:
            return error
        session = session_service().update_session(
            session_id, serializer.to_update_request()
        )
        return Response(TrainingSessionSerializer(session).data)


class SessionAttendeeView(DomainAPIView):
    """Handler for POST/DELETE /api/sessions/{session_id}/attendees"""

    def post(self, request: Request, session_id: str) -> Response:
        serializer, error = self.parse(AttendeeSerializer, request)
        if error:
            return error
        session = session_service().register_attendee(serializer.to_request(session_id))
        return Response(
            TrainingSessionSerializer(session).data, status=status.HTTP_201_CREATED
        )

    def delete(self, request: Request, session_id: str) -> Response:
        serializer, error = self.parse(AttendeeSerializer, request)
        if error:
            return error
        session = session_service().unregister_attendee(serializer.to_request(session_id))
        return Response(TrainingSessionSerializer(session).data)


class PersonListView(DomainAPIView):
    """Handler for GET/POST /api/persons"""

    def get(self, request: Request) -> Response:
        data = cache.get(PERSONS_LIST_KEY)
        if data is None:
            data = list(PersonSerializer(person_service().list_persons(), many=True).data)
            cache.set(PERSONS_LIST_KEY, data, cache_timeout())
        return Response(data)

    def post(self, request: Request) -> Response:
        serializer, error = self.parse(CreatePersonSerializer, request)
        if error:
            return error
        person = person_service().create_person(serializer.to_create_request())
        return Response(PersonSerializer(person).data, status=status.HTTP_201_CREATED)


class TrainerListView(DomainAPIView):
    """Handler for GET /api/persons/trainers"""

    def get(self, request: Request) -> Response:
        data = cache.get(TRAINERS_LIST_KEY)
        if data is None:
            data = list(PersonSerializer(person_service().list_trainers(), many=True).data)
            cache.set(TRAINERS_LIST_KEY, data, cache_timeout())
        return Response(data)


class PersonDetailView(DomainAPIView):
    """Handler for GET /api/persons/{person_id}"""

    def get(self, request: Request, person_id: str) -> Response:
        return Response(PersonSerializer(person_service().get_person(person_id)).data)


class PersonTrainerStatusView(DomainAPIView):
    """Handler for PUT /api/persons/{person_id}/trainer-status"""

    def put(self, request: Request, person_id: str) -> Response:
        serializer, error = self.parse(TrainerStatusSerializer, request)
        if error:
            return error
        person = person_service().set_trainer_status(
            person_id, serializer.validated_data["is_trainer"]
        )
        return Response(PersonSerializer(person).data)


class PersonMembershipView(DomainAPIView):
    """Handler for PUT /api/persons/{person_id}/membership"""

    def put(self, request: Request, person_id: str) -> Response:
        serializer, error = self.parse(MembershipSerializer, request)
        if error:
            return error
        person = person_service().assign_membership(
            person_id, serializer.validated_data["membership_id"]
        )
        return Response(PersonSerializer(person).data)
