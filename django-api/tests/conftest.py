"""Pytest configuration and shared fixtures."""

from datetime import datetime, timedelta, timezone

import pytest
from rest_framework.test import APIClient

from trainings.services import PersonService, TrainingService, TrainingSessionService
from trainings.stores.memory_store import InMemoryPersonStore, InMemoryTrainingStore


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def future_date() -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=7)


@pytest.fixture
def training_store() -> InMemoryTrainingStore:
    return InMemoryTrainingStore()


@pytest.fixture
def person_store() -> InMemoryPersonStore:
    return InMemoryPersonStore()


@pytest.fixture
def training_service(training_store) -> TrainingService:
    return TrainingService(training_store, save_retries=3)


@pytest.fixture
def session_service(training_store, person_store) -> TrainingSessionService:
    return TrainingSessionService(training_store, person_store, save_retries=3)


@pytest.fixture
def person_service(person_store) -> PersonService:
    return PersonService(person_store)
