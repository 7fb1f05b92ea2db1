import os
import random

os.environ.setdefault("STORE_BACKEND", "memory")

import pytest
from fastapi.testclient import TestClient

from joyverse.api import routes
from joyverse.core.config import StoreBackend
from joyverse.main import app
from joyverse.models.attempt import Attempt
from joyverse.services.activity import ActivityService, activity_service
from joyverse.services.practice import TypingService, typing_service
from joyverse.services.progress_store import ProgressStore


@pytest.fixture
def make_attempt():
    def factory(word, typed=None, time_spent=2000, hesitations=0, correct=None):
        typed = word if typed is None else typed
        return Attempt(
            word=word,
            input=typed,
            correct=(word == typed) if correct is None else correct,
            time_spent=time_spent,
            hesitations=hesitations,
        )

    return factory


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def store():
    return ProgressStore(backend=StoreBackend.MEMORY)


@pytest.fixture
def practice(store, rng):
    return TypingService(store, rng=rng)


@pytest.fixture
def activity(store):
    return ActivityService(store)


@pytest.fixture
def client(store, monkeypatch):
    monkeypatch.setattr(routes, "progress_store", store)
    monkeypatch.setattr(activity_service, "store", store)
    monkeypatch.setattr(typing_service, "store", store)
    monkeypatch.setattr(typing_service, "rng", random.Random(99))
    with TestClient(app) as test_client:
        yield test_client
