"""Shared fixtures and in-memory collaborators for the game scores tests."""

from datetime import datetime, timezone

import pytest
from fastapi.testclient import TestClient

from game_scores.core.auth import get_player_id
from game_scores.database import InMemoryGameStore, InMemoryScoreStore
from game_scores.dependencies import ServiceContainer
from game_scores.main import create_app
from game_scores.models.data import BasicUserData, Game
from game_scores.models.result import Failure, Success
from game_scores.services.games import GameQueryService
from game_scores.services.scores import GameScoreService
from game_scores.services.users import UserQueryService


class FakeUserService(UserQueryService):
    """User directory holding a fixed set of users; can be told to fail"""

    def __init__(self, users=None, failure=None):
        self.users = dict(users or {})
        self.failure = failure
        self.calls = []

    async def get_user_by_id(self, user_id):
        self.calls.append(user_id)
        if self.failure is not None:
            return self.failure
        if user_id not in self.users:
            return Failure(status=404, message="The user does not exist.")
        return Success(data=BasicUserData(id=user_id, username=self.users[user_id]))


class FakeGameService(GameQueryService):
    def __init__(self, games=None, failure=None):
        self.games = {game.title: game for game in (games or [])}
        self.failure = failure
        self.calls = []

    async def get_game_by_title(self, title):
        self.calls.append(title)
        if self.failure is not None:
            return self.failure
        if title not in self.games:
            return Failure(status=404, message="Not found")
        return Success(data=self.games[title])


class RecordingScoreStore(InMemoryScoreStore):
    """In-memory store that counts saves and can be told to fail them"""

    def __init__(self, failure=None):
        super().__init__()
        self.failure = failure
        self.saved = []

    async def save(self, record):
        self.saved.append(record)
        if self.failure is not None:
            return self.failure
        return await super().save(record)


@pytest.fixture
def chess():
    return Game(title="Chess", added_at=datetime(2023, 1, 1, tzinfo=timezone.utc), times_played=3)


@pytest.fixture
def users():
    return FakeUserService({"u1": "alice", "u2": "bob"})


@pytest.fixture
def games(chess):
    return FakeGameService([chess])


@pytest.fixture
def store():
    return RecordingScoreStore()


@pytest.fixture
def service(store, users, games):
    return GameScoreService(store, users, games)


@pytest.fixture
def catalog():
    return InMemoryGameStore(["Chess", "Go"])


@pytest.fixture
def app(service, catalog):
    application = create_app(ServiceContainer(scores=service, games=catalog))
    application.dependency_overrides[get_player_id] = lambda: "u1"
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as test_client:
        yield test_client
