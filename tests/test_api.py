"""
HTTP tests for the score and game routes.
"""

from fastapi.testclient import TestClient

from game_scores.core.auth import get_player_id
from game_scores.dependencies import ServiceContainer
from game_scores.main import create_app
from game_scores.models.result import Failure
from game_scores.services.scores import GameScoreService

from .conftest import FakeUserService, RecordingScoreStore


def test_submit_score(client, store):
    res = client.post("/scores", json={"game_title": "Chess", "score": 42})

    assert res.status_code == 200, res.text
    body = res.json()
    assert body["game_title"] == "Chess"
    assert body["player_id"] == "u1"
    assert body["player_username"] == "alice"
    assert body["score"] == 42
    assert body["id"]
    assert body["created_at"]
    assert len(store.saved) == 1


def test_submit_score_twice_creates_two_records(client):
    first = client.post("/scores", json={"game_title": "Chess", "score": 42}).json()
    second = client.post("/scores", json={"game_title": "Chess", "score": 42}).json()

    assert first["id"] != second["id"]


def test_submit_score_unknown_game(client, store):
    res = client.post("/scores", json={"game_title": "Checkers", "score": 1})

    assert res.status_code == 400
    assert res.json() == {"message": "Game with the given Title does not exist."}
    assert store.saved == []


def test_submit_score_unknown_user(app, store):
    app.dependency_overrides[get_player_id] = lambda: "ghost"

    with TestClient(app) as client:
        res = client.post("/scores", json={"game_title": "Chess", "score": 1})

    assert res.status_code == 400
    assert res.json()["message"] == "User with the given Id does not exist."
    assert store.saved == []


def test_submit_score_user_directory_down(games, catalog):
    users = FakeUserService(failure=Failure(status=503, message="Service Unavailable: tenant overloaded"))
    service = GameScoreService(RecordingScoreStore(), users, games)
    app = create_app(ServiceContainer(scores=service, games=catalog))
    app.dependency_overrides[get_player_id] = lambda: "u1"

    with TestClient(app) as client:
        res = client.post("/scores", json={"game_title": "Chess", "score": 1})

    assert res.status_code == 500
    assert res.json() == {"message": "Internal error"}


def test_submit_score_requires_token(service, catalog):
    app = create_app(ServiceContainer(scores=service, games=catalog))

    with TestClient(app) as client:
        res = client.post("/scores", json={"game_title": "Chess", "score": 1})

    assert res.status_code == 401
    assert res.json() == {"message": "Unauthorized"}


def test_submit_score_missing_fields(client, store):
    res = client.post("/scores", json={"game_title": "Chess"})

    assert res.status_code == 400
    body = res.json()
    assert body["message"] == "Invalid request"
    assert [error["field"] for error in body["errors"]] == ["score"]
    assert store.saved == []


def test_submit_score_malformed_json(client):
    res = client.post("/scores", content=b"{not json", headers={"Content-Type": "application/json"})

    assert res.status_code == 400
    assert res.json()["message"] == "Invalid request"


def test_submit_score_malformed_json_without_token(service, catalog):
    app = create_app(ServiceContainer(scores=service, games=catalog))

    with TestClient(app) as client:
        res = client.post("/scores", content=b"{not json", headers={"Content-Type": "application/json"})

    assert res.status_code == 401
    assert res.json() == {"message": "Unauthorized"}


def test_submit_score_out_of_range_integer(client, store):
    res = client.post("/scores", json={"game_title": "Chess", "score": 2 ** 70})

    assert res.status_code == 400
    body = res.json()
    assert body["message"] == "Invalid request"
    assert [error["field"] for error in body["errors"]] == ["score"]
    assert store.saved == []

    listing = client.get("/scores", params={"game": "Chess"})
    assert listing.status_code == 200
    assert listing.json() == {"data": []}


def test_submit_score_largest_integer_round_trips(client):
    res = client.post("/scores", json={"game_title": "Chess", "score": 2 ** 63 - 1})

    assert res.status_code == 200, res.text
    assert client.get("/scores", params={"game": "Chess"}).json()["data"][0]["score"] == 2 ** 63 - 1

def test_submit_score_blank_title(client):
    res = client.post("/scores", json={"game_title": "   ", "score": 3})

    assert res.status_code == 400
    assert res.json()["errors"][0]["field"] == "game_title"


def test_top_scores(client):
    for score in [10, 40, 25]:
        client.post("/scores", json={"game_title": "Chess", "score": score})

    res = client.get("/scores", params={"game": "Chess", "count": 2})

    assert res.status_code == 200
    assert [s["score"] for s in res.json()["data"]] == [40, 25]


def test_top_scores_defaults_and_validation(client):
    assert client.get("/scores", params={"game": "Chess"}).json() == {"data": []}
    assert client.get("/scores").status_code == 400
    assert client.get("/scores", params={"game": "Chess", "count": 0}).status_code == 400
    assert client.get("/scores", params={"game": "Chess", "count": "ten"}).status_code == 400


def test_get_game(client):
    res = client.get("/games", params={"title": "Go"})

    assert res.status_code == 200
    assert res.json()["title"] == "Go"
    assert res.json()["times_played"] == 0


def test_get_game_not_found(client):
    res = client.get("/games", params={"title": "Tetris"})

    assert res.status_code == 404
    assert res.json() == {"message": "Not found"}


def test_health(client):
    res = client.get("/health")

    assert res.status_code == 200
    assert res.json()["status"] == "healthy"
