"""
Import-time checks for the application module and its annotations.
"""

import typing

from game_scores.database.game_store import InMemoryGameStore, PostgresGameStore
from game_scores.database.score_store import InMemoryScoreStore, PostgresScoreStore, ScoreStore
from game_scores.models.data import GameScore
from game_scores.models.result import Result
from game_scores.services.games import GameQueryService, HttpGameQueryService
from game_scores.services.scores import GameScoreService
from game_scores.services.users import Auth0UserService, UserQueryService


def test_main_module_builds_app():
    import game_scores.main

    paths = {route.path for route in game_scores.main.app.routes}
    assert {"/scores", "/games", "/health"} <= paths


def test_result_is_subscriptable():
    alias = Result[GameScore]

    assert typing.get_args(alias) == (GameScore,)


def test_result_annotations_resolve():
    annotated = [
        ScoreStore.save, ScoreStore.get_by_game,
        PostgresScoreStore.save, InMemoryScoreStore.get_by_game,
        GameQueryService.get_game_by_title, HttpGameQueryService.get_game_by_title,
        PostgresGameStore.get_game_by_title, InMemoryGameStore.get_game_by_title,
        UserQueryService.get_user_by_id, Auth0UserService.get_user_by_id,
        GameScoreService.submit_score, GameScoreService.get_top_scores_for_game,
    ]

    for method in annotated:
        hints = typing.get_type_hints(method)
        assert typing.get_origin(hints["return"]) is Result, method.__qualname__
