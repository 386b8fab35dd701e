from .data import BasicUserData, Game, GameScore, NewGameScore, ScoreSubmission
from .result import Failure, FieldError, Result, Success, is_success

__all__ = [
    "BasicUserData",
    "Game",
    "GameScore",
    "NewGameScore",
    "ScoreSubmission",
    "Failure",
    "FieldError",
    "Result",
    "Success",
    "is_success",
]
