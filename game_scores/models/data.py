from datetime import datetime
from typing import Union

from pydantic import BaseModel, ConfigDict

Number = Union[int, float]


class ScoreSubmission(BaseModel):
    """A score as submitted by a player, before validation and enrichment"""
    game_title: str
    player_id: str
    score: Number


class NewGameScore(BaseModel):
    """A validated score waiting to be assigned an id and timestamp by the store"""
    game_title: str
    player_id: str
    player_username: str
    score: Number


class GameScore(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    game_title: str
    player_id: str
    player_username: str
    score: Number
    created_at: datetime


class BasicUserData(BaseModel):
    id: str
    username: str


class Game(BaseModel):
    title: str
    added_at: datetime
    times_played: int = 0
