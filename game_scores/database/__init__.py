from .connection import DatabaseConnection
from .game_store import InMemoryGameStore, PostgresGameStore
from .score_store import InMemoryScoreStore, PostgresScoreStore, ScoreStore

__all__ = [
    "DatabaseConnection",
    "InMemoryGameStore",
    "PostgresGameStore",
    "InMemoryScoreStore",
    "PostgresScoreStore",
    "ScoreStore",
]
