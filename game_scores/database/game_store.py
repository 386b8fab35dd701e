from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, Iterable

from ..logger import get_logger
from ..models.data import Game
from ..models.result import Result, Success, internal_error, not_found
from ..services.games import GameQueryService
from .connection import DatabaseConnection

logger = get_logger()


class PostgresGameStore(GameQueryService):
    """Game catalog backed by the local ``games`` table"""

    def __init__(self, db: DatabaseConnection):
        self.db = db

    async def get_game_by_title(self, title: str) -> Result[Game]:
        try:
            async with self.db.acquire() as conn:
                row = await conn.fetchrow('''
                    SELECT title, added_at, times_played
                    FROM games
                    WHERE title = $1
                ''', title)
        except Exception as e:
            logger.error(f"Error looking up game {title!r}: {e}")
            return internal_error()

        if row is None:
            return not_found()
        return Success(data=Game(**dict(row)))


class InMemoryGameStore(GameQueryService):
    def __init__(self, titles: Iterable[str] = ()):
        self._games: Dict[str, Game] = {}
        for title in titles:
            self.add(title)

    def add(self, title: str, times_played: int = 0) -> Game:
        game = Game(title=title, added_at=datetime.now(timezone.utc), times_played=times_played)
        self._games[title] = game
        return game

    async def get_game_by_title(self, title: str) -> Result[Game]:
        game = self._games.get(title)
        if game is None:
            return not_found()
        return Success(data=game)
