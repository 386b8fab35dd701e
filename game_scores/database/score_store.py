from __future__ import annotations

import asyncio
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from itertools import chain, groupby, islice
from typing import Dict, List, Optional

from sortedcontainers import SortedList

from ..logger import get_logger
from ..models.data import GameScore, NewGameScore, Number
from ..models.result import Result, Success, internal_error
from .connection import DatabaseConnection

logger = get_logger()


class ScoreStore(ABC):
    """
    Durable, append-only storage of game scores.

    Implementations translate their own faults into a ``Failure`` with
    status 500; nothing is raised to callers. Scores with equal values are
    returned oldest first, whichever direction the query runs.
    """

    def __init__(self):
        self._last_created_at: Optional[datetime] = None

    @abstractmethod
    async def save(self, record: NewGameScore) -> Result[GameScore]:
        """Persist a new score, assigning it a unique id and creation time."""

    @abstractmethod
    async def get_by_game(self, game_title: str, count: int, ascending: bool = False) -> Result[List[GameScore]]:
        """Return at most ``count`` scores for a game, highest first unless ``ascending``."""

    def _new_score(self, record: NewGameScore) -> GameScore:
        created_at = datetime.now(timezone.utc)
        # keep creation times strictly increasing so ties have a stable order
        if self._last_created_at is not None and created_at <= self._last_created_at:
            created_at = self._last_created_at + timedelta(microseconds=1)
        self._last_created_at = created_at
        return GameScore(
            id=str(uuid.uuid4()),
            created_at=created_at,
            **record.model_dump(),
        )


def _to_numeric(score: Number) -> Decimal:
    return Decimal(str(score))


def _from_numeric(value: Decimal) -> Number:
    if value == value.to_integral_value():
        return int(value)
    return float(value)


class PostgresScoreStore(ScoreStore):
    def __init__(self, db: DatabaseConnection):
        super().__init__()
        self.db = db

    async def save(self, record: NewGameScore) -> Result[GameScore]:
        score = self._new_score(record)
        try:
            async with self.db.acquire() as conn:
                await conn.execute('''
                    INSERT INTO game_scores (id, game_title, player_id, player_username, score, created_at)
                    VALUES ($1, $2, $3, $4, $5, $6)
                ''', score.id, score.game_title, score.player_id, score.player_username,
                    _to_numeric(score.score), score.created_at)
        except Exception as e:
            logger.error(f"Error saving score for game {record.game_title}: {e}")
            return internal_error()
        return Success(data=score)

    async def get_by_game(self, game_title: str, count: int, ascending: bool = False) -> Result[List[GameScore]]:
        order = 'ASC' if ascending else 'DESC'
        try:
            async with self.db.acquire() as conn:
                rows = await conn.fetch(f'''
                    SELECT id, game_title, player_id, player_username, score, created_at
                    FROM game_scores
                    WHERE game_title = $1
                    ORDER BY score {order}, created_at ASC
                    LIMIT $2
                ''', game_title, count)
        except Exception as e:
            logger.error(f"Error querying scores for game {game_title}: {e}")
            return internal_error()
        return Success(data=[self._from_row(row) for row in rows])

    @staticmethod
    def _from_row(row) -> GameScore:
        data = dict(row)
        data['score'] = _from_numeric(data['score'])
        return GameScore(**data)


class InMemoryScoreStore(ScoreStore):
    """Keeps scores per game in a SortedList ordered by score"""

    def __init__(self):
        super().__init__()
        self._scores: Dict[str, SortedList] = {}
        self._lock = asyncio.Lock()

    async def save(self, record: NewGameScore) -> Result[GameScore]:
        score = self._new_score(record)
        async with self._lock:
            # equal scores keep insertion order, i.e. oldest first
            scores = self._scores.setdefault(score.game_title, SortedList(key=lambda s: s.score))
            scores.add(score)
        return Success(data=score)

    async def get_by_game(self, game_title: str, count: int, ascending: bool = False) -> Result[List[GameScore]]:
        scores = self._scores.get(game_title)
        if not scores:
            return Success(data=[])
        if ascending:
            ordered = iter(scores)
        else:
            ties = groupby(reversed(scores), key=lambda s: s.score)
            ordered = chain.from_iterable(reversed(list(group)) for _, group in ties)
        return Success(data=list(islice(ordered, count)))
