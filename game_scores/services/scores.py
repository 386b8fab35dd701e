from __future__ import annotations

import asyncio
from typing import Awaitable, List, Optional

from ..database.score_store import ScoreStore
from ..logger import get_logger
from ..models.data import GameScore, NewGameScore, ScoreSubmission
from ..models.result import (
    FieldError,
    Result,
    Success,
    bad_request,
    internal_error,
    is_success,
)
from .games import GameQueryService
from .users import UserQueryService

logger = get_logger()

USER_NOT_FOUND = 'User with the given Id does not exist.'
GAME_NOT_FOUND = 'Game with the given Title does not exist.'
SAVE_TIMED_OUT = FieldError(
    field='score',
    message='Timed out while saving; the score may have been recorded.',
)


class GameScoreService:
    """
    Persists new game scores and queries existing ones.

    Every collaborator reports through a ``Result``. Submissions are checked
    against the user directory first, then the game catalog, and only then
    written, so an invalid reference never reaches the store.
    """

    def __init__(
        self,
        scores: ScoreStore,
        users: UserQueryService,
        games: GameQueryService,
        timeout: Optional[float] = None,
    ):
        self.scores = scores
        self.users = users
        self.games = games
        self.timeout = timeout

    async def submit_score(self, submission: ScoreSubmission) -> Result[GameScore]:
        """
        Save a new score, assigning it a unique id and filling in the player's
        username. Repeated identical submissions are all recorded.

        Returns the created score with status 200. A player id or game title
        that doesn't exist gives status 400; any other collaborator failure
        gives status 500 with a generic message.
        """
        deadline = None
        if self.timeout is not None:
            deadline = asyncio.get_running_loop().time() + self.timeout

        user_result = await self._call('user lookup', self.users.get_user_by_id(submission.player_id), deadline)
        if not is_success(user_result):
            if user_result.status == 404:
                return bad_request(USER_NOT_FOUND)
            return internal_error()
        user = user_result.data

        game_result = await self._call('game lookup', self.games.get_game_by_title(submission.game_title), deadline)
        if not is_success(game_result):
            if game_result.status == 404:
                return bad_request(GAME_NOT_FOUND)
            return internal_error()

        record = NewGameScore(
            game_title=game_result.data.title,
            player_id=user.id,
            player_username=user.username,
            score=submission.score,
        )

        save_result = await self._call('save', self.scores.save(record), deadline, timeout_errors=[SAVE_TIMED_OUT])
        if not is_success(save_result):
            # The write may have landed if we timed out mid-save; say so, and nothing else
            timed_out = getattr(save_result, 'errors', None) == [SAVE_TIMED_OUT]
            return internal_error([SAVE_TIMED_OUT] if timed_out else None)

        logger.info(f"Saved score {save_result.data.id} for player {user.id} in game {record.game_title}")
        return Success(data=save_result.data)

    async def get_top_scores_for_game(self, game_title: str, count: int, ascending: bool = False) -> Result[List[GameScore]]:
        """Return up to ``count`` scores for a game, highest first unless ``ascending``."""
        result = await self._call('top scores query', self.scores.get_by_game(game_title, count, ascending), None)
        if not is_success(result):
            return internal_error()
        return result

    async def _call(self, step: str, call: Awaitable[Result], deadline: Optional[float],
                    timeout_errors: Optional[List[FieldError]] = None) -> Result:
        """Await one collaborator call, turning timeouts and stray exceptions into failures"""
        timeout = asyncio.timeout_at(deadline)
        try:
            async with timeout:
                return await call
        except TimeoutError:
            if not timeout.expired():
                # raised by the collaborator itself, not by our deadline
                logger.exception(f"Unexpected error during {step}")
                return internal_error()
            logger.error(f"Score service timed out during {step}")
            return internal_error(timeout_errors)
        except Exception:
            logger.exception(f"Unexpected error during {step}")
            return internal_error()
