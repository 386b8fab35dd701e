"""
Construction of the service's collaborators.

Everything is built explicitly by ``build_container`` and handed to the app
through ``app.state.services``; routes pull what they need from there.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, List, Optional

from fastapi import Request

from . import config
from .core.auth import TokenVerifier
from .database import (
    DatabaseConnection,
    InMemoryGameStore,
    InMemoryScoreStore,
    PostgresGameStore,
    PostgresScoreStore,
)
from .logger import get_logger
from .services.games import GameQueryService, HttpGameQueryService
from .services.scores import GameScoreService
from .services.users import Auth0UserService

logger = get_logger()


@dataclass
class ServiceContainer:
    scores: GameScoreService
    games: GameQueryService
    token_verifier: Optional[TokenVerifier] = None
    closers: List[Callable[[], Awaitable[Any]]] = field(default_factory=list)

    async def close(self):
        for close in reversed(self.closers):
            try:
                await close()
            except Exception as e:
                logger.error(f"Error closing service resource: {e}")
        self.closers.clear()


async def build_container(
    storage=config.storage,
    catalog=config.game_catalog,
    service=config.service,
    directory=config.auth0,
    tokens=config.auth,
) -> ServiceContainer:
    closers = []

    if storage.STORAGE_BACKEND == 'postgres':
        db = DatabaseConnection()
        await db.initialize()
        closers.append(db.close)
        score_store = PostgresScoreStore(db)
        local_games = PostgresGameStore(db)
    else:
        logger.warning("Using in-memory storage; scores are lost on restart")
        score_store = InMemoryScoreStore()
        local_games = InMemoryGameStore(storage.MEMORY_SEED_GAMES)

    if catalog.GAME_SERVICE_URL:
        games = HttpGameQueryService.from_config(catalog)
        closers.append(games.close)
        logger.info(f"Validating game titles against {catalog.GAME_SERVICE_URL}")
    else:
        games = local_games

    users = Auth0UserService.from_config(directory)
    closers.append(users.close)

    token_verifier = TokenVerifier.from_config(tokens)
    closers.append(token_verifier.close)

    scores = GameScoreService(
        score_store,
        users,
        games,
        timeout=service.SCORES_SUBMIT_TIMEOUT_SECONDS,
    )
    # The local catalog always answers GET /games, whatever validates submissions
    return ServiceContainer(scores=scores, games=local_games, token_verifier=token_verifier, closers=closers)


def get_services(request: Request) -> ServiceContainer:
    return request.app.state.services


def get_score_service(request: Request) -> GameScoreService:
    return get_services(request).scores


def get_game_service(request: Request) -> GameQueryService:
    return get_services(request).games
