from __future__ import annotations

from abc import ABC, abstractmethod

import httpx
from pydantic import ValidationError

from ..config import game_catalog
from ..logger import get_logger
from ..models.data import Game
from ..models.result import Failure, Result, Success, internal_error

logger = get_logger()


class GameQueryService(ABC):
    """Offers methods to query existing games."""

    @abstractmethod
    async def get_game_by_title(self, title: str) -> Result[Game]:
        """
        Find the game with exactly this title.

        Returns the game, or a ``Failure`` with status 404 when there is none.
        Any other failure carries a 5xx status.
        """


class HttpGameQueryService(GameQueryService):
    """Queries a remote games service: ``GET <url>?title=<title>``"""

    def __init__(self, client: httpx.AsyncClient, url: str):
        self._client = client
        self._url = url

    @classmethod
    def from_config(cls, config=game_catalog) -> "HttpGameQueryService":
        client = httpx.AsyncClient(timeout=config.GAME_SERVICE_TIMEOUT)
        return cls(client, config.GAME_SERVICE_URL)

    async def get_game_by_title(self, title: str) -> Result[Game]:
        try:
            response = await self._client.get(self._url, params={"title": title})
            response.raise_for_status()
            return Success(data=Game.model_validate(response.json()))
        except httpx.HTTPStatusError as e:
            logger.error(f"Games service returned {e.response.status_code} for title {title!r}")
            return Failure(status=e.response.status_code, message="Bad request")
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            logger.error(f"Games service request error for title {title!r}: {e}")
            return internal_error()

    async def close(self):
        await self._client.aclose()
