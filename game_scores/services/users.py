from __future__ import annotations

import asyncio
import time
from abc import ABC, abstractmethod
from typing import Optional
from urllib.parse import quote

import httpx

from ..config import auth0
from ..logger import get_logger
from ..models.data import BasicUserData
from ..models.result import Failure, Result, Success, internal_error

logger = get_logger()

# Refresh the management token this many seconds before Auth0 expires it
TOKEN_EXPIRY_MARGIN = 60


class UserQueryService(ABC):
    """
    Provides the user data other services need. Clients cannot update
    users through this interface.
    """

    @abstractmethod
    async def get_user_by_id(self, user_id: str) -> Result[BasicUserData]:
        """
        Look up a user by id.

        Returns part of the user's public profile, or a ``Failure`` with
        status 404 when no such user exists. Any other failure carries the
        upstream or a 5xx status.
        """


class Auth0UserService(UserQueryService):
    """Reads users from the Auth0 Management API"""

    def __init__(self, client: httpx.AsyncClient, client_id: str, client_secret: str, audience: str):
        self._client = client
        self._client_id = client_id
        self._client_secret = client_secret
        self._audience = audience
        self._token: Optional[str] = None
        self._token_expires_at = 0.0
        self._token_lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config=auth0) -> "Auth0UserService":
        base_url = f"https://{config.DOMAIN}"
        client = httpx.AsyncClient(base_url=base_url, timeout=config.REQUEST_TIMEOUT)
        return cls(
            client,
            client_id=config.CLIENT_ID,
            client_secret=config.CLIENT_SECRET.get_secret_value(),
            audience=f"{base_url}/api/v2/",
        )

    async def _management_token(self) -> str:
        async with self._token_lock:
            if self._token is None or time.monotonic() >= self._token_expires_at:
                response = await self._client.post("/oauth/token", json={
                    "grant_type": "client_credentials",
                    "client_id": self._client_id,
                    "client_secret": self._client_secret,
                    "audience": self._audience,
                })
                response.raise_for_status()
                body = response.json()
                self._token = body["access_token"]
                self._token_expires_at = time.monotonic() + body.get("expires_in", 86400) - TOKEN_EXPIRY_MARGIN
            return self._token

    async def get_user_by_id(self, user_id: str) -> Result[BasicUserData]:
        try:
            token = await self._management_token()
        except (httpx.HTTPError, KeyError, ValueError) as e:
            logger.error(f"Auth0UserService: could not obtain management token: {e}")
            return internal_error()

        try:
            response = await self._client.get(
                f"/api/v2/users/{quote(user_id, safe='')}",
                headers={"Authorization": f"Bearer {token}"},
            )
            if response.is_error:
                message = _error_message(response)
                logger.error(f"Auth0UserService: getUserById request error: {response.status_code} {message}")
                return Failure(status=response.status_code, message=message)
            user = response.json()
        except (httpx.HTTPError, ValueError) as e:
            logger.error(f"Auth0UserService: getUserById request error: {e}")
            return internal_error()

        username = user.get("username")
        if username is None:
            return Failure(status=500, message="user did not have username field")
        return Success(data=BasicUserData(id=user_id, username=username))

    async def close(self):
        await self._client.aclose()


def _error_message(response: httpx.Response) -> str:
    """Auth0 error bodies carry a human readable ``message``"""
    try:
        body = response.json()
    except ValueError:
        return response.reason_phrase
    if isinstance(body, dict) and isinstance(body.get("message"), str):
        return body["message"]
    return response.reason_phrase
