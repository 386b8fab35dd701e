import asyncio
import time
from typing import Any, Dict, List, Optional

import httpx
from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from ..config import auth
from ..logger import get_logger

logger = get_logger()

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized",
        headers={"WWW-Authenticate": "Bearer"},
    )


class TokenVerifier:
    """Verifies bearer tokens against a JWKS document, re-fetched after ``cache_seconds``"""

    def __init__(
        self,
        client: httpx.AsyncClient,
        jwks_url: str,
        audience: Optional[str] = None,
        issuer: Optional[str] = None,
        algorithms: Optional[List[str]] = None,
        cache_seconds: int = 300,
    ):
        self._client = client
        self.jwks_url = jwks_url
        self.audience = audience
        self.issuer = issuer
        self.algorithms = algorithms or ["RS256"]
        self.cache_seconds = cache_seconds
        self._jwks: Optional[Dict[str, Any]] = None
        self._fetched_at: Optional[float] = None
        self._lock = asyncio.Lock()

    @classmethod
    def from_config(cls, config=auth) -> "TokenVerifier":
        return cls(
            httpx.AsyncClient(timeout=5),
            jwks_url=config.JWKS_URL,
            audience=config.AUDIENCE,
            issuer=config.ISSUER,
            algorithms=config.ALGORITHMS,
            cache_seconds=config.JWKS_CACHE_SECONDS,
        )

    async def _get_jwks(self, refresh: bool = False) -> Dict[str, Any]:
        async with self._lock:
            stale = self._fetched_at is None or (time.monotonic() - self._fetched_at) > self.cache_seconds
            if refresh or self._jwks is None or stale:
                r = await self._client.get(self.jwks_url)
                r.raise_for_status()
                self._jwks = r.json()
                self._fetched_at = time.monotonic()
            return self._jwks

    async def _find_key(self, kid: Optional[str]) -> Optional[Dict[str, Any]]:
        jwks = await self._get_jwks()
        key = next((k for k in jwks.get("keys", []) if k.get("kid") == kid), None)
        if key is None:
            # One forced refresh in case of key rotation
            jwks = await self._get_jwks(refresh=True)
            key = next((k for k in jwks.get("keys", []) if k.get("kid") == kid), None)
        return key

    async def player_id(self, token: str) -> str:
        """Return the ``sub`` claim of a valid token, or raise a 401"""
        try:
            header = jwt.get_unverified_header(token)
            key = await self._find_key(header.get("kid"))
            if key is None:
                logger.warning(f"No JWKS key for token kid={header.get('kid')}")
                raise _unauthorized()
            claims = jwt.decode(
                token,
                key,
                algorithms=self.algorithms,
                audience=self.audience,
                issuer=self.issuer,
                options={"verify_aud": self.audience is not None, "verify_iss": self.issuer is not None},
            )
        except JWTError as e:
            logger.warning(f"Rejected bearer token: {e}")
            raise _unauthorized()
        except httpx.HTTPError as e:
            logger.error(f"Could not fetch JWKS from {self.jwks_url}: {e}")
            raise _unauthorized()

        sub = claims.get("sub")
        if not isinstance(sub, str) or not sub:
            raise _unauthorized()
        return sub

    async def close(self):
        await self._client.aclose()


async def get_player_id(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> str:
    """FastAPI dependency resolving the authenticated player's id"""
    if credentials is None or not credentials.credentials:
        raise _unauthorized()
    verifier: TokenVerifier = request.app.state.services.token_verifier
    return await verifier.player_id(credentials.credentials)
