"""
Strava session.

Explicit, caller-owned holder of one user's Strava connection:
tokens, athlete and the last fetched activities. Persisting the tokens
between requests is the caller's job (see snapshot()).

States:
    UNAUTHENTICATED -> AUTHORIZED -> EXPIRED -> REFRESHING
        -> AUTHORIZED (refresh ok) | UNAUTHENTICATED (refresh failed)

Refresh rules:
- expired tokens are refreshed before a call is made
- a 401 triggers exactly one refresh and one retry of the same call;
  a second 401 is terminal (session dropped, StravaAuthError raised)
- a failed refresh drops tokens, athlete and cached activities
- refresh is single-flight: callers that hit 401 with the same stale
  token while a refresh is running wait for it and reuse its result;
  StravaOAuth also shares one request per refresh token across sessions
"""

import asyncio
import logging
import time
from enum import Enum
from typing import Awaitable, Callable, Optional, TypeVar

from .client import StravaClient
from .exceptions import StravaAuthError, StravaError, StravaUnauthorizedError
from .oauth import StravaOAuth
from .schemas import Athlete, ExternalActivity, TokenSet

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Refresh this many seconds before Strava's expiry
EXPIRY_LEEWAY_SECONDS = 300


class ConnectionState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHORIZED = "authorized"
    EXPIRED = "expired"
    REFRESHING = "refreshing"


class StravaSession:
    """
    One user's Strava connection.

    Usage:
        session = StravaSession(oauth, client, tokens=stored_tokens)
        activities = await session.call(client.get_activities, 1, 30)
        store(session.snapshot())   # tokens may have been refreshed
    """

    def __init__(
        self,
        oauth: StravaOAuth,
        client: StravaClient,
        tokens: Optional[TokenSet] = None,
        athlete: Optional[Athlete] = None,
        clock: Callable[[], float] = time.time
    ):
        self.oauth = oauth
        self.client = client
        self.tokens = tokens
        self.athlete = athlete
        self.activities: list[ExternalActivity] = []
        self._clock = clock
        self._refresh_lock = asyncio.Lock()
        self._refreshing = False

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def state(self) -> ConnectionState:
        if self._refreshing:
            return ConnectionState.REFRESHING
        if self.tokens is None:
            return ConnectionState.UNAUTHENTICATED
        if self.is_expired():
            return ConnectionState.EXPIRED
        return ConnectionState.AUTHORIZED

    @property
    def is_connected(self) -> bool:
        return self.tokens is not None

    def is_expired(self) -> bool:
        return self.tokens is not None and self.tokens.is_expired(self._clock() + EXPIRY_LEEWAY_SECONDS)

    def snapshot(self) -> Optional[TokenSet]:
        """Tokens the caller should persist (None once disconnected)."""
        return self.tokens.model_copy() if self.tokens else None

    def disconnect(self) -> None:
        """Forget tokens, athlete and cached activities."""
        self.tokens = None
        self.athlete = None
        self.activities = []

    # -------------------------------------------------------------------------
    # Connect / refresh
    # -------------------------------------------------------------------------

    async def connect(self, code: str, redirect_uri: Optional[str] = None) -> Athlete:
        """
        Redeem an authorization code and load the athlete profile.

        Raises:
            StravaAuthError: If the exchange fails
        """
        tokens, athlete = await self.oauth.exchange_code(code, redirect_uri)
        self.tokens = tokens
        self.activities = []
        self.athlete = athlete or await self.client.get_athlete(tokens.access_token)
        logger.info(f"Strava connected: athlete_id={self.athlete.id}")
        return self.athlete

    async def refresh(self, stale_access_token: Optional[str] = None) -> TokenSet:
        """
        Refresh tokens, at most once per stale token.

        Args:
            stale_access_token: The token the caller saw rejected/expired.
                If the session already moved past it, the current tokens
                are returned without another refresh.

        Raises:
            StravaAuthError: If not connected or the refresh fails
        """
        async with self._refresh_lock:
            if self.tokens is None:
                raise StravaAuthError("Strava is not connected")

            if (
                stale_access_token is not None
                and self.tokens.access_token != stale_access_token
            ):
                return self.tokens

            self._refreshing = True
            try:
                self.tokens = await self.oauth.refresh(self.tokens.refresh_token)
                logger.info("Strava token refreshed")
                return self.tokens
            except StravaAuthError:
                logger.warning("Strava token refresh rejected, disconnecting")
                self.disconnect()
                raise
            except StravaError as e:
                logger.warning(f"Strava token refresh failed ({e}), disconnecting")
                self.disconnect()
                raise StravaAuthError("Token refresh failed, please reconnect") from e
            finally:
                self._refreshing = False

    async def _ensure_fresh(self) -> str:
        if self.tokens is None:
            raise StravaAuthError("Strava is not connected")
        if self.is_expired():
            return (await self.refresh(stale_access_token=self.tokens.access_token)).access_token
        return self.tokens.access_token

    # -------------------------------------------------------------------------
    # Calls
    # -------------------------------------------------------------------------

    async def call(self, fn: Callable[..., Awaitable[T]], *args, **kwargs) -> T:
        """
        Invoke ``fn(access_token, *args, **kwargs)`` with refresh-on-401.

        Raises:
            StravaAuthError: If refresh fails or the retried call is rejected again
        """
        token = await self._ensure_fresh()
        try:
            return await fn(token, *args, **kwargs)
        except StravaUnauthorizedError:
            logger.info("Strava rejected token, refreshing once")

        fresh = await self.refresh(stale_access_token=token)
        try:
            return await fn(fresh.access_token, *args, **kwargs)
        except StravaUnauthorizedError as e:
            logger.warning("Strava rejected refreshed token, disconnecting")
            self.disconnect()
            raise StravaAuthError("Strava authorization lost, please reconnect") from e

    async def get_athlete(self) -> Athlete:
        self.athlete = await self.call(self.client.get_athlete)
        return self.athlete

    async def refresh_activities(self, per_page: int = 50) -> list[ExternalActivity]:
        """Reload the first page of activities into the session cache."""
        self.activities = await self.call(self.client.get_activities, page=1, per_page=per_page)
        return self.activities
