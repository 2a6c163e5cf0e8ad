"""
Strava OAuth flow.

Handles:
- Authorization URL generation
- Code exchange for tokens (consume-once)
- Token refresh (one request per refresh token at a time)
"""

import asyncio
import logging
from collections import OrderedDict
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional
from urllib.parse import urlencode

import httpx

from app.config import settings
from .exceptions import StravaAuthError, StravaConnectionError
from .schemas import Athlete, TokenSet

logger = logging.getLogger(__name__)

# How many redeemed codes to remember
_REDEEMED_CODES_LIMIT = 1024


class StravaOAuth:
    """
    Strava OAuth handler.

    Usage:
        oauth = StravaOAuth()
        auth_url = oauth.get_authorization_url(
            redirect_uri="https://example.com/callback",
            state="csrf-token"
        )
        tokens, athlete = await oauth.exchange_code(code, redirect_uri)
        tokens = await oauth.refresh(tokens.refresh_token)
    """

    AUTHORIZE_URL = "https://www.strava.com/oauth/authorize"
    TOKEN_URL = "https://www.strava.com/oauth/token"

    def __init__(
        self,
        client_id: Optional[str] = None,
        client_secret: Optional[str] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None
    ):
        self.client_id = client_id or settings.strava_client_id
        self.client_secret = client_secret or settings.strava_client_secret
        self.timeout = timeout or settings.strava_timeout_seconds
        self._http = http_client
        self._redeemed_codes: OrderedDict[str, None] = OrderedDict()
        self._refreshing: dict[str, asyncio.Future] = {}

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http is not None:
            yield self._http
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                yield client

    def get_authorization_url(
        self,
        redirect_uri: str,
        state: Optional[str] = None,
        scope: str = "read,activity:read_all",
        approval_prompt: str = "force"
    ) -> str:
        """
        Generate Strava OAuth authorization URL.

        Args:
            redirect_uri: URL to redirect after authorization
            state: Optional state parameter for CSRF protection
            scope: OAuth scope
            approval_prompt: "force" to always show consent, "auto" otherwise

        Returns:
            Authorization URL string
        """
        params = {
            "client_id": self.client_id,
            "redirect_uri": redirect_uri,
            "response_type": "code",
            "scope": scope,
            "approval_prompt": approval_prompt,
        }
        if state:
            params["state"] = state

        return f"{self.AUTHORIZE_URL}?{urlencode(params)}"

    async def _token_request(self, data: dict, action: str) -> dict:
        payload = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            **data,
        }
        try:
            async with self._client() as client:
                response = await client.post(self.TOKEN_URL, data=payload)
        except httpx.HTTPError as e:
            logger.error(f"Strava token {action} failed: {e!r}")
            raise StravaConnectionError(f"Could not reach Strava for token {action}") from e

        if not response.is_success:
            logger.error(f"Strava token {action} failed: {response.status_code} {response.text}")
            raise StravaAuthError(f"Token {action} failed: {response.status_code}")

        return response.json()

    async def exchange_code(
        self,
        code: str,
        redirect_uri: Optional[str] = None
    ) -> tuple[TokenSet, Optional[Athlete]]:
        """
        Exchange authorization code for tokens.

        A code can be redeemed once; a repeated call with the same code
        fails without contacting Strava.

        Args:
            code: Authorization code from Strava callback
            redirect_uri: Redirect URI used for the authorization request

        Returns:
            (tokens, athlete) - athlete is None if Strava didn't include it

        Raises:
            StravaAuthError: If the code was already redeemed or exchange fails
            StravaConnectionError: If Strava could not be reached (code stays usable)
        """
        if code in self._redeemed_codes:
            logger.warning("Strava authorization code reused")
            raise StravaAuthError("Authorization code already redeemed")

        # Marked before the request: Strava invalidates a code on first use
        self._redeemed_codes[code] = None
        while len(self._redeemed_codes) > _REDEEMED_CODES_LIMIT:
            self._redeemed_codes.popitem(last=False)

        data = {"code": code, "grant_type": "authorization_code"}
        if redirect_uri:
            data["redirect_uri"] = redirect_uri
        try:
            body = await self._token_request(data, "exchange")
        except StravaConnectionError:
            # Strava never saw the code, so it can still be redeemed
            self._redeemed_codes.pop(code, None)
            raise

        tokens = TokenSet.model_validate(body)
        athlete = Athlete.model_validate(body["athlete"]) if body.get("athlete") else None
        logger.info(f"Strava code exchanged (athlete={athlete.id if athlete else 'n/a'})")
        return tokens, athlete

    async def refresh(self, refresh_token: str) -> TokenSet:
        """
        Refresh an expired access token.

        Never retried: on failure the caller must drop the session.
        Concurrent calls with the same refresh token share one request
        to Strava and all receive its result.

        Raises:
            StravaAuthError: If token refresh fails
        """
        pending = self._refreshing.get(refresh_token)
        if pending is None:
            pending = asyncio.ensure_future(self._refresh(refresh_token))
            self._refreshing[refresh_token] = pending

            def forget(done: asyncio.Future) -> None:
                if self._refreshing.get(refresh_token) is done:
                    del self._refreshing[refresh_token]

            pending.add_done_callback(forget)
        else:
            logger.debug("Joining in-flight Strava token refresh")
        return await asyncio.shield(pending)

    async def _refresh(self, refresh_token: str) -> TokenSet:
        body = await self._token_request(
            {"refresh_token": refresh_token, "grant_type": "refresh_token"},
            "refresh",
        )
        return TokenSet.model_validate(body)
