"""
Strava API client.

Provides methods for the read-only Strava resource endpoints.
Every call takes a bearer token; token lifecycle (refresh on 401)
belongs to StravaSession.

Errors:
- 401 -> StravaUnauthorizedError (caller may refresh once and retry)
- 429 -> StravaRateLimitError
- other non-2xx -> StravaAPIError
- network failure / timeout -> StravaConnectionError
"""

import logging
from contextlib import asynccontextmanager
from datetime import datetime
from typing import Any, AsyncIterator, Optional

import httpx

from app.config import settings
from .exceptions import (
    StravaAPIError,
    StravaConnectionError,
    StravaRateLimitError,
    StravaUnauthorizedError,
)
from .schemas import Athlete, ExternalActivity

logger = logging.getLogger(__name__)


class StravaClient:
    """
    Async client for Strava API.

    Usage:
        client = StravaClient()
        athlete = await client.get_athlete(access_token)
        activities = await client.get_activities_in_range(access_token, start, end)
    """

    API_URL = "https://www.strava.com/api/v3"

    def __init__(
        self,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: Optional[float] = None,
        per_page: Optional[int] = None,
        max_pages: Optional[int] = None
    ):
        self._http = http_client
        self.timeout = timeout or settings.strava_timeout_seconds
        self.per_page = per_page or settings.strava_per_page
        self.max_pages = max_pages or settings.strava_max_pages

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http is not None:
            yield self._http
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                yield client

    async def _api_request(
        self,
        method: str,
        endpoint: str,
        access_token: str,
        params: Optional[dict] = None
    ) -> Any:
        """
        Make an authenticated API request.

        Raises:
            StravaUnauthorizedError: If the token is rejected
            StravaRateLimitError: If rate limit exceeded
            StravaAPIError: If API returns error
            StravaConnectionError: If Strava can't be reached in time
        """
        try:
            async with self._client() as client:
                response = await client.request(
                    method=method,
                    url=f"{self.API_URL}{endpoint}",
                    headers={"Authorization": f"Bearer {access_token}"},
                    params=params
                )
        except httpx.HTTPError as e:
            logger.error(f"Strava request {method} {endpoint} failed: {e!r}")
            raise StravaConnectionError(f"Could not reach Strava: {e.__class__.__name__}") from e

        # Log rate limit headers from Strava
        if "X-RateLimit-Limit" in response.headers:
            logger.debug(
                f"Strava rate limit: {response.headers.get('X-RateLimit-Usage')} "
                f"/ {response.headers.get('X-RateLimit-Limit')}"
            )

        if response.status_code == 401:
            raise StravaUnauthorizedError()
        elif response.status_code == 429:
            raise StravaRateLimitError()
        elif not response.is_success:
            raise StravaAPIError(
                f"API error: {response.status_code} - {response.text}",
                status_code=response.status_code
            )

        return response.json()

    async def get_athlete(self, access_token: str) -> Athlete:
        """Get authenticated athlete profile."""
        data = await self._api_request("GET", "/athlete", access_token)
        return Athlete.model_validate(data)

    async def get_activities(
        self,
        access_token: str,
        page: int = 1,
        per_page: int = 30,
        after: Optional[int] = None,
        before: Optional[int] = None
    ) -> list[ExternalActivity]:
        """
        Get one page of athlete activities.

        Args:
            access_token: Valid access token
            page: Page number (default 1)
            per_page: Results per page (max 200)
            after: Only activities starting after this epoch second
            before: Only activities starting before this epoch second

        Returns:
            Activities in Strava's order
        """
        params = {"page": page, "per_page": min(per_page, 200)}

        if after is not None:
            params["after"] = after
        if before is not None:
            params["before"] = before

        data = await self._api_request("GET", "/athlete/activities", access_token, params)
        return [ExternalActivity.model_validate(item) for item in data]

    async def get_activity(self, access_token: str, activity_id: int) -> ExternalActivity:
        """Get a single activity."""
        data = await self._api_request("GET", f"/activities/{activity_id}", access_token)
        return ExternalActivity.model_validate(data)

    async def get_activities_in_range(
        self,
        access_token: str,
        start: datetime,
        end: datetime
    ) -> list[ExternalActivity]:
        """
        Get all activities that started within [start, end].

        Pages through /athlete/activities until a short page or
        max_pages, whichever comes first.
        """
        after = int(start.timestamp())
        before = int(end.timestamp())

        activities: list[ExternalActivity] = []
        for page in range(1, self.max_pages + 1):
            batch = await self.get_activities(
                access_token,
                page=page,
                per_page=self.per_page,
                after=after,
                before=before,
            )
            activities.extend(batch)
            if len(batch) < self.per_page:
                break
        else:
            logger.warning(
                f"Stopped after {self.max_pages} pages of Strava activities "
                f"({len(activities)} fetched)"
            )

        return activities
