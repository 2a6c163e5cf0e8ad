"""
Tests for StravaSession.

Refresh-on-401 (exactly one retry), refresh failure handling,
single-flight refresh and state transitions.
"""

import asyncio

import httpx
import pytest

from app.features.strava import (
    ConnectionState,
    StravaAPIError,
    StravaAuthError,
    StravaClient,
    StravaOAuth,
    StravaSession,
    TokenSet,
)


NOW = 1_700_000_000
FRESH_EXPIRY = NOW + 6 * 3600

ATHLETE = {"id": 42, "firstname": "Shelly", "lastname": "T"}


class FakeStrava:
    """
    Mock Strava: token endpoint and API.

    API accepts only tokens in ``valid_tokens``; the token endpoint hands
    out ``new-<n>`` access tokens unless ``refresh_status`` says otherwise.
    """

    def __init__(self, valid_tokens=("old",), refresh_status=200, api_delay=0.0):
        self.valid_tokens = set(valid_tokens)
        self.refresh_status = refresh_status
        self.api_delay = api_delay
        self.token_calls = 0
        self.api_calls: list[str] = []

    async def handler(self, request: httpx.Request) -> httpx.Response:
        if request.url.path == "/oauth/token":
            self.token_calls += 1
            if self.refresh_status != 200:
                return httpx.Response(self.refresh_status, json={"message": "nope"})
            access = f"new-{self.token_calls}"
            return httpx.Response(200, json={
                "access_token": access,
                "refresh_token": f"refresh-{self.token_calls}",
                "expires_at": FRESH_EXPIRY,
                "athlete": ATHLETE,
            })

        token = request.headers["Authorization"].removeprefix("Bearer ")
        self.api_calls.append(token)
        if self.api_delay:
            await asyncio.sleep(self.api_delay)
        if token not in self.valid_tokens:
            return httpx.Response(401, json={"message": "Authorization Error"})
        if request.url.path == "/api/v3/athlete":
            return httpx.Response(200, json=ATHLETE)
        return httpx.Response(200, json=[{
            "id": 1, "type": "Run", "distance": 3000, "start_date": "2024-05-15T07:00:00Z",
        }])

    def session(self, tokens: TokenSet | None = None) -> StravaSession:
        http = httpx.AsyncClient(transport=httpx.MockTransport(self.handler))
        oauth = StravaOAuth(client_id="1", client_secret="s", http_client=http)
        client = StravaClient(http_client=http)
        return StravaSession(oauth, client, tokens=tokens, clock=lambda: NOW)


def tokens(access="old", expires_at=FRESH_EXPIRY) -> TokenSet:
    return TokenSet(access_token=access, refresh_token="refresh-0", expires_at=expires_at)


# =============================================================================
# Test State
# =============================================================================

class TestState:
    """Tests for state and snapshot."""

    def test_unauthenticated(self):
        session = FakeStrava().session()
        assert session.state == ConnectionState.UNAUTHENTICATED
        assert session.snapshot() is None

    def test_authorized(self):
        session = FakeStrava().session(tokens())
        assert session.state == ConnectionState.AUTHORIZED
        assert session.is_connected

    def test_expired_within_leeway(self):
        session = FakeStrava().session(tokens(expires_at=NOW + 60))
        assert session.state == ConnectionState.EXPIRED

    def test_snapshot_is_a_copy(self):
        session = FakeStrava().session(tokens())
        snapshot = session.snapshot()
        snapshot.access_token = "changed"
        assert session.tokens.access_token == "old"

    async def test_connect(self):
        session = FakeStrava().session()

        athlete = await session.connect("code-1", "https://app.example/cb")

        assert athlete.id == 42
        assert session.tokens.access_token == "new-1"
        assert session.state == ConnectionState.AUTHORIZED


# =============================================================================
# Test Refresh on 401
# =============================================================================

class TestCallWithRefresh:
    """Tests for call()."""

    async def test_no_refresh_when_token_valid(self):
        fake = FakeStrava()
        session = fake.session(tokens())

        athlete = await session.get_athlete()

        assert athlete.id == 42
        assert fake.token_calls == 0

    async def test_401_refreshes_once_and_retries(self):
        fake = FakeStrava(valid_tokens={"new-1"})
        session = fake.session(tokens())

        activities = await session.call(session.client.get_activities, page=1, per_page=30)

        assert [a.id for a in activities] == [1]
        assert fake.token_calls == 1
        assert fake.api_calls == ["old", "new-1"]
        assert session.snapshot().access_token == "new-1"
        assert session.snapshot().refresh_token == "refresh-1"

    async def test_second_401_is_terminal(self):
        fake = FakeStrava(valid_tokens=set())
        session = fake.session(tokens())

        with pytest.raises(StravaAuthError):
            await session.get_athlete()

        assert fake.token_calls == 1
        assert len(fake.api_calls) == 2
        assert session.state == ConnectionState.UNAUTHENTICATED

    async def test_failed_refresh_clears_session(self):
        fake = FakeStrava(valid_tokens={"new-1"}, refresh_status=400)
        session = fake.session(tokens())
        session.activities = await FakeStrava().session(tokens()).refresh_activities()

        with pytest.raises(StravaAuthError):
            await session.get_athlete()

        assert session.tokens is None
        assert session.athlete is None
        assert session.activities == []

    async def test_refresh_network_error_becomes_auth_error(self):
        async def handler(request):
            if request.url.path == "/oauth/token":
                raise httpx.ConnectError("down", request=request)
            return httpx.Response(401)

        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        session = StravaSession(
            StravaOAuth(client_id="1", client_secret="s", http_client=http),
            StravaClient(http_client=http),
            tokens=tokens(),
            clock=lambda: NOW,
        )

        with pytest.raises(StravaAuthError):
            await session.get_athlete()
        assert not session.is_connected

    async def test_expired_token_refreshed_before_call(self):
        fake = FakeStrava(valid_tokens={"new-1"})
        session = fake.session(tokens(expires_at=NOW - 10))

        await session.get_athlete()

        assert fake.api_calls == ["new-1"]
        assert fake.token_calls == 1

    async def test_other_errors_do_not_refresh(self):
        async def handler(request):
            return httpx.Response(503, text="maintenance")

        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        session = StravaSession(
            StravaOAuth(client_id="1", client_secret="s", http_client=http),
            StravaClient(http_client=http),
            tokens=tokens(),
            clock=lambda: NOW,
        )

        with pytest.raises(StravaAPIError):
            await session.get_athlete()
        assert session.is_connected

    async def test_not_connected(self):
        with pytest.raises(StravaAuthError):
            await FakeStrava().session().get_athlete()


class TestSingleFlightRefresh:
    """Concurrent 401s share one refresh."""

    async def test_concurrent_401s_refresh_once(self):
        fake = FakeStrava(valid_tokens={"new-1"}, api_delay=0.01)
        session = fake.session(tokens())

        first, second = await asyncio.gather(session.get_athlete(), session.get_athlete())

        assert first.id == second.id == 42
        assert fake.token_calls == 1
        assert session.tokens.access_token == "new-1"

    async def test_stale_token_returns_current(self):
        fake = FakeStrava(valid_tokens={"new-1"})
        session = fake.session(tokens(access="new-1"))

        result = await session.refresh(stale_access_token="old")

        assert result.access_token == "new-1"
        assert fake.token_calls == 0
