"""
Tests for StravaOAuth.

Authorization URL, consume-once code exchange and refresh.
"""

import asyncio
from urllib.parse import parse_qs, urlparse

import httpx
import pytest

from app.features.strava import StravaAuthError, StravaConnectionError, StravaOAuth


TOKEN_BODY = {
    "token_type": "Bearer",
    "access_token": "access-1",
    "refresh_token": "refresh-1",
    "expires_at": 1_900_000_000,
    "expires_in": 21600,
    "athlete": {"id": 42, "username": "shelly", "firstname": "Shelly", "lastname": "T"},
}


def make_oauth(handler) -> StravaOAuth:
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return StravaOAuth(client_id="12345", client_secret="secret", http_client=http)


class TestAuthorizationUrl:
    """Tests for get_authorization_url."""

    def test_contains_params(self):
        oauth = StravaOAuth(client_id="12345", client_secret="secret")

        url = oauth.get_authorization_url("https://app.example/callback", state="abc")
        parsed = urlparse(url)
        params = parse_qs(parsed.query)

        assert parsed.netloc == "www.strava.com"
        assert params["client_id"] == ["12345"]
        assert params["redirect_uri"] == ["https://app.example/callback"]
        assert params["response_type"] == ["code"]
        assert params["scope"] == ["read,activity:read_all"]
        assert params["state"] == ["abc"]

    def test_state_optional(self):
        oauth = StravaOAuth(client_id="12345", client_secret="secret")
        assert "state=" not in oauth.get_authorization_url("https://app.example/callback")


class TestExchangeCode:
    """Tests for exchange_code."""

    async def test_success(self):
        requests = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json=TOKEN_BODY)

        tokens, athlete = await make_oauth(handler).exchange_code("code-1", "https://app.example/cb")

        assert tokens.access_token == "access-1"
        assert tokens.refresh_token == "refresh-1"
        assert tokens.expires_at == 1_900_000_000
        assert athlete.id == 42

        form = parse_qs(requests[0].content.decode())
        assert form["grant_type"] == ["authorization_code"]
        assert form["code"] == ["code-1"]
        assert form["client_secret"] == ["secret"]

    async def test_code_is_consumed_once(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json=TOKEN_BODY)

        oauth = make_oauth(handler)
        await oauth.exchange_code("code-1")

        with pytest.raises(StravaAuthError):
            await oauth.exchange_code("code-1")
        assert len(calls) == 1

    async def test_failed_code_is_not_retried(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(400, json={"message": "Bad Request"})

        oauth = make_oauth(handler)
        with pytest.raises(StravaAuthError):
            await oauth.exchange_code("bad-code")
        with pytest.raises(StravaAuthError):
            await oauth.exchange_code("bad-code")
        assert len(calls) == 1

    async def test_missing_athlete(self):
        body = {k: v for k, v in TOKEN_BODY.items() if k != "athlete"}
        oauth = make_oauth(lambda request: httpx.Response(200, json=body))

        _, athlete = await oauth.exchange_code("code-2")

        assert athlete is None

    async def test_unreachable_strava_leaves_code_usable(self):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) == 1:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(200, json=TOKEN_BODY)

        oauth = make_oauth(handler)
        with pytest.raises(StravaConnectionError):
            await oauth.exchange_code("code-3")

        tokens, _ = await oauth.exchange_code("code-3")

        assert tokens.access_token == "access-1"
        assert len(calls) == 2


class TestRefresh:
    """Tests for refresh."""

    async def test_success(self):
        def handler(request):
            form = parse_qs(request.content.decode())
            assert form["grant_type"] == ["refresh_token"]
            assert form["refresh_token"] == ["refresh-1"]
            return httpx.Response(200, json={
                "access_token": "access-2", "refresh_token": "refresh-2", "expires_at": 1_900_021_600,
            })

        tokens = await make_oauth(handler).refresh("refresh-1")

        assert tokens.access_token == "access-2"
        assert tokens.refresh_token == "refresh-2"

    async def test_rejected(self):
        oauth = make_oauth(lambda request: httpx.Response(401, json={"message": "invalid"}))
        with pytest.raises(StravaAuthError):
            await oauth.refresh("refresh-1")

    async def test_network_failure(self):
        def handler(request):
            raise httpx.ConnectTimeout("timed out", request=request)

        with pytest.raises(StravaConnectionError):
            await make_oauth(handler).refresh("refresh-1")

    async def test_concurrent_refreshes_share_one_request(self):
        calls = []

        async def handler(request):
            calls.append(request)
            await asyncio.sleep(0.05)
            return httpx.Response(200, json={
                "access_token": "access-2", "refresh_token": "refresh-2", "expires_at": 1_900_021_600,
            })

        oauth = make_oauth(handler)
        first, second = await asyncio.gather(oauth.refresh("refresh-1"), oauth.refresh("refresh-1"))

        assert len(calls) == 1
        assert first.access_token == second.access_token == "access-2"

    async def test_shared_refresh_failure_reaches_every_caller(self):
        calls = []

        async def handler(request):
            calls.append(request)
            await asyncio.sleep(0.05)
            return httpx.Response(400, json={"message": "invalid"})

        oauth = make_oauth(handler)
        results = await asyncio.gather(
            oauth.refresh("refresh-1"), oauth.refresh("refresh-1"), return_exceptions=True
        )

        assert len(calls) == 1
        assert all(isinstance(r, StravaAuthError) for r in results)

    async def test_later_refresh_sends_a_new_request(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200, json={
                "access_token": "access-2", "refresh_token": "refresh-2", "expires_at": 1_900_021_600,
            })

        oauth = make_oauth(handler)
        await oauth.refresh("refresh-1")
        await oauth.refresh("refresh-1")

        assert len(calls) == 2
