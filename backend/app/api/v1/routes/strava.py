"""
Strava Routes

Endpoints for Strava integration:
- GET  /strava/auth-url    - Authorization URL with a CSRF state
- POST /strava/exchange    - Redeem an authorization code (consume-once)
- POST /strava/refresh     - Refresh tokens
- POST /strava/activities  - One page of the athlete's activities
- POST /strava/verify      - Verify a challenge from Strava activities

Tokens are never stored here. Every response echoes the (possibly
refreshed) token set; the caller must keep the latest one.
"""

import secrets
import logging
from datetime import datetime, timedelta
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.session import get_async_db
from app.config import settings
from app.features.challenges import ChallengeTracker
from app.features.strava import (
    ChallengeVerifier,
    StravaClient,
    StravaOAuth,
    StravaSession,
)
from app.features.strava.schemas import (
    ActivitiesRequest,
    ActivitiesResponse,
    AuthUrlResponse,
    ConnectionResponse,
    ExchangeRequest,
    RefreshRequest,
    VerifyRequest,
    VerifyResponse,
)
from app.shared.exceptions import ValidationError
from app.api.v1.routes.challenges import award_completion

logger = logging.getLogger(__name__)

router = APIRouter()

# In-memory state storage (for CSRF protection)
# In production, use Redis or database
_oauth_states: dict[str, dict] = {}
_OAUTH_STATE_TTL = timedelta(minutes=10)

# Shared so redeemed codes are remembered across requests
_oauth: Optional[StravaOAuth] = None


# =============================================================================
# Dependencies
# =============================================================================

def get_strava_oauth() -> StravaOAuth:
    """Shared OAuth handler; 503 when Strava credentials are missing."""
    global _oauth
    if not settings.strava_client_id or not settings.strava_client_secret:
        raise HTTPException(
            status_code=503,
            detail="Strava integration not configured"
        )
    if _oauth is None:
        _oauth = StravaOAuth()
    return _oauth


def get_strava_client() -> StravaClient:
    return StravaClient()


def _is_expired(state_data: dict, now: datetime) -> bool:
    return now - state_data["created_at"] > _OAUTH_STATE_TTL


def _purge_expired_states(now: datetime) -> None:
    for state in [s for s, data in _oauth_states.items() if _is_expired(data, now)]:
        del _oauth_states[state]


# =============================================================================
# OAuth Flow
# =============================================================================

@router.get("/strava/auth-url", response_model=AuthUrlResponse)
async def strava_auth_url(
    redirect_uri: Optional[str] = Query(default=None, description="Where Strava sends the code"),
    oauth: StravaOAuth = Depends(get_strava_oauth)
):
    """
    Build the Strava authorization URL.

    The returned state must be sent back with the code to /strava/exchange
    within ten minutes.
    """
    redirect_uri = redirect_uri or settings.strava_redirect_uri
    if not redirect_uri:
        raise ValidationError("redirect_uri is required", field="redirect_uri")

    now = datetime.utcnow()
    _purge_expired_states(now)

    state = secrets.token_urlsafe(32)
    _oauth_states[state] = {
        "redirect_uri": redirect_uri,
        "created_at": now
    }

    logger.info("Strava OAuth initiated")

    return AuthUrlResponse(
        url=oauth.get_authorization_url(redirect_uri=redirect_uri, state=state),
        state=state,
    )


@router.post("/strava/exchange", response_model=ConnectionResponse)
async def strava_exchange(
    request: ExchangeRequest,
    oauth: StravaOAuth = Depends(get_strava_oauth),
    client: StravaClient = Depends(get_strava_client)
):
    """Redeem an authorization code for tokens and the athlete profile."""
    state_data = _oauth_states.pop(request.state, None)
    if not state_data or _is_expired(state_data, datetime.utcnow()):
        logger.warning("Strava exchange with unknown state")
        raise ValidationError("Invalid or expired OAuth state", field="state")

    session = StravaSession(oauth, client)
    athlete = await session.connect(
        request.code,
        request.redirect_uri or state_data["redirect_uri"]
    )

    return ConnectionResponse(tokens=session.snapshot(), athlete=athlete)


@router.post("/strava/refresh", response_model=ConnectionResponse)
async def strava_refresh(
    request: RefreshRequest,
    oauth: StravaOAuth = Depends(get_strava_oauth)
):
    """Exchange a refresh token for a new token set."""
    tokens = await oauth.refresh(request.refresh_token)
    return ConnectionResponse(tokens=tokens)


# =============================================================================
# Activities / Verification
# =============================================================================

@router.post(
    "/strava/activities",
    response_model=ActivitiesResponse,
    response_model_by_alias=False
)
async def strava_activities(
    request: ActivitiesRequest,
    oauth: StravaOAuth = Depends(get_strava_oauth),
    client: StravaClient = Depends(get_strava_client)
):
    """One page of activities; tokens are refreshed once on 401."""
    session = StravaSession(oauth, client, tokens=request.tokens)
    activities = await session.call(
        client.get_activities,
        page=request.page,
        per_page=request.per_page,
        after=request.after,
        before=request.before,
    )
    return ActivitiesResponse(tokens=session.snapshot(), activities=activities)


@router.post(
    "/strava/verify",
    response_model=VerifyResponse,
    response_model_by_alias=False
)
async def strava_verify(
    request: VerifyRequest,
    oauth: StravaOAuth = Depends(get_strava_oauth),
    client: StravaClient = Depends(get_strava_client),
    db: AsyncSession = Depends(get_async_db)
):
    """
    Verify a challenge against Strava activities in the timeframe.

    With challenge_id, the measured progress is written to the challenge
    and completion XP is awarded on the transition to completed. The
    request target must then equal the stored target, so the reported
    completion matches the saved one.
    """
    tracker = ChallengeTracker(db)
    if request.challenge_id:
        challenge = await tracker.get_challenge(request.challenge_id)
        if request.target != challenge.target:
            raise ValidationError(
                f"Target {request.target} does not match challenge target {challenge.target}",
                field="target",
                value=request.target,
            )

    session = StravaSession(oauth, client, tokens=request.tokens)
    result = await ChallengeVerifier(session).verify(
        request.challenge_type,
        request.target,
        request.timeframe,
    )

    saved = None
    if request.challenge_id:
        progress = await tracker.set_progress(request.challenge_id, result.progress)
        saved = await award_completion(tracker, progress)
        await db.commit()

    return VerifyResponse(
        tokens=session.snapshot(),
        completed=result.completed,
        progress=result.progress,
        measurement=result.measurement.value,
        window_start=result.window_start,
        window_end=result.window_end,
        activities=result.activities,
        challenge=saved,
    )
