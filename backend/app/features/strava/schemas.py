"""
Strava schemas.

Pydantic models for Strava payloads and API request/response.
"""
from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from app.features.challenges.schemas import ProgressResponse


class TokenSet(BaseModel):
    """OAuth tokens owned by the caller's session."""
    access_token: str
    refresh_token: str
    expires_at: int = Field(..., description="Unix timestamp (seconds)")

    def is_expired(self, now: float) -> bool:
        return now >= self.expires_at


class Athlete(BaseModel):
    """Authenticated athlete (subset of Strava's profile)."""
    model_config = ConfigDict(extra="ignore")

    id: int
    username: Optional[str] = None
    firstname: Optional[str] = None
    lastname: Optional[str] = None

    @property
    def display_name(self) -> str:
        return f"{self.firstname or ''} {self.lastname or ''}".strip()


class ExternalActivity(BaseModel):
    """
    Activity summary as returned by /athlete/activities.

    Read-only verification input; field names follow ours, aliases
    follow Strava's.
    """
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: int
    name: Optional[str] = None
    activity_type: str = Field(..., alias="type")
    distance: float = 0.0  # meters
    moving_time: int = 0  # seconds
    elapsed_time: int = 0  # seconds
    elevation_gain: float = Field(default=0.0, alias="total_elevation_gain")  # meters
    start_date: datetime
    calories: Optional[float] = None


# =============================================================================
# API request/response
# =============================================================================

class AuthUrlResponse(BaseModel):
    url: str
    state: str


class ExchangeRequest(BaseModel):
    code: str = Field(..., min_length=1)
    state: str = Field(..., min_length=1)
    redirect_uri: Optional[str] = None


class ConnectionResponse(BaseModel):
    tokens: TokenSet
    athlete: Optional[Athlete] = None


class RefreshRequest(BaseModel):
    refresh_token: str = Field(..., min_length=1)


class ActivitiesRequest(BaseModel):
    tokens: TokenSet
    page: int = Field(default=1, ge=1)
    per_page: int = Field(default=30, ge=1, le=200)
    after: Optional[int] = None
    before: Optional[int] = None


class ActivitiesResponse(BaseModel):
    tokens: TokenSet
    activities: List[ExternalActivity]


class VerifyRequest(BaseModel):
    tokens: TokenSet
    challenge_type: str = Field(..., min_length=1, description="Measurement kind or challenge category")
    target: float = Field(..., gt=0)
    timeframe: str = "today"
    challenge_id: Optional[str] = Field(default=None, description="Save verified progress to this challenge")


class VerifyResponse(BaseModel):
    tokens: TokenSet
    completed: bool
    progress: float
    measurement: str
    window_start: datetime
    window_end: datetime
    activities: List[ExternalActivity]
    challenge: Optional[ProgressResponse] = None
