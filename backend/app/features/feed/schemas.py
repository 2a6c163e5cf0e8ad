"""
Feed schemas.
"""
from pydantic import BaseModel, Field
from datetime import datetime


class FeedPost(BaseModel):
    """Post a message."""
    owner_id: str
    message: str = Field(..., min_length=1, max_length=500)


class FeedMessageResponse(BaseModel):
    id: str
    owner_id: str
    message: str
    created_at: datetime

    class Config:
        from_attributes = True
