"""
User feed module.

Usage:
    from app.features.feed import FeedRepository
"""
from .models import FeedMessage
from .repository import FeedRepository

__all__ = [
    "FeedMessage",
    "FeedRepository",
]
