"""
API Router v1

Combines all route modules.
"""

from fastapi import APIRouter

from app.api.v1.routes import activities, challenges, feed, strava, users, wellness

api_router = APIRouter()

api_router.include_router(users.router, tags=["Users"])
api_router.include_router(activities.router, tags=["Activities"])
api_router.include_router(challenges.router, tags=["Challenges"])
api_router.include_router(wellness.router, tags=["Wellness"])
api_router.include_router(feed.router, tags=["Feed"])
api_router.include_router(strava.router, tags=["Strava"])
