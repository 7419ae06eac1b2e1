"""API router for version 1."""
from fastapi import APIRouter

from studyquest.api.v1.endpoints import (
    achievements,
    activity,
    fixtures,
    odds,
    points,
    wagers,
)


api_router = APIRouter()
api_router.include_router(achievements.router)
api_router.include_router(points.router)
api_router.include_router(odds.router)
api_router.include_router(wagers.router)
api_router.include_router(activity.router)
api_router.include_router(fixtures.router)
