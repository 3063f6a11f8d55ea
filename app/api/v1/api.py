"""
API router for version 1 of the API.
"""
from fastapi import APIRouter

from app.api.v1.endpoints import league, teams, logos

api_router = APIRouter()

api_router.include_router(league.router, prefix="/league", tags=["league"])
api_router.include_router(teams.router, prefix="/teams", tags=["teams"])
api_router.include_router(logos.router, prefix="/logos", tags=["logos"])
