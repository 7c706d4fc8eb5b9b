"""
API router aggregator: wires all endpoint modules together.
"""

from fastapi import APIRouter

from app.api.endpoints import (auth, events, health, matches, news, players,
                               teams, users)

api_router = APIRouter()

# Account lifecycle (register, verify, login, reset) and current user
api_router.include_router(auth.router)

# User administration
api_router.include_router(users.router)

# Teams, players, events, news
api_router.include_router(teams.router)
api_router.include_router(events.router)
api_router.include_router(news.router)

# Match details
api_router.include_router(matches.router)

# Player statistics
api_router.include_router(players.router)

# Health
api_router.include_router(health.router)
