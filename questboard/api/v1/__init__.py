"""
API v1 routes aggregation
"""
from fastapi import APIRouter
from questboard.api.v1 import (
    users, categories, tasks, goals, achievements, leaderboard, stats
)

api_router = APIRouter()

# Users
api_router.include_router(users.router, tags=["users"])

# Categories
api_router.include_router(categories.router, tags=["categories"])

# Tasks
api_router.include_router(tasks.router, tags=["tasks"])

# Goals, roadmaps and AI tips
api_router.include_router(goals.router, tags=["goals"])

# Achievements
api_router.include_router(achievements.router, tags=["achievements"])

# Leaderboard
api_router.include_router(leaderboard.router, tags=["leaderboard"])

# Stats
api_router.include_router(stats.router, tags=["stats"])
