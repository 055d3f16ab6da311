# app/api/v1/api.py

from fastapi import APIRouter
from app.api.v1.endpoints import (
    health,
    auth,
    users,
    events,
    registrations,
    dashboard,
    notifications,
    profile,
    categories,
)

# This is the main router for the v1 API.
# It will include all the specific endpoint routers.
api_router = APIRouter()

api_router.include_router(health.router)
api_router.include_router(auth.router)
api_router.include_router(users.router)
api_router.include_router(events.router)
api_router.include_router(registrations.router)
api_router.include_router(dashboard.router)
api_router.include_router(notifications.router)
api_router.include_router(profile.router)
api_router.include_router(categories.router)
