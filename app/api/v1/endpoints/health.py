# app/api/v1/endpoints/health.py
"""
Health check endpoints for monitoring system status.
"""
from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.orm import Session

from app.core.config import settings
from app.db.session import get_db

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check():
    """Basic health check - API is responding."""
    return {"status": "healthy", "service": "academic-events-api"}


@router.get("/health/db")
def database_health(db: Session = Depends(get_db)):
    """Check database connectivity."""
    try:
        db.execute(text("SELECT 1"))
        return {"status": "healthy", "component": "database"}
    except Exception as e:
        raise HTTPException(
            status_code=503,
            detail=f"Database unhealthy: {str(e)}",
        )


@router.get("/info")
def api_info():
    return {
        "name": "Academic Events API",
        "version": "1.0.0",
        "environment": settings.ENV,
        "endpoints": {
            "auth": "/api/v1/auth",
            "users": "/api/v1/users",
            "events": "/api/v1/events",
            "registrations": "/api/v1/registrations",
            "dashboard": "/api/v1/dashboard",
            "profile": "/api/v1/profile",
            "notifications": "/api/v1/notifications",
            "categories": "/api/v1/categories",
        },
    }
