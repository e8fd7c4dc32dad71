"""API v1 router aggregating all route modules."""

from fastapi import APIRouter

from app.api.v1.routes import (
    backup,
    calendar,
    lessons,
    settings,
    statistics,
    students,
)

api_router = APIRouter()

api_router.include_router(students.router)
api_router.include_router(lessons.router)
api_router.include_router(calendar.router)
api_router.include_router(statistics.router)
api_router.include_router(settings.router)
api_router.include_router(backup.router)
