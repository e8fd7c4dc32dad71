"""Pydantic schemas."""

from app.schemas.lesson import (
    LessonCreate,
    LessonUpdate,
    LessonResponse,
    LessonListResponse,
    LessonSeriesResponse,
)
from app.schemas.student import (
    StudentCreate,
    StudentUpdate,
    StudentResponse,
    StudentListResponse,
)
from app.schemas.settings import (
    SettingsUpdate,
    SettingsResponse,
    TaxRecord,
)

__all__ = [
    # Lesson
    "LessonCreate",
    "LessonUpdate",
    "LessonResponse",
    "LessonListResponse",
    "LessonSeriesResponse",
    # Student
    "StudentCreate",
    "StudentUpdate",
    "StudentResponse",
    "StudentListResponse",
    # Settings
    "SettingsUpdate",
    "SettingsResponse",
    "TaxRecord",
]
