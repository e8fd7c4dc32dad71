# Database models

from app.models.student import Student, StudentLevel
from app.models.lesson import Lesson, LessonStatus
from app.models.settings import AppSettings, TaxRegime

__all__ = [
    "Student",
    "StudentLevel",
    "Lesson",
    "LessonStatus",
    "AppSettings",
    "TaxRegime",
]
