"""Student model."""

from enum import Enum

from sqlalchemy import JSON, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import BaseModel


class StudentLevel(str, Enum):
    """Proficiency level offered in the student form."""

    BEGINNER = "Начальный"
    INTERMEDIATE = "Средний"
    ADVANCED = "Продвинутый"
    OGE_PREP = "Подготовка к ОГЭ"
    EGE_PREP = "Подготовка к ЕГЭ"


# Palette offered to new students; the first unused color is suggested
STUDENT_COLORS = [
    "#ef4444", "#f97316", "#f59e0b", "#eab308",
    "#84cc16", "#22c55e", "#10b981", "#14b8a6",
    "#06b6d4", "#0ea5e9", "#3b82f6", "#6366f1",
    "#8b5cf6", "#a855f7", "#d946ef", "#ec4899",
]

UNKNOWN_STUDENT_NAME = "Неизвестный"


class Student(BaseModel):
    """Student model - one person the tutor teaches."""

    __tablename__ = "students"

    name: Mapped[str] = mapped_column(String(200), nullable=False, index=True)
    phone: Mapped[str | None] = mapped_column(String(50))
    email: Mapped[str | None] = mapped_column(String(255))

    # Subject ids from settings, not enforced
    subjects: Mapped[list[str]] = mapped_column(JSON, default=list, nullable=False)
    level: Mapped[str | None] = mapped_column(String(50))

    # Overrides settings.default_price when set
    default_price: Mapped[int | None] = mapped_column(Integer)
    color: Mapped[str | None] = mapped_column(String(7))

    goals: Mapped[str] = mapped_column(Text, default="", nullable=False)
    notes: Mapped[str] = mapped_column(Text, default="", nullable=False)

    def __repr__(self) -> str:
        return f"<Student(id={self.id}, name={self.name})>"
