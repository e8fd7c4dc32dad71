"""Tutor settings model (single row)."""

from enum import Enum

from sqlalchemy import JSON, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import BaseModel

SETTINGS_ID = 1

# Palette offered to new subjects
SUBJECT_COLORS = [
    "#ef4444", "#f59e0b", "#22c55e", "#3b82f6",
    "#8b5cf6", "#ec4899", "#06b6d4", "#84cc16",
]

FALLBACK_COLOR = "#6366f1"


class TaxRegime(str, Enum):
    """Tax calculation policy selected by the tutor."""

    PATENT = "patent"
    USN = "usn"
    SELF_EMPLOYED = "self-employed"
    NONE = "none"


DEFAULT_SUBJECTS = [
    {"id": "russian", "name": "Русский язык", "color": "#ef4444"},
    {"id": "literature", "name": "Литература", "color": "#8b5cf6"},
    {"id": "english", "name": "Английский язык", "color": "#3b82f6"},
    {"id": "spanish", "name": "Испанский язык", "color": "#f59e0b"},
]

DEFAULT_TOPICS = {
    "russian": [
        "Грамматика", "Орфография", "Пунктуация", "Сочинение",
        "ЕГЭ подготовка", "ОГЭ подготовка",
    ],
    "literature": [
        "Русская классика", "Зарубежная литература", "Анализ текста", "Сочинение",
    ],
    "english": [
        "Грамматика", "Разговорный", "Бизнес-английский", "IELTS", "TOEFL",
        "Школьная программа",
    ],
    "spanish": ["Грамматика", "Разговорный", "DELE подготовка", "Бизнес"],
}


class AppSettings(BaseModel):
    """Tutor preferences, subjects, topic dictionary and tax records."""

    __tablename__ = "settings"

    default_lesson_duration: Mapped[int] = mapped_column(Integer, default=60, nullable=False)
    default_price: Mapped[int] = mapped_column(Integer, default=1500, nullable=False)
    working_hours: Mapped[dict] = mapped_column(JSON, nullable=False)

    subjects: Mapped[list[dict]] = mapped_column(JSON, default=list, nullable=False)
    topics: Mapped[dict[str, list[str]]] = mapped_column(JSON, default=dict, nullable=False)

    theme: Mapped[str] = mapped_column(String(20), default="light", nullable=False)
    user_name: Mapped[str | None] = mapped_column(String(200))

    tax_system: Mapped[TaxRegime] = mapped_column(
        String(20),
        default=TaxRegime.PATENT,
        nullable=False,
    )
    tax_records: Mapped[list[dict]] = mapped_column(JSON, default=list, nullable=False)

    def subject_by_id(self, subject_id: str) -> dict | None:
        for subject in self.subjects or []:
            if subject.get("id") == subject_id:
                return subject
        return None

    def __repr__(self) -> str:
        return f"<AppSettings(id={self.id}, tax_system={self.tax_system})>"
