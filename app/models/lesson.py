"""Lesson model."""

import datetime as dt
from enum import Enum

from sqlalchemy import Boolean, Date, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import BaseModel

DEFAULT_DURATION = 60


class LessonStatus(str, Enum):
    """Lifecycle status of a lesson."""

    SCHEDULED = "scheduled"
    COMPLETED = "completed"
    CANCELLED = "cancelled"


class Lesson(BaseModel):
    """A single tutoring session with one student on one subject."""

    __tablename__ = "lessons"

    # Plain integer: deleting a student keeps its lessons
    student_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    subject: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    topic: Mapped[str] = mapped_column(String(255), default="", nullable=False)

    date: Mapped[dt.date] = mapped_column(Date, nullable=False, index=True)
    start_time: Mapped[str] = mapped_column(String(5), nullable=False)  # HH:MM
    duration: Mapped[int] = mapped_column(
        Integer,
        default=DEFAULT_DURATION,
        nullable=False,
    )  # minutes
    price: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    is_online: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    meeting_link: Mapped[str | None] = mapped_column(String(500))

    status: Mapped[LessonStatus] = mapped_column(
        String(20),
        default=LessonStatus.SCHEDULED,
        nullable=False,
        index=True,
    )
    is_paid: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)
    notes: Mapped[str] = mapped_column(Text, default="", nullable=False)

    @property
    def starts_at(self) -> dt.datetime:
        """Moment the lesson begins; midnight when no start time is set."""
        if not self.start_time:
            return dt.datetime.combine(self.date, dt.time())
        hours, minutes = self.start_time.split(":")
        return dt.datetime.combine(self.date, dt.time(int(hours), int(minutes)))

    @property
    def ends_at(self) -> dt.datetime:
        return self.starts_at + dt.timedelta(minutes=self.duration or DEFAULT_DURATION)

    @property
    def hours(self) -> float:
        return (self.duration or DEFAULT_DURATION) / 60

    def __repr__(self) -> str:
        return f"<Lesson(id={self.id}, date={self.date}, status={self.status})>"
