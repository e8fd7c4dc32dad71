"""Lesson schemas."""

from datetime import date, datetime
from enum import Enum
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, Field, field_validator, model_validator

from app.models.lesson import DEFAULT_DURATION, LessonStatus
from app.schemas.validators import LessonDate, TimeOfDay, reject_null

MAX_REPEAT_COUNT = 52


class RepeatUnit(str, Enum):
    """Cadence of a recurring series; lessons repeat weekly."""

    WEEKS = "weeks"


def coerce_repeat_count(value) -> int:
    """Non-numeric or non-positive counts mean no repeats; cap at 52 weeks."""
    try:
        count = int(value)
    except (TypeError, ValueError):
        return 0
    return max(0, min(count, MAX_REPEAT_COUNT))


RepeatCount = Annotated[int, BeforeValidator(coerce_repeat_count)]


class LessonBase(BaseModel):
    """Fields shared by lesson create payloads."""

    model_config = {"use_enum_values": True}

    student_id: int
    subject: str = Field(..., min_length=1, max_length=100)
    topic: str = Field("", max_length=255)
    date: LessonDate
    start_time: TimeOfDay
    duration: int = Field(DEFAULT_DURATION, gt=0)
    price: int = Field(0, ge=0)
    is_online: bool = False
    meeting_link: str | None = Field(None, max_length=500)
    status: LessonStatus = LessonStatus.SCHEDULED
    is_paid: bool = False
    notes: str = ""


class LessonCreate(LessonBase):
    """
    Schema for creating a new lesson.

    ``repeat``, ``repeat_count`` and ``repeat_unit`` only drive series
    generation and are never stored.
    """

    repeat: bool = False
    repeat_count: RepeatCount = 4
    repeat_unit: RepeatUnit = RepeatUnit.WEEKS

    @model_validator(mode="after")
    def strip_topic(self) -> "LessonCreate":
        self.topic = self.topic.strip()
        return self

    def to_record(self) -> dict:
        """Persistable fields, without the repeat controls."""
        return self.model_dump(exclude={"repeat", "repeat_count", "repeat_unit"})


class LessonUpdate(BaseModel):
    """Schema for updating a lesson (partial patch)."""

    model_config = {"use_enum_values": True}

    student_id: int | None = None
    subject: str | None = Field(None, min_length=1, max_length=100)
    topic: str | None = Field(None, max_length=255)
    date: LessonDate | None = None
    start_time: TimeOfDay | None = None
    duration: int | None = Field(None, gt=0)
    price: int | None = Field(None, ge=0)
    is_online: bool | None = None
    meeting_link: str | None = Field(None, max_length=500)
    status: LessonStatus | None = None
    is_paid: bool | None = None
    notes: str | None = None

    @field_validator(
        "student_id", "subject", "topic", "date", "start_time", "duration",
        "price", "is_online", "status", "is_paid", "notes",
        mode="before",
    )
    @classmethod
    def not_null(cls, value):
        # Only meeting_link may be cleared
        return reject_null(value)


class LessonResponse(BaseModel):
    """Lesson response schema."""

    id: int
    student_id: int
    subject: str
    topic: str
    date: date
    start_time: str
    duration: int
    price: int
    is_online: bool
    meeting_link: str | None
    status: LessonStatus
    is_paid: bool
    notes: str
    created_at: datetime

    model_config = {"from_attributes": True}


class LessonListResponse(BaseModel):
    """List of lessons."""

    items: list[LessonResponse]
    total: int


class LessonSeriesResponse(BaseModel):
    """Base lesson plus the lessons generated for its weekly series."""

    lesson: LessonResponse
    generated: list[LessonResponse]
    total_created: int
