"""Calendar schemas."""

from datetime import datetime

from pydantic import BaseModel, Field, model_validator


class CalendarEvent(BaseModel):
    """A lesson as drawn on the calendar grid."""

    id: int
    title: str
    start: datetime
    end: datetime
    background_color: str
    border_color: str
    text_color: str = "#ffffff"
    class_names: list[str]
    lesson_id: int
    student_name: str
    subject_name: str


class RescheduleRequest(BaseModel):
    """Lesson dragged to a new start."""

    start: datetime


class ResizeRequest(BaseModel):
    """Lesson stretched or shrunk on the grid."""

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def check_positive(self) -> "ResizeRequest":
        if self.end <= self.start:
            raise ValueError("Lesson must end after it starts")
        return self


class CalendarEventList(BaseModel):
    """Events for a date range."""

    items: list[CalendarEvent]
    total: int = Field(description="Number of events")
