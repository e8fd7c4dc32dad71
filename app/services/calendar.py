"""Calendar service - lessons as calendar events and grid interactions."""

from datetime import date, datetime

from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ValidationError
from app.models.lesson import Lesson, LessonStatus
from app.models.settings import FALLBACK_COLOR, AppSettings
from app.models.student import UNKNOWN_STUDENT_NAME, Student
from app.schemas.calendar import CalendarEvent
from app.services import lesson as lesson_service
from app.services import student as student_service

STATUS_ICONS = {
    LessonStatus.CANCELLED.value: "❌ ",
    LessonStatus.COMPLETED.value: "✓ ",
}

STATUS_CLASSES = {
    LessonStatus.CANCELLED.value: "event-cancelled",
    LessonStatus.COMPLETED.value: "event-completed",
}


def build_event(
    lesson: Lesson,
    student: Student | None,
    app_settings: AppSettings | None,
) -> CalendarEvent:
    """
    Turn a lesson into a calendar event.

    Title format: ``✓ Anna • English: Grammar 💳``. The student's color wins
    over the subject's.
    """
    status = LessonStatus(lesson.status).value
    subject = app_settings.subject_by_id(lesson.subject) if app_settings else None
    subject_name = subject["name"] if subject else lesson.subject
    student_name = student.name if student else UNKNOWN_STUDENT_NAME

    color = (
        (student.color if student else None)
        or (subject.get("color") if subject else None)
        or FALLBACK_COLOR
    )

    payment_icon = ""
    if status != LessonStatus.CANCELLED.value:
        payment_icon = " 💰" if lesson.is_paid else " 💳"
    topic_text = f": {lesson.topic}" if lesson.topic else ""

    return CalendarEvent(
        id=lesson.id,
        title=f"{STATUS_ICONS.get(status, '')}{student_name} • {subject_name}{topic_text}{payment_icon}",
        start=lesson.starts_at,
        end=lesson.ends_at,
        background_color=color,
        border_color=color,
        class_names=[STATUS_CLASSES.get(status, "event-scheduled")],
        lesson_id=lesson.id,
        student_name=student_name,
        subject_name=subject_name,
    )


async def get_events(
    db: AsyncSession,
    date_from: date,
    date_to: date,
    app_settings: AppSettings | None,
) -> list[CalendarEvent]:
    """Events for every lesson dated within the visible range."""
    lessons = await lesson_service.get_lessons_by_date_range(db, date_from, date_to)
    students = {s.id: s for s in await student_service.get_students(db)}
    return [build_event(l, students.get(l.student_id), app_settings) for l in lessons]


async def reschedule_lesson(db: AsyncSession, lesson_id: int, start: datetime) -> Lesson:
    """Move a lesson to the date and time it was dropped on."""
    return await lesson_service.update_lesson(
        db,
        lesson_id,
        {"date": start.date(), "start_time": start.strftime("%H:%M")},
    )


async def resize_lesson(
    db: AsyncSession,
    lesson_id: int,
    start: datetime,
    end: datetime,
) -> Lesson:
    """Set the duration from the new event bounds, rounded to whole minutes."""
    duration = round((end - start).total_seconds() / 60)
    if duration <= 0:
        raise ValidationError("Lesson duration must be positive")
    return await lesson_service.update_lesson(db, lesson_id, {"duration": duration})
