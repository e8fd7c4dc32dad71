"""Lesson service."""

import logging
from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import storage_operation
from app.core.exceptions import RecordNotFoundError
from app.models.lesson import Lesson, LessonStatus
from app.schemas.lesson import LessonUpdate

logger = logging.getLogger(__name__)


@storage_operation
async def get_lessons(db: AsyncSession) -> list[Lesson]:
    """Get all lessons."""
    result = await db.execute(select(Lesson).order_by(Lesson.id))
    return list(result.scalars().all())


@storage_operation
async def get_lesson_by_id(db: AsyncSession, lesson_id: int) -> Lesson | None:
    """Get lesson by ID."""
    result = await db.execute(select(Lesson).where(Lesson.id == lesson_id))
    return result.scalar_one_or_none()


@storage_operation
async def get_lessons_by_date_range(
    db: AsyncSession,
    date_from: date,
    date_to: date,
    *,
    status: LessonStatus | None = None,
) -> list[Lesson]:
    """Get lessons whose date lies within [date_from, date_to]."""
    query = select(Lesson).where(Lesson.date >= date_from, Lesson.date <= date_to)
    if status is not None:
        query = query.where(Lesson.status == LessonStatus(status).value)

    result = await db.execute(query.order_by(Lesson.date, Lesson.start_time, Lesson.id))
    return list(result.scalars().all())


@storage_operation
async def get_lessons_by_student(db: AsyncSession, student_id: int) -> list[Lesson]:
    """Get all lessons of a student, newest first."""
    result = await db.execute(
        select(Lesson)
        .where(Lesson.student_id == student_id)
        .order_by(Lesson.date.desc(), Lesson.start_time.desc())
    )
    return list(result.scalars().all())


@storage_operation
async def get_today_lessons(db: AsyncSession, today: date | None = None) -> list[Lesson]:
    """Get lessons dated today (local date)."""
    if today is None:
        today = date.today()

    result = await db.execute(
        select(Lesson).where(Lesson.date == today).order_by(Lesson.start_time)
    )
    return list(result.scalars().all())


@storage_operation
async def get_upcoming_lessons(
    db: AsyncSession,
    limit: int | None = None,
    now: datetime | None = None,
) -> list[Lesson]:
    """Get scheduled lessons starting at or after now, earliest first."""
    if limit is None:
        limit = settings.UPCOMING_LIMIT
    if now is None:
        now = datetime.now()

    result = await db.execute(
        select(Lesson)
        .where(
            Lesson.status == LessonStatus.SCHEDULED.value,
            Lesson.date >= now.date(),
        )
        .order_by(Lesson.date, Lesson.start_time, Lesson.id)
    )

    upcoming = []
    for lesson in result.scalars():
        # Earlier today is already past
        if lesson.starts_at < now:
            continue
        upcoming.append(lesson)
        if len(upcoming) >= limit:
            break
    return upcoming


@storage_operation
async def get_unpaid_lessons(db: AsyncSession) -> list[Lesson]:
    """Get lessons that are not cancelled and not paid."""
    result = await db.execute(
        select(Lesson)
        .where(
            Lesson.status != LessonStatus.CANCELLED.value,
            Lesson.is_paid == False,  # noqa: E712
        )
        .order_by(Lesson.date, Lesson.start_time)
    )
    return list(result.scalars().all())


@storage_operation
async def create_lesson(db: AsyncSession, lesson_data: dict) -> Lesson:
    """Insert one lesson record and return it with its id."""
    lesson = Lesson(**lesson_data, created_at=datetime.now())

    db.add(lesson)
    await db.commit()
    await db.refresh(lesson)

    return lesson


@storage_operation
async def bulk_create_lessons(db: AsyncSession, lessons_data: list[dict]) -> list[Lesson]:
    """Insert several lessons in one commit; each gets its own timestamp."""
    lessons = [Lesson(**data, created_at=datetime.now()) for data in lessons_data]

    db.add_all(lessons)
    await db.commit()
    for lesson in lessons:
        await db.refresh(lesson)

    return lessons


@storage_operation
async def update_lesson(
    db: AsyncSession,
    lesson_id: int,
    lesson_data: LessonUpdate | dict,
) -> Lesson:
    """Apply a partial patch to a lesson."""
    lesson = await get_lesson_by_id(db, lesson_id)
    if lesson is None:
        raise RecordNotFoundError("lessons", lesson_id)

    if isinstance(lesson_data, LessonUpdate):
        update_data = lesson_data.model_dump(exclude_unset=True)
    else:
        update_data = dict(lesson_data)

    for field, value in update_data.items():
        setattr(lesson, field, value)

    await db.commit()
    await db.refresh(lesson)

    return lesson


@storage_operation
async def delete_lesson(db: AsyncSession, lesson_id: int) -> None:
    """Delete a lesson."""
    lesson = await get_lesson_by_id(db, lesson_id)
    if lesson is None:
        raise RecordNotFoundError("lessons", lesson_id)

    await db.delete(lesson)
    await db.commit()


async def mark_completed(db: AsyncSession, lesson_id: int) -> Lesson:
    """Set status to completed."""
    return await update_lesson(db, lesson_id, {"status": LessonStatus.COMPLETED.value})


async def mark_paid(db: AsyncSession, lesson_id: int) -> Lesson:
    """Set the payment flag."""
    return await update_lesson(db, lesson_id, {"is_paid": True})


async def mark_cancelled(db: AsyncSession, lesson_id: int) -> Lesson:
    """Set status to cancelled."""
    return await update_lesson(db, lesson_id, {"status": LessonStatus.CANCELLED.value})
