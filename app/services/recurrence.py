"""Recurrence service - expands a new lesson into a weekly series."""

import logging
from datetime import timedelta

from sqlalchemy.ext.asyncio import AsyncSession

from app.models.lesson import Lesson, LessonStatus
from app.schemas.lesson import LessonCreate
from app.services import lesson as lesson_service

logger = logging.getLogger(__name__)

WEEK = timedelta(days=7)


def build_series(base: dict, repeat_count: int) -> list[dict]:
    """
    Records for the lessons following ``base``, one per week.

    Lesson ``i`` falls ``7 * i`` days after the base date. Copies start
    unpaid and scheduled, without notes.
    """
    series = []
    for i in range(1, repeat_count + 1):
        series.append({
            **base,
            "date": base["date"] + WEEK * i,
            "is_paid": False,
            "status": LessonStatus.SCHEDULED.value,
            "notes": "",
        })
    return series


async def create_lesson_with_repeats(
    db: AsyncSession,
    lesson_data: LessonCreate,
) -> tuple[Lesson, list[Lesson]]:
    """
    Create a new lesson and, when requested, its weekly repeats.

    The base lesson is committed first. Repeats go in through one bulk
    insert; if that fails the base lesson stays and StorageError is raised.
    """
    base = lesson_data.to_record()
    lesson = await lesson_service.create_lesson(db, base)

    if not lesson_data.repeat or lesson_data.repeat_count < 1:
        return lesson, []

    series = build_series(base, lesson_data.repeat_count)
    generated = await lesson_service.bulk_create_lessons(db, series)

    logger.info(
        "Created lesson %s with %d weekly repeats until %s",
        lesson.id,
        len(generated),
        series[-1]["date"],
    )
    return lesson, generated
