"""Lesson routes."""

from datetime import date

from fastapi import APIRouter, HTTPException, Query, status

from app.core.deps import DbSession
from app.core.exceptions import RecordNotFoundError
from app.models.lesson import Lesson
from app.schemas.lesson import (
    LessonCreate,
    LessonListResponse,
    LessonResponse,
    LessonSeriesResponse,
    LessonUpdate,
)
from app.services import lesson as lesson_service
from app.services import recurrence as recurrence_service

router = APIRouter(prefix="/lessons", tags=["Lessons"])


# ============== Helper Functions ==============


def to_list(lessons: list[Lesson]) -> LessonListResponse:
    return LessonListResponse(
        items=[LessonResponse.model_validate(l) for l in lessons],
        total=len(lessons),
    )


def lesson_not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Lesson not found",
    )


# ============== Endpoints ==============


@router.get("", response_model=LessonListResponse)
async def list_lessons(
    db: DbSession,
    date_from: date | None = Query(None, description="First date, inclusive"),
    date_to: date | None = Query(None, description="Last date, inclusive"),
    student_id: int | None = Query(None, description="Filter by student ID"),
) -> LessonListResponse:
    """
    List lessons.

    With both ``date_from`` and ``date_to`` only lessons in that range are
    returned; with ``student_id`` only that student's lessons.
    """
    if (date_from is None) != (date_to is None):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="date_from and date_to must be given together",
        )

    if date_from is not None:
        if date_to < date_from:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="date_to must be after date_from",
            )
        lessons = await lesson_service.get_lessons_by_date_range(db, date_from, date_to)
        if student_id is not None:
            lessons = [l for l in lessons if l.student_id == student_id]
    elif student_id is not None:
        lessons = await lesson_service.get_lessons_by_student(db, student_id)
    else:
        lessons = await lesson_service.get_lessons(db)

    return to_list(lessons)


@router.get("/today", response_model=LessonListResponse)
async def list_today_lessons(db: DbSession) -> LessonListResponse:
    """Lessons dated today."""
    return to_list(await lesson_service.get_today_lessons(db))


@router.get("/upcoming", response_model=LessonListResponse)
async def list_upcoming_lessons(
    db: DbSession,
    limit: int | None = Query(None, ge=1, le=100, description="Max number of lessons"),
) -> LessonListResponse:
    """Next scheduled lessons, earliest first."""
    return to_list(await lesson_service.get_upcoming_lessons(db, limit=limit))


@router.get("/unpaid", response_model=LessonListResponse)
async def list_unpaid_lessons(db: DbSession) -> LessonListResponse:
    """Lessons that are not cancelled and not yet paid."""
    return to_list(await lesson_service.get_unpaid_lessons(db))


@router.post("", response_model=LessonSeriesResponse, status_code=status.HTTP_201_CREATED)
async def create_lesson(lesson_data: LessonCreate, db: DbSession) -> LessonSeriesResponse:
    """
    Create a new lesson.

    With ``repeat`` set, ``repeat_count`` more lessons are added one week
    apart, unpaid, scheduled and without notes.
    """
    lesson, generated = await recurrence_service.create_lesson_with_repeats(db, lesson_data)
    return LessonSeriesResponse(
        lesson=LessonResponse.model_validate(lesson),
        generated=[LessonResponse.model_validate(l) for l in generated],
        total_created=1 + len(generated),
    )


@router.get("/{lesson_id}", response_model=LessonResponse)
async def get_lesson(lesson_id: int, db: DbSession) -> LessonResponse:
    """Get a specific lesson by ID."""
    lesson = await lesson_service.get_lesson_by_id(db, lesson_id)
    if not lesson:
        raise lesson_not_found()
    return LessonResponse.model_validate(lesson)


@router.patch("/{lesson_id}", response_model=LessonResponse)
async def update_lesson(
    lesson_id: int,
    lesson_data: LessonUpdate,
    db: DbSession,
) -> LessonResponse:
    """Update a lesson. Editing never creates repeats."""
    try:
        lesson = await lesson_service.update_lesson(db, lesson_id, lesson_data)
    except RecordNotFoundError:
        raise lesson_not_found()
    return LessonResponse.model_validate(lesson)


@router.delete("/{lesson_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_lesson(lesson_id: int, db: DbSession) -> None:
    """Delete a lesson."""
    try:
        await lesson_service.delete_lesson(db, lesson_id)
    except RecordNotFoundError:
        raise lesson_not_found()


@router.post("/{lesson_id}/complete", response_model=LessonResponse)
async def complete_lesson(lesson_id: int, db: DbSession) -> LessonResponse:
    """Mark a lesson as completed."""
    try:
        lesson = await lesson_service.mark_completed(db, lesson_id)
    except RecordNotFoundError:
        raise lesson_not_found()
    return LessonResponse.model_validate(lesson)


@router.post("/{lesson_id}/pay", response_model=LessonResponse)
async def pay_lesson(lesson_id: int, db: DbSession) -> LessonResponse:
    """Mark a lesson as paid."""
    try:
        lesson = await lesson_service.mark_paid(db, lesson_id)
    except RecordNotFoundError:
        raise lesson_not_found()
    return LessonResponse.model_validate(lesson)


@router.post("/{lesson_id}/cancel", response_model=LessonResponse)
async def cancel_lesson(lesson_id: int, db: DbSession) -> LessonResponse:
    """Mark a lesson as cancelled."""
    try:
        lesson = await lesson_service.mark_cancelled(db, lesson_id)
    except RecordNotFoundError:
        raise lesson_not_found()
    return LessonResponse.model_validate(lesson)
