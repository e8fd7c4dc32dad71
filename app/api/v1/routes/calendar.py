"""Calendar routes."""

from datetime import date

from fastapi import APIRouter, HTTPException, Query, status

from app.core.deps import CurrentSettings, DbSession
from app.core.exceptions import RecordNotFoundError
from app.schemas.calendar import CalendarEventList, RescheduleRequest, ResizeRequest
from app.schemas.lesson import LessonResponse
from app.services import calendar as calendar_service

router = APIRouter(prefix="/calendar", tags=["Calendar"])


def lesson_not_found() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail="Lesson not found",
    )


@router.get("/events", response_model=CalendarEventList)
async def list_events(
    db: DbSession,
    app_settings: CurrentSettings,
    date_from: date = Query(..., description="First visible date"),
    date_to: date = Query(..., description="Last visible date"),
) -> CalendarEventList:
    """Lessons in the visible range as calendar events."""
    if date_to < date_from:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="date_to must be after date_from",
        )

    events = await calendar_service.get_events(db, date_from, date_to, app_settings)
    return CalendarEventList(items=events, total=len(events))


@router.patch("/events/{lesson_id}/move", response_model=LessonResponse)
async def move_event(
    lesson_id: int,
    request: RescheduleRequest,
    db: DbSession,
) -> LessonResponse:
    """Lesson dragged to another slot."""
    try:
        lesson = await calendar_service.reschedule_lesson(db, lesson_id, request.start)
    except RecordNotFoundError:
        raise lesson_not_found()
    return LessonResponse.model_validate(lesson)


@router.patch("/events/{lesson_id}/resize", response_model=LessonResponse)
async def resize_event(
    lesson_id: int,
    request: ResizeRequest,
    db: DbSession,
) -> LessonResponse:
    """Lesson stretched or shrunk on the grid."""
    try:
        lesson = await calendar_service.resize_lesson(db, lesson_id, request.start, request.end)
    except RecordNotFoundError:
        raise lesson_not_found()
    return LessonResponse.model_validate(lesson)
