"""Student routes."""

from fastapi import APIRouter, HTTPException, Query, status

from app.core.deps import DbSession
from app.core.exceptions import RecordNotFoundError
from app.schemas.lesson import LessonListResponse, LessonResponse
from app.schemas.student import (
    ColorSuggestion,
    StudentCreate,
    StudentListResponse,
    StudentResponse,
    StudentUpdate,
)
from app.services import lesson as lesson_service
from app.services import student as student_service

router = APIRouter(prefix="/students", tags=["Students"])


@router.get("", response_model=StudentListResponse)
async def list_students(
    db: DbSession,
    search: str | None = Query(None, description="Search by name"),
) -> StudentListResponse:
    """List all students, optionally filtered by a name fragment."""
    if search:
        students = await student_service.search_students(db, search)
    else:
        students = await student_service.get_students(db)

    return StudentListResponse(
        items=[StudentResponse.model_validate(s) for s in students],
        total=len(students),
    )


@router.get("/suggest-color", response_model=ColorSuggestion)
async def suggest_color(
    db: DbSession,
    exclude_id: int | None = Query(None, description="Student being edited"),
) -> ColorSuggestion:
    """First palette color no other student uses."""
    color, used = await student_service.suggest_color(db, exclude_id=exclude_id)
    return ColorSuggestion(color=color, used_colors=used)


@router.post("", response_model=StudentResponse, status_code=status.HTTP_201_CREATED)
async def create_student(student_data: StudentCreate, db: DbSession) -> StudentResponse:
    """Create a new student."""
    student = await student_service.create_student(db, student_data)
    return StudentResponse.model_validate(student)


@router.get("/{student_id}", response_model=StudentResponse)
async def get_student(student_id: int, db: DbSession) -> StudentResponse:
    """Get a specific student by ID."""
    student = await student_service.get_student_by_id(db, student_id)

    if not student:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Student not found",
        )

    return StudentResponse.model_validate(student)


@router.get("/{student_id}/lessons", response_model=LessonListResponse)
async def get_student_lessons(student_id: int, db: DbSession) -> LessonListResponse:
    """Lesson history of a student, newest first."""
    lessons = await lesson_service.get_lessons_by_student(db, student_id)
    return LessonListResponse(
        items=[LessonResponse.model_validate(l) for l in lessons],
        total=len(lessons),
    )


@router.patch("/{student_id}", response_model=StudentResponse)
async def update_student(
    student_id: int,
    student_data: StudentUpdate,
    db: DbSession,
) -> StudentResponse:
    """Update a student."""
    try:
        student = await student_service.update_student(db, student_id, student_data)
    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Student not found",
        )

    return StudentResponse.model_validate(student)


@router.delete("/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_student(student_id: int, db: DbSession) -> None:
    """
    Delete a student.

    Lessons of the student are kept and shown with a placeholder name.
    """
    try:
        await student_service.delete_student(db, student_id)
    except RecordNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Student not found",
        )
