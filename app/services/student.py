"""Student service."""

import logging
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import storage_operation
from app.core.exceptions import RecordNotFoundError
from app.models.student import STUDENT_COLORS, Student
from app.schemas.student import StudentCreate, StudentUpdate

logger = logging.getLogger(__name__)


@storage_operation
async def get_students(db: AsyncSession) -> list[Student]:
    """Get all students in insertion order."""
    result = await db.execute(select(Student).order_by(Student.id))
    return list(result.scalars().all())


@storage_operation
async def get_student_by_id(db: AsyncSession, student_id: int) -> Student | None:
    """Get student by ID."""
    result = await db.execute(select(Student).where(Student.id == student_id))
    return result.scalar_one_or_none()


@storage_operation
async def search_students(db: AsyncSession, query: str) -> list[Student]:
    """Case-insensitive substring match on the student name."""
    needle = query.casefold()
    # SQLite's lower() only folds ASCII, so Cyrillic names are matched here
    return [s for s in await get_students(db) if needle in s.name.casefold()]


@storage_operation
async def create_student(db: AsyncSession, student_data: StudentCreate) -> Student:
    """Create a new student."""
    student = Student(
        name=student_data.name.strip(),
        phone=student_data.phone,
        email=student_data.email,
        subjects=list(student_data.subjects),
        level=student_data.level.value if student_data.level else None,
        default_price=student_data.default_price,
        color=student_data.color,
        goals=student_data.goals,
        notes=student_data.notes,
        created_at=datetime.now(),
    )

    db.add(student)
    await db.commit()
    await db.refresh(student)

    logger.info("Created student %s (%s)", student.id, student.email or "no email")
    return student


@storage_operation
async def update_student(
    db: AsyncSession,
    student_id: int,
    student_data: StudentUpdate,
) -> Student:
    """Update a student."""
    student = await get_student_by_id(db, student_id)
    if student is None:
        raise RecordNotFoundError("students", student_id)

    update_data = student_data.model_dump(exclude_unset=True)
    if update_data.get("level") is not None:
        update_data["level"] = update_data["level"].value

    for field, value in update_data.items():
        setattr(student, field, value)

    await db.commit()
    await db.refresh(student)

    return student


@storage_operation
async def delete_student(db: AsyncSession, student_id: int) -> None:
    """Delete a student. Their lessons are kept."""
    student = await get_student_by_id(db, student_id)
    if student is None:
        raise RecordNotFoundError("students", student_id)

    await db.delete(student)
    await db.commit()


@storage_operation
async def suggest_color(db: AsyncSession, exclude_id: int | None = None) -> tuple[str, list[str]]:
    """
    Pick the first palette color not used by another student.

    Colors are advisory: duplicates are allowed, this only helps the form.
    """
    used = [
        s.color
        for s in await get_students(db)
        if s.color and s.id != exclude_id
    ]
    color = next((c for c in STUDENT_COLORS if c not in used), STUDENT_COLORS[0])
    return color, used
