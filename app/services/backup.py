"""Backup service - export, import and reset of the whole data set."""

import json
import logging
from datetime import datetime

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import storage_operation
from app.core.exceptions import FormatError, StorageError
from app.models.lesson import Lesson
from app.models.settings import AppSettings
from app.models.student import Student
from app.schemas.backup import (
    BackupData,
    BackupDocument,
    BackupLesson,
    BackupSettings,
    BackupStudent,
    ImportResult,
    ResetResult,
)
from app.utils.pluralize import LESSON_FORMS, STUDENT_FORMS, pluralize_with_number

logger = logging.getLogger(__name__)


def backup_filename(today: datetime | None = None) -> str:
    """Suggested file name, e.g. tutor-scheduler-backup-2026-01-31.json."""
    return f"tutor-scheduler-backup-{(today or datetime.now()).date().isoformat()}.json"


@storage_operation
async def export_data(db: AsyncSession) -> dict:
    """Build the backup document for all three collections."""
    students = (await db.execute(select(Student).order_by(Student.id))).scalars().all()
    lessons = (await db.execute(select(Lesson).order_by(Lesson.id))).scalars().all()
    app_settings = (await db.execute(select(AppSettings))).scalars().first()

    document = BackupDocument(
        version=settings.BACKUP_VERSION,
        exported_at=datetime.now(),
        data=BackupData(
            students=[BackupStudent.model_validate(s, from_attributes=True) for s in students],
            lessons=[BackupLesson.model_validate(l, from_attributes=True) for l in lessons],
            settings=(
                BackupSettings.model_validate(app_settings, from_attributes=True)
                if app_settings is not None
                else None
            ),
        ),
    )
    return document.model_dump(mode="json", by_alias=True)


def export_json(document: dict) -> str:
    """Serialize a backup document the way it is written to disk."""
    return json.dumps(document, ensure_ascii=False, indent=2)


def parse_backup(raw: str | bytes | dict) -> BackupDocument:
    """
    Validate a backup document without touching the store.

    Raises FormatError for invalid JSON, missing ``version``/``data`` keys,
    an unsupported version or malformed records.
    """
    if isinstance(raw, (str, bytes)):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise FormatError(f"Backup file is not valid JSON: {exc}") from exc

    if not isinstance(raw, dict) or raw.get("data") is None or not raw.get("version"):
        raise FormatError("Invalid backup format: 'version' and 'data' are required")

    if raw["version"] != settings.BACKUP_VERSION:
        raise FormatError(
            f"Unsupported backup version {raw['version']!r}, expected {settings.BACKUP_VERSION}"
        )

    try:
        return BackupDocument.model_validate(raw)
    except PydanticValidationError as exc:
        raise FormatError(f"Invalid backup contents: {exc.error_count()} error(s)\n{exc}") from exc


async def _clear_collections(db: AsyncSession) -> None:
    await db.execute(delete(Student))
    await db.execute(delete(Lesson))
    await db.execute(delete(AppSettings))


async def import_data(db: AsyncSession, raw: str | bytes | dict) -> ImportResult:
    """
    Replace all collections with the contents of a backup document.

    The document is validated first; nothing is deleted if it is invalid.
    Clearing and inserting run in one transaction which is rolled back on
    failure.
    """
    document = parse_backup(raw)
    data = document.data

    try:
        await _clear_collections(db)
        db.add_all(Student(**s.model_dump(exclude_none=True)) for s in data.students)
        db.add_all(Lesson(**l.model_dump(exclude_none=True)) for l in data.lessons)
        if data.settings is not None:
            db.add(AppSettings(**data.settings.model_dump(exclude_none=True)))
        await db.flush()
        await db.commit()
    except SQLAlchemyError as exc:
        await db.rollback()
        logger.exception("Import failed, previous data restored")
        raise StorageError(f"Import failed: {exc}") from exc

    message = (
        f"Импортировано: {pluralize_with_number(len(data.students), STUDENT_FORMS)}, "
        f"{pluralize_with_number(len(data.lessons), LESSON_FORMS)}"
    )
    logger.info(message)
    return ImportResult(
        students=len(data.students),
        lessons=len(data.lessons),
        settings=data.settings is not None,
        message=message,
    )


@storage_operation
async def reset_data(db: AsyncSession) -> ResetResult:
    """Delete every student, lesson and the settings record. No backup is made."""
    await _clear_collections(db)
    await db.commit()

    logger.info("All data deleted")
    return ResetResult(message="Все данные удалены")
