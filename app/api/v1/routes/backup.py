"""Backup routes - export, import and reset."""

from fastapi import APIRouter, Body, Response

from app.core.deps import DbSession
from app.schemas.backup import ImportResult, ResetResult
from app.services import backup as backup_service

router = APIRouter(prefix="/backup", tags=["Backup"])


@router.get("/export")
async def export_backup(db: DbSession) -> Response:
    """Download every collection as a JSON backup file."""
    document = await backup_service.export_data(db)
    return Response(
        content=backup_service.export_json(document),
        media_type="application/json",
        headers={
            "Content-Disposition": f'attachment; filename="{backup_service.backup_filename()}"',
        },
    )


@router.post("/import", response_model=ImportResult)
async def import_backup(db: DbSession, document: dict = Body(...)) -> ImportResult:
    """
    Replace all data with the contents of a backup.

    Invalid documents are rejected before anything is deleted.
    """
    return await backup_service.import_data(db, document)


@router.post("/reset", response_model=ResetResult)
async def reset_data(db: DbSession) -> ResetResult:
    """Delete all students, lessons and settings."""
    return await backup_service.reset_data(db)
