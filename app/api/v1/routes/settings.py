"""Settings routes."""

from fastapi import APIRouter, HTTPException, Query, status

from app.core.deps import CurrentSettings, DbSession
from app.schemas.settings import (
    SettingsResponse,
    SettingsUpdate,
    SubjectCreate,
    SubjectUpdate,
    TaxRecordRequest,
    TopicRequest,
)
from app.services import settings as settings_service

router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("", response_model=SettingsResponse)
async def get_settings(app_settings: CurrentSettings) -> SettingsResponse:
    """Get the settings, creating defaults on first run."""
    return SettingsResponse.model_validate(app_settings)


@router.patch("", response_model=SettingsResponse)
async def update_settings(
    settings_data: SettingsUpdate,
    db: DbSession,
    app_settings: CurrentSettings,
) -> SettingsResponse:
    """Partially update the settings."""
    updated = await settings_service.update_settings(db, settings_data)
    return SettingsResponse.model_validate(updated)


# ============== Subjects ==============


@router.post("/subjects", response_model=SettingsResponse, status_code=status.HTTP_201_CREATED)
async def add_subject(
    subject_data: SubjectCreate,
    db: DbSession,
    app_settings: CurrentSettings,
) -> SettingsResponse:
    """Add a subject with a generated id."""
    updated = await settings_service.add_subject(db, subject_data)
    return SettingsResponse.model_validate(updated)


@router.patch("/subjects/{subject_id}", response_model=SettingsResponse)
async def update_subject(
    subject_id: str,
    subject_data: SubjectUpdate,
    db: DbSession,
    app_settings: CurrentSettings,
) -> SettingsResponse:
    """Rename or recolor a subject."""
    updated = await settings_service.update_subject(db, subject_id, subject_data)
    return SettingsResponse.model_validate(updated)


@router.delete("/subjects/{subject_id}", response_model=SettingsResponse)
async def remove_subject(
    subject_id: str,
    db: DbSession,
    app_settings: CurrentSettings,
) -> SettingsResponse:
    """Remove a subject; lessons and students keep its id."""
    updated = await settings_service.remove_subject(db, subject_id)
    return SettingsResponse.model_validate(updated)


# ============== Topics ==============


@router.get("/topics/{subject_id}", response_model=list[str])
async def list_topics(
    subject_id: str,
    app_settings: CurrentSettings,
    q: str = Query("", description="Autocomplete fragment"),
) -> list[str]:
    """Known topics of a subject matching ``q``."""
    return settings_service.filter_topics(app_settings, subject_id, q)


@router.post("/topics/{subject_id}", response_model=SettingsResponse)
async def add_topic(
    subject_id: str,
    topic_data: TopicRequest,
    db: DbSession,
    app_settings: CurrentSettings,
) -> SettingsResponse:
    """Remember a topic for a subject."""
    updated = await settings_service.add_topic(db, subject_id, topic_data.topic)
    return SettingsResponse.model_validate(updated)


@router.delete("/topics/{subject_id}", response_model=SettingsResponse)
async def remove_topic(
    subject_id: str,
    db: DbSession,
    app_settings: CurrentSettings,
    topic: str = Query(..., description="Topic to forget"),
) -> SettingsResponse:
    """Forget a topic for a subject."""
    updated = await settings_service.remove_topic(db, subject_id, topic)
    return SettingsResponse.model_validate(updated)


# ============== Tax Records ==============


@router.post("/tax-records", response_model=SettingsResponse, status_code=status.HTTP_201_CREATED)
async def add_tax_record(
    db: DbSession,
    app_settings: CurrentSettings,
    record: TaxRecordRequest | None = None,
) -> SettingsResponse:
    """Add a tax record; without a body the next free year is pre-filled."""
    updated = await settings_service.add_tax_record(db, record.root if record else None)
    return SettingsResponse.model_validate(updated)


@router.put("/tax-records/{year}", response_model=SettingsResponse)
async def update_tax_record(
    year: int,
    record: TaxRecordRequest,
    db: DbSession,
    app_settings: CurrentSettings,
) -> SettingsResponse:
    """Replace the record for a year."""
    if record.root.year != year:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Year in path and body must match",
        )
    updated = await settings_service.update_tax_record(db, record.root)
    return SettingsResponse.model_validate(updated)


@router.delete("/tax-records/{year}", response_model=SettingsResponse)
async def delete_tax_record(
    year: int,
    db: DbSession,
    app_settings: CurrentSettings,
) -> SettingsResponse:
    """Remove the record for a year."""
    updated = await settings_service.delete_tax_record(db, year)
    return SettingsResponse.model_validate(updated)
