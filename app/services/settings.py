"""Settings service - the tutor's single preferences record."""

import logging
import time
from datetime import date, datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import storage_operation
from app.core.exceptions import RecordNotFoundError, ValidationError
from app.models.settings import (
    DEFAULT_SUBJECTS,
    DEFAULT_TOPICS,
    FALLBACK_COLOR,
    SETTINGS_ID,
    SUBJECT_COLORS,
    AppSettings,
    TaxRegime,
)
from app.schemas.settings import (
    SettingsUpdate,
    SubjectCreate,
    SubjectUpdate,
    TaxRecord,
    tax_record_adapter,
)

logger = logging.getLogger(__name__)

# Pre-filled values for a newly added tax year
NEW_TAX_RECORD_DEFAULTS = {"patent_cost": 30000, "insurance_cost": 49500, "tax_rate": 6}


def default_settings() -> dict:
    """Values stored on first run."""
    return {
        "default_lesson_duration": 60,
        "default_price": 1500,
        "working_hours": {"start": "09:00", "end": "21:00"},
        "subjects": [dict(subject) for subject in DEFAULT_SUBJECTS],
        "topics": {key: list(value) for key, value in DEFAULT_TOPICS.items()},
        "theme": "light",
        "user_name": None,
        "tax_system": TaxRegime.PATENT.value,
        "tax_records": [],
    }


@storage_operation
async def get_settings(db: AsyncSession) -> AppSettings | None:
    """Get the settings record."""
    result = await db.execute(select(AppSettings).where(AppSettings.id == SETTINGS_ID))
    return result.scalar_one_or_none()


async def _require_settings(db: AsyncSession) -> AppSettings:
    app_settings = await get_settings(db)
    if app_settings is None:
        raise RecordNotFoundError("settings", SETTINGS_ID)
    return app_settings


@storage_operation
async def initialize_settings(db: AsyncSession) -> AppSettings:
    """Insert defaults once if the record is absent, then return the record."""
    app_settings = await get_settings(db)
    if app_settings is not None:
        return app_settings

    app_settings = AppSettings(id=SETTINGS_ID, created_at=datetime.now(), **default_settings())
    db.add(app_settings)
    await db.commit()
    await db.refresh(app_settings)

    logger.info("Initialized default settings")
    return app_settings


@storage_operation
async def update_settings(db: AsyncSession, settings_data: SettingsUpdate | dict) -> AppSettings:
    """Apply a partial patch to the settings record."""
    app_settings = await _require_settings(db)

    if isinstance(settings_data, SettingsUpdate):
        update_data = settings_data.model_dump(exclude_unset=True, mode="json")
    else:
        update_data = dict(settings_data)

    for field, value in update_data.items():
        setattr(app_settings, field, value)

    await db.commit()
    await db.refresh(app_settings)

    return app_settings


# ============== Topic Dictionary ==============


def get_topics_for_subject(app_settings: AppSettings, subject_id: str) -> list[str]:
    return list((app_settings.topics or {}).get(subject_id, []))


def filter_topics(app_settings: AppSettings, subject_id: str, query: str) -> list[str]:
    """Autocomplete: known topics of a subject containing ``query``."""
    needle = query.casefold()
    return [t for t in get_topics_for_subject(app_settings, subject_id) if needle in t.casefold()]


async def add_topic(db: AsyncSession, subject_id: str, topic: str) -> AppSettings:
    """Remember a topic for a subject. Already known topics are left as is."""
    topic = topic.strip()
    if not topic:
        raise ValidationError("Topic must not be empty")
    if not subject_id:
        raise ValidationError("Subject is required to store a topic")

    app_settings = await _require_settings(db)
    current = get_topics_for_subject(app_settings, subject_id)
    if topic in current:
        return app_settings

    topics = dict(app_settings.topics or {})
    topics[subject_id] = [*current, topic]
    return await update_settings(db, {"topics": topics})


async def remove_topic(db: AsyncSession, subject_id: str, topic: str) -> AppSettings:
    """Forget a topic for a subject."""
    app_settings = await _require_settings(db)
    topics = dict(app_settings.topics or {})
    topics[subject_id] = [t for t in get_topics_for_subject(app_settings, subject_id) if t != topic]
    return await update_settings(db, {"topics": topics})


# ============== Subjects ==============


async def add_subject(db: AsyncSession, subject_data: SubjectCreate) -> AppSettings:
    """Append a subject with a generated id and the first unused palette color."""
    app_settings = await _require_settings(db)
    subjects = list(app_settings.subjects or [])

    color = subject_data.color
    if color is None:
        used = {s.get("color") for s in subjects}
        color = next((c for c in SUBJECT_COLORS if c not in used), FALLBACK_COLOR)

    subject_id = f"subject_{int(time.time() * 1000)}"
    existing_ids = {s.get("id") for s in subjects}
    while subject_id in existing_ids:
        subject_id = f"{subject_id}_1"

    subjects.append({"id": subject_id, "name": subject_data.name, "color": color})
    return await update_settings(db, {"subjects": subjects})


async def update_subject(
    db: AsyncSession,
    subject_id: str,
    subject_data: SubjectUpdate,
) -> AppSettings:
    """Rename or recolor a subject in place."""
    app_settings = await _require_settings(db)
    if app_settings.subject_by_id(subject_id) is None:
        raise ValidationError(f"Subject {subject_id!r} does not exist")

    changes = subject_data.model_dump(exclude_unset=True, exclude_none=True)
    subjects = [
        {**s, **changes} if s.get("id") == subject_id else s
        for s in app_settings.subjects
    ]
    return await update_settings(db, {"subjects": subjects})


async def remove_subject(db: AsyncSession, subject_id: str) -> AppSettings:
    """Remove a subject. Students and lessons keep referencing its id."""
    app_settings = await _require_settings(db)
    subjects = [s for s in app_settings.subjects or [] if s.get("id") != subject_id]
    return await update_settings(db, {"subjects": subjects})


# ============== Tax Records ==============


def get_tax_record(app_settings: AppSettings, year: int) -> TaxRecord | None:
    """Stored tax record for a year, if any."""
    for record in app_settings.tax_records or []:
        if record.get("year") == year:
            return tax_record_adapter.validate_python(record)
    return None


def next_free_tax_year(app_settings: AppSettings, today: date | None = None) -> int:
    """Current year, or the closest earlier year that has no record yet."""
    year = (today or date.today()).year
    existing = {record.get("year") for record in app_settings.tax_records or []}
    while year in existing:
        year -= 1
    return year


async def add_tax_record(
    db: AsyncSession,
    record: TaxRecord | None = None,
    today: date | None = None,
) -> AppSettings:
    """
    Add a tax record.

    Without an explicit record, one is pre-filled for the next free year
    using the currently selected regime (patent when taxes are off).
    """
    app_settings = await _require_settings(db)

    if record is None:
        regime = app_settings.tax_system
        if regime not in (TaxRegime.USN.value, TaxRegime.SELF_EMPLOYED.value):
            regime = TaxRegime.PATENT.value
        record = tax_record_adapter.validate_python({
            "regime": regime,
            "year": next_free_tax_year(app_settings, today),
            **NEW_TAX_RECORD_DEFAULTS,
        })
    elif get_tax_record(app_settings, record.year) is not None:
        raise ValidationError(f"Tax record for {record.year} already exists")

    records = [*(app_settings.tax_records or []), record.model_dump(mode="json")]
    return await update_settings(db, {"tax_records": records})


async def update_tax_record(db: AsyncSession, record: TaxRecord) -> AppSettings:
    """Replace the record stored for ``record.year``."""
    app_settings = await _require_settings(db)
    if get_tax_record(app_settings, record.year) is None:
        raise ValidationError(f"No tax record for {record.year}")

    records = [
        record.model_dump(mode="json") if r.get("year") == record.year else r
        for r in app_settings.tax_records
    ]
    return await update_settings(db, {"tax_records": records})


async def delete_tax_record(db: AsyncSession, year: int) -> AppSettings:
    """Remove the record for a year."""
    app_settings = await _require_settings(db)
    records = [r for r in app_settings.tax_records or [] if r.get("year") != year]
    return await update_settings(db, {"tax_records": records})
