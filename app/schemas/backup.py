"""Backup document schemas.

Keys are camelCase so documents written by earlier versions of the app can be
imported unchanged.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator, model_validator
from pydantic.alias_generators import to_camel, to_snake

from app.models.lesson import DEFAULT_DURATION, LessonStatus
from app.models.settings import TaxRegime
from app.schemas.settings import Subject, TaxRecord, WorkingHours
from app.schemas.validators import LessonDate, TimeOfDay

RECORD_REGIMES = {TaxRegime.PATENT.value, TaxRegime.USN.value, TaxRegime.SELF_EMPLOYED.value}


class BackupModel(BaseModel):
    """Base for backup records."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        use_enum_values=True,
    )

    @field_validator("created_at", mode="after", check_fields=False)
    @classmethod
    def to_local_naive(cls, value: datetime | None) -> datetime | None:
        """Timestamps are stored as naive local time."""
        if value is not None and value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value


class BackupStudent(BackupModel):
    """Student as written to a backup file."""

    id: int
    name: str = Field(..., min_length=1)
    phone: str | None = None
    email: str | None = None
    subjects: list[str] = Field(default_factory=list)
    level: str | None = None
    default_price: int | None = None
    color: str | None = None
    goals: str = ""
    notes: str = ""
    created_at: datetime | None = None


class BackupLesson(BackupModel):
    """Lesson as written to a backup file."""

    id: int
    student_id: int
    subject: str
    topic: str = ""
    date: LessonDate
    start_time: TimeOfDay
    duration: int = DEFAULT_DURATION
    price: int = 0
    is_online: bool = False
    meeting_link: str | None = None
    status: LessonStatus = LessonStatus.SCHEDULED
    is_paid: bool = False
    notes: str = ""
    created_at: datetime | None = None


class BackupSettings(BackupModel):
    """Settings record as written to a backup file."""

    id: int = 1
    default_lesson_duration: int = 60
    default_price: int = 1500
    working_hours: WorkingHours = Field(default_factory=WorkingHours)
    subjects: list[Subject] = Field(default_factory=list)
    topics: dict[str, list[str]] = Field(default_factory=dict)
    theme: str = "light"
    user_name: str | None = None
    tax_system: str = TaxRegime.PATENT.value
    tax_records: list[TaxRecord] = Field(default_factory=list)
    created_at: datetime | None = None

    @model_validator(mode="before")
    @classmethod
    def tag_tax_records(cls, data):
        """Untagged records belong to the document's regime."""
        if not isinstance(data, dict):
            return data
        tax_system = data.get("taxSystem", data.get("tax_system"))
        default_regime = tax_system if tax_system in RECORD_REGIMES else TaxRegime.PATENT.value
        records = data.get("taxRecords", data.get("tax_records"))
        if isinstance(records, list):
            tagged = []
            for record in records:
                if isinstance(record, dict):
                    record = {to_snake(key): value for key, value in record.items()}
                    record.setdefault("regime", default_regime)
                tagged.append(record)
            data = {k: v for k, v in data.items() if k not in ("taxRecords", "tax_records")}
            data["taxRecords"] = tagged
        return data

    @field_serializer("tax_records", when_used="json")
    def camelize_tax_records(self, records: list) -> list[dict]:
        return [
            {to_camel(key): value for key, value in record.model_dump().items()}
            for record in records
        ]


class BackupData(BaseModel):
    """All three collections."""

    students: list[BackupStudent] = Field(default_factory=list)
    lessons: list[BackupLesson] = Field(default_factory=list)
    settings: BackupSettings | None = None


class BackupDocument(BackupModel):
    """Top-level backup file."""

    version: int
    exported_at: datetime | None = None
    data: BackupData


class ImportResult(BaseModel):
    """Outcome of a successful import."""

    students: int
    lessons: int
    settings: bool
    message: str


class ResetResult(BaseModel):
    """Outcome of a reset."""

    message: str
