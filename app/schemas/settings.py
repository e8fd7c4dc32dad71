"""Settings schemas."""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, RootModel, TypeAdapter, field_validator, model_validator

from app.models.settings import TaxRegime
from app.schemas.validators import HexColor, TimeOfDay, reject_null


class WorkingHours(BaseModel):
    """Daily working window."""

    start: TimeOfDay = "09:00"
    end: TimeOfDay = "21:00"

    @model_validator(mode="after")
    def check_order(self) -> "WorkingHours":
        if self.end <= self.start:
            raise ValueError("Working hours must end after they start")
        return self


class Subject(BaseModel):
    """A subject the tutor teaches."""

    id: str = Field(..., min_length=1, max_length=100)
    name: str = Field(..., min_length=1, max_length=100)
    color: HexColor


# ============== Tax Records ==============


class PatentTaxRecord(BaseModel):
    """Patent regime: flat yearly patent cost plus insurance."""

    regime: Literal["patent"] = "patent"
    year: int = Field(..., ge=2000, le=2100)
    patent_cost: int = Field(0, ge=0)
    insurance_cost: int = Field(0, ge=0)


class UsnTaxRecord(BaseModel):
    """Simplified regime: percentage of earnings plus insurance."""

    regime: Literal["usn"] = "usn"
    year: int = Field(..., ge=2000, le=2100)
    tax_rate: float | None = Field(None, ge=0, le=100)
    insurance_cost: int = Field(0, ge=0)


class SelfEmployedTaxRecord(BaseModel):
    """Self-employed regime: percentage of earnings, voluntary insurance."""

    regime: Literal["self-employed"] = "self-employed"
    year: int = Field(..., ge=2000, le=2100)
    tax_rate: float | None = Field(None, ge=0, le=100)
    insurance_cost: int = Field(0, ge=0)


TaxRecord = Annotated[
    Union[PatentTaxRecord, UsnTaxRecord, SelfEmployedTaxRecord],
    Field(discriminator="regime"),
]

tax_record_adapter = TypeAdapter(TaxRecord)


class TaxRecordRequest(RootModel[TaxRecord]):
    """Tax record body; the variant is picked by ``regime``."""


# ============== Settings ==============


class SettingsUpdate(BaseModel):
    """Partial update of the settings record."""

    default_lesson_duration: int | None = Field(None, gt=0)
    default_price: int | None = Field(None, ge=0)
    working_hours: WorkingHours | None = None
    subjects: list[Subject] | None = None
    topics: dict[str, list[str]] | None = None
    theme: Literal["light", "dark"] | None = None
    user_name: str | None = Field(None, max_length=200)
    tax_system: TaxRegime | None = None
    tax_records: list[TaxRecord] | None = None

    @field_validator(
        "default_lesson_duration", "default_price", "working_hours", "subjects",
        "topics", "theme", "tax_system", "tax_records",
        mode="before",
    )
    @classmethod
    def not_null(cls, value):
        return reject_null(value)

    @model_validator(mode="after")
    def check_unique_ids(self) -> "SettingsUpdate":
        if self.subjects is not None:
            ids = [subject.id for subject in self.subjects]
            if len(ids) != len(set(ids)):
                raise ValueError("Subject ids must be unique")
        if self.tax_records is not None:
            years = [record.year for record in self.tax_records]
            if len(years) != len(set(years)):
                raise ValueError("Only one tax record per year is allowed")
        return self


class SettingsResponse(BaseModel):
    """Settings response schema."""

    id: int
    default_lesson_duration: int
    default_price: int
    working_hours: WorkingHours
    subjects: list[Subject]
    topics: dict[str, list[str]]
    theme: str
    user_name: str | None
    tax_system: str
    tax_records: list[TaxRecord]

    model_config = {"from_attributes": True}


class SubjectCreate(BaseModel):
    """Schema for adding a subject; id and color are generated when omitted."""

    name: str = Field("Новый предмет", min_length=1, max_length=100)
    color: HexColor | None = None


class SubjectUpdate(BaseModel):
    """Schema for renaming or recoloring a subject."""

    name: str | None = Field(None, min_length=1, max_length=100)
    color: HexColor | None = None


class TopicRequest(BaseModel):
    """Topic to add to or remove from a subject's dictionary."""

    topic: str = Field(..., max_length=255)
