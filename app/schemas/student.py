"""Student schemas."""

from datetime import datetime
from typing import Annotated

from pydantic import BaseModel, BeforeValidator, Field, field_validator

from app.models.student import StudentLevel
from app.schemas.validators import HexColor, empty_to_none, reject_null

OptionalLevel = Annotated[StudentLevel | None, BeforeValidator(empty_to_none)]
OptionalText = Annotated[str | None, BeforeValidator(empty_to_none)]


class StudentCreate(BaseModel):
    """Schema for creating a new student."""

    name: str = Field(..., min_length=1, max_length=200)
    phone: OptionalText = Field(None, max_length=50)
    email: OptionalText = Field(None, max_length=255)

    subjects: list[str] = Field(default_factory=list)
    level: OptionalLevel = None
    default_price: int | None = Field(None, ge=0)
    color: HexColor | None = None

    goals: str = ""
    notes: str = ""


class StudentUpdate(BaseModel):
    """Schema for updating a student."""

    name: str | None = Field(None, min_length=1, max_length=200)
    phone: OptionalText = Field(None, max_length=50)
    email: OptionalText = Field(None, max_length=255)

    subjects: list[str] | None = None
    level: OptionalLevel = None
    default_price: int | None = Field(None, ge=0)
    color: HexColor | None = None

    goals: str | None = None
    notes: str | None = None

    @field_validator("name", "subjects", "goals", "notes", mode="before")
    @classmethod
    def not_null(cls, value):
        return reject_null(value)


class StudentResponse(BaseModel):
    """Student response schema."""

    id: int
    name: str
    phone: str | None
    email: str | None
    subjects: list[str]
    level: str | None
    default_price: int | None
    color: str | None
    goals: str
    notes: str
    created_at: datetime

    model_config = {"from_attributes": True}


class StudentListResponse(BaseModel):
    """List of students."""

    items: list[StudentResponse]
    total: int


class ColorSuggestion(BaseModel):
    """Suggested color for a new student."""

    color: str
    used_colors: list[str]
