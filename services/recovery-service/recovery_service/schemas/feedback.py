from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..services.body_parts import normalize_key
from .sessions import as_utc

MAX_NOTE_LENGTH = 300


class Feeling(str, Enum):
    GOOD = "GOOD"
    TIGHT = "TIGHT"
    SORE = "SORE"
    INJURED = "INJURED"

    @property
    def is_negative(self) -> bool:
        return self is not Feeling.GOOD

    @property
    def is_severe(self) -> bool:
        return self in (Feeling.SORE, Feeling.INJURED)


class FeedbackCreate(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    body_part: str = Field(..., min_length=1, max_length=128)
    feeling: Feeling
    intensity: float | None = Field(default=None, ge=0, le=10)
    note: str | None = Field(default=None, max_length=MAX_NOTE_LENGTH)

    @field_validator("body_part")
    @classmethod
    def _body_part_has_name(cls, value: str) -> str:
        if not normalize_key(value):
            raise ValueError("body_part must name a body part")
        return value

    @field_validator("note")
    @classmethod
    def _blank_note_is_none(cls, value: str | None) -> str | None:
        return value or None


class FeedbackEntry(BaseModel):
    id: int
    body_part: str
    feeling: Feeling
    intensity: float | None = None
    note: str | None = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("created_at")
    @classmethod
    def _normalize_tz(cls, value: datetime) -> datetime:
        return as_utc(value)
