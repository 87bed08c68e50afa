from datetime import UTC, datetime

from pydantic import BaseModel, Field, field_validator


def as_utc(value: datetime | None) -> datetime | None:
    """Treat naive timestamps as UTC; convert aware ones to UTC."""
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)


class SessionExercise(BaseModel):
    name: str | None = None
    body_parts: list[str] = Field(default_factory=list)
    completed_sets: int | None = Field(default=None, ge=0)
    target_sets: int | None = Field(default=None, ge=0)

    @property
    def set_count(self) -> int:
        # recorded sets, then the planned count, then a floor of one set
        return self.completed_sets or self.target_sets or 1


class TrainingSession(BaseModel):
    id: int | str
    name: str | None = None
    started_at: datetime | None = None
    finished_at: datetime | None = None
    archived: bool = False
    duration_seconds: int | None = None
    exercises: list[SessionExercise] = Field(default_factory=list)

    @field_validator("started_at", "finished_at")
    @classmethod
    def _normalize_tz(cls, value: datetime | None) -> datetime | None:
        return as_utc(value)

    @property
    def effective_at(self) -> datetime | None:
        return self.finished_at or self.started_at
