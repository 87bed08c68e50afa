from datetime import date, datetime
from enum import Enum

from pydantic import BaseModel, Field

from .feedback import Feeling


class RecoveryStatus(str, Enum):
    ready = "ready"
    caution = "caution"
    rest = "rest"
    pain = "pain"


class FeedbackSnapshot(BaseModel):
    id: int
    body_part: str
    feeling: Feeling
    intensity: float | None = None
    note: str | None = None
    created_at: datetime
    has_negative_signal: bool


class TrendPoint(BaseModel):
    date: date
    volume: int


class BodyPartState(BaseModel):
    body_part: str = Field(..., description="Canonical body-part key")
    label: str
    last_trained_at: datetime | None = None
    hours_since_last: float | None = None
    rest_window_hours: float
    status: RecoveryStatus
    session_ids: list[int | str] = Field(default_factory=list)
    seven_day_count: int = 0
    total_sets: int = 0
    average_sets: float = 0.0
    feedback: FeedbackSnapshot | None = None
    trend: list[TrendPoint] = Field(default_factory=list)


class NextEligible(BaseModel):
    body_part: str
    label: str
    remaining_hours: float


class RecoverySummary(BaseModel):
    ready_count: int = 0
    caution_count: int = 0
    rest_count: int = 0
    pain_count: int = 0
    suggested_focus: list[str] = Field(default_factory=list)
    next_eligible_in_hours: list[NextEligible] = Field(default_factory=list)
    pain_alerts: list[str] = Field(default_factory=list)
    last_updated: datetime


class RecentSession(BaseModel):
    id: int | str
    name: str | None = None
    performed_at: datetime
    body_parts: list[str] = Field(default_factory=list)
    duration_minutes: int | None = None


class RecoveryResponse(BaseModel):
    summary: RecoverySummary
    body_parts: list[BodyPartState]
    recent_sessions: list[RecentSession] = Field(default_factory=list)
