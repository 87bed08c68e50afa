from collections.abc import Iterable
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from ..schemas.feedback import FeedbackEntry
from ..schemas.recovery import RecentSession
from ..schemas.sessions import TrainingSession, as_utc
from .body_parts import exercise_body_parts, format_label

DEFAULT_LOOKBACK_DAYS = 30
TRAILING_WINDOW = timedelta(days=7)


@dataclass
class BodyPartAggregate:
    key: str
    label: str
    last_trained_at: datetime | None = None
    total_sets: int = 0
    session_ids: set[int | str] = field(default_factory=set)
    seven_day_session_ids: set[int | str] = field(default_factory=set)
    trend: dict[date, int] = field(default_factory=dict)
    feedback: FeedbackEntry | None = None

    @classmethod
    def empty(cls, key: str) -> "BodyPartAggregate":
        return cls(key=key, label=format_label(key))

    @property
    def seven_day_count(self) -> int:
        return len(self.seven_day_session_ids)

    @property
    def average_sets(self) -> float:
        if not self.session_ids:
            return 0.0
        return round(self.total_sets / len(self.session_ids), 1)

    def add_session(self, session_id: int | str, performed_at: datetime, sets: int, in_trailing_window: bool) -> None:
        if self.last_trained_at is None or performed_at > self.last_trained_at:
            self.last_trained_at = performed_at
        self.total_sets += sets
        self.session_ids.add(session_id)
        if in_trailing_window:
            self.seven_day_session_ids.add(session_id)
        day = performed_at.date()
        self.trend[day] = self.trend.get(day, 0) + sets

    def sorted_trend(self) -> list[tuple[date, int]]:
        return sorted(self.trend.items())


def usable_sessions(
    sessions: Iterable[TrainingSession],
    now: datetime,
    lookback_days: int = DEFAULT_LOOKBACK_DAYS,
) -> list[TrainingSession]:
    """Sessions eligible for aggregation, most recent first.

    Archived sessions, sessions without any timestamp and sessions older than
    the lookback horizon are dropped.
    """
    horizon = as_utc(now) - timedelta(days=lookback_days)
    kept = [s for s in sessions if not s.archived and s.effective_at is not None and s.effective_at >= horizon]
    return sorted(kept, key=lambda s: s.effective_at, reverse=True)


def session_body_part_sets(session: TrainingSession) -> dict[str, int]:
    """Set volume per canonical body part for one session.

    Several exercises hitting the same body part are summed, so the session
    is represented once per body part.
    """
    volumes: dict[str, int] = {}
    for exercise in session.exercises:
        sets = exercise.set_count
        for key in exercise_body_parts(exercise.body_parts):
            volumes[key] = volumes.get(key, 0) + sets
    return volumes


def aggregate(
    sessions: Iterable[TrainingSession],
    now: datetime,
    lookback_days: int = DEFAULT_LOOKBACK_DAYS,
) -> dict[str, BodyPartAggregate]:
    now = as_utc(now)
    trailing_start = now - TRAILING_WINDOW
    aggregates: dict[str, BodyPartAggregate] = {}

    for session in usable_sessions(sessions, now, lookback_days):
        performed_at = session.effective_at
        in_trailing_window = performed_at >= trailing_start
        for key, sets in session_body_part_sets(session).items():
            if key not in aggregates:
                aggregates[key] = BodyPartAggregate.empty(key)
            aggregates[key].add_session(session.id, performed_at, sets, in_trailing_window)

    return aggregates


def recent_sessions(
    sessions: Iterable[TrainingSession],
    now: datetime,
    limit: int = 6,
    lookback_days: int = DEFAULT_LOOKBACK_DAYS,
) -> list[RecentSession]:
    items: list[RecentSession] = []
    for session in usable_sessions(sessions, now, lookback_days)[:limit]:
        labels: list[str] = []
        for exercise in session.exercises:
            for key in exercise_body_parts(exercise.body_parts):
                label = format_label(key)
                if label not in labels:
                    labels.append(label)
        duration = session.duration_seconds
        items.append(
            RecentSession(
                id=session.id,
                name=session.name,
                performed_at=session.effective_at,
                body_parts=labels,
                duration_minutes=round(duration / 60) if duration else None,
            )
        )
    return items
