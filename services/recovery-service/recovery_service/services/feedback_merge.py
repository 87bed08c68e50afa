from collections.abc import Iterable

from ..schemas.feedback import FeedbackEntry
from ..schemas.recovery import FeedbackSnapshot
from .aggregation import BodyPartAggregate
from .body_parts import format_label, normalize_key


def _recency(entry: FeedbackEntry) -> tuple:
    return (entry.created_at, entry.id)


def latest_feedback_by_part(entries: Iterable[FeedbackEntry]) -> dict[str, FeedbackEntry]:
    """Most recent entry per canonical body part; ties on ``created_at`` go to the higher id."""
    latest: dict[str, FeedbackEntry] = {}
    for entry in entries:
        key = normalize_key(entry.body_part)
        if not key:
            continue
        current = latest.get(key)
        if current is None or _recency(entry) > _recency(current):
            latest[key] = entry
    return latest


def merge(
    aggregates: dict[str, BodyPartAggregate],
    entries: Iterable[FeedbackEntry],
) -> dict[str, BodyPartAggregate]:
    """Attach current feedback to aggregates, creating untrained ones as needed.

    Mutates and returns ``aggregates``.
    """
    for key, entry in latest_feedback_by_part(entries).items():
        if key not in aggregates:
            aggregates[key] = BodyPartAggregate.empty(key)
        aggregates[key].feedback = entry
    return aggregates


def snapshot(entry: FeedbackEntry) -> FeedbackSnapshot:
    return FeedbackSnapshot(
        id=entry.id,
        body_part=format_label(entry.body_part),
        feeling=entry.feeling,
        intensity=entry.intensity,
        note=entry.note,
        created_at=entry.created_at,
        has_negative_signal=entry.feeling.is_negative,
    )
