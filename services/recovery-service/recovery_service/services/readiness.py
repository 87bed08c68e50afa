"""Readiness report: sessions + feedback + now -> per-body-part states and a summary.

Pure and synchronous. Every call builds fresh aggregates from its inputs and
reads no clock of its own, so it is safe to call concurrently.
"""

from collections.abc import Sequence
from datetime import datetime

from ..schemas.feedback import FeedbackEntry
from ..schemas.recovery import BodyPartState, RecoveryResponse, TrendPoint
from ..schemas.sessions import TrainingSession, as_utc
from .aggregation import DEFAULT_LOOKBACK_DAYS, BodyPartAggregate, aggregate, recent_sessions
from .classification import classify_status
from .feedback_merge import merge, snapshot
from .rest_windows import DEFAULT_REST_WINDOWS, RestWindowPolicy
from .summary import SUGGESTED_FOCUS_LIMIT, summarize

HOUR_SECONDS = 3600.0
RECENT_SESSIONS_LIMIT = 6


def hours_since(last: datetime | None, now: datetime) -> float | None:
    if last is None:
        return None
    return max(0.0, (now - last).total_seconds() / HOUR_SECONDS)


def build_state(agg: BodyPartAggregate, now: datetime, policy: RestWindowPolicy) -> BodyPartState:
    rest_window = policy.rest_window_hours(agg.key)
    elapsed = hours_since(agg.last_trained_at, now)
    feeling = agg.feedback.feeling if agg.feedback is not None else None
    return BodyPartState(
        body_part=agg.key,
        label=agg.label,
        last_trained_at=agg.last_trained_at,
        hours_since_last=elapsed,
        rest_window_hours=rest_window,
        status=classify_status(elapsed, rest_window, feeling),
        session_ids=sorted(agg.session_ids, key=lambda sid: (isinstance(sid, str), sid)),
        seven_day_count=agg.seven_day_count,
        total_sets=agg.total_sets,
        average_sets=agg.average_sets,
        feedback=snapshot(agg.feedback) if agg.feedback is not None else None,
        trend=[TrendPoint(date=day, volume=volume) for day, volume in agg.sorted_trend()],
    )


def compute_readiness(
    sessions: Sequence[TrainingSession],
    feedback: Sequence[FeedbackEntry],
    now: datetime,
    *,
    policy: RestWindowPolicy | None = None,
    lookback_days: int = DEFAULT_LOOKBACK_DAYS,
    focus_limit: int = SUGGESTED_FOCUS_LIMIT,
    recent_limit: int = RECENT_SESSIONS_LIMIT,
) -> RecoveryResponse:
    now = as_utc(now)
    policy = policy or RestWindowPolicy(DEFAULT_REST_WINDOWS)

    aggregates = merge(aggregate(sessions, now, lookback_days), feedback)
    states = [build_state(agg, now, policy) for agg in aggregates.values()]
    ordered, summary = summarize(states, now, focus_limit=focus_limit)

    return RecoveryResponse(
        summary=summary,
        body_parts=ordered,
        recent_sessions=recent_sessions(sessions, now, limit=recent_limit, lookback_days=lookback_days),
    )
