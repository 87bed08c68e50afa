import math
from collections.abc import Iterable
from datetime import datetime

from ..schemas.recovery import BodyPartState, NextEligible, RecoveryStatus, RecoverySummary

SUGGESTED_FOCUS_LIMIT = 5

STATUS_SEVERITY: dict[RecoveryStatus, int] = {
    RecoveryStatus.ready: 0,
    RecoveryStatus.caution: 1,
    RecoveryStatus.rest: 2,
    RecoveryStatus.pain: 3,
}


def _order_key(state: BodyPartState) -> tuple[int, float, str]:
    # never-trained parts count as the most idle within their tier
    hours = math.inf if state.hours_since_last is None else state.hours_since_last
    return (STATUS_SEVERITY[state.status], -hours, state.body_part)


def order_states(states: Iterable[BodyPartState]) -> list[BodyPartState]:
    return sorted(states, key=_order_key)


def remaining_hours(state: BodyPartState) -> float:
    elapsed = state.hours_since_last or 0.0
    return round(max(0.0, state.rest_window_hours - elapsed), 1)


def summarize(
    states: Iterable[BodyPartState],
    now: datetime,
    focus_limit: int = SUGGESTED_FOCUS_LIMIT,
) -> tuple[list[BodyPartState], RecoverySummary]:
    ordered = order_states(states)
    counts = {status: 0 for status in RecoveryStatus}
    suggested_focus: list[str] = []
    pain_alerts: list[str] = []
    next_eligible: list[NextEligible] = []

    for state in ordered:
        counts[state.status] += 1
        if state.status is RecoveryStatus.ready:
            if len(suggested_focus) < focus_limit:
                suggested_focus.append(state.body_part)
        elif state.status is RecoveryStatus.pain:
            if state.feedback is not None:
                pain_alerts.append(state.body_part)
        else:
            next_eligible.append(
                NextEligible(
                    body_part=state.body_part,
                    label=state.label,
                    remaining_hours=remaining_hours(state),
                )
            )

    next_eligible.sort(key=lambda item: item.remaining_hours)

    summary = RecoverySummary(
        ready_count=counts[RecoveryStatus.ready],
        caution_count=counts[RecoveryStatus.caution],
        rest_count=counts[RecoveryStatus.rest],
        pain_count=counts[RecoveryStatus.pain],
        suggested_focus=suggested_focus,
        next_eligible_in_hours=next_eligible,
        pain_alerts=pain_alerts,
        last_updated=now,
    )
    return ordered, summary
