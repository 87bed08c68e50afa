import asyncio
from datetime import datetime, timedelta

import structlog
from fastapi import APIRouter, Body, Depends, Query, Response, status

from ..config import Settings, get_settings
from ..dependencies import get_current_user_id, get_feedback_store, get_now, get_policy, get_session_source
from ..exceptions import EmptyFeedbackBatchException, UpstreamUnavailableException
from ..metrics import (
    FEEDBACK_ENTRIES_DELETED_TOTAL,
    FEEDBACK_ENTRIES_RECORDED_TOTAL,
    READINESS_COMPUTATIONS_TOTAL,
    UPSTREAM_FAILURES_TOTAL,
)
from ..schemas.feedback import FeedbackCreate, FeedbackEntry
from ..schemas.recovery import RecoveryResponse
from ..services.feedback_service import FeedbackStore
from ..services.readiness import compute_readiness
from ..services.rest_windows import RestWindowPolicy
from ..services.session_source import WorkoutsSessionSource

router = APIRouter(prefix="/recovery", tags=["recovery"])
logger = structlog.get_logger(__name__)


async def _build_report(
    user_id: str,
    now: datetime,
    lookback_days: int,
    store: FeedbackStore,
    source: WorkoutsSessionSource,
    policy: RestWindowPolicy,
    settings: Settings,
) -> RecoveryResponse:
    since = now - timedelta(days=lookback_days)
    # Wait for both loads; the engine only runs when both succeeded.
    sessions, feedback = await asyncio.gather(
        source.load_recent_sessions(user_id, since),
        store.load_feedback(user_id),
        return_exceptions=True,
    )
    for outcome in (sessions, feedback):
        if isinstance(outcome, UpstreamUnavailableException):
            UPSTREAM_FAILURES_TOTAL.labels(source=outcome.source).inc()
            raise outcome
        if isinstance(outcome, BaseException):
            raise outcome

    report = compute_readiness(
        sessions,
        feedback,
        now,
        policy=policy,
        lookback_days=lookback_days,
        focus_limit=settings.RECOVERY_SUGGESTED_FOCUS_LIMIT,
        recent_limit=settings.RECOVERY_RECENT_SESSIONS_LIMIT,
    )
    READINESS_COMPUTATIONS_TOTAL.inc()
    logger.info(
        "readiness_computed",
        user_id=user_id,
        sessions=len(sessions),
        feedback=len(feedback),
        body_parts=len(report.body_parts),
        pain=report.summary.pain_count,
    )
    return report


@router.get("", response_model=RecoveryResponse)
async def get_recovery(
    lookback_days: int | None = Query(None, ge=1, le=90),
    user_id: str = Depends(get_current_user_id),
    now: datetime = Depends(get_now),
    store: FeedbackStore = Depends(get_feedback_store),
    source: WorkoutsSessionSource = Depends(get_session_source),
    policy: RestWindowPolicy = Depends(get_policy),
    settings: Settings = Depends(get_settings),
) -> RecoveryResponse:
    days = lookback_days or settings.RECOVERY_LOOKBACK_DAYS
    return await _build_report(user_id, now, days, store, source, policy, settings)


@router.post("/feedback", response_model=RecoveryResponse, status_code=status.HTTP_201_CREATED)
async def submit_feedback(
    payload: FeedbackCreate | list[FeedbackCreate] = Body(...),
    user_id: str = Depends(get_current_user_id),
    now: datetime = Depends(get_now),
    store: FeedbackStore = Depends(get_feedback_store),
    source: WorkoutsSessionSource = Depends(get_session_source),
    policy: RestWindowPolicy = Depends(get_policy),
    settings: Settings = Depends(get_settings),
) -> RecoveryResponse:
    """Record one entry or a batch, then return the refreshed report.

    Batches are all-or-nothing: one invalid entry fails validation for the
    whole request and nothing is stored.

    The entries are committed before the report is rebuilt. If the rebuild
    fails, the 503 body carries ``recorded_ids`` so clients know the write
    went through and must not resubmit.
    """
    entries = payload if isinstance(payload, list) else [payload]
    if not entries:
        raise EmptyFeedbackBatchException()

    stored = await store.record_feedback(user_id, entries, created_at=now)
    for entry in entries:
        FEEDBACK_ENTRIES_RECORDED_TOTAL.labels(feeling=entry.feeling.value).inc()

    try:
        return await _build_report(user_id, now, settings.RECOVERY_LOOKBACK_DAYS, store, source, policy, settings)
    except UpstreamUnavailableException as exc:
        recorded_ids = [entry.id for entry in stored]
        logger.warning("feedback_recorded_report_failed", user_id=user_id, source=exc.source, recorded_ids=recorded_ids)
        raise UpstreamUnavailableException(
            exc.source,
            detail=f"Feedback recorded but the report could not be refreshed: {exc.detail}",
            recorded_ids=recorded_ids,
        ) from exc


@router.get("/feedback", response_model=list[FeedbackEntry])
async def list_feedback(
    body_part: str | None = Query(None, min_length=1),
    limit: int = Query(100, ge=1, le=500),
    user_id: str = Depends(get_current_user_id),
    store: FeedbackStore = Depends(get_feedback_store),
) -> list[FeedbackEntry]:
    return await store.list_history(user_id, body_part=body_part, limit=limit)


@router.delete("/feedback/{feedback_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_feedback(
    feedback_id: int,
    user_id: str = Depends(get_current_user_id),
    store: FeedbackStore = Depends(get_feedback_store),
) -> Response:
    await store.delete_feedback(user_id, feedback_id)
    FEEDBACK_ENTRIES_DELETED_TOTAL.inc()
    return Response(status_code=status.HTTP_204_NO_CONTENT)
