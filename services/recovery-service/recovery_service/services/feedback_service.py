from collections.abc import Sequence
from datetime import datetime

import structlog
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..exceptions import FeedbackForbiddenException, FeedbackNotFoundException, UpstreamUnavailableException
from ..models import RecoveryFeedback
from ..schemas.feedback import FeedbackCreate, FeedbackEntry
from .body_parts import normalize_key

logger = structlog.get_logger(__name__)

SOURCE_NAME = "feedback-store"


class FeedbackStore:
    """Append-only persistence of recovery feedback, scoped per user."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def load_feedback(self, user_id: str) -> list[FeedbackEntry]:
        try:
            result = await self.db.execute(
                select(RecoveryFeedback)
                .where(RecoveryFeedback.user_id == user_id)
                .order_by(RecoveryFeedback.created_at.desc(), RecoveryFeedback.id.desc())
            )
        except SQLAlchemyError as exc:
            logger.error("feedback_load_failed", user_id=user_id, error=str(exc))
            raise UpstreamUnavailableException(SOURCE_NAME) from exc
        return [FeedbackEntry.model_validate(row) for row in result.scalars().all()]

    async def list_history(
        self,
        user_id: str,
        body_part: str | None = None,
        limit: int = 100,
    ) -> list[FeedbackEntry]:
        query = select(RecoveryFeedback).where(RecoveryFeedback.user_id == user_id)
        if body_part:
            query = query.where(RecoveryFeedback.body_part == normalize_key(body_part))
        query = query.order_by(RecoveryFeedback.created_at.desc(), RecoveryFeedback.id.desc()).limit(limit)
        result = await self.db.execute(query)
        return [FeedbackEntry.model_validate(row) for row in result.scalars().all()]

    async def record_feedback(
        self,
        user_id: str,
        entries: Sequence[FeedbackCreate],
        created_at: datetime,
    ) -> list[FeedbackEntry]:
        rows = [
            RecoveryFeedback(
                user_id=user_id,
                body_part=normalize_key(entry.body_part),
                feeling=entry.feeling.value,
                intensity=entry.intensity,
                note=entry.note,
                created_at=created_at,
            )
            for entry in entries
        ]
        self.db.add_all(rows)
        try:
            await self.db.commit()
        except SQLAlchemyError as exc:
            await self.db.rollback()
            logger.error("feedback_record_failed", user_id=user_id, count=len(rows), error=str(exc))
            raise UpstreamUnavailableException(SOURCE_NAME) from exc
        for row in rows:
            await self.db.refresh(row)
        logger.info("feedback_recorded", user_id=user_id, count=len(rows))
        return [FeedbackEntry.model_validate(row) for row in rows]

    async def delete_feedback(self, user_id: str, feedback_id: int) -> None:
        result = await self.db.execute(select(RecoveryFeedback.user_id).where(RecoveryFeedback.id == feedback_id))
        owner = result.scalar_one_or_none()
        if owner is None:
            raise FeedbackNotFoundException(feedback_id)
        if owner != user_id:
            raise FeedbackForbiddenException(feedback_id)
        await self.db.execute(delete(RecoveryFeedback).where(RecoveryFeedback.id == feedback_id))
        await self.db.commit()
        logger.info("feedback_deleted", user_id=user_id, feedback_id=feedback_id)
