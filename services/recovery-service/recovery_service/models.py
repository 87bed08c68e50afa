from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, Float, Index, Integer, String

from .database import Base


def _utcnow() -> datetime:
    return datetime.now(UTC)


class RecoveryFeedback(Base):
    """Append-only subjective feedback about a body part.

    ``body_part`` holds the canonical key; history is never updated in place,
    newer rows supersede older ones for readiness purposes.
    """

    __tablename__ = "recovery_feedback"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), nullable=False, index=True)
    body_part = Column(String(128), nullable=False)
    feeling = Column(String(16), nullable=False)
    intensity = Column(Float, nullable=True)
    note = Column(String(300), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    __table_args__ = (
        Index("ix_recovery_feedback_user_created", "user_id", "created_at"),
        Index("ix_recovery_feedback_user_part", "user_id", "body_part"),
    )

    def __repr__(self):
        return "<RecoveryFeedback(id=%s, body_part='%s', feeling=%s)>" % (self.id, self.body_part, self.feeling)
