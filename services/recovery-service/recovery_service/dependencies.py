from datetime import UTC, datetime

from fastapi import Depends, HTTPException, Request, status
from sentry_sdk import set_tag, set_user
from sqlalchemy.ext.asyncio import AsyncSession

from .config import Settings, get_settings
from .database import get_db
from .logging_config import bind_request_user
from .services.feedback_service import FeedbackStore
from .services.rest_windows import RestWindowPolicy, get_rest_window_policy
from .services.session_source import WorkoutsSessionSource


async def get_current_user_id(request: Request) -> str:
    """Extract user ID from X-User-Id header (case-insensitive)."""
    user_id = request.headers.get("x-user-id")
    if not user_id:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="X-User-Id header required")
    set_user({"id": str(user_id)})
    set_tag("service", get_settings().SERVICE_NAME)
    bind_request_user(user_id)
    return user_id


def get_now() -> datetime:
    return datetime.now(UTC)


def get_feedback_store(db: AsyncSession = Depends(get_db)) -> FeedbackStore:
    return FeedbackStore(db)


def get_session_source(settings: Settings = Depends(get_settings)) -> WorkoutsSessionSource:
    return WorkoutsSessionSource(
        base_url=settings.WORKOUTS_SERVICE_URL,
        timeout=settings.UPSTREAM_TIMEOUT_SECONDS,
        limit=settings.RECOVERY_SESSION_LIMIT,
    )


def get_policy() -> RestWindowPolicy:
    return get_rest_window_policy()
