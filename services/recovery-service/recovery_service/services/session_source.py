from datetime import datetime

import httpx
import structlog
from pydantic import TypeAdapter, ValidationError

from ..exceptions import UpstreamUnavailableException
from ..schemas.sessions import TrainingSession, as_utc

logger = structlog.get_logger(__name__)

SOURCE_NAME = "workouts-service"

_SESSIONS_ADAPTER = TypeAdapter(list[TrainingSession])


def select_recent(sessions: list[TrainingSession], since: datetime, limit: int) -> list[TrainingSession]:
    """Non-archived sessions performed at or after ``since``, most recent first, at most ``limit``."""
    since = as_utc(since)
    kept = [s for s in sessions if not s.archived and s.effective_at is not None and s.effective_at >= since]
    kept.sort(key=lambda s: s.effective_at, reverse=True)
    return kept[:limit]


class WorkoutsSessionSource:
    """Reads a user's recent training sessions from workouts-service."""

    def __init__(
        self,
        base_url: str,
        timeout: float = 5.0,
        limit: int = 60,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.limit = limit
        self._transport = transport

    async def load_recent_sessions(self, user_id: str, since: datetime) -> list[TrainingSession]:
        url = f"{self.base_url}/workouts/sessions/history"
        params = {"since": as_utc(since).isoformat(), "limit": self.limit}
        headers = {"X-User-Id": user_id}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.get(url, params=params, headers=headers)
        except httpx.RequestError as exc:
            logger.warning("sessions_fetch_failed", url=url, user_id=user_id, error=str(exc))
            raise UpstreamUnavailableException(SOURCE_NAME) from exc

        if response.status_code != 200:
            logger.warning(
                "sessions_fetch_bad_status",
                url=url,
                user_id=user_id,
                status_code=response.status_code,
                body_preview=response.text[:500] if response.text else "",
            )
            raise UpstreamUnavailableException(SOURCE_NAME, f"{SOURCE_NAME} answered {response.status_code}")

        try:
            sessions = _SESSIONS_ADAPTER.validate_python(response.json())
        except (ValueError, ValidationError) as exc:
            logger.error("sessions_payload_invalid", url=url, user_id=user_id, error=str(exc))
            raise UpstreamUnavailableException(SOURCE_NAME, f"{SOURCE_NAME} returned an invalid payload") from exc

        recent = select_recent(sessions, since, self.limit)
        logger.debug("sessions_loaded", user_id=user_id, received=len(sessions), kept=len(recent))
        return recent
