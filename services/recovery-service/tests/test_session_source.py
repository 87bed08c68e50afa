import asyncio
from datetime import timedelta

import httpx
import pytest
from factories import NOW

from recovery_service.exceptions import UpstreamUnavailableException
from recovery_service.services.session_source import SOURCE_NAME, WorkoutsSessionSource

SINCE = NOW - timedelta(days=30)


def _session_payload(session_id, hours_ago, archived=False, body_parts=("Chest",)):
    performed_at = NOW - timedelta(hours=hours_ago)
    return {
        "id": session_id,
        "name": f"Session {session_id}",
        "started_at": (performed_at - timedelta(hours=1)).isoformat(),
        "finished_at": performed_at.isoformat(),
        "archived": archived,
        "exercises": [{"name": "Bench", "body_parts": list(body_parts), "completed_sets": 3}],
    }


def _source(handler, limit=60) -> WorkoutsSessionSource:
    return WorkoutsSessionSource("http://workouts:8004/", limit=limit, transport=httpx.MockTransport(handler))


def test_requests_history_for_user_with_since_and_limit():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = request.url
        seen["user"] = request.headers.get("X-User-Id")
        return httpx.Response(200, json=[])

    result = asyncio.run(_source(handler, limit=10).load_recent_sessions("user-7", SINCE))

    assert result == []
    assert seen["url"].path == "/workouts/sessions/history"
    assert seen["url"].params["limit"] == "10"
    assert seen["url"].params["since"] == SINCE.isoformat()
    assert seen["user"] == "user-7"


def test_filters_archived_and_old_sessions_and_sorts_newest_first():
    payload = [
        _session_payload(1, hours_ago=50),
        _session_payload(2, hours_ago=5),
        _session_payload(3, hours_ago=10, archived=True),
        _session_payload(4, hours_ago=24 * 45),
        {"id": 5, "exercises": []},
    ]

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=payload)

    sessions = asyncio.run(_source(handler).load_recent_sessions("user-1", SINCE))

    assert [s.id for s in sessions] == [2, 1]
    assert sessions[0].exercises[0].body_parts == ["Chest"]
    assert sessions[0].effective_at == NOW - timedelta(hours=5)


def test_truncates_to_limit():
    payload = [_session_payload(i, hours_ago=i) for i in range(1, 8)]

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json=payload)

    sessions = asyncio.run(_source(handler, limit=3).load_recent_sessions("user-1", SINCE))

    assert [s.id for s in sessions] == [1, 2, 3]


def test_error_status_is_reported_as_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="boom")

    with pytest.raises(UpstreamUnavailableException) as exc_info:
        asyncio.run(_source(handler).load_recent_sessions("user-1", SINCE))

    assert exc_info.value.status_code == 503
    assert exc_info.value.source == SOURCE_NAME
    assert "500" in exc_info.value.detail


def test_connection_failure_is_reported_as_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamUnavailableException) as exc_info:
        asyncio.run(_source(handler).load_recent_sessions("user-1", SINCE))

    assert exc_info.value.source == SOURCE_NAME


@pytest.mark.parametrize("body", [b"not json", b'{"sessions": []}', b'[{"name": "missing id"}]'])
def test_invalid_payload_is_reported_as_unavailable(body):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=body, headers={"content-type": "application/json"})

    with pytest.raises(UpstreamUnavailableException) as exc_info:
        asyncio.run(_source(handler).load_recent_sessions("user-1", SINCE))

    assert "invalid payload" in exc_info.value.detail
