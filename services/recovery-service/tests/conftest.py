import os
import sys
import tempfile
from pathlib import Path

import pytest
from alembic import command
from alembic.config import Config
from fastapi.testclient import TestClient

# Ensure the service package is importable
SERVICE_ROOT = Path(__file__).resolve().parents[1]
if str(SERVICE_ROOT) not in sys.path:
    sys.path.insert(0, str(SERVICE_ROOT))

# database.py reads the URL at import time, so it has to be set before any test module imports the app
_DB_DIR = Path(tempfile.mkdtemp(prefix="recovery_db_"))
TEST_DB_URL = f"sqlite+aiosqlite:///{_DB_DIR / 'test_recovery.db'}"
os.environ["RECOVERY_DATABASE_URL"] = TEST_DB_URL
os.environ.setdefault("APP_ENV", "test")

from factories import NOW, FakeFeedbackStore, FakeSessionSource  # noqa: E402


def _alembic_upgrade_head(db_url: str) -> None:
    os.environ["RECOVERY_DATABASE_URL"] = db_url
    cfg = Config(str(SERVICE_ROOT / "alembic.ini"))
    # Pin script_location explicitly to avoid picking up wrong migrations when running from repo root
    cfg.set_main_option("script_location", str(SERVICE_ROOT / "alembic"))
    command.upgrade(cfg, "head")


@pytest.fixture(scope="session")
def migrated_db() -> str:
    _alembic_upgrade_head(TEST_DB_URL)
    return TEST_DB_URL


@pytest.fixture()
def session_source() -> FakeSessionSource:
    return FakeSessionSource()


@pytest.fixture()
def feedback_store() -> FakeFeedbackStore:
    return FakeFeedbackStore()


@pytest.fixture()
def client(session_source: FakeSessionSource, feedback_store: FakeFeedbackStore):
    from recovery_service.dependencies import get_feedback_store, get_now, get_session_source
    from recovery_service.main import app

    app.dependency_overrides[get_session_source] = lambda: session_source
    app.dependency_overrides[get_feedback_store] = lambda: feedback_store
    app.dependency_overrides[get_now] = lambda: NOW

    with TestClient(app, headers={"X-User-Id": "user-1"}) as c:
        yield c

    app.dependency_overrides.clear()
