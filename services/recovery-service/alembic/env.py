import os
from logging.config import fileConfig
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

from alembic import context
from sqlalchemy import create_engine

from recovery_service import models  # noqa: F401
from recovery_service.database import Base

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def _to_sync_url(url: str | None) -> str:
    """Normalize async SQLAlchemy URL to a sync driver for the Alembic runtime."""
    if not url:
        raise ValueError("RECOVERY_DATABASE_URL environment variable is not set")

    if url.startswith("postgresql+asyncpg://"):
        url = url.replace("postgresql+asyncpg://", "postgresql+psycopg2://", 1)
        # psycopg2 speaks libpq's sslmode, not asyncpg's ssl flag
        parsed = urlparse(url)
        q = dict(parse_qsl(parsed.query, keep_blank_values=True))
        ssl_val = (q.pop("ssl", None) or "").strip().lower()
        if ssl_val in {"true", "1", "require"}:
            q.setdefault("sslmode", "require")
        q.pop("channel_binding", None)
        return urlunparse(parsed._replace(query=urlencode(q, doseq=True)))

    if url.startswith("sqlite+aiosqlite:"):
        return url.replace("sqlite+aiosqlite:", "sqlite:", 1)
    return url


def run_migrations_offline():
    """Run migrations in 'offline' mode."""
    context.configure(
        url=_to_sync_url(os.getenv("RECOVERY_DATABASE_URL")),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    """Run migrations in 'online' mode."""
    connectable = create_engine(_to_sync_url(os.getenv("RECOVERY_DATABASE_URL")))

    with connectable.connect() as connection:
        context.configure(connection=connection, target_metadata=target_metadata)

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
