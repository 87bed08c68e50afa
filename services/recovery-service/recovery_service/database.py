import os
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

import structlog
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import declarative_base

logger = structlog.get_logger(__name__)

Base = declarative_base()


def ensure_async_url(url: str) -> str:
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    elif url.startswith("postgres://"):
        url = url.replace("postgres://", "postgresql+asyncpg://", 1)
    elif url.startswith("sqlite:///"):
        url = url.replace("sqlite:///", "sqlite+aiosqlite:///", 1)

    parsed = urlparse(url)
    if not parsed.scheme.startswith("postgresql+asyncpg"):
        return url

    # asyncpg understands ``ssl`` but not libpq's ``sslmode``/``channel_binding``
    q = dict(parse_qsl(parsed.query, keep_blank_values=True))
    sslmode = (q.pop("sslmode", None) or "").strip().lower()
    if sslmode in {"require", "verify-full", "verify-ca"}:
        q.setdefault("ssl", "true")
    elif sslmode == "disable":
        q.setdefault("ssl", "false")
    q.pop("channel_binding", None)
    return urlunparse(parsed._replace(query=urlencode(q, doseq=True)))


def create_engine_and_session(
    database_url: str,
    *,
    echo: bool = False,
    **engine_kwargs: Any,
) -> tuple[AsyncEngine, async_sessionmaker[AsyncSession]]:
    engine = create_async_engine(ensure_async_url(database_url), echo=echo, **engine_kwargs)
    session_factory = async_sessionmaker(
        bind=engine,
        expire_on_commit=False,
        autoflush=False,
        class_=AsyncSession,
    )
    return engine, session_factory


DATABASE_URL = os.getenv("RECOVERY_DATABASE_URL")

if not DATABASE_URL:
    raise ValueError("RECOVERY_DATABASE_URL environment variable is not set")

engine, AsyncSessionLocal = create_engine_and_session(DATABASE_URL)
logger.info("database_configured", driver=engine.url.drivername)


async def get_db():
    async with AsyncSessionLocal() as session:
        yield session
