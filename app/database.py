# app/database.py
from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping, Optional

from dotenv import load_dotenv
from sqlalchemy.engine.url import make_url
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine
from sqlalchemy.orm import declarative_base, sessionmaker

load_dotenv()


def _default_db_url() -> str:
    """File-based SQLite next to the project root, used when nothing is configured."""
    root = Path(__file__).resolve().parents[1]
    return f"sqlite+aiosqlite:///{(root / 'roster.db').as_posix()}"


def _translate_sslmode(value: str) -> Optional[str]:
    """Map a libpq ``sslmode`` onto asyncpg's ``ssl`` flag (None = driver default)."""
    mode = value.strip().lower()
    if mode in {"require", "verify-ca", "verify-full"}:
        return "true"
    if mode == "disable":
        return "false"
    return None


def _normalize_database_url(raw_url: Optional[str]) -> Optional[str]:
    """Force an async driver onto Postgres URLs; anything else passes through."""
    if not raw_url:
        return raw_url

    try:
        url = make_url(raw_url)
    except Exception:
        return raw_url

    driver = url.drivername.lower()
    if driver in {"postgres", "postgresql"} or driver.startswith("postgresql+"):
        url = url.set(drivername="postgresql+asyncpg")
    else:
        return url.render_as_string(hide_password=False)

    query = dict(url.query)
    sslmode = query.pop("sslmode", None)
    if sslmode is not None:
        ssl = _translate_sslmode(sslmode)
        if ssl is not None:
            query["ssl"] = ssl
        url = url.set(query=query)
    return url.render_as_string(hide_password=False)


def _database_url_from_env(env: Mapping[str, str]) -> Optional[str]:
    for name in ("DATABASE_URL", "POSTGRES_URL"):
        normalized = _normalize_database_url(env.get(name))
        if normalized:
            return normalized
    return None


DEFAULT_SQLITE_URL: str = _default_db_url()
DATABASE_URL: str = _database_url_from_env(os.environ) or DEFAULT_SQLITE_URL

ECHO = os.getenv("SQLALCHEMY_ECHO", "0").lower() in {"1", "true", "yes"}

Base = declarative_base()

engine: AsyncEngine = create_async_engine(DATABASE_URL, echo=ECHO, pool_pre_ping=True)
SessionLocal = sessionmaker(
    bind=engine,
    class_=AsyncSession,
    autocommit=False,
    autoflush=False,
    expire_on_commit=False,
)


async def get_db():
    """FastAPI dependency that yields an AsyncSession."""
    async with SessionLocal() as session:
        yield session


async def init_models() -> None:
    """Register every mapped class with ``Base`` and create missing tables."""
    import app.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
