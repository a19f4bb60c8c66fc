"""
SQLAlchemy engine and per-request sessions.

Postgres in deployment, in-memory SQLite for tests and local runs.
"""

import os
from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from shared.config.settings import DATABASE_URL


def _pool_size() -> int:
    # 2 * cores + 1, capped at 20
    return min((os.cpu_count() or 4) * 2 + 1, 20)


def build_engine(url: str) -> Engine:
    """Create the engine; SQLite shares one connection across threads."""
    if url.startswith("sqlite"):
        return create_engine(
            url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    pool_kwargs: dict[str, Any] = {
        "pool_pre_ping": True,
        "pool_size": _pool_size(),
        "max_overflow": 15,
        "pool_timeout": 30,
        "pool_recycle": 1800,
        "connect_args": {"connect_timeout": 10},
    }
    return create_engine(url, **pool_kwargs)


engine = build_engine(DATABASE_URL)

SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False,
)


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency: one session per request, closed afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def safe_commit(db: Session) -> None:
    """Commit, rolling back and re-raising on failure."""
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
