"""
Engine and session factory.

PostgreSQL in production; SQLite (file or in-memory) for local runs and tests.
"""

from sqlalchemy import JSON, create_engine
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from .config import settings

# JSONB on Postgres, plain JSON everywhere else
JSONType = JSON().with_variant(JSONB(), "postgresql")


def build_engine(url: str):
    """
    Create an engine for the given URL.

    SQLite connections are shared across threads (the request handlers run in
    a threadpool), and an in-memory database is pinned to a single connection
    so every session sees the same tables.
    """
    kwargs = {}
    if url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
    return create_engine(url, **kwargs)


engine = build_engine(settings.DATABASE_URL)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base = declarative_base()
