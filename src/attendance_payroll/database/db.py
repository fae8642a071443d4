import logging
from datetime import datetime, timezone
from pathlib import Path
from sqlalchemy import create_engine
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool
from ..config.settings import DATABASE_URL

logger = logging.getLogger(__name__)

Base = declarative_base()


def utcnow() -> datetime:
    """Timezone-aware current UTC time for timestamp columns"""
    return datetime.now(timezone.utc)


def make_engine(url: str = DATABASE_URL):
    """Create an engine; SQLite connections are shared across worker threads"""
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)


def make_session_factory(bind):
    return sessionmaker(bind=bind, autoflush=False, expire_on_commit=False)


engine = make_engine()
SessionLocal = make_session_factory(engine)


def init_db(bind=None):
    """Create all tables"""
    # Register models on Base.metadata
    from . import models  # noqa: F401

    bind = bind if bind is not None else engine
    if bind.url.get_backend_name() == "sqlite" and bind.url.database not in (None, "", ":memory:"):
        Path(bind.url.database).parent.mkdir(parents=True, exist_ok=True)
    Base.metadata.create_all(bind=bind)
    logger.info(f"Database initialized at {bind.url}")
