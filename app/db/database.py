"""Engine and session factory shared by the API, the seed script and tests"""

from typing import Iterator

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ..core.config import Settings, settings


def create_db_engine(config: Settings) -> Engine:
    """Build the engine for the configured database.

    Under TESTING every connection shares one in-memory SQLite database,
    so the schema created by the test suite is visible to all sessions.
    """
    if config.TESTING:
        return create_engine(
            "sqlite:///:memory:",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
            echo=config.DB_ECHO,
        )
    return create_engine(
        config.DATABASE_URL,
        pool_pre_ping=True,
        pool_recycle=config.DB_POOL_RECYCLE,
        pool_size=config.DB_POOL_SIZE,
        max_overflow=config.DB_MAX_OVERFLOW,
        echo=config.DB_ECHO,
    )


engine = create_db_engine(settings)
SessionLocal = sessionmaker(bind=engine, autoflush=False)


def get_db() -> Iterator[Session]:
    """Request-scoped session; the unit of work decides when to commit."""
    with SessionLocal() as db:
        yield db
