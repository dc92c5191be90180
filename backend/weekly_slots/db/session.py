"""
Database session, engine and the per-mutation transaction scope.
"""
import logging
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from weekly_slots.config import settings
from weekly_slots.core.errors import StorageFailure

logger = logging.getLogger(__name__)

engine = create_engine(
    settings.database_url,
    pool_size=settings.db_pool_size,
    max_overflow=settings.db_max_overflow,
    pool_pre_ping=True,
    pool_recycle=settings.db_pool_recycle,
    pool_timeout=settings.db_pool_timeout,
    connect_args={
        "connect_timeout": settings.db_connect_timeout_seconds,
        "options": f"-c statement_timeout={settings.db_statement_timeout_ms}",
    },
)
# Rows stay loaded after commit: responses are built from them without another round trip.
SESSION_OPTIONS = {"autocommit": False, "autoflush": False, "expire_on_commit": False}
SessionLocal = sessionmaker(bind=engine, **SESSION_OPTIONS)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    One read-modify-write unit: commit when the block exits normally, roll back on any exception.
    SQLAlchemy errors surface as StorageFailure (cause chained); domain errors propagate unchanged.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as e:
        db.rollback()
        logger.exception("Storage operation failed, rolled back")
        raise StorageFailure() from e
    except Exception:
        db.rollback()
        raise
