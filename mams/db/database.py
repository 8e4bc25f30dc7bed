# File: mams/db/database.py
from contextlib import contextmanager
from typing import Generator, Iterator
import logging

from sqlalchemy import create_engine, event
from sqlalchemy.exc import DBAPIError, IntegrityError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

from mams.core.config import settings
from mams.core.exceptions import InvalidInput, StorageFailure, WorkflowError

logger = logging.getLogger(__name__)


def build_engine(database_url: str, **kwargs):
    """Create an engine; PostgreSQL sessions get a lock_timeout so row locks never wait forever."""
    if database_url.startswith("sqlite"):
        kwargs.setdefault("connect_args", {"check_same_thread": False, "timeout": 30})
        engine = create_engine(database_url, future=True, **kwargs)

        # pysqlite defers BEGIN until the first write; every transaction takes the write lock at BEGIN instead
        @event.listens_for(engine, "connect")
        def disable_pysqlite_begin(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None

        @event.listens_for(engine, "begin")
        def begin_immediate(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

        return engine

    engine = create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=settings.DB_POOL_SIZE,
        future=True,
        **kwargs,
    )

    if engine.dialect.name == "postgresql":
        @event.listens_for(engine, "connect")
        def set_lock_timeout(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute(f"SET lock_timeout = {int(settings.DB_LOCK_TIMEOUT_MS)}")
            cursor.close()

    return engine


engine = build_engine(settings.DATABASE_URL)

# No autocommit, no autoflush: transactions are controlled explicitly
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False, future=True)

Base = declarative_base()


def get_db() -> Generator[Session, None, None]:
    """FastAPI dependency: yields a Session and closes it after the request."""
    db: Session = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """
    Run a unit of work: commit when the block finishes, roll back on any error.

    Domain errors propagate unchanged. Driver level failures (lock timeouts,
    lost connections, deadlocks) become StorageFailure after the rollback.
    """
    try:
        yield db
        db.commit()
    except WorkflowError:
        db.rollback()
        raise
    except IntegrityError as e:
        db.rollback()
        logger.warning(f"Integrity error, transaction rolled back: {e.orig}")
        raise InvalidInput("A conflicting record already exists") from e
    except DBAPIError as e:
        db.rollback()
        logger.error(f"Transaction aborted by the database: {e}")
        raise StorageFailure("The operation could not be completed, no changes were applied") from e
    except Exception:
        db.rollback()
        raise
