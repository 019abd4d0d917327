import logging
from contextlib import contextmanager
from typing import Callable, Iterator, TypeVar

from sqlalchemy import create_engine, event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from inventory_pro.core.config import settings
from inventory_pro.core.errors import StorageError
from inventory_pro.models.tenant import Base


logger = logging.getLogger(__name__)

T = TypeVar("T")


def _engine_options(url: str) -> dict:
    if not url.startswith("sqlite"):
        return {"pool_pre_ping": True}
    options: dict = {"connect_args": {"check_same_thread": False}}
    if url in ("sqlite://", "sqlite:///:memory:"):
        # One shared connection, otherwise every pooled connection sees its own empty database
        options["poolclass"] = StaticPool
    return options


engine = create_engine(settings.database_url, **_engine_options(settings.database_url))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


if engine.dialect.name == "sqlite":
    @event.listens_for(engine, "connect")
    def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
        # ON DELETE CASCADE / SET NULL are ignored by SQLite unless enabled per connection
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        # Anything not committed by now (client went away, handler raised) is rolled back
        db.close()


@contextmanager
def unit_of_work(db: Session) -> Iterator[Session]:
    """
    Run a block as one transaction: commit on success, roll back on any failure.

    Driver and store errors are re-raised as StorageError so nothing
    store-specific travels past the service layer.
    """
    try:
        yield db
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Transaction rolled back after %s", exc.__class__.__name__, exc_info=True)
        raise StorageError() from exc
    except BaseException:
        db.rollback()
        raise


def run_with_retry(func: Callable[[], T], attempts: int = 2) -> T:
    """Call func again after a StorageError, at most attempts times in total."""
    for attempt in range(1, attempts + 1):
        try:
            return func()
        except StorageError:
            if attempt >= attempts:
                raise
            logger.warning("Storage failure on attempt %s of %s, retrying", attempt, attempts)
    raise StorageError()


def ping(db: Session) -> None:
    db.execute(text("SELECT 1"))


def init_db() -> None:
    # Import models so every table is registered on Base.metadata
    from inventory_pro import models  # noqa: F401

    # Create tables in dev/test without running migrations
    if settings.env in {"dev", "test"}:
        Base.metadata.create_all(bind=engine)
