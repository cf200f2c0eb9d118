import logging
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker, declarative_base

from photoshare.utils.errors import PersistenceError


logger = logging.getLogger(__name__)

Base = declarative_base()


def create_db_engine(url: str) -> Engine:
    connect_args = {}
    if url.startswith("sqlite"):
        # For SQLite, check_same_thread=False is required only for multi-threaded contexts.
        connect_args["check_same_thread"] = False

    engine = create_engine(url, connect_args=connect_args)

    if engine.dialect.name == "sqlite":
        # SQLite ignores foreign keys (and so ON DELETE CASCADE) unless enabled per connection
        @event.listens_for(engine, "connect")
        def _enable_foreign_keys(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    return engine


class Database:
    """Engine plus session factory, built once per app and passed down."""

    def __init__(self, url: str):
        self.url = url
        self.engine = create_db_engine(url)
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine)

    def create_all(self) -> None:
        # Ensure models are registered on Base before creating tables
        import photoshare.models  # noqa: F401

        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Session:
        return self.SessionLocal()

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Iterator[Session]:
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()


def commit_or_raise(db: Session, failure_message: str) -> None:
    """Commit ``db``; on any database error roll back and raise PersistenceError."""
    try:
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.exception(failure_message)
        raise PersistenceError(failure_message)
