# school_admin/db/engine.py
"""
Database handle: SQLModel engine plus session factory.

A single Database instance is created at application start-up, stored on
app.state and disposed at shutdown. Request handlers receive sessions through
the get_session dependency instead of a module-level engine.
Supports SQLite (default) and any SQLAlchemy URL via DATABASE_URL.
"""

import logging

from sqlalchemy import event, text
from sqlmodel import Session, SQLModel, create_engine

logger = logging.getLogger(__name__)


def _set_sqlite_pragma(dbapi_connection, connection_record):
    # WAL mode mejora la concurrencia y evita "database is locked"
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA journal_mode=WAL;")
    cursor.close()


class Database:
    """
    Owns the engine for one database URL.
    """

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.is_sqlite = url.startswith("sqlite")

        connect_args = {"check_same_thread": False} if self.is_sqlite else {}
        self.engine = create_engine(url, echo=echo, connect_args=connect_args)

        if self.is_sqlite:
            event.listen(self.engine, "connect", _set_sqlite_pragma)

    def create_db_and_tables(self) -> None:
        """
        Create all tables defined in SQLModel models.
        The models package must be imported before calling this.
        """
        from .. import models  # noqa: F401

        SQLModel.metadata.create_all(self.engine)
        logger.info("Database tables initialized")

    def session(self) -> Session:
        return Session(self.engine)

    def ping(self) -> None:
        """Run a trivial query; raises SQLAlchemyError if the database is unreachable."""
        with self.engine.connect() as conn:
            conn.execute(text("SELECT 1"))

    def dispose(self) -> None:
        self.engine.dispose()
        logger.info("Database connections closed")
