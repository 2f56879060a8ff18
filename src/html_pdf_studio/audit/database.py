"""SQLAlchemy engine and session handling for the audit trail."""

import os
from contextlib import contextmanager
from typing import Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from .models import Base


DEFAULT_DATABASE_URL = "sqlite:///html_pdf_studio_audit.db"


def get_database_url(database_url: Optional[str] = None) -> str:
    """Resolve the audit database URL: explicit, STUDIO_DATABASE_URL, then a local SQLite file."""
    return database_url or os.environ.get("STUDIO_DATABASE_URL", DEFAULT_DATABASE_URL)


class DatabaseManager:
    """
    Owns the engine of the audit database.

    The engine is created on first use. SQLite connections may be used
    from the worker threads that write audit events.
    """

    def __init__(self, database_url: Optional[str] = None, echo: bool = False):
        self.database_url = get_database_url(database_url)
        self._echo = echo
        self._engine: Optional[Engine] = None
        self._session_factory: Optional[sessionmaker] = None

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            connect_args = {}
            if self.database_url.startswith("sqlite"):
                connect_args["check_same_thread"] = False
            self._engine = create_engine(
                self.database_url,
                echo=self._echo,
                connect_args=connect_args,
            )
        return self._engine

    @contextmanager
    def get_session(self) -> Iterator[Session]:
        """Yield a session that is committed on success and rolled back on error."""
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def init_database(self) -> None:
        """Create the audit tables if they do not exist."""
        Base.metadata.create_all(self.engine)

    def close(self) -> None:
        """Dispose of the engine; it is recreated on next use."""
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
            self._session_factory = None
