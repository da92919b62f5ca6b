"""Database connection management for AttendQL."""

from __future__ import annotations

from sqlalchemy import Engine, create_engine
from sqlalchemy.orm import Session, sessionmaker

from attendql.exceptions import ConnectionError
from attendql.schema.models import Base


def _with_psycopg_driver(url: str) -> str:
    """Point bare PostgreSQL URLs at psycopg 3 instead of SQLAlchemy's psycopg2 default."""
    if url.startswith("postgresql://"):
        return "postgresql+psycopg://" + url.removeprefix("postgresql://")
    return url


class DatabaseConnection:
    """Lazily created engine and read sessions for the attendance store.

    Example:
        >>> connection = DatabaseConnection("sqlite:///./attendql.db")
        >>> connection.create_tables()
        >>> with connection.get_session() as session:
        ...     students = session.scalars(select(Student)).all()
    """

    def __init__(self, url: str, echo: bool = False) -> None:
        """Initialize the connection; nothing is opened until first use.

        Args:
            url: SQLAlchemy URL, e.g. "postgresql://localhost/school" or
                 "sqlite:///:memory:"
            echo: Whether to echo SQL statements
        """
        self._url = _with_psycopg_driver(url)
        self._echo = echo
        self._engine: Engine | None = None
        self._session_factory: sessionmaker[Session] | None = None

    @property
    def url(self) -> str:
        """The connection URL, with the PostgreSQL driver resolved."""
        return self._url

    @property
    def engine(self) -> Engine:
        """The SQLAlchemy engine, created on first access.

        Raises:
            ConnectionError: If SQLAlchemy cannot build an engine for the URL
        """
        if self._engine is None:
            # sessions may be used from the thread serving the question
            connect_args = {"check_same_thread": False} if self._url.startswith("sqlite") else {}
            try:
                self._engine = create_engine(
                    self._url, echo=self._echo, pool_pre_ping=True, connect_args=connect_args
                )
            except Exception as e:
                raise ConnectionError(
                    f"Failed to create database engine: {e}", {"url": self._url}
                ) from e
        return self._engine

    def get_session(self) -> Session:
        """Open a new session."""
        if self._session_factory is None:
            self._session_factory = sessionmaker(bind=self.engine)
        return self._session_factory()

    def create_tables(self) -> None:
        """Create the attendance tables that do not exist yet."""
        Base.metadata.create_all(self.engine)

    def close(self) -> None:
        """Dispose of the engine; the next access creates a fresh one."""
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._session_factory = None
