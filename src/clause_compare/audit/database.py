"""Engine and session handling for the comparison audit store."""

import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Dict, Generator, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base

logger = logging.getLogger(__name__)

DEFAULT_DATABASE_URL = "sqlite:///./clause_compare_audit.db"


class DatabaseManager:
    """
    Owns the SQLAlchemy engine behind the audit trail.

    SQLite (the default) is opened so it can be shared by the request
    handlers; any other URL gets a pooled engine with pre-ping.
    """

    def __init__(
        self,
        database_url: Optional[str] = None,
        pool_size: int = 5,
        max_overflow: int = 10,
        echo: bool = False,
    ):
        """
        Initialize the database manager.

        Args:
            database_url: SQLAlchemy URL of the audit store.
            pool_size: Pooled connections for server databases.
            max_overflow: Extra connections allowed beyond ``pool_size``.
            echo: Log emitted SQL.
        """
        self._database_url = database_url or DEFAULT_DATABASE_URL
        self._pool_size = pool_size
        self._max_overflow = max_overflow
        self._echo = echo
        self._engine: Optional[Engine] = None
        self._sessions: Optional[sessionmaker] = None

    @property
    def database_url(self) -> str:
        return self._database_url

    @property
    def is_sqlite(self) -> bool:
        return make_url(self._database_url).get_backend_name() == "sqlite"

    @property
    def engine(self) -> Engine:
        if self._engine is None:
            self._engine = create_engine(self._database_url, **self._engine_options())
            logger.debug(f"Audit store engine created for {self._engine.url!r}")
        return self._engine

    def _engine_options(self) -> Dict[str, object]:
        options: Dict[str, object] = {"echo": self._echo}
        if not self.is_sqlite:
            options.update(
                pool_size=self._pool_size,
                max_overflow=self._max_overflow,
                pool_pre_ping=True,
            )
            return options

        options["connect_args"] = {"check_same_thread": False}
        database = make_url(self._database_url).database
        if not database or database == ":memory:":
            # One shared connection, otherwise each session sees an empty database
            options["poolclass"] = StaticPool
        else:
            Path(database).parent.mkdir(parents=True, exist_ok=True)
        return options

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        """
        Yield a session that commits on success and rolls back on error.

        Example:
            with db_manager.get_session() as session:
                session.add(model)
        """
        if self._sessions is None:
            self._sessions = sessionmaker(
                bind=self.engine,
                autoflush=False,
                expire_on_commit=False,
            )
        session = self._sessions()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def init_database(self) -> None:
        """Create the audit tables if they are missing."""
        Base.metadata.create_all(self.engine)

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
        self._engine = None
        self._sessions = None

    def health_check(self) -> bool:
        """Return True when the audit store answers a trivial query."""
        try:
            with self.engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except (SQLAlchemyError, OSError) as e:
            logger.warning(f"Audit store health check failed: {e}")
            return False
        return True
