"""
SQLAlchemy engine, session, and base. DB url from config or default.
"""
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator, Optional

from sqlalchemy import create_engine, inspect
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlalchemy.orm import sessionmaker, declarative_base, Session

from weatherservice.core.errors import StorageWriteError

logger = logging.getLogger(__name__)

Base = declarative_base()

DEFAULT_DB_DIR = Path.home() / ".weatherservice"


def default_db_url() -> str:
    _make_parent_dir(DEFAULT_DB_DIR / "weather.db")
    return f"sqlite:///{DEFAULT_DB_DIR / 'weather.db'}"


def db_url_from_path(path: str) -> str:
    """Build a sqlite URL from a filesystem path, creating the parent directory."""
    resolved = Path(path).expanduser().resolve()
    _make_parent_dir(resolved)
    return f"sqlite:///{resolved}"


def _make_parent_dir(db_file: Path) -> None:
    try:
        db_file.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise StorageWriteError(f"Could not create database directory {db_file.parent}: {e}") from e


def _engine_options(db_url: str) -> Dict[str, Any]:
    url = make_url(db_url)
    if url.get_backend_name() != "sqlite":
        return {}
    options: Dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if url.database in (None, "", ":memory:"):
        # One shared connection, otherwise each pool thread gets its own empty database
        options["poolclass"] = StaticPool
    return options


class Database:
    """
    Owns one engine and its session factory.
    Created once by the entry point and handed to the store.
    """

    def __init__(self, db_url: Optional[str] = None, echo: bool = False):
        self.url = db_url or default_db_url()
        try:
            self.engine: Engine = create_engine(self.url, echo=echo, future=True, **_engine_options(self.url))
        except SQLAlchemyError as e:
            raise StorageWriteError(f"Could not open database {self.url.split('?')[0]}: {e}") from e
        self._session_factory = sessionmaker(
            bind=self.engine, autocommit=False, autoflush=False, expire_on_commit=False
        )
        logger.info(f"Database engine created: {self.url.split('?')[0]}")

    @contextmanager
    def session_scope(self) -> Generator[Session, None, None]:
        """Context manager for a single DB session. Commits on success, rolls back on error."""
        session = self._session_factory()
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise
        finally:
            session.close()

    def has_table(self, table_name: str) -> bool:
        return inspect(self.engine).has_table(table_name)

    def dispose(self) -> None:
        self.engine.dispose()
