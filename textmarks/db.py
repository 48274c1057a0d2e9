"""SQLAlchemy database setup for textmarks."""

import sys
from pathlib import Path
from typing import TYPE_CHECKING, Any, Final, cast

from sqlalchemy import Engine, create_engine, event
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

if TYPE_CHECKING:
    import sqlite3

#: The application name, used for the data directory.
APP_NAME: Final[str] = "textmarks"
#: The default database name.
DEFAULT_DB_NAME: Final[str] = "textmarks.db"
#: The default name of the document loaded and saved by the application.
DEFAULT_DOCUMENT_NAME: Final[str] = "default"
#: The default autosave debounce delay in milliseconds.
DEFAULT_AUTOSAVE_DEBOUNCE_MS: Final[int] = 500


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""


def get_data_dir() -> Path:
    """
    Get the directory application data is stored in.

    - On Windows: ``AppData/Local/textmarks``
    - On macOS: ``~/Library/Application Support/textmarks``
    - On Linux: ``~/.config/textmarks``
    - If the platform is not supported, raise a ValueError.

    Returns:
        Path to the data directory (created if missing)

    """
    if sys.platform not in ["win32", "darwin", "linux"]:
        msg = f"Unsupported platform: {sys.platform}"
        raise ValueError(msg)
    if sys.platform == "win32":
        data_dir = Path.home() / "AppData" / "Local" / APP_NAME
    elif sys.platform == "darwin":
        data_dir = Path.home() / "Library" / "Application Support" / APP_NAME
    else:
        data_dir = Path.home() / ".config" / APP_NAME
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir


def get_db_path() -> Path:
    return get_data_dir() / DEFAULT_DB_NAME


def create_engine_with_path(db_path: Path | None = None) -> Engine:
    """
    Create SQLAlchemy engine with proper SQLite settings.

    Args:
        db_path: Optional path to database file. If None, uses default path.

    Returns:
        SQLAlchemy engine

    """
    if db_path is None:
        db_path = get_db_path()

    db_path.touch(exist_ok=True)

    engine = create_engine(
        f"sqlite:///{db_path}",
        connect_args={"check_same_thread": False},  # Autosave runs on a timer thread
        echo=False,
    )

    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(
        dbapi_conn: "sqlite3.Connection | Any", _connection_record: Any
    ) -> None:
        """Set SQLite pragmas on connection."""
        cursor = cast("sqlite3.Cursor", dbapi_conn.cursor())
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.close()

    return engine


def create_session_factory(engine: Engine) -> sessionmaker[Session]:
    """
    Create the tables if needed and return a session factory bound to ``engine``.

    Args:
        engine: SQLAlchemy engine

    Returns:
        Session factory

    """
    # Import for the side effect of registering the tables on Base.metadata
    from textmarks.services import persistence  # noqa: F401, PLC0415

    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine, autoflush=False)
