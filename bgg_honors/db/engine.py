"""
Database engine configuration
Supports SQLite (dev) and Postgres/Supabase (production)
"""
import logging
from pathlib import Path

from sqlalchemy import create_engine, event
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker

from bgg_honors.config import DATABASE_URL, DISABLE_SQLITE_WAL

logger = logging.getLogger(__name__)


def _is_sqlite(url: str) -> bool:
    """Check if database URL is SQLite"""
    return url.startswith("sqlite:")


def create_engine_for_url(url: str, *, disable_sqlite_wal: bool = False):
    """Create SQLAlchemy engine for the given URL."""
    if _is_sqlite(url):
        database = make_url(url).database
        if database and database != ":memory:":
            Path(database).parent.mkdir(parents=True, exist_ok=True)
        engine = create_engine(
            url,
            connect_args={"check_same_thread": False},
            pool_pre_ping=True,
            echo=False,
        )

        @event.listens_for(engine, "connect")
        def _sqlite_pragmas(dbapi_con, _):  # pragma: no cover - driver specific
            cursor = dbapi_con.cursor()
            try:
                cursor.execute("PRAGMA foreign_keys = ON;")
                if not disable_sqlite_wal and ":memory:" not in url:
                    cursor.execute("PRAGMA journal_mode = WAL;")
                cursor.execute("PRAGMA synchronous = NORMAL;")
            finally:
                cursor.close()

        return engine

    # Supabase speaks plain Postgres
    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        echo=False,
        connect_args={"connect_timeout": 10, "application_name": "bgg_honors"},
    )


def get_engine():
    """Return the primary engine based on `DATABASE_URL`."""
    return create_engine_for_url(
        DATABASE_URL,
        disable_sqlite_wal=DISABLE_SQLITE_WAL,
    )


_engine = None
_session_factory = None


def get_session_factory():
    """Lazily build the global session factory so importing this module never connects."""
    global _engine, _session_factory
    if _session_factory is None:
        _engine = get_engine()
        _session_factory = sessionmaker(
            bind=_engine,
            autoflush=False,
            autocommit=False,
            expire_on_commit=False,
        )
    return _session_factory


def init_db(engine=None):
    """Initialize database (create all tables)"""
    from bgg_honors.models.base import Base
    from bgg_honors.models import game  # noqa: F401

    if engine is None:
        get_session_factory()
        engine = _engine
    Base.metadata.create_all(bind=engine)
    logger.info("Database initialized: %s", engine.url.render_as_string(hide_password=True))
