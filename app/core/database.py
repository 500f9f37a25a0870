from typing import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from app.core.config import get_settings

settings = get_settings()


def build_engine(database_url: str, *, echo: bool = False) -> Engine:
    """
    Create an engine for the given URL.

    SQLite is accepted for local development and tests. It needs a busy
    timeout so concurrent writers wait for the lock instead of failing, and
    foreign keys switched on per connection.

    pysqlite's own transaction handling is switched off and every transaction
    starts with BEGIN IMMEDIATE: writers queue on the database lock up front,
    and SAVEPOINT works as documented.
    """
    if database_url.startswith("sqlite"):
        engine = create_engine(
            database_url,
            future=True,
            echo=echo,
            connect_args={"check_same_thread": False, "timeout": 30},
        )

        @event.listens_for(engine, "connect")
        def _sqlite_pragmas(dbapi_connection, connection_record):  # noqa: ARG001
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        @event.listens_for(engine, "begin")
        def _sqlite_begin(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

        return engine

    return create_engine(
        database_url,
        future=True,
        echo=echo,
        pool_pre_ping=True,
    )


# Main SQLAlchemy engine
engine = build_engine(str(settings.database_url), echo=settings.database_echo)

# Session factory
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
    future=True,
)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that yields a DB session.

    Services own their transaction boundaries (commit/rollback); this only
    guarantees the session is closed at the end of the request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
