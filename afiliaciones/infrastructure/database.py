"""Database handle — engine, session factory and transaction scope.

The engine is owned by whoever constructs :class:`Database` (the application
factory in production, the test fixtures in tests); nothing is created at
import time.
"""

from contextlib import contextmanager
from typing import Iterator

from fastapi import Request
from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from sqlalchemy.pool import StaticPool


class Base(DeclarativeBase):
    pass


def _configure_sqlite(engine: Engine) -> None:
    # pysqlite defers BEGIN on its own, which breaks SAVEPOINT; take over
    # transaction control so nested transactions behave as on PostgreSQL.
    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


class Database:
    """Connection pool plus session factory for one process."""

    def __init__(self, url: str, pool_size: int = 10, echo: bool = False):
        if url.startswith("sqlite"):
            kwargs = {"connect_args": {"check_same_thread": False}}
            if url in ("sqlite://", "sqlite:///:memory:"):
                kwargs["poolclass"] = StaticPool
            self.engine = create_engine(url, echo=echo, **kwargs)
            _configure_sqlite(self.engine)
        else:
            self.engine = create_engine(
                url,
                echo=echo,
                pool_size=pool_size,
                pool_pre_ping=True,
            )
        self.SessionLocal = sessionmaker(bind=self.engine, autoflush=False, expire_on_commit=False)

    def create_all(self) -> None:
        # Import models so they are registered on Base.metadata
        from afiliaciones.domain.models import (  # noqa: F401
            affiliation,
            catalog,
            client,
            client_phone,
            office,
            unsubscription,
            user,
        )

        Base.metadata.create_all(bind=self.engine)

    def session(self) -> Iterator[Session]:
        db = self.SessionLocal()
        try:
            yield db
        finally:
            db.close()

    def dispose(self) -> None:
        self.engine.dispose()


def get_db(request: Request) -> Iterator[Session]:
    """FastAPI dependency — one session per request, always closed."""
    yield from request.app.state.database.session()


@contextmanager
def transaction(db: Session) -> Iterator[Session]:
    """Commit on success; roll back and re-raise on any error."""
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
