"""Engine and session factory."""

from collections.abc import Generator

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from bocado.core.config import settings


def _engine_kwargs(url: str) -> dict:
    kwargs: dict = {"pool_pre_ping": True}
    if url.startswith("postgresql"):
        kwargs["pool_timeout"] = settings.db_pool_timeout
        # per-statement timeout, PostgreSQL only
        kwargs["connect_args"] = {
            "options": f"-c statement_timeout={settings.db_statement_timeout_ms}",
        }
    elif url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
    return kwargs


def enable_sqlite_savepoints(engine: Engine) -> None:
    """Let SQLAlchemy drive BEGIN itself so SAVEPOINT works on pysqlite."""

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def build_engine(url: str, **overrides) -> Engine:
    kwargs = _engine_kwargs(url)
    kwargs.update(overrides)
    new_engine = create_engine(url, **kwargs)
    if url.startswith("sqlite"):
        enable_sqlite_savepoints(new_engine)
    return new_engine


def make_session_factory(bind: Engine) -> sessionmaker:
    return sessionmaker(bind=bind, autoflush=False, expire_on_commit=False)


database_url = str(settings.database_url)
engine = build_engine(database_url)
SessionLocal = make_session_factory(engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a session per request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
