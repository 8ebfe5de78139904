from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from app.core.security import crypt, gen_salt

Base = declarative_base()


def normalize_database_url(url: str) -> str:
    """Normalize PostgreSQL URL to use psycopg3 driver."""
    if url.startswith("postgresql://") and "+psycopg" not in url:
        return url.replace("postgresql://", "postgresql+psycopg://", 1)
    return url


def create_db_engine(database_url: str, **kwargs) -> Engine:
    """Create an engine for the relational store.

    SQLite connections get foreign key enforcement, WAL journaling and the
    ``crypt``/``gen_salt`` functions PostgreSQL gets from pgcrypto, so the
    store can issue the same statements on both backends.
    """
    database_url = normalize_database_url(database_url)

    if database_url.startswith("sqlite"):
        connect_args = kwargs.pop("connect_args", {})
        connect_args.setdefault("check_same_thread", False)
        engine = create_engine(database_url, connect_args=connect_args, **kwargs)
        event.listen(engine, "connect", _configure_sqlite_connection)
        return engine

    return create_engine(database_url, pool_pre_ping=True, **kwargs)


def _configure_sqlite_connection(dbapi_conn, connection_record):
    cursor = dbapi_conn.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.close()

    dbapi_conn.create_function("gen_salt", -1, gen_salt)
    dbapi_conn.create_function("crypt", 2, crypt)
