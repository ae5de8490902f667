"""Database engine and session management."""
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool


def make_engine(database_url: str, pool_size: int = 5, max_overflow: int = 10) -> Engine:
    """
    Create an engine for the given URL.

    SQLite gets a thread-shareable connection (and a single static connection
    for in-memory databases); other drivers get a sized connection pool.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in database_url or database_url == "sqlite://":
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)

    return create_engine(
        database_url,
        pool_pre_ping=True,
        echo=False,
        pool_size=pool_size,
        max_overflow=max_overflow,
    )


def make_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)
