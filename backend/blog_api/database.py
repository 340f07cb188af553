"""Database engine and helpers.

The engine is built explicitly from a URL and handed to the FastAPI app
(`app.state.engine`), so every request opens its own `Session` against
whatever store the app was created with. Tests build an in-memory SQLite
engine the same way.
"""

from fastapi import Request
from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, create_engine, Session


def build_engine(url: str, echo: bool = False) -> Engine:
    """Create a SQLAlchemy engine for `url`.

    SQLite connections are shared across FastAPI's worker threads, so
    `check_same_thread` is disabled. An in-memory SQLite database only
    lives as long as its connection, hence the `StaticPool` there.
    """
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=echo, **kwargs)
    return create_engine(url, echo=echo, pool_pre_ping=True)


def create_db_and_tables(engine: Engine):
    """Create the `usuarios`, `tema` and `postagem` tables if missing.

    Models must be imported before the metadata is used, which the
    import below guarantees.
    """
    from . import models  # noqa: F401

    SQLModel.metadata.create_all(engine)


def get_session(request: Request):
    """Yield a database `Session` for FastAPI dependency injection.

    The session is bound to the engine stored on the running app and is
    closed when the request scope finishes.
    """
    with Session(request.app.state.engine) as session:
        yield session
