from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from shopping_cart.core.config import config


class Base(DeclarativeBase):
    pass


def engine_options(url: str, timeout: int) -> Dict[str, Any]:
    """
    Engine keyword arguments for url.

    Every round trip is bounded by timeout: the pool wait, the connect
    handshake and, on PostgreSQL, each statement.
    """
    options: Dict[str, Any] = {"echo": config.database.echo, "pool_pre_ping": True}
    if url.startswith("sqlite"):
        options["connect_args"] = {"timeout": timeout, "check_same_thread": False}
    else:
        options["pool_size"] = config.database.pool_size
        options["max_overflow"] = config.database.max_overflow
        options["pool_timeout"] = timeout
        if url.startswith("postgresql"):
            options["connect_args"] = {
                "connect_timeout": timeout,
                "options": f"-c statement_timeout={timeout * 1000}",
            }
    return options


def build_engine(url: Optional[str] = None, timeout_seconds: Optional[int] = None, **kwargs) -> Engine:
    """Create the engine backing both stores"""
    url = url or config.database.url
    timeout = timeout_seconds if timeout_seconds is not None else config.store.timeout_seconds
    if timeout <= 0:
        raise ValueError("timeout_seconds must be positive")

    options = engine_options(url, timeout)
    options.update(kwargs)
    return create_engine(url, **options)


def build_session_factory(engine: Engine) -> sessionmaker:
    # expire_on_commit=False so rows can be mapped to domain objects after commit
    return sessionmaker(bind=engine, expire_on_commit=False)


@contextmanager
def session_scope(session_factory: sessionmaker) -> Iterator[Session]:
    """Commit on success, roll back on any exception."""
    session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
