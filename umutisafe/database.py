"""Database engine, session factory and declarative base."""

import logging
import time
from typing import Callable, Optional

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker

logger = logging.getLogger(__name__)

# Base class for models
Base = declarative_base()


def create_db_engine(database_url: str, *, pool_size: int = 5, echo: bool = False) -> Engine:
    """Build the engine once per application; SQLite URLs skip pool sizing."""
    if database_url.startswith("sqlite"):
        return create_engine(
            database_url,
            echo=echo,
            connect_args={"check_same_thread": False},
        )
    return create_engine(
        database_url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=pool_size,
        max_overflow=0,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def wait_for_database(
    engine: Engine,
    *,
    retries: int = 5,
    backoff_seconds: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
) -> None:
    """
    Probe the database with ``SELECT 1`` until it answers.

    Waits ``backoff_seconds * 2 ** attempt`` between attempts and re-raises
    the last error once ``retries`` attempts have failed.
    """
    last_error: Optional[Exception] = None
    for attempt in range(retries):
        try:
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
            logger.info("Database connection established")
            return
        except OperationalError as exc:
            last_error = exc
            delay = backoff_seconds * (2 ** attempt)
            logger.warning(
                f"Database not reachable (attempt {attempt + 1}/{retries}): {exc}. "
                f"Retrying in {delay:.1f}s"
            )
            if attempt < retries - 1:
                sleep(delay)

    logger.error("Unable to connect to the database, giving up")
    if last_error is not None:
        raise last_error
