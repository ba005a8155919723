"""Database engine and session utilities.

This module centralises the creation of the SQLAlchemy engine used by the
API, the CLI scripts and the startup seed. SQLite is the default backend;
any other SQLAlchemy URL works as long as its driver is installed.
"""

from __future__ import annotations

import logging
import time
from time import perf_counter
from typing import Any

from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.engine.url import make_url
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from wordquiz.core.config import settings

logger = logging.getLogger(__name__)

# These globals are populated by ``configure_database``.
sync_engine: Engine
SessionLocal: sessionmaker


def _derive_connection_parameters(database_url: str) -> tuple[str, dict[str, Any]]:
    """Return the engine keyword arguments matching *database_url*."""

    parsed_url = make_url(database_url)
    engine_kwargs: dict[str, Any] = {}

    if parsed_url.get_backend_name() == "sqlite":
        # FastAPI runs sync endpoints in a thread pool.
        engine_kwargs["connect_args"] = {"check_same_thread": False}
        if parsed_url.database in (None, "", ":memory:"):
            # A private in-memory database per connection would lose every table.
            engine_kwargs["poolclass"] = StaticPool
    else:
        engine_kwargs["pool_pre_ping"] = True

    return parsed_url.render_as_string(hide_password=False), engine_kwargs


def _shorten(value: str, limit: int = 200) -> str:
    return value if len(value) <= limit else value[: limit - 3] + "..."


def _install_slow_query_logger(engine: Engine) -> None:
    """Warn about statements slower than ``SQLALCHEMY_SLOW_QUERY_THRESHOLD_MS``."""

    threshold_ms = max(settings.SQLALCHEMY_SLOW_QUERY_THRESHOLD_MS, 0)
    if threshold_ms == 0:
        return

    @event.listens_for(engine, "before_cursor_execute")
    def _start_timer(conn, cursor, statement, parameters, context, executemany):
        conn.info.setdefault("query_started_at", []).append(perf_counter())

    @event.listens_for(engine, "after_cursor_execute")
    def _report_slow_query(conn, cursor, statement, parameters, context, executemany):
        started = conn.info.get("query_started_at")
        if not started:
            return
        elapsed_ms = (perf_counter() - started.pop()) * 1000.0
        if elapsed_ms >= threshold_ms:
            logger.warning(
                "Slow SQL (%.1f ms) - %s | params=%s",
                elapsed_ms,
                _shorten(" ".join(str(statement).split())),
                _shorten(repr(parameters)),
            )


def _ping(engine: Engine) -> None:
    with engine.connect() as connection:
        connection.execute(text("SELECT 1"))


def _verify_database_connection(engine: Engine, sleep=time.sleep) -> None:
    """Ping *engine*, retrying server backends with exponential backoff.

    SQLite is pinged once. Other backends get up to
    ``DATABASE_CONNECTION_MAX_RETRIES`` attempts, waiting
    ``DATABASE_CONNECTION_RETRY_BACKOFF_SECONDS`` doubled after each failure
    (capped at 30 s). The last error is re-raised.
    """

    if engine.dialect.name == "sqlite":
        _ping(engine)
        return

    attempts = max(settings.DATABASE_CONNECTION_MAX_RETRIES, 1)
    delay = max(settings.DATABASE_CONNECTION_RETRY_BACKOFF_SECONDS, 0.1)

    for attempt in range(1, attempts + 1):
        try:
            _ping(engine)
            return
        except (OperationalError, OSError) as exc:
            if attempt == attempts:
                raise
            logger.warning(
                "Database connection failed (attempt %s/%s): %s. Retrying in %.1f s.",
                attempt,
                attempts,
                exc,
                delay,
            )
            sleep(delay)
            delay = min(delay * 2, 30.0)


def configure_database(database_url: str | None = None) -> Engine:
    """Initialise the engine and session factory.

    ``database_url`` defaults to the environment configuration. The
    connection is verified eagerly so a misconfigured URL fails at boot
    rather than on the first request.
    """

    global sync_engine, SessionLocal

    target_url, engine_kwargs = _derive_connection_parameters(str(database_url or settings.DATABASE_URL))
    logger.info("Configuring database: %s", make_url(target_url).render_as_string(hide_password=True))

    candidate_engine = create_engine(target_url, future=True, **engine_kwargs)
    _install_slow_query_logger(candidate_engine)

    try:
        _verify_database_connection(candidate_engine)
    except (OperationalError, OSError) as exc:
        logger.error("Database connection failed: %s", exc)
        candidate_engine.dispose()
        raise

    sync_engine = candidate_engine
    SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=sync_engine)
    return sync_engine


# Initialise the engine at import time so the rest of the application can use
# it immediately.
configure_database()

