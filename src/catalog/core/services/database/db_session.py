"""Database engine and session factory used across the application."""

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine
from tenacity import (
    RetryCallState,
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    stop_after_delay,
    wait_fixed,
)

from src.catalog.core.exceptions import CatalogError, StoreUnavailable
from src.catalog.runtime.context import get_config


def _is_in_memory(url: str) -> bool:
    return url in ("sqlite://", "sqlite:///:memory:") or "mode=memory" in url


def _log_retry(retry_state: RetryCallState) -> None:
    logger.warning(
        "Database connection attempt {} failed: {}",
        retry_state.attempt_number,
        retry_state.outcome.exception() if retry_state.outcome else None,
    )


class DbSessionService:
    """Owns the shared engine and hands out sessions.

    The first connection is attempted eagerly by :meth:`connect`, with a fixed
    delay between attempts and an overall deadline. If the store never comes
    up, sessions keep trying to reconnect lazily so the service recovers
    without a restart.
    """

    def __init__(self, engine: Engine | None = None):
        main_config = get_config()
        self._db_config = main_config.database
        self._connected = False
        self._schema_ready = False

        if engine is not None:
            self._engine = engine
            return

        logger.info(
            "Configuring database engine for environment: {}",
            main_config.app.environment,
        )
        engine_kwargs = {
            "echo": self._db_config.echo,
            "pool_pre_ping": True,
            "connect_args": self._get_connect_args(),
        }
        if self._db_config.is_sqlite and _is_in_memory(self._db_config.url):
            # one shared connection, otherwise every checkout sees an empty database
            engine_kwargs["poolclass"] = StaticPool
        elif not self._db_config.is_sqlite:
            engine_kwargs.update(
                {
                    "pool_size": self._db_config.pool_size,
                    "max_overflow": self._db_config.max_overflow,
                    "pool_timeout": self._db_config.pool_timeout,
                    "pool_recycle": self._db_config.pool_recycle,
                }
            )

        self._engine = create_engine(self._db_config.url, **engine_kwargs)

    def _get_connect_args(self) -> dict:
        """Get database-specific connection arguments."""
        if self._db_config.is_sqlite:
            return {"check_same_thread": False, "timeout": 20}

        if self._db_config.url.startswith("postgresql"):
            return {
                "application_name": "product-catalog",
                "connect_timeout": max(int(self._db_config.connect_timeout_seconds), 1),
            }

        return {}

    @property
    def engine(self) -> Engine:
        return self._engine

    @property
    def connected(self) -> bool:
        return self._connected

    @property
    def dialect(self) -> str:
        return self._engine.dialect.name

    def connect(self) -> None:
        """Establish the first connection, retrying on failure.

        Raises:
            StoreUnavailable: when every attempt failed or the deadline passed.
        """
        retrying = Retrying(
            retry=retry_if_exception_type(SQLAlchemyError),
            stop=(
                stop_after_attempt(self._db_config.connect_retries)
                | stop_after_delay(self._db_config.connect_timeout_seconds)
            ),
            wait=wait_fixed(self._db_config.connect_retry_delay_seconds),
            before_sleep=_log_retry,
            reraise=False,
        )
        try:
            retrying(self._ping)
        except RetryError as e:
            cause = e.last_attempt.exception()
            logger.error(
                "Database unreachable after {} attempt(s): {}",
                e.last_attempt.attempt_number,
                cause,
            )
            raise StoreUnavailable(
                "Product store is unavailable",
                details={"error": str(cause)},
            ) from cause

        self._connected = True
        logger.info("Database connection established")

    def _ping(self) -> None:
        with self._engine.connect() as connection:
            connection.execute(text("SELECT 1"))

    def create_all(self) -> None:
        """Create all database tables."""
        # registers the tables on SQLModel.metadata
        from src.catalog.entities import ProductTable, UserTable  # noqa: F401

        SQLModel.metadata.create_all(self._engine)
        self._schema_ready = True
        logger.info("Database initialized with tables.")

    def get_session(self) -> Session:
        """Return a new session, reconnecting first if startup never succeeded.

        A store that was unreachable at startup also never got its tables, so
        they are created after the first successful reconnect.
        """
        if not self._connected:
            self.connect()
        if not self._schema_ready:
            self.create_all()

        return Session(self._engine, expire_on_commit=False, autoflush=True)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Yield a session that commits on success and rolls back on error.

        Domain errors are expected outcomes of a request and roll back without
        being logged here.
        """
        db = self.get_session()
        try:
            yield db
            db.commit()
        except CatalogError:
            db.rollback()
            raise
        except Exception as e:
            db.rollback()
            logger.error(
                "Database transaction failed: {}: {}", type(e).__name__, e
            )
            raise
        finally:
            db.close()

    def health_check(self) -> bool:
        """Perform a health check on the database connection."""
        try:
            self._ping()
            return True
        except SQLAlchemyError as e:
            logger.error("Database health check failed: {}: {}", type(e).__name__, e)
            # next session goes through the retrying connect path again
            self._connected = False
            return False

    def get_pool_status(self) -> dict:
        """Get current connection pool status for monitoring."""
        pool = self._engine.pool
        return {
            "size": getattr(pool, "size", lambda: 0)(),
            "checked_in": getattr(pool, "checkedin", lambda: 0)(),
            "checked_out": getattr(pool, "checkedout", lambda: 0)(),
            "overflow": getattr(pool, "overflow", lambda: 0)(),
        }

    def dispose(self) -> None:
        self._engine.dispose()
        self._connected = False
        logger.info("Database engine disposed")
