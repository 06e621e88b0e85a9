"""Database engine and session factory shared by repositories and probes."""

from collections.abc import Iterator
from contextlib import contextmanager

from loguru import logger
from sqlalchemy import Engine
from sqlmodel import Session, create_engine

from bookstore.runtime.config.settings import Settings


class DbSessionService:
    def __init__(self, settings: Settings, engine: Engine | None = None):
        """Initialize the shared database engine and session factory.

        Args:
            settings: Application settings holding the database URL and pool sizing.
            engine: Pre-built engine to use instead of creating one.
        """
        if engine is not None:
            self._engine = engine
            return

        logger.info("Setting up database engine and session factory")
        engine_kwargs = {
            "pool_pre_ping": True,  # Validate connections before use
            "echo": False,
            "connect_args": self._get_connect_args(settings),
        }

        if settings.is_postgresql:
            engine_kwargs.update(
                {
                    "pool_size": settings.db_pool_size,
                    "max_overflow": settings.db_max_overflow,
                    "pool_timeout": settings.db_pool_timeout,
                    "pool_recycle": settings.db_pool_recycle,
                }
            )

        url = settings.database_url
        logger.info(
            "Initializing database engine for {}",
            url.render_as_string(hide_password=True),
        )
        self._engine = create_engine(url, **engine_kwargs)

    def _get_connect_args(self, settings: Settings) -> dict:
        """Get database-specific connection arguments."""
        connect_args = {}

        if settings.is_postgresql:
            connect_args.update(
                {
                    # Application name for connection tracking
                    "application_name": f"{settings.environment}_bookstore",
                    "connect_timeout": 30,
                }
            )
        elif settings.database_url.get_backend_name() == "sqlite":
            connect_args.update(
                {
                    "check_same_thread": False,  # Requests run on the threadpool
                    "timeout": 20,  # Lock timeout
                }
            )

            if settings.environment == "production":
                logger.warning(
                    "SQLite is not recommended for production use. "
                    "Consider PostgreSQL for better performance and reliability."
                )

        return connect_args

    @property
    def engine(self) -> Engine:
        return self._engine

    def get_session(self) -> Session:
        """Return a new SQLModel session bound to the shared engine."""
        return Session(self._engine, expire_on_commit=False)

    @contextmanager
    def session_scope(self) -> Iterator[Session]:
        """Yield a session that commits on success and rolls back on error."""
        db = self.get_session()
        try:
            yield db
            db.commit()
        except Exception as e:
            db.rollback()
            logger.bind(
                error_type=type(e).__name__,
                error_message=str(e),
            ).debug("Database transaction rolled back")
            raise
        finally:
            db.close()

    def dispose(self) -> None:
        """Close every pooled connection."""
        logger.info("Disposing database engine")
        self._engine.dispose()
