"""Database connectivity probe backing /healthz and /readyz."""

from abc import ABC, abstractmethod

from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError

from bookstore.core.exceptions import DataAccessError


class ConnectionChecker(ABC):
    @abstractmethod
    def check_connection(self) -> None:
        """Return normally when the backing store is reachable.

        Raises:
            DataAccessError: If the round trip fails.
        """
        raise NotImplementedError


class DatabaseHealthService(ConnectionChecker):
    def __init__(self, engine: Engine) -> None:
        self._engine = engine

    def check_connection(self) -> None:
        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1")).all()
        except SQLAlchemyError as exc:
            raise DataAccessError(f"database health check failed: {exc}") from exc
