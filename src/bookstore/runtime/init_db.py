"""Database initialization."""

from loguru import logger
from sqlmodel import SQLModel

from bookstore.core.services.database.db_session import DbSessionService
from bookstore.entities.book.table import BookTable


def init_db(database_service: DbSessionService) -> None:
    """Create the books table if it does not exist yet."""
    logger.info("Ensuring database schema exists")
    SQLModel.metadata.create_all(
        database_service.engine, tables=[BookTable.__table__]
    )
