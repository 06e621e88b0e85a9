"""Book repository: data access for the books table."""

from abc import ABC, abstractmethod

from loguru import logger
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select

from bookstore.core.exceptions import DataAccessError, NotFoundError
from bookstore.core.services.database.db_session import DbSessionService

from .entity import Book
from .table import BookTable


class BookStore(ABC):
    """Operations the HTTP layer needs from book storage."""

    @abstractmethod
    def list_all(self) -> list[Book]:
        raise NotImplementedError

    @abstractmethod
    def get_by_isbn(self, isbn: str) -> Book:
        """Raises NotFoundError when no book has this ISBN."""
        raise NotImplementedError

    @abstractmethod
    def create(self, book: Book) -> None:
        raise NotImplementedError


def _to_entity(row: BookTable) -> Book:
    # NULL columns fail validation here
    return Book(isbn=row.isbn, title=row.title, author=row.author, price=row.price)


class BookRepository(BookStore):
    """SQL-backed book store. Every call runs in its own short session."""

    def __init__(self, database_service: DbSessionService) -> None:
        self._db = database_service

    def list_all(self) -> list[Book]:
        try:
            with self._db.session_scope() as session:
                rows = session.exec(select(BookTable)).all()
                return [_to_entity(row) for row in rows]
        except (SQLAlchemyError, ValidationError) as exc:
            raise DataAccessError(f"unable to list books: {exc}") from exc

    def get_by_isbn(self, isbn: str) -> Book:
        try:
            with self._db.session_scope() as session:
                row = session.get(BookTable, isbn)
                if row is None:
                    raise NotFoundError(f"no book with isbn {isbn!r}")
                return _to_entity(row)
        except (SQLAlchemyError, ValidationError) as exc:
            raise DataAccessError(f"unable to get book {isbn!r}: {exc}") from exc

    def create(self, book: Book) -> None:
        row = BookTable(
            isbn=book.isbn, title=book.title, author=book.author, price=book.price
        )
        try:
            with self._db.session_scope() as session:
                session.add(row)
        except SQLAlchemyError as exc:
            raise DataAccessError(
                f"unable to create book {book.isbn!r}: {exc}"
            ) from exc
        logger.debug("Created book {}", book.isbn)
