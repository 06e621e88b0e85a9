"""Book database table model."""

from sqlalchemy import CHAR, Column, Numeric, String
from sqlmodel import Field, SQLModel


class BookTable(SQLModel, table=True):
    """Persistence model for the pre-existing ``books`` table.

    Only ``isbn`` is NOT NULL; the other columns may hold NULLs written by
    other clients.
    """

    __tablename__ = "books"

    isbn: str = Field(sa_column=Column(CHAR(14), primary_key=True))
    title: str | None = Field(default=None, sa_column=Column(String(255)))
    author: str | None = Field(default=None, sa_column=Column(String(255)))
    price: float | None = Field(
        default=None, sa_column=Column(Numeric(5, 2, asdecimal=False))
    )
