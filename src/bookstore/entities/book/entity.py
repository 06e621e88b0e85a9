"""Entity: Book."""

from pydantic import BaseModel, ConfigDict, Field


class Book(BaseModel):
    """A row of the books table.

    Serialized on the wire with the capitalized keys ``ISBN``, ``Title``,
    ``Author`` and ``Price``; the snake_case names are accepted on input too.
    ``Price`` must be a finite JSON number; numeric strings are rejected.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True, allow_inf_nan=False)

    isbn: str = Field(alias="ISBN", description="ISBN, primary key")
    title: str = Field(alias="Title")
    author: str = Field(alias="Author")
    price: float = Field(
        alias="Price", strict=True, description="Price with two decimals"
    )
