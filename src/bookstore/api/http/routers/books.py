"""Book API router."""

from fastapi import APIRouter, Depends

from bookstore.api.http.deps import get_book_store
from bookstore.entities.book import Book, BookStore

router = APIRouter(prefix="/books", tags=["books"])


@router.get("", response_model=list[Book])
def list_books(books: BookStore = Depends(get_book_store)) -> list[Book]:
    """List all books."""
    return books.list_all()


@router.post("", response_model=Book)
def create_book(book: Book, books: BookStore = Depends(get_book_store)) -> Book:
    """Create a book and echo it back."""
    books.create(book)
    return book


@router.get("/{isbn}", response_model=Book)
def get_book(isbn: str, books: BookStore = Depends(get_book_store)) -> Book:
    """Get a book by ISBN. An unknown ISBN is reported as a server error."""
    return books.get_by_isbn(isbn)
