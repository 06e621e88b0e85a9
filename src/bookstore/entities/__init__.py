"""Entities module.

Each entity has its own package containing:
- entity.py: Domain model and its JSON wire shape
- table.py: Database persistence model
- repository.py: Data access layer
"""

from .book import Book, BookRepository, BookStore, BookTable

__all__ = [
    "Book",
    "BookRepository",
    "BookStore",
    "BookTable",
]
