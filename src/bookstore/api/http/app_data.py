from dataclasses import dataclass

from bookstore.core.services import ConnectionChecker, DbSessionService
from bookstore.entities.book import BookStore
from bookstore.runtime.config.settings import Settings


@dataclass
class ApplicationDependencies:
    settings: Settings
    books: BookStore
    health: ConnectionChecker
    database_service: DbSessionService | None = None
