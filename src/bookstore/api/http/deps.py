"""FastAPI dependency implementations."""

from fastapi import Request

from bookstore.api.http.app_data import ApplicationDependencies
from bookstore.core.services import ConnectionChecker
from bookstore.entities.book import BookStore


def get_app_dependencies(request: Request) -> ApplicationDependencies:
    return request.app.state.app_dependencies


def get_book_store(request: Request) -> BookStore:
    """Get the book store instance."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.books


def get_health_checker(request: Request) -> ConnectionChecker:
    """Get the connection checker used by the probes."""
    app_deps: ApplicationDependencies = request.app.state.app_dependencies
    return app_deps.health
