from __future__ import annotations

from collections.abc import Callable, Generator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import Engine, StaticPool
from sqlmodel import SQLModel, create_engine

from bookstore.api.http.app import create_app
from bookstore.api.http.app_data import ApplicationDependencies
from bookstore.core.services import (
    ConnectionChecker,
    DatabaseHealthService,
    DbSessionService,
)
from bookstore.entities.book import Book, BookRepository, BookStore
from bookstore.runtime.config import ConfigStore, Settings

from .dummies import InMemoryBookStore, StubConnectionChecker


@pytest.fixture
def settings() -> Settings:
    return Settings.from_store(
        ConfigStore(
            {
                "ENVIRONMENT": "test",
                "VAULT_ENABLED": "false",
                "DATABASE_URL": "sqlite://",
            }
        )
    )


@pytest.fixture
def engine() -> Generator[Engine]:
    """Fresh in-memory database with the books table for each test."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    from bookstore.entities.book import BookTable  # noqa: F401

    SQLModel.metadata.create_all(engine)
    try:
        yield engine
    finally:
        engine.dispose()


@pytest.fixture
def database_service(settings: Settings, engine: Engine) -> DbSessionService:
    return DbSessionService(settings, engine=engine)


@pytest.fixture
def book_repository(database_service: DbSessionService) -> BookRepository:
    return BookRepository(database_service)


@pytest.fixture
def sample_books() -> list[Book]:
    return [
        Book(isbn="978-1503261969", title="Emma", author="Jayne Austen", price=9.44),
        Book(
            isbn="978-1505255607",
            title="The Time Machine",
            author="H. G. Wells",
            price=5.99,
        ),
    ]


@pytest.fixture
def in_memory_store(sample_books: list[Book]) -> InMemoryBookStore:
    return InMemoryBookStore(sample_books)


@pytest.fixture
def health_checker() -> StubConnectionChecker:
    return StubConnectionChecker()


@pytest.fixture
def app_factory(settings: Settings) -> Callable[..., FastAPI]:
    def _make_app(books: BookStore, health: ConnectionChecker) -> FastAPI:
        return create_app(
            ApplicationDependencies(settings=settings, books=books, health=health)
        )

    return _make_app


@pytest.fixture
def client(
    app_factory: Callable[..., FastAPI],
    in_memory_store: InMemoryBookStore,
    health_checker: StubConnectionChecker,
) -> TestClient:
    """Client over in-memory fakes; no database involved."""
    return TestClient(app_factory(in_memory_store, health_checker))


@pytest.fixture
def db_client(
    settings: Settings, database_service: DbSessionService
) -> Generator[TestClient]:
    """Client over the real repository and health check on SQLite."""
    deps = ApplicationDependencies(
        settings=settings,
        books=BookRepository(database_service),
        health=DatabaseHealthService(database_service.engine),
    )
    with TestClient(create_app(deps)) as client:
        yield client
