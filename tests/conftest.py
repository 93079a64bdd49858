import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, text
from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm import Session

from bookshelf.main import app
from bookshelf.api.books import get_book_repository
from bookshelf.db.base import Base
from bookshelf.core.config import settings
from bookshelf.repositories.memory import InMemoryBookRepository


@pytest.fixture()
def memory_repo():
    return InMemoryBookRepository()


@pytest.fixture()
def client(memory_repo):
    """
    TestClient whose book endpoints run against the in-memory repository,
    so no database is needed.
    """
    app.dependency_overrides[get_book_repository] = lambda: memory_repo
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture(scope="session")
def pg_engine():
    engine = create_engine(
        settings.DATABASE_URL,
        pool_pre_ping=True,
        connect_args={"connect_timeout": 3},
    )
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
    except DBAPIError:
        engine.dispose()
        pytest.skip("PostgreSQL is not reachable at DATABASE_URL")

    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture()
def db_session(pg_engine):
    """
    Uses:
      - one outer transaction per test
      - a SAVEPOINT for every session-level transaction

    Repository code can call session.commit() freely; everything is rolled
    back when the test ends.
    """
    connection = pg_engine.connect()
    outer_tx = connection.begin()

    session = Session(
        bind=connection,
        autoflush=False,
        expire_on_commit=False,
        join_transaction_mode="create_savepoint",
    )

    try:
        yield session
    finally:
        session.close()
        outer_tx.rollback()
        connection.close()
