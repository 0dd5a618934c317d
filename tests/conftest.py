# tests/conftest.py
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from bookreviews.db.session import Base, get_db
# Import all models to ensure they are registered with Base
from bookreviews.models import book, review  # noqa: F401
from bookreviews.api.main import create_app
from bookreviews.crud import create_book
from bookreviews.validation import validate_book

# --- Test Database Setup ---
# Use an in-memory SQLite database for testing. StaticPool keeps a single
# connection so every session (and the API's worker threads) see the same data.
TEST_DATABASE_URL = "sqlite:///:memory:"

# A fresh database per test: the repositories commit, so rolling back an
# outer transaction would not isolate tests.
@pytest.fixture(scope="function")
def db_engine():
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    # Create all tables defined in your models
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()

@pytest.fixture(scope="function")
def db_session_factory(db_engine):
    """Returns a SQLAlchemy session factory."""
    return sessionmaker(autocommit=False, autoflush=False, bind=db_engine)

@pytest.fixture(scope="function")
def db_session(db_session_factory):
    session = db_session_factory()
    try:
        yield session # Test function runs here
    finally:
        session.close()

@pytest.fixture
def client(db_session_factory):
    """TestClient whose requests use the test database (lifespan is not run)."""
    app = create_app()

    def override_get_db():
        db = db_session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)

# --- Data helpers ---

@pytest.fixture
def book_payload():
    return {
        "title": "The Left Hand of Darkness",
        "author": "Ursula K. Le Guin",
        "isbn": "978-3-16-148410-0",
        "publicationYear": 2020,
        "genre": "Fiction",
    }

@pytest.fixture
def make_book(db_session):
    """Creates books through the repository; ISBNs default to unique ISBN-13 values."""
    counter = {"n": 0}

    def _make_book(**overrides):
        counter["n"] += 1
        data = {
            "title": f"Test Book {counter['n']}",
            "author": "Test Author",
            "isbn": f"978{counter['n']:010d}",
            "publicationYear": 2001,
            "genre": "Science Fiction",
        }
        data.update(overrides)
        return create_book(db_session, validate_book(data))

    return _make_book
