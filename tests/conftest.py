"""
Shared pytest fixtures.

The environment is set before anything from ``app`` is imported so the
settings object picks up an in-memory SQLite database and a test secret.

Fixtures:
    engine / session   fresh in-memory database with all tables, for service tests
    client             TestClient running the app lifespan (its own fresh database)
    db                 Session on the client's database, for seeding and asserting
    make_user / make_genre / make_book   row factories taking a session
    auth_headers       bearer header for a seeded user
"""
import os
from decimal import Decimal

os.environ["SQLALCHEMY_DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-not-real"
os.environ["ENV"] = "local"
os.environ["LOG_LEVEL"] = "WARNING"

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from app.database import build_engine, create_db_and_tables
from app.main import app
from app.models import Book, Genre, User
from app.utils.hash import hash_password
from app.utils.token import create_access_token


@pytest.fixture
def engine():
    engine = build_engine("sqlite://")
    create_db_and_tables(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client():
    with TestClient(app) as client:
        yield client


@pytest.fixture
def db(client):
    with Session(client.app.state.engine) as session:
        yield session


@pytest.fixture
def make_user():
    def _make_user(session, email="reader@example.com", password="secret123", username=None):
        user = User(
            email=email,
            username=username or email.split("@")[0],
            password=hash_password(password),
        )
        session.add(user)
        session.commit()
        session.refresh(user)
        return user
    return _make_user


@pytest.fixture
def make_genre():
    def _make_genre(session, name="Programming"):
        genre = Genre(name=name)
        session.add(genre)
        session.commit()
        session.refresh(genre)
        return genre
    return _make_genre


@pytest.fixture
def make_book(make_genre):
    def _make_book(session, genre=None, **overrides):
        if genre is None:
            genre = make_genre(session, name=f"Genre for {overrides.get('title', 'book')}")
        fields = {
            "title": "Clean Code",
            "writer": "Robert C. Martin",
            "publisher": "Prentice Hall",
            "publication_year": 2008,
            "price": Decimal("10.00"),
            "stock_quantity": 5,
        }
        fields.update(overrides)
        book = Book(genre_id=genre.id, **fields)
        session.add(book)
        session.commit()
        session.refresh(book)
        return book
    return _make_book


def bearer(user_id: str) -> dict:
    return {"Authorization": f"Bearer {create_access_token({'sub': user_id})}"}


@pytest.fixture
def bearer_for():
    return bearer


@pytest.fixture
def auth_user(db, make_user):
    return make_user(db)


@pytest.fixture
def auth_headers(auth_user):
    return bearer(auth_user.id)
