import copy
import os

# Must be set before the app (and its engine) is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("AUTO_CREATE_TABLES", "false")

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from movieapp.database import Base, get_db
from movieapp.main import app
from movieapp.models.user import User
from movieapp.services.genre_service import GenreService, get_genre_service
from movieapp.services.movie_service import MovieService, get_movie_service
from movieapp.utils.security import create_access_token, hash_password

SQLALCHEMY_DATABASE_URL = "sqlite://"

engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


GENRES = [
    {"id": 28, "name": "Action"},
    {"id": 12, "name": "Adventure"},
    {"id": 35, "name": "Comedy"},
    {"id": 18, "name": "Drama"},
    {"id": 878, "name": "Science Fiction"},
    {"id": 53, "name": "Thriller"},
]


def movie_payload(movie_id, title, genre_ids, **extra):
    data = {
        "id": movie_id,
        "title": title,
        "overview": f"Overview of {title}",
        "poster_path": f"/poster{movie_id}.jpg",
        "backdrop_path": f"/backdrop{movie_id}.jpg",
        "release_date": "1999-10-15",
        "vote_average": 8.4,
        "vote_count": 26000,
        "popularity": 61.4,
        "genre_ids": genre_ids,
        "original_language": "en",
        "original_title": title,
        "adult": False,
        "video": False,
    }
    data.update(extra)
    return data


FIGHT_CLUB_DETAILS = {
    **{k: v for k, v in movie_payload(550, "Fight Club", []).items() if k != "genre_ids"},
    "genres": [{"id": 18, "name": "Drama"}, {"id": 53, "name": "Thriller"}],
    "credits": {
        "cast": [
            {"id": 6, "name": "Zach Grenier", "character": "Richard Chesler", "order": 6, "profile_path": None},
            {"id": 1, "name": "Edward Norton", "character": "Narrator", "order": 0, "profile_path": "/en.jpg"},
            {"id": 3, "name": "Helena Bonham Carter", "character": "Marla Singer", "order": 2, "profile_path": "/hbc.jpg"},
            {"id": 2, "name": "Brad Pitt", "character": "Tyler Durden", "order": 1, "profile_path": "/bp.jpg"},
            {"id": 5, "name": "Jared Leto", "character": "Angel Face", "order": 4, "profile_path": "/jl.jpg"},
            {"id": 4, "name": "Meat Loaf", "character": "Robert Paulson", "order": 3, "profile_path": "/ml.jpg"},
        ]
    },
}


def default_routes():
    return {
        "/genre/movie/list": {"genres": GENRES},
        "/movie/now_playing": {
            "dates": {"maximum": "2024-06-01", "minimum": "2024-04-20"},
            "page": 1,
            "results": [
                movie_payload(1, "Space Heist", [28, 878]),
                movie_payload(2, "Quiet Drama", [18, 99999]),
            ],
            "total_pages": 1,
            "total_results": 2,
        },
        "/movie/top_rated": {
            "page": 1,
            "results": [movie_payload(238, "The Godfather", [18, 80])],
            "total_pages": 1,
            "total_results": 1,
        },
        "/search/movie": {
            "page": 1,
            "results": [
                movie_payload(10, "Star Wars", [12, 28, 878]),
                movie_payload(11, "Star Comedy", [35]),
            ],
        },
        "/discover/movie": {
            "page": 1,
            "results": [movie_payload(20, "Explosions", [28])],
        },
        "/movie/550": FIGHT_CLUB_DETAILS,
    }


class FakeTMDB:
    """Stands in for TMDBClient: serves canned payloads per endpoint and records calls"""

    def __init__(self, routes=None):
        self.routes = default_routes() if routes is None else dict(routes)
        self.calls = []

    def get(self, endpoint, params=None):
        self.calls.append((endpoint, dict(params or {})))
        if endpoint not in self.routes:
            raise HTTPException(status_code=404, detail="Resource not found on TMDB")
        value = self.routes[endpoint]
        if isinstance(value, Exception):
            raise value
        if callable(value):
            return value(params or {})
        return copy.deepcopy(value)

    def count(self, endpoint):
        return sum(1 for called, _ in self.calls if called == endpoint)


@pytest.fixture
def fake_tmdb():
    return FakeTMDB()


@pytest.fixture
def genre_service(fake_tmdb):
    return GenreService(fake_tmdb)


@pytest.fixture
def movie_service(fake_tmdb, genre_service):
    return MovieService(fake_tmdb, genre_service)


@pytest.fixture
def db_session():
    """Provide a clean database session for each test."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db_session, genre_service, movie_service):
    """FastAPI test client with the database and TMDB-backed services overridden."""

    def override_get_db():
        test_db = TestingSessionLocal()
        try:
            yield test_db
        finally:
            test_db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_genre_service] = lambda: genre_service
    app.dependency_overrides[get_movie_service] = lambda: movie_service

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


def create_user(session, email="user@example.com", password="Password123!", user_name="Test User", is_active=True):
    user = User(
        email=email,
        user_name=user_name,
        password_hash=hash_password(password),
        is_active=is_active,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def auth_headers_for(user):
    token = create_access_token(data={"sub": str(user.id), "email": user.email, "name": user.user_name})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def test_user(db_session):
    return create_user(db_session)


@pytest.fixture
def auth_headers(test_user):
    return auth_headers_for(test_user)


@pytest.fixture
def make_user(db_session):
    def _make(**kwargs):
        return create_user(db_session, **kwargs)
    return _make


@pytest.fixture
def headers_for():
    return auth_headers_for
