"""
Genre cache tests: lazy one-time initialization, concurrency and lookups
"""
import threading
import time

import pytest
from fastapi import HTTPException

from movieapp.services.genre_service import GenreService

from conftest import FakeTMDB, GENRES

GENRE_LIST = "/genre/movie/list"


def test_lookups_initialize_lazily_and_only_once(genre_service, fake_tmdb):
    assert not genre_service.is_initialized
    assert fake_tmdb.calls == []

    assert genre_service.get_genre_name(28) == "Action"
    assert genre_service.get_genre_name(35) == "Comedy"
    assert genre_service.get_genre_id("drama") == 18
    assert len(genre_service.get_all_genres()) == len(GENRES)

    assert genre_service.is_initialized
    assert fake_tmdb.count(GENRE_LIST) == 1


def test_concurrent_first_lookups_fetch_genres_once():
    fetches = []

    def slow_genre_list(params):
        fetches.append(threading.get_ident())
        time.sleep(0.05)
        return {"genres": GENRES}

    service = GenreService(FakeTMDB({GENRE_LIST: slow_genre_list}))
    barrier = threading.Barrier(10)
    results = []

    def lookup():
        barrier.wait()
        results.append(service.get_genre_name(28))

    threads = [threading.Thread(target=lookup) for _ in range(10)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results == ["Action"] * 10
    assert len(fetches) == 1


def test_invalid_genre_entries_are_skipped():
    fake = FakeTMDB({GENRE_LIST: {"genres": [
        {"id": 28, "name": "Action"},
        {"id": 0, "name": "Zero"},
        {"id": 5, "name": ""},
        {"id": 7, "name": None},
        {"id": -3, "name": "Negative"},
    ]}})
    service = GenreService(fake)

    assert service.get_all_genres() == [{"id": 28, "name": "Action"}]
    assert service.get_genre_name(5) is None


def test_missing_genre_list_still_initializes_empty():
    service = GenreService(FakeTMDB({GENRE_LIST: {}}))

    assert service.get_all_genres() == []
    assert service.is_initialized


def test_genre_id_lookup_is_case_insensitive_and_trimmed(genre_service):
    assert genre_service.get_genre_id("  science FICTION ") == 878
    assert genre_service.get_genre_id("ACTION") == 28
    assert genre_service.get_genre_id("Musical") is None


def test_blank_genre_name_does_not_touch_tmdb(genre_service, fake_tmdb):
    assert genre_service.get_genre_id("") is None
    assert genre_service.get_genre_id("   ") is None
    assert genre_service.get_genre_id(None) is None
    assert fake_tmdb.calls == []


def test_failed_initialization_is_retried_on_next_lookup():
    fake = FakeTMDB({GENRE_LIST: HTTPException(status_code=502, detail="TMDB API error: boom")})
    service = GenreService(fake)

    with pytest.raises(HTTPException) as exc_info:
        service.get_genre_name(28)
    assert exc_info.value.status_code == 502
    assert not service.is_initialized

    fake.routes[GENRE_LIST] = {"genres": GENRES}
    assert service.get_genre_name(28) == "Action"
    assert fake.count(GENRE_LIST) == 2


def test_resolve_genre_names_keeps_order_and_drops_unknown(genre_service):
    assert genre_service.resolve_genre_names([35, 99999, 28, 878]) == [
        "Comedy", "Action", "Science Fiction"
    ]


def test_resolve_empty_genre_list_skips_initialization(genre_service, fake_tmdb):
    assert genre_service.resolve_genre_names([]) == []
    assert genre_service.resolve_genre_names(None) == []
    assert fake_tmdb.calls == []
