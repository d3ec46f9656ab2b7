"""
Movie Service - TMDB movie lookups enriched with genre names and cast
"""
from fastapi import HTTPException, status
from typing import Any, Dict, List, Optional
import logging

from movieapp.schemas.movie import CastMember, Movie
from movieapp.services.genre_service import GenreService, genre_service
from movieapp.services.tmdb_client import TMDBClient, tmdb_client

logger = logging.getLogger(__name__)

# Number of billed cast members kept on movie details
TOP_CAST_SIZE = 5


def to_movie(data: Dict[str, Any]) -> Movie:
    """Map a TMDB movie payload onto a Movie; genre names are filled in by the caller"""
    return Movie(
        id=data.get("id") or 0,
        title=data.get("title") or "",
        overview=data.get("overview") or "",
        poster_path=data.get("poster_path") or "",
        backdrop_path=data.get("backdrop_path") or "",
        release_date=data.get("release_date") or "",
        vote_average=data.get("vote_average") or 0.0,
        vote_count=data.get("vote_count") or 0,
        popularity=data.get("popularity") or 0.0,
        genre_ids=data.get("genre_ids") or [],
        original_language=data.get("original_language") or "",
        original_title=data.get("original_title") or "",
        adult=bool(data.get("adult")),
        video=bool(data.get("video")),
    )


def top_cast(credits: Optional[Dict[str, Any]], limit: int = TOP_CAST_SIZE) -> List[CastMember]:
    """First `limit` cast members by billing order"""
    cast = (credits or {}).get("cast") or []
    ordered = sorted(cast, key=lambda c: c.get("order", 0))
    return [
        CastMember(
            id=c.get("id") or 0,
            name=c.get("name") or "",
            character=c.get("character") or "",
            profile_path=c.get("profile_path"),
        )
        for c in ordered[:limit]
    ]


class MovieService:
    """Movie listings, search and details from TMDB"""

    def __init__(self, client: TMDBClient, genres: GenreService):
        self.client = client
        self.genres = genres

    def _to_movies(self, response: Dict[str, Any]) -> List[Movie]:
        results = response.get("results")
        if not results:
            return []

        movies = []
        for data in results:
            movie = to_movie(data)
            movie.genres = self.genres.resolve_genre_names(movie.genre_ids)
            movies.append(movie)
        return movies

    def get_latest_movies(self, page: int = 1) -> List[Movie]:
        """Movies now playing in theaters"""
        logger.info(f"Fetching latest movies from TMDB (page {page})")
        return self._to_movies(self.client.get("/movie/now_playing", {"page": page}))

    def get_top_rated_movies(self, page: int = 1) -> List[Movie]:
        return self._to_movies(self.client.get("/movie/top_rated", {"page": page}))

    def search_movies(
        self,
        query: Optional[str] = None,
        genre: Optional[str] = None,
        page: int = 1
    ) -> List[Movie]:
        """
        Search movies by title and/or genre name.

        - query only: title search
        - query + genre: title search, results filtered to the genre locally
          (TMDB's search endpoint ignores genre filters)
        - genre only: discover by genre; unknown genre names match nothing
        - neither: empty list
        """
        query = (query or "").strip()
        genre = (genre or "").strip()

        if not query and not genre:
            return []

        genre_id = self.genres.get_genre_id(genre) if genre else None

        if query:
            movies = self._to_movies(
                self.client.get("/search/movie", {"query": query, "page": page})
            )
            if genre_id is not None:
                movies = [m for m in movies if genre_id in m.genre_ids]
            return movies

        if genre_id is None:
            logger.info(f"Unknown genre '{genre}', returning no results")
            return []

        return self._to_movies(
            self.client.get("/discover/movie", {"with_genres": genre_id, "page": page})
        )

    def get_movie_details(self, movie_id: int) -> Movie:
        """
        Full movie record with genre names and the top-billed cast.

        Raises:
            HTTPException: 404 if TMDB has no movie with this ID
        """
        try:
            data = self.client.get(f"/movie/{movie_id}", {"append_to_response": "credits"})
        except HTTPException as e:
            if e.status_code == status.HTTP_404_NOT_FOUND:
                raise HTTPException(
                    status_code=status.HTTP_404_NOT_FOUND,
                    detail=f"Movie with ID {movie_id} not found"
                )
            raise

        movie = to_movie(data)

        # Details carry genre objects; fall back to id lookup when they don't
        embedded = [g.get("name") for g in data.get("genres") or [] if g.get("name")]
        if embedded:
            movie.genres = embedded
            movie.genre_ids = movie.genre_ids or [g["id"] for g in data["genres"] if g.get("id")]
        else:
            movie.genres = self.genres.resolve_genre_names(movie.genre_ids)

        movie.cast = top_cast(data.get("credits"))
        if not movie.cast:
            logger.warning(f"No cast data found for movie {movie_id}")

        return movie


# Global movie service instance
movie_service = MovieService(tmdb_client, genre_service)


def get_movie_service() -> MovieService:
    """FastAPI dependency returning the shared movie service"""
    return movie_service
