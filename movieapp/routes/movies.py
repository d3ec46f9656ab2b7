from fastapi import APIRouter, Depends, Query
from typing import List, Optional

from movieapp.schemas.movie import Genre, Movie
from movieapp.services.genre_service import GenreService, get_genre_service
from movieapp.services.movie_service import MovieService, get_movie_service

router = APIRouter(prefix="/api/movies", tags=["Movies"])


# ============================================
# Listings
# ============================================

@router.get("/latest", response_model=List[Movie])
def get_latest_movies(
    page: int = Query(1, ge=1, le=500, description="Page number"),
    movies: MovieService = Depends(get_movie_service)
):
    """Get movies now playing in theaters"""
    return movies.get_latest_movies(page)


@router.get("/top-rated", response_model=List[Movie])
def get_top_rated_movies(
    page: int = Query(1, ge=1, le=500, description="Page number"),
    movies: MovieService = Depends(get_movie_service)
):
    """Get top rated movies"""
    return movies.get_top_rated_movies(page)


# ============================================
# Search & Genres
# ============================================

@router.get("/search", response_model=List[Movie])
def search_movies(
    query: Optional[str] = Query(None, max_length=200, description="Movie title search term"),
    genre: Optional[str] = Query(None, max_length=50, description="Genre name (e.g. 'action', 'comedy')"),
    page: int = Query(1, ge=1, le=500, description="Page number"),
    movies: MovieService = Depends(get_movie_service)
):
    """
    Search movies by name and/or genre

    Returns an empty list when neither a query nor a genre is given,
    or when the genre name is unknown.
    """
    return movies.search_movies(query, genre, page)


@router.get("/genres", response_model=List[Genre])
def get_genres(genres: GenreService = Depends(get_genre_service)):
    """
    Get list of all available movie genres

    Used for genre filter dropdowns.
    """
    return genres.get_all_genres()


# ============================================
# Movie Details (MUST be last - dynamic route)
# ============================================

@router.get("/{movie_id}", response_model=Movie)
def get_movie_details(movie_id: int, movies: MovieService = Depends(get_movie_service)):
    """Get movie details with genre names and top-billed cast"""
    return movies.get_movie_details(movie_id)
