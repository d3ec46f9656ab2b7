"""
Movie schemas returned by the movie endpoints.
TMDB payloads are mapped onto these by MovieService.
"""
from pydantic import Field
from typing import List, Optional

from movieapp.schemas.base import CamelModel


class Genre(CamelModel):
    id: int
    name: str


class CastMember(CamelModel):
    id: int
    name: str = ""
    character: str = ""
    profile_path: Optional[str] = None


class Movie(CamelModel):
    """Movie record with resolved genre names and (for details) a trimmed cast"""
    id: int
    title: str = ""
    overview: str = ""
    poster_path: str = ""
    backdrop_path: str = ""
    release_date: str = ""
    vote_average: float = 0.0
    vote_count: int = 0
    popularity: float = 0.0
    genre_ids: List[int] = Field(default_factory=list)
    genres: List[str] = Field(default_factory=list)
    original_language: str = ""
    original_title: str = ""
    adult: bool = False
    video: bool = False
    cast: List[CastMember] = Field(default_factory=list)
