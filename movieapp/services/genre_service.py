"""
Genre Service - TMDB genre id <-> name lookups

The genre table is fetched from TMDB once per process, on first use, and kept
in memory for the lifetime of the service. Concurrent first callers are
serialized on a lock so only one of them performs the fetch; a failed fetch
leaves the service uninitialized and the next caller tries again.
"""
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional
import logging
import threading

from movieapp.services.tmdb_client import TMDBClient, tmdb_client

logger = logging.getLogger(__name__)

# Upper bound for the per-movie fan-out; TMDB movies carry a handful of genres
MAX_RESOLVE_WORKERS = 8


class GenreService:
    """Lazily-initialized genre cache backed by TMDB's /genre/movie/list"""

    def __init__(self, client: TMDBClient):
        self.client = client
        self._genre_cache: Dict[int, str] = {}
        self._is_initialized = False
        self._init_lock = threading.Lock()

    @property
    def is_initialized(self) -> bool:
        return self._is_initialized

    def initialize(self) -> None:
        """Fetch and cache the genre table unless another caller already did"""
        if self._is_initialized:
            return

        with self._init_lock:
            if self._is_initialized:
                logger.debug("Genre cache filled by another caller while waiting for lock")
                return

            logger.info("Initializing genre cache from TMDB")
            try:
                result = self.client.get("/genre/movie/list")
            except Exception:
                logger.error("Error initializing genres from TMDB", exc_info=True)
                raise

            genres = result.get("genres") or []
            if not genres:
                logger.warning("No genres found in TMDB response")

            for genre in genres:
                genre_id = genre.get("id")
                name = genre.get("name")
                if isinstance(genre_id, int) and genre_id > 0 and name:
                    self._genre_cache[genre_id] = name
                else:
                    logger.warning(f"Skipping invalid genre: id={genre_id!r}, name={name!r}")

            self._is_initialized = True
            logger.info(f"Genre cache initialized with {len(self._genre_cache)} entries")

    def get_genre_name(self, genre_id: int) -> Optional[str]:
        self.initialize()
        return self._genre_cache.get(genre_id)

    def get_genre_id(self, genre_name: Optional[str]) -> Optional[int]:
        """Case-insensitive lookup; blank names resolve to None without a fetch"""
        if not genre_name or not genre_name.strip():
            return None

        self.initialize()
        normalized = genre_name.strip().lower()
        for genre_id, name in self._genre_cache.items():
            if name.lower() == normalized:
                return genre_id
        return None

    def get_all_genres(self) -> List[Dict]:
        self.initialize()
        return [{"id": genre_id, "name": name} for genre_id, name in self._genre_cache.items()]

    def resolve_genre_names(self, genre_ids: Optional[List[int]]) -> List[str]:
        """
        Map genre ids to names in parallel.

        Keeps the order of `genre_ids` and drops ids that have no known name.
        """
        if not genre_ids:
            return []

        workers = min(MAX_RESOLVE_WORKERS, len(genre_ids))
        with ThreadPoolExecutor(max_workers=workers) as executor:
            names = list(executor.map(self.get_genre_name, genre_ids))

        return [name for name in names if name]


# Global genre service instance
genre_service = GenreService(tmdb_client)


def get_genre_service() -> GenreService:
    """FastAPI dependency returning the shared genre service"""
    return genre_service
