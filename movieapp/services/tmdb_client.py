import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry
import os
import threading
import time
from typing import Dict, Optional
from fastapi import HTTPException, status
import logging

logger = logging.getLogger(__name__)

TMDB_TIMEOUT = int(os.getenv("TMDB_TIMEOUT", "30"))
TMDB_RETRY_TOTAL = int(os.getenv("TMDB_RETRY_TOTAL", "3"))
TMDB_RETRY_BACKOFF = float(os.getenv("TMDB_RETRY_BACKOFF", "1.0"))

# Statuses worth retrying; 408 and 5xx also count toward opening the circuit
RETRY_STATUSES = (408, 429, 500, 502, 503, 504)


class CircuitBreaker:
    """
    Consecutive-failure circuit breaker.

    After `failure_threshold` failures in a row the circuit opens and every call
    is rejected for `reset_timeout` seconds. After that a single trial call is let
    through: success closes the circuit, failure opens it again.
    """

    def __init__(self, failure_threshold: int = 5, reset_timeout: float = 30.0):
        self.failure_threshold = failure_threshold
        self.reset_timeout = reset_timeout
        self._failures = 0
        self._opened_at: Optional[float] = None
        self._lock = threading.Lock()

    @property
    def is_open(self) -> bool:
        with self._lock:
            return self._opened_at is not None and not self._cooled_down()

    def _cooled_down(self) -> bool:
        return time.monotonic() - self._opened_at >= self.reset_timeout

    def allow_request(self) -> bool:
        with self._lock:
            if self._opened_at is None:
                return True
            if self._cooled_down():
                # Half-open: one trial call, re-armed for a full timeout meanwhile
                self._opened_at = time.monotonic()
                return True
            return False

    def record_success(self) -> None:
        with self._lock:
            self._failures = 0
            self._opened_at = None

    def record_failure(self) -> None:
        with self._lock:
            self._failures += 1
            if self._failures >= self.failure_threshold:
                if self._opened_at is None:
                    logger.warning(
                        f"TMDB circuit opened after {self._failures} consecutive failures"
                    )
                self._opened_at = time.monotonic()


class TMDBClient:
    """
    HTTP client for The Movie Database API.

    Authenticates with a v4 read access token (Bearer header) or, failing that,
    a v3 api_key query parameter. Transient errors are retried by the session
    adapter; repeated failures trip the circuit breaker.
    """
    BASE_URL = "https://api.themoviedb.org/3"

    def __init__(
        self,
        access_token: Optional[str] = None,
        api_key: Optional[str] = None,
        timeout: int = TMDB_TIMEOUT,
        session: Optional[requests.Session] = None,
        breaker: Optional[CircuitBreaker] = None,
    ):
        self.access_token = access_token
        self.api_key = api_key
        self.timeout = timeout
        self.session = session or self._build_session()
        self.breaker = breaker or CircuitBreaker()

    @classmethod
    def from_env(cls) -> "TMDBClient":
        return cls(
            access_token=os.getenv("TMDB_ACCESS_TOKEN"),
            api_key=os.getenv("TMDB_API_KEY"),
        )

    @staticmethod
    def _build_session() -> requests.Session:
        session = requests.Session()
        retries = Retry(
            total=TMDB_RETRY_TOTAL,
            backoff_factor=TMDB_RETRY_BACKOFF,
            status_forcelist=RETRY_STATUSES,
            allowed_methods=("GET",),
            raise_on_status=False,
            respect_retry_after_header=True,
        )
        adapter = HTTPAdapter(max_retries=retries)
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        session.headers.update({"Accept": "application/json"})
        return session

    def _auth(self, params: Dict) -> Dict[str, str]:
        if self.access_token:
            return {"Authorization": f"Bearer {self.access_token}"}
        if self.api_key:
            params["api_key"] = self.api_key
            return {}
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="TMDB API key not configured"
        )

    def get(self, endpoint: str, params: Optional[Dict] = None) -> Dict:
        """
        Make GET request to TMDB API.

        Args:
            endpoint: API endpoint (e.g., "/movie/popular")
            params: Query parameters

        Returns:
            JSON response from TMDB

        Raises:
            HTTPException: 404 for unknown resources, 503 while the circuit is open,
            502 for any other request failure
        """
        params = dict(params or {})
        headers = self._auth(params)

        if not self.breaker.allow_request():
            logger.warning(f"TMDB circuit open, rejecting request for {endpoint}")
            raise HTTPException(
                status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
                detail="TMDB API temporarily unavailable"
            )

        url = f"{self.BASE_URL}{endpoint}"
        try:
            response = self.session.get(url, params=params, headers=headers, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            self.breaker.record_failure()
            logger.error(f"TMDB API error for {endpoint}: {str(e)}")
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"TMDB API error: {str(e)}")

        # Only transient statuses count against TMDB; any other answer closes the circuit
        if response.status_code >= 500 or response.status_code == 408:
            self.breaker.record_failure()
        else:
            self.breaker.record_success()

        if response.status_code == 404:
            logger.info(f"TMDB resource not found: {endpoint}")
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Resource not found on TMDB")

        try:
            response.raise_for_status()
            payload = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"TMDB API error for {endpoint}: {str(e)}")
            raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=f"TMDB API error: {str(e)}")

        logger.debug(f"TMDB API request successful: {endpoint}")
        return payload

    def close(self) -> None:
        self.session.close()


# Global client instance
tmdb_client = TMDBClient.from_env()
