"""HTTP client for the network API and the static boundary document.

Handles retries, JSON decoding and record validation. Errors from the three
core feeds are raised as DataFetchFailure; errors from the boundary document
and the stores-with-businesses feed as EnrichmentFetchFailure.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Dict, List, Optional, Type

import requests
from pydantic import TypeAdapter, ValidationError
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from store_network.boundaries import BoundaryDocument
from store_network.config import get_settings
from store_network.exceptions import DataFetchFailure, EnrichmentFetchFailure, NetworkDataError
from store_network.records import AreaRecord, CityRecord, StoreWithBusinessesRecord, ZoneRecord

logger = logging.getLogger(__name__)

CITIES_ENDPOINT = "/cities"
AREAS_ENDPOINT = "/areas/filters"
ZONES_ENDPOINT = "/zones"
STORES_WITH_BUSINESSES_ENDPOINT = "/combined/stores-with-businesses"


class NetworkApiClient:
    """Client for the network API.

    Attributes:
        base_url: API base URL, e.g. ``http://localhost:4000/api``.
        boundaries_url: URL of the city boundary GeoJSON document.
        timeout: Per-request timeout in seconds.
        session: Requests session with retry logic.
        request_count: Total number of requests made.
        error_count: Total number of failed requests.

    Counters are updated under a lock; the loader fetches from worker threads.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        boundaries_url: Optional[str] = None,
        timeout: Optional[float] = None,
    ):
        """Initialize the client.

        Args:
            base_url: API base URL. Defaults to the configured one.
            boundaries_url: Boundary GeoJSON URL. Defaults to the configured one.
            timeout: Per-request timeout in seconds.
        """
        settings = get_settings()
        self.base_url = (base_url or settings.api_base_url).rstrip("/")
        self.boundaries_url = boundaries_url or settings.boundaries_url
        self.timeout = timeout if timeout is not None else settings.request_timeout
        self.session = self._create_session()
        self.request_count = 0
        self.error_count = 0
        self._stats_lock = threading.Lock()

    def _create_session(self) -> requests.Session:
        """Create a requests session with retry logic.

        Returns:
            Configured requests.Session.
        """
        session = requests.Session()

        retry_strategy = Retry(
            total=3,
            backoff_factor=1,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"],
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("https://", adapter)
        session.mount("http://", adapter)
        session.headers.update({"Accept": "application/json"})

        return session

    def _count_request(self) -> None:
        with self._stats_lock:
            self.request_count += 1

    def _count_error(self) -> None:
        with self._stats_lock:
            self.error_count += 1

    def _get_json(self, url: str, dataset: str, error_cls: Type[NetworkDataError]) -> Any:
        """GET ``url`` and decode the JSON body.

        Raises:
            DataFetchFailure or EnrichmentFetchFailure (``error_cls``) on
            network, HTTP status or decoding errors.
        """
        self._count_request()
        try:
            response = self.session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.RequestException as e:
            self._count_error()
            logger.error(f"Request failed: {url}, error: {e}")
            raise error_cls(dataset, str(e)) from e
        except ValueError as e:
            self._count_error()
            logger.error(f"Invalid JSON from {url}: {e}")
            raise error_cls(dataset, f"invalid JSON: {e}") from e

    def _get_records(self, endpoint: str, model: Type[Any], error_cls: Type[NetworkDataError]) -> List[Any]:
        dataset = endpoint.lstrip("/")
        payload = self._get_json(f"{self.base_url}{endpoint}", dataset, error_cls)
        if not isinstance(payload, list):
            self._count_error()
            raise error_cls(dataset, f"expected a list, got {type(payload).__name__}")
        try:
            return TypeAdapter(List[model]).validate_python(payload)
        except ValidationError as e:
            self._count_error()
            logger.error(f"Malformed {dataset} feed: {e.error_count()} validation errors")
            raise error_cls(dataset, f"malformed records: {e.error_count()} errors") from e

    def fetch_cities(self) -> List[CityRecord]:
        return self._get_records(CITIES_ENDPOINT, CityRecord, DataFetchFailure)

    def fetch_areas(self) -> List[AreaRecord]:
        return self._get_records(AREAS_ENDPOINT, AreaRecord, DataFetchFailure)

    def fetch_zones(self) -> List[ZoneRecord]:
        return self._get_records(ZONES_ENDPOINT, ZoneRecord, DataFetchFailure)

    def fetch_stores_with_businesses(self) -> List[StoreWithBusinessesRecord]:
        return self._get_records(
            STORES_WITH_BUSINESSES_ENDPOINT, StoreWithBusinessesRecord, EnrichmentFetchFailure
        )

    def fetch_boundaries(self) -> BoundaryDocument:
        """Fetch the city boundary FeatureCollection.

        Raises:
            EnrichmentFetchFailure: If the document is unreachable or not a
                FeatureCollection.
        """
        data = self._get_json(self.boundaries_url, "boundaries", EnrichmentFetchFailure)
        if not isinstance(data, dict) or not isinstance(data.get("features"), list):
            self._count_error()
            raise EnrichmentFetchFailure("boundaries", "not a GeoJSON FeatureCollection")
        return BoundaryDocument(data)

    def get_stats(self) -> Dict[str, int]:
        """Get client statistics.

        Returns:
            Dictionary with request and error counts.
        """
        with self._stats_lock:
            return {
                "request_count": self.request_count,
                "error_count": self.error_count,
            }

    def close(self) -> None:
        self.session.close()
