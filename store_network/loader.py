"""Network data refresh: concurrent fetch, then all-or-nothing aggregation."""

from __future__ import annotations

import concurrent.futures
import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from store_network.aggregator import NetworkSnapshot, aggregate
from store_network.boundaries import BoundaryDocument
from store_network.client import NetworkApiClient
from store_network.config import DATA_ERROR_MESSAGE
from store_network.enrichment import build_business_pois
from store_network.exceptions import DataFetchFailure, NetworkDataError
from store_network.models import BusinessPoi

logger = logging.getLogger(__name__)

CORE_DATASETS = ("cities", "areas", "zones")
ENRICHMENT_DATASETS = ("boundaries", "stores_with_businesses")


@dataclass(frozen=True)
class RefreshTicket:
    generation: int


@dataclass
class DataBundle:
    """Raw results of one fetch round.

    ``errors`` maps dataset name to the failure raised while fetching it.
    """
    cities: Optional[List[Any]] = None
    areas: Optional[List[Any]] = None
    zones: Optional[List[Any]] = None
    boundaries: Optional[BoundaryDocument] = None
    stores_with_businesses: Optional[List[Any]] = None
    errors: Dict[str, NetworkDataError] = field(default_factory=dict)

    @property
    def core_errors(self) -> Dict[str, NetworkDataError]:
        return {name: error for name, error in self.errors.items() if name in CORE_DATASETS}

    @property
    def core_complete(self) -> bool:
        return not self.core_errors and all(
            getattr(self, name) is not None for name in CORE_DATASETS
        )


@dataclass
class NetworkState:
    snapshot: Optional[NetworkSnapshot] = None
    boundaries: Optional[BoundaryDocument] = None
    businesses: Tuple[BusinessPoi, ...] = ()
    error: Optional[str] = None
    loading: bool = False
    generation: int = 0


class NetworkLoader:
    """Loads the five datasets and maintains NetworkState.

    Core feeds (cities, areas, zones) are all-or-nothing: if any fails the
    refresh is aborted and ``state.error`` is set. Enrichment feeds degrade
    to absent features. A completion is dropped when the loader has been
    closed or when a newer refresh has started since its ticket was issued.

    Attributes:
        client: NetworkApiClient used for every fetch.
        state: Latest NetworkState.
    """

    def __init__(self, client: NetworkApiClient, max_workers: int = 5):
        self.client = client
        self.max_workers = max_workers
        self.state = NetworkState()
        self._alive = True
        self._lock = threading.Lock()
        self._listeners: List[Callable[[NetworkState], None]] = []

    @property
    def alive(self) -> bool:
        return self._alive

    def on_change(self, listener: Callable[[NetworkState], None]) -> None:
        self._listeners.append(listener)

    def begin_refresh(self) -> RefreshTicket:
        with self._lock:
            self.state.generation += 1
            self.state.loading = True
            return RefreshTicket(self.state.generation)

    def fetch_bundle(self) -> DataBundle:
        """Fetch every dataset concurrently; failures are collected, not raised."""
        fetchers = {
            "cities": self.client.fetch_cities,
            "areas": self.client.fetch_areas,
            "zones": self.client.fetch_zones,
            "boundaries": self.client.fetch_boundaries,
            "stores_with_businesses": self.client.fetch_stores_with_businesses,
        }
        bundle = DataBundle()
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            futures = {executor.submit(fetch): name for name, fetch in fetchers.items()}
            for future in concurrent.futures.as_completed(futures):
                name = futures[future]
                try:
                    setattr(bundle, name, future.result())
                except NetworkDataError as e:
                    bundle.errors[name] = e
        return bundle

    def apply_results(self, ticket: RefreshTicket, bundle: DataBundle) -> bool:
        """Fold a fetched bundle into the state.

        Args:
            ticket: Ticket returned by begin_refresh() for this round.
            bundle: Fetched datasets.

        Returns:
            True if the state was updated, False if the completion was dropped.
        """
        with self._lock:
            if not self._alive:
                logger.debug(f"Loader closed, dropping refresh {ticket.generation}")
                return False
            if ticket.generation != self.state.generation:
                logger.debug(
                    f"Dropping stale refresh {ticket.generation} "
                    f"(latest is {self.state.generation})"
                )
                return False

            state = NetworkState(generation=ticket.generation)

            if bundle.core_complete:
                state.snapshot = aggregate(bundle.cities, bundle.areas, bundle.zones)
            else:
                for name in CORE_DATASETS:
                    if getattr(bundle, name) is None and name not in bundle.errors:
                        bundle.errors[name] = DataFetchFailure(name, "no data")

            if state.snapshot is None:
                details = "; ".join(str(e) for e in bundle.core_errors.values())
                logger.error(f"Network data refresh failed: {details}")
                state.error = DATA_ERROR_MESSAGE
            else:
                state.boundaries = self._boundaries(bundle)
                state.businesses = self._businesses(bundle)

            self.state = state

        for listener in self._listeners:
            listener(state)
        return True

    def _boundaries(self, bundle: DataBundle) -> Optional[BoundaryDocument]:
        if "boundaries" in bundle.errors:
            logger.warning(f"City boundaries unavailable: {bundle.errors['boundaries']}")
            return None
        return bundle.boundaries

    def _businesses(self, bundle: DataBundle) -> Tuple[BusinessPoi, ...]:
        if "stores_with_businesses" in bundle.errors:
            logger.warning(f"Nearby businesses unavailable: {bundle.errors['stores_with_businesses']}")
            return ()
        return tuple(build_business_pois(bundle.stores_with_businesses or []))

    def refresh(self) -> NetworkState:
        ticket = self.begin_refresh()
        bundle = self.fetch_bundle()
        self.apply_results(ticket, bundle)
        return self.state

    def close(self) -> None:
        with self._lock:
            self._alive = False
        self.client.close()
