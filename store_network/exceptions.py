"""Error taxonomy for network data loading."""

from __future__ import annotations


class NetworkDataError(Exception):
    """Base class for dataset loading errors."""

    def __init__(self, dataset: str, message: str):
        self.dataset = dataset
        super().__init__(f"{dataset}: {message}")


class DataFetchFailure(NetworkDataError):
    """One of the core datasets (cities, areas, zones) is unreachable or malformed."""


class EnrichmentFetchFailure(NetworkDataError):
    """Boundary geometry or nearby business data could not be loaded."""
