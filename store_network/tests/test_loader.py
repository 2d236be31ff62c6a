"""Tests for the refresh loader."""

import logging

import pytest

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from store_network.config import DATA_ERROR_MESSAGE
from store_network.loader import DataBundle, NetworkLoader
from store_network.tests.samples import FakeClient


class TestRefresh:
    """Tests for full refresh cycles."""

    def test_successful_refresh(self):
        """Test every dataset lands in the state."""
        loader = NetworkLoader(FakeClient())

        state = loader.refresh()

        assert state.error is None
        assert not state.loading
        assert state.generation == 1
        assert len(state.snapshot.catalog) == 3
        assert state.boundaries.name_key == "NAME_2"
        assert len(state.businesses) == 3

    @pytest.mark.parametrize("dataset", ["cities", "areas", "zones"])
    def test_core_failure_aborts_refresh(self, dataset, caplog):
        """Test any core failure discards the whole refresh."""
        loader = NetworkLoader(FakeClient())
        loader.refresh()
        loader.client = FakeClient(failing=[dataset])

        with caplog.at_level(logging.ERROR):
            state = loader.refresh()

        assert state.snapshot is None
        assert state.boundaries is None
        assert state.businesses == ()
        assert state.error == DATA_ERROR_MESSAGE
        assert any(dataset in record.getMessage() for record in caplog.records)

    def test_boundary_failure_degrades(self, caplog):
        """Test a boundary failure leaves the rest of the state intact."""
        loader = NetworkLoader(FakeClient(failing=["boundaries"]))

        with caplog.at_level(logging.WARNING):
            state = loader.refresh()

        assert state.error is None
        assert state.snapshot is not None
        assert state.boundaries is None
        assert len(state.businesses) == 3
        assert "boundaries unavailable" in caplog.text

    def test_business_failure_degrades(self):
        """Test a business feed failure leaves no POIs."""
        loader = NetworkLoader(FakeClient(failing=["stores_with_businesses"]))

        state = loader.refresh()

        assert state.snapshot is not None
        assert state.businesses == ()

    def test_listeners_notified(self):
        """Test change listeners receive the new state."""
        loader = NetworkLoader(FakeClient())
        seen = []
        loader.on_change(seen.append)

        loader.refresh()

        assert len(seen) == 1
        assert seen[0].generation == 1


class TestCompletionOrdering:
    """Tests for stale and post-close completions."""

    def test_stale_generation_dropped(self):
        """Test a completion older than the latest refresh is ignored."""
        loader = NetworkLoader(FakeClient())
        old_ticket = loader.begin_refresh()
        new_ticket = loader.begin_refresh()
        bundle = loader.fetch_bundle()

        assert not loader.apply_results(old_ticket, bundle)
        assert loader.state.snapshot is None
        assert loader.state.loading

        assert loader.apply_results(new_ticket, bundle)
        assert loader.state.snapshot is not None
        assert loader.state.generation == new_ticket.generation

    def test_closed_loader_drops_completion(self):
        """Test completions after close never mutate the state."""
        client = FakeClient()
        loader = NetworkLoader(client)
        ticket = loader.begin_refresh()
        bundle = loader.fetch_bundle()

        loader.close()

        assert not loader.apply_results(ticket, bundle)
        assert loader.state.snapshot is None
        assert client.closed

    def test_missing_core_dataset_is_failure(self):
        """Test a bundle without a core dataset counts as a failed refresh."""
        loader = NetworkLoader(FakeClient())
        ticket = loader.begin_refresh()

        loader.apply_results(ticket, DataBundle(cities=[], areas=[]))

        assert loader.state.error == DATA_ERROR_MESSAGE
