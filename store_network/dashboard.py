"""Dashboard facade: the command surface used by the UI chrome."""

from __future__ import annotations

import logging
from typing import Callable, Optional, Tuple

from store_network.aggregator import Item
from store_network.catalog import StoreCatalog
from store_network.client import NetworkApiClient
from store_network.config import BOUNDARY_SOURCE, HOME_ZOOM, STORE_SOURCE, DashboardSettings, get_settings
from store_network.loader import NetworkLoader, NetworkState
from store_network.map_filters import MapFilterEngine, RenderPlan
from store_network.selection import BrowseMode, SelectableItem, Selection, SelectionModel
from store_network.summary import SelectionSummary, summarize_selection
from store_network.viewport import RenderSurface, ViewportController

logger = logging.getLogger(__name__)


class Dashboard:
    """Wires the loader, selection model, filter engine and viewport together.

    ``render()`` is the only path that touches the render surface: every
    command updates state and then computes and applies a fresh plan.

    Attributes:
        loader: NetworkLoader holding the latest NetworkState.
        selection: SelectionModel.
        engine: MapFilterEngine.
        controller: ViewportController, once a surface is attached.
        zoom: Current map zoom level.
        last_plan: Most recently computed RenderPlan.
    """

    def __init__(
        self,
        client: Optional[NetworkApiClient] = None,
        surface: Optional[RenderSurface] = None,
        settings: Optional[DashboardSettings] = None,
    ):
        self.settings = settings or get_settings()
        self.loader = NetworkLoader(client or NetworkApiClient())
        self.selection = SelectionModel()
        self.engine = MapFilterEngine(settings=self.settings)
        self.controller: Optional[ViewportController] = None
        self.zoom = HOME_ZOOM
        self.last_plan: Optional[RenderPlan] = None
        if surface is not None:
            self.attach(surface)

    @property
    def state(self) -> NetworkState:
        return self.loader.state

    @property
    def catalog(self) -> Optional[StoreCatalog]:
        snapshot = self.state.snapshot
        return snapshot.catalog if snapshot is not None else None

    def attach(self, surface: RenderSurface) -> None:
        self.controller = ViewportController(surface)
        self._push_sources()
        self.render()

    def on_city_chosen(self, listener: Callable[[str], None]) -> None:
        self.selection.on_city_chosen(listener)

    def refresh(self) -> NetworkState:
        """Reload every dataset and re-render."""
        state = self.loader.refresh()
        self.engine.set_boundaries(state.boundaries)
        if state.error:
            logger.error(state.error)
        self._push_sources()
        self.render()
        return state

    def _push_sources(self) -> None:
        if self.controller is None:
            return
        if self.catalog is not None:
            self.controller.set_source(STORE_SOURCE, self.catalog.to_feature_collection())
        if self.state.boundaries is not None:
            self.controller.set_source(BOUNDARY_SOURCE, self.state.boundaries.data)

    def set_mode(self, mode: BrowseMode) -> RenderPlan:
        self.selection.set_mode(mode)
        return self.render()

    def select(self, item: SelectableItem, mode: Optional[BrowseMode] = None) -> RenderPlan:
        """Select an entity, or a name resolved against the current snapshot."""
        mode = BrowseMode(mode) if mode is not None else self.selection.mode
        if isinstance(item, str):
            item = self._resolve(mode, item) or item
        self.selection.select(mode, item)
        return self.render()

    def select_boundary(self, name: str) -> RenderPlan:
        """Map click on a city polygon."""
        return self.select(name, BrowseMode.CITY)

    def _resolve(self, mode: BrowseMode, name: str) -> Optional[Item]:
        snapshot = self.state.snapshot
        if snapshot is None:
            return None
        if mode is BrowseMode.CITY:
            return snapshot.find_city(name)
        if mode is BrowseMode.AREA:
            return snapshot.find_area(name)
        return snapshot.find_zone(name)

    def back(self) -> RenderPlan:
        self.selection.back()
        return self.render()

    def clear(self) -> RenderPlan:
        self.selection.clear()
        return self.render()

    def set_category(self, category: str) -> RenderPlan:
        self.engine.set_category(category)
        return self.render()

    def set_zoom(self, zoom: float) -> RenderPlan:
        self.zoom = zoom
        return self.render()

    @property
    def current_selection(self) -> Selection:
        return self.selection.selection

    def items(self, mode: Optional[BrowseMode] = None) -> Tuple[Item, ...]:
        snapshot = self.state.snapshot
        if snapshot is None:
            return ()
        return snapshot.items_for(mode if mode is not None else self.selection.mode)

    def summary(self) -> Optional[SelectionSummary]:
        snapshot = self.state.snapshot
        if snapshot is None:
            return None
        return summarize_selection(self.current_selection, snapshot)

    def render(self) -> RenderPlan:
        plan = self.engine.compute_render_plan(
            self.current_selection,
            self.catalog,
            self.state.businesses,
            self.zoom,
        )
        self.last_plan = plan
        if self.controller is not None:
            self.controller.apply(plan)
        return plan

    def close(self) -> None:
        self.loader.close()
