"""Selection-driven render plan computation.

Turns the current selection, store catalog, business POIs and zoom level into
a RenderPlan: MapLibre-style filter and paint expressions, layer visibility,
the filtered business features and a viewport target. Nothing here touches
the map; ViewportController applies the plan.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Tuple

from store_network.boundaries import BoundaryDocument, Bounds
from store_network.catalog import StoreCatalog
from store_network.config import (
    ALL_CATEGORIES,
    BOUNDARY_BASE_COLOR,
    BOUNDARY_BASE_OPACITY,
    BOUNDARY_DIMMED_OPACITY,
    BOUNDARY_FILL_LAYER,
    BOUNDARY_HIGHLIGHT_COLOR,
    BOUNDARY_HIGHLIGHT_LAYER,
    BOUNDARY_SELECTED_OPACITY,
    BUSINESS_LABEL_LAYER,
    CAMERA_DURATION_MS,
    CLUSTER_COUNT_LAYER,
    CLUSTER_LAYER,
    FIT_PADDING_PX,
    HOME_CENTER,
    HOME_ZOOM,
    PREFERRED_CATEGORY,
    STORE_COLOR,
    STORE_DIMMED_OPACITY,
    STORE_HIGHLIGHT_COLOR,
    STORE_HIGHLIGHT_LAYER,
    STORE_LABEL_LAYER,
    STORE_OPACITY,
    STORE_POINT_LAYER,
    DashboardSettings,
    get_settings,
)
from store_network.enrichment import categories_of, poi_feature
from store_network.models import BusinessPoi
from store_network.normalize import normalize_category
from store_network.selection import NO_SELECTION, Selection, SelectionTargets, targets_for

logger = logging.getLogger(__name__)

Expression = Any

MATCH_NOTHING: Expression = ["==", 1, 0]
UNCLUSTERED: Expression = ["!", ["has", "point_count"]]


def default_category(categories: Sequence[str]) -> str:
    """Prefer supermarkets, else the first category alphabetically, else all."""
    if PREFERRED_CATEGORY in categories:
        return PREFERRED_CATEGORY
    if categories:
        return sorted(categories)[0]
    return ALL_CATEGORIES


class CategoryState(str, Enum):
    AUTOMATIC = "automatic"
    USER_OVERRIDDEN = "user_overridden"


class CategoryFilter:
    """Business category state machine.

    Automatic: the default is re-derived whenever the relevant category set
    changes. UserOverridden: the chosen category sticks while it is still
    offered. When it is no longer offered the filter resets to ``"all"`` and
    returns to Automatic.
    """

    def __init__(self) -> None:
        self.state = CategoryState.AUTOMATIC
        self.current = ALL_CATEGORIES
        self._last_categories: Optional[Tuple[str, ...]] = None

    def choose(self, category: str) -> None:
        category = normalize_category(category) if category else ALL_CATEGORIES
        self.current = category
        self.state = CategoryState.USER_OVERRIDDEN

    def reset(self) -> None:
        self.state = CategoryState.AUTOMATIC
        self.current = ALL_CATEGORIES
        self._last_categories = None

    def resolve(self, categories: Sequence[str]) -> str:
        offered = tuple(categories)
        if self.state is CategoryState.USER_OVERRIDDEN:
            if self.current != ALL_CATEGORIES and self.current not in offered:
                logger.info(f"Category '{self.current}' no longer available, showing all")
                self.current = ALL_CATEGORIES
                self.state = CategoryState.AUTOMATIC
        elif offered != self._last_categories:
            self.current = default_category(offered)
        self._last_categories = offered
        return self.current


class ViewportAction(str, Enum):
    NONE = "none"
    FIT_BOUNDS = "fit_bounds"
    EASE_HOME = "ease_home"


@dataclass(frozen=True)
class ViewportTarget:
    action: ViewportAction = ViewportAction.NONE
    bounds: Optional[Bounds] = None
    center: Optional[Tuple[float, float]] = None
    zoom: Optional[float] = None
    padding: int = FIT_PADDING_PX
    duration: int = CAMERA_DURATION_MS


UNCHANGED_VIEWPORT = ViewportTarget()
HOME_VIEWPORT = ViewportTarget(action=ViewportAction.EASE_HOME, center=HOME_CENTER, zoom=HOME_ZOOM)


@dataclass(frozen=True)
class RenderPlan:
    """Everything the map needs to reflect one selection at one zoom level."""
    selection: Selection = NO_SELECTION
    boundary_fill_color: Expression = BOUNDARY_BASE_COLOR
    boundary_fill_opacity: Expression = BOUNDARY_BASE_OPACITY
    boundary_highlight_filter: Expression = field(default_factory=lambda: list(MATCH_NOTHING))
    highlighted_boundaries: Tuple[str, ...] = ()
    store_base_filter: Expression = field(default_factory=lambda: list(UNCLUSTERED))
    store_highlight_filter: Expression = field(default_factory=lambda: list(MATCH_NOTHING))
    store_base_paint: Dict[str, Any] = field(default_factory=dict)
    store_highlight_paint: Dict[str, Any] = field(default_factory=dict)
    highlighted_stores: Tuple[str, ...] = ()
    cluster_visible: bool = True
    labels_visible: bool = False
    business_category: str = ALL_CATEGORIES
    business_categories: Tuple[str, ...] = ()
    category_restricted: bool = False
    business_features: Tuple[Dict[str, Any], ...] = ()
    viewport: ViewportTarget = UNCHANGED_VIEWPORT

    @property
    def selection_active(self) -> bool:
        return self.selection.active

    def layer_filters(self) -> Dict[str, Expression]:
        return {
            BOUNDARY_HIGHLIGHT_LAYER: self.boundary_highlight_filter,
            STORE_POINT_LAYER: self.store_base_filter,
            STORE_HIGHLIGHT_LAYER: self.store_highlight_filter,
            STORE_LABEL_LAYER: self.store_base_filter if not self.selection_active else self.store_highlight_filter,
        }

    def layer_paint(self) -> Dict[str, Dict[str, Any]]:
        return {
            BOUNDARY_FILL_LAYER: {
                "fill-color": self.boundary_fill_color,
                "fill-opacity": self.boundary_fill_opacity,
            },
            STORE_POINT_LAYER: dict(self.store_base_paint),
            STORE_HIGHLIGHT_LAYER: dict(self.store_highlight_paint),
        }

    def layer_visibility(self) -> Dict[str, bool]:
        return {
            CLUSTER_LAYER: self.cluster_visible,
            CLUSTER_COUNT_LAYER: self.cluster_visible,
            STORE_LABEL_LAYER: self.labels_visible,
            BUSINESS_LABEL_LAYER: self.labels_visible,
        }

    def business_collection(self) -> Dict[str, Any]:
        return {"type": "FeatureCollection", "features": list(self.business_features)}


def membership(property_name: str, values: Sequence[Any]) -> Expression:
    return ["in", ["get", property_name], ["literal", list(values)]]


class MapFilterEngine:
    """Computes render plans.

    Holds the two pieces of state a plan depends on besides its inputs: the
    category filter and whether the camera moved for the previous selection.

    Attributes:
        boundaries: Boundary document, or None when it failed to load.
        category_filter: Business category state machine.
    """

    def __init__(
        self,
        boundaries: Optional[BoundaryDocument] = None,
        settings: Optional[DashboardSettings] = None,
    ):
        self.boundaries = boundaries
        self.settings = settings or get_settings()
        self.category_filter = CategoryFilter()
        self._last_selection: Selection = NO_SELECTION
        self._camera_moved = False

    def set_boundaries(self, boundaries: Optional[BoundaryDocument]) -> None:
        self.boundaries = boundaries

    def set_category(self, category: str) -> None:
        self.category_filter.choose(category)

    def labels_visible(self, zoom: float, selection_active: bool) -> bool:
        if zoom < self.settings.label_zoom:
            return False
        return selection_active or zoom > self.settings.close_zoom

    def compute_render_plan(
        self,
        selection: Selection,
        catalog: Optional[StoreCatalog],
        businesses: Sequence[BusinessPoi],
        zoom: float,
        category_override: Optional[str] = None,
    ) -> RenderPlan:
        """Compute the render plan for the current selection and zoom.

        Lookup misses (unknown names, missing boundaries, empty catalog)
        resolve to filters that match nothing rather than raising.

        Args:
            selection: Current selection.
            catalog: Deduplicated store catalog, or None before the first load.
            businesses: Business POIs (may be empty when enrichment failed).
            zoom: Current map zoom level.
            category_override: Category explicitly chosen by the user, if any.

        Returns:
            RenderPlan for ViewportController.apply().
        """
        if category_override is not None:
            self.set_category(category_override)

        targets = targets_for(selection)
        active = selection.active

        boundary_names = self._boundary_names(targets) if active else []
        store_codes = self._store_codes(catalog, targets) if active else []
        category, categories, restricted, features = self._business_features(
            businesses, targets, active, zoom
        )

        plan = RenderPlan(
            selection=selection,
            boundary_fill_color=self._fill_color(boundary_names),
            boundary_fill_opacity=self._fill_opacity(boundary_names, active),
            boundary_highlight_filter=self._boundary_filter(boundary_names),
            highlighted_boundaries=tuple(boundary_names),
            store_base_filter=self._store_base_filter(store_codes, active),
            store_highlight_filter=self._store_highlight_filter(store_codes, active),
            store_base_paint={
                "circle-color": STORE_COLOR,
                "circle-opacity": STORE_DIMMED_OPACITY if active else STORE_OPACITY,
            },
            store_highlight_paint={
                "circle-color": STORE_HIGHLIGHT_COLOR,
                "circle-opacity": STORE_OPACITY,
            },
            highlighted_stores=tuple(store_codes),
            cluster_visible=not active,
            labels_visible=self.labels_visible(zoom, active),
            business_category=category,
            business_categories=tuple(categories),
            category_restricted=restricted,
            business_features=tuple(poi_feature(poi) for poi in features),
            viewport=self._viewport_target(selection, targets),
        )
        self._last_selection = selection
        return plan

    def _boundary_names(self, targets: SelectionTargets) -> List[str]:
        if self.boundaries is None or self.boundaries.name_key is None:
            return []
        return self.boundaries.matching_names(targets.cities)

    def _store_codes(self, catalog: Optional[StoreCatalog], targets: SelectionTargets) -> List[str]:
        if catalog is None:
            return []
        return [store.code for store in catalog.matching(targets)]

    def _fill_color(self, names: List[str]) -> Expression:
        if not names:
            return BOUNDARY_BASE_COLOR
        return [
            "match",
            ["get", self.boundaries.name_key],
            list(names),
            BOUNDARY_HIGHLIGHT_COLOR,
            BOUNDARY_BASE_COLOR,
        ]

    def _fill_opacity(self, names: List[str], active: bool) -> Expression:
        if not active or not names:
            return BOUNDARY_BASE_OPACITY
        return [
            "case",
            membership(self.boundaries.name_key, names),
            BOUNDARY_SELECTED_OPACITY,
            BOUNDARY_DIMMED_OPACITY,
        ]

    def _boundary_filter(self, names: List[str]) -> Expression:
        if not names:
            return list(MATCH_NOTHING)
        return membership(self.boundaries.name_key, names)

    def _store_base_filter(self, codes: List[str], active: bool) -> Expression:
        if not active:
            return list(UNCLUSTERED)
        return ["all", list(UNCLUSTERED), ["!", membership("code", codes)]]

    def _store_highlight_filter(self, codes: List[str], active: bool) -> Expression:
        if not active or not codes:
            return list(MATCH_NOTHING)
        return ["all", list(UNCLUSTERED), membership("code", codes)]

    def _business_features(
        self,
        businesses: Sequence[BusinessPoi],
        targets: SelectionTargets,
        active: bool,
        zoom: float,
    ) -> Tuple[str, List[str], bool, List[BusinessPoi]]:
        if active:
            relevant = [
                poi
                for poi in businesses
                if targets.matches(zone=poi.zone_name, area=poi.area_name, city=poi.city_name)
            ]
        else:
            relevant = list(businesses)

        categories = categories_of(relevant)
        category = self.category_filter.resolve(categories)

        if zoom >= self.settings.close_zoom or category == ALL_CATEGORIES:
            return category, categories, False, relevant
        return category, categories, True, [poi for poi in relevant if poi.category == category]

    def _viewport_target(self, selection: Selection, targets: SelectionTargets) -> ViewportTarget:
        if selection == self._last_selection:
            return UNCHANGED_VIEWPORT

        if selection.active:
            bounds = None
            if self.boundaries is not None:
                bounds = self.boundaries.bounds_for(targets.cities)
            if bounds is None:
                logger.debug(f"No boundary geometry for {selection!r}, viewport unchanged")
                return UNCHANGED_VIEWPORT
            self._camera_moved = True
            return ViewportTarget(action=ViewportAction.FIT_BOUNDS, bounds=bounds)

        if self._camera_moved:
            self._camera_moved = False
            return HOME_VIEWPORT
        return UNCHANGED_VIEWPORT
