"""Applies render plans to the live map surface.

The render surface (a MapLibre map or any object with the same methods) is a
single mutable resource owned by one ViewportController; nothing else calls
its mutating methods.
"""

from __future__ import annotations

import dataclasses
import logging
from typing import Any, Callable, Dict, List, Optional, Protocol

from store_network.config import BUSINESS_SOURCE
from store_network.map_filters import RenderPlan, ViewportAction, ViewportTarget

logger = logging.getLogger(__name__)


class RenderSurface(Protocol):
    def is_ready(self) -> bool: ...

    def on_ready(self, callback: Callable[[], None]) -> None: ...

    def has_layer(self, layer_id: str) -> bool: ...

    def set_filter(self, layer_id: str, expression: Any) -> None: ...

    def set_paint_property(self, layer_id: str, name: str, value: Any) -> None: ...

    def set_layout_property(self, layer_id: str, name: str, value: Any) -> None: ...

    def set_source_data(self, source_id: str, data: Dict[str, Any]) -> None: ...

    def fit_bounds(self, bounds: List[List[float]], padding: int, duration: int) -> None: ...

    def ease_to(self, center: List[float], zoom: float, duration: int) -> None: ...


class ViewportController:
    """Owns the render surface and applies plans to it.

    While the surface is not ready, at most one plan is queued; a later call
    replaces it. A camera move carried by a replaced plan is kept unless the
    newer plan carries its own.

    Attributes:
        surface: The render surface.
        applied_count: Number of plans actually applied.
    """

    def __init__(self, surface: RenderSurface):
        self.surface = surface
        self.applied_count = 0
        self._pending: Optional[RenderPlan] = None
        self._pending_sources: Dict[str, Dict[str, Any]] = {}
        self._listening = False
        self._last_plan: Optional[RenderPlan] = None

    @property
    def pending(self) -> Optional[RenderPlan]:
        return self._pending

    def apply(self, plan: RenderPlan) -> bool:
        """Apply ``plan`` now, or queue it until the surface is ready.

        Args:
            plan: Plan from MapFilterEngine.compute_render_plan().

        Returns:
            True if the plan was applied immediately.
        """
        if not self.surface.is_ready():
            self._queue(plan)
            return False
        plan = self._take_pending(plan)
        self._flush_sources()
        self._apply_now(plan)
        return True

    def set_source(self, source_id: str, data: Dict[str, Any]) -> bool:
        """Replace a GeoJSON source, deferred like plans until the surface is ready."""
        if not self.surface.is_ready():
            self._pending_sources[source_id] = data
            self._listen()
            return False
        self.surface.set_source_data(source_id, data)
        return True

    def _listen(self) -> None:
        """Register the ready callback once per readiness gap."""
        if not self._listening:
            self._listening = True
            self.surface.on_ready(self._on_ready)

    def _take_pending(self, plan: RenderPlan) -> RenderPlan:
        """Supersede the queued plan with ``plan`` and clear the queue slot.

        Args:
            plan: The newer plan.

        Returns:
            ``plan``, carrying the queued camera move when it has none itself.
        """
        pending, self._pending = self._pending, None
        if (
            pending is not None
            and plan.viewport.action is ViewportAction.NONE
            and pending.viewport.action is not ViewportAction.NONE
        ):
            return dataclasses.replace(plan, viewport=pending.viewport)
        return plan

    def _flush_sources(self) -> None:
        """Push every deferred GeoJSON source to the surface."""
        sources, self._pending_sources = self._pending_sources, {}
        for source_id, data in sources.items():
            self.surface.set_source_data(source_id, data)

    def _queue(self, plan: RenderPlan) -> None:
        """Hold ``plan`` in the single queue slot until the surface is ready."""
        self._pending = self._take_pending(plan)
        self._listen()
        logger.debug("Render surface not ready, plan queued")

    def _on_ready(self) -> None:
        """Ready callback: flush deferred sources, then the queued plan if any.

        The slot is empty when a direct apply() already superseded it.
        """
        self._listening = False
        self._flush_sources()
        plan, self._pending = self._pending, None
        if plan is not None:
            self._apply_now(plan)

    def _apply_now(self, plan: RenderPlan) -> None:
        """Apply filters, paint, visibility and business data, then move the camera.

        Args:
            plan: Plan to apply; the surface must be ready.
        """
        for layer_id, expression in plan.layer_filters().items():
            if self._has_layer(layer_id):
                self.surface.set_filter(layer_id, expression)

        for layer_id, properties in plan.layer_paint().items():
            if self._has_layer(layer_id):
                for name, value in properties.items():
                    self.surface.set_paint_property(layer_id, name, value)

        for layer_id, visible in plan.layer_visibility().items():
            if self._has_layer(layer_id):
                self.surface.set_layout_property(layer_id, "visibility", "visible" if visible else "none")

        self.surface.set_source_data(BUSINESS_SOURCE, plan.business_collection())

        if self._last_plan is None or self._last_plan != plan:
            self._move_camera(plan.viewport)
        self._last_plan = plan
        self.applied_count += 1

    def _has_layer(self, layer_id: str) -> bool:
        """Check a layer exists.

        Args:
            layer_id: Layer id.

        Returns:
            True if the layer is on the map; missing layers are logged.
        """
        if self.surface.has_layer(layer_id):
            return True
        logger.debug(f"Layer {layer_id} not on the map, skipped")
        return False

    def _move_camera(self, target: ViewportTarget) -> None:
        """Fit bounds or ease home; NONE leaves the camera where it is."""
        if target.action is ViewportAction.FIT_BOUNDS and target.bounds is not None:
            self.surface.fit_bounds(target.bounds.as_list(), padding=target.padding, duration=target.duration)
        elif target.action is ViewportAction.EASE_HOME and target.center is not None:
            self.surface.ease_to(list(target.center), zoom=target.zoom, duration=target.duration)
