"""Tests for applying render plans to the map surface."""

import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from store_network.boundaries import Bounds
from store_network.config import (
    BUSINESS_SOURCE,
    CLUSTER_LAYER,
    STORE_HIGHLIGHT_LAYER,
    STORE_POINT_LAYER,
    STORE_SOURCE,
)
from store_network.map_filters import (
    HOME_VIEWPORT,
    RenderPlan,
    ViewportAction,
    ViewportTarget,
)
from store_network.selection import CitySelection
from store_network.tests.samples import RecordingSurface
from store_network.viewport import ViewportController

FIT_PRISTINA = ViewportTarget(
    action=ViewportAction.FIT_BOUNDS,
    bounds=Bounds(west=21.0, south=42.5, east=21.3, north=42.8),
)


class TestApplyWhenReady:
    """Tests for immediate application."""

    def test_applies_filters_paint_and_visibility(self):
        """Test a plan is pushed to every known layer."""
        surface = RecordingSurface()
        controller = ViewportController(surface)

        applied = controller.apply(RenderPlan(selection=CitySelection("Pristina"), cluster_visible=False))

        assert applied
        filtered_layers = [layer for layer, _ in surface.named("set_filter")]
        assert STORE_POINT_LAYER in filtered_layers
        assert STORE_HIGHLIGHT_LAYER in filtered_layers
        assert (CLUSTER_LAYER, "visibility", "none") in surface.named("set_layout_property")
        assert surface.named("set_source_data")[0][0] == BUSINESS_SOURCE
        assert controller.applied_count == 1

    def test_missing_layers_are_skipped(self):
        """Test layers absent from the map are skipped without errors."""
        surface = RecordingSurface(layers=[STORE_POINT_LAYER])
        controller = ViewportController(surface)

        controller.apply(RenderPlan())

        assert {layer for layer, _ in surface.named("set_filter")} == {STORE_POINT_LAYER}
        assert surface.named("set_layout_property") == []

    def test_camera_moves(self):
        """Test fit-bounds and ease-home targets drive the camera."""
        surface = RecordingSurface()
        controller = ViewportController(surface)

        controller.apply(RenderPlan(selection=CitySelection("Pristina"), viewport=FIT_PRISTINA))
        controller.apply(RenderPlan(viewport=HOME_VIEWPORT))

        assert surface.named("fit_bounds") == [([[21.0, 42.5], [21.3, 42.8]], 48, 1200)]
        assert surface.named("ease_to") == [([21.0, 42.6], 7.5, 1200)]

    def test_identical_plan_does_not_move_camera_twice(self):
        """Test re-applying the same plan is idempotent for the camera."""
        surface = RecordingSurface()
        controller = ViewportController(surface)
        plan = RenderPlan(selection=CitySelection("Pristina"), viewport=FIT_PRISTINA)

        controller.apply(plan)
        controller.apply(plan)

        assert len(surface.named("fit_bounds")) == 1
        assert controller.applied_count == 2


class TestDeferredApply:
    """Tests for plans issued before the surface is ready."""

    def test_plan_queued_until_ready(self):
        """Test nothing touches the surface before it is ready."""
        surface = RecordingSurface(ready=False)
        controller = ViewportController(surface)

        applied = controller.apply(RenderPlan())

        assert not applied
        assert surface.calls == []
        assert controller.pending is not None

        surface.become_ready()

        assert controller.pending is None
        assert controller.applied_count == 1
        assert surface.named("set_filter")

    def test_latest_plan_wins_single_listener(self):
        """Test later plans replace the queued one and only one listener exists."""
        surface = RecordingSurface(ready=False)
        controller = ViewportController(surface)

        controller.apply(RenderPlan(cluster_visible=True))
        controller.apply(RenderPlan(cluster_visible=False))
        controller.apply(RenderPlan(cluster_visible=False, labels_visible=True))

        assert len(surface.ready_callbacks) == 1
        surface.become_ready()

        assert controller.applied_count == 1
        assert (CLUSTER_LAYER, "visibility", "none") in surface.named("set_layout_property")

    def test_replaced_plan_keeps_pending_camera_move(self):
        """Test a queued camera move survives a later plan without one."""
        surface = RecordingSurface(ready=False)
        controller = ViewportController(surface)

        controller.apply(RenderPlan(selection=CitySelection("Pristina"), viewport=FIT_PRISTINA))
        controller.apply(RenderPlan(selection=CitySelection("Pristina"), labels_visible=True))
        surface.become_ready()

        assert len(surface.named("fit_bounds")) == 1

    def test_direct_apply_supersedes_queued_plan(self):
        """Test a late ready callback does not replay a plan already replaced."""
        surface = RecordingSurface(ready=False)
        controller = ViewportController(surface)

        controller.apply(RenderPlan(selection=CitySelection("Pristina"), cluster_visible=False))
        surface.ready = True
        assert controller.apply(RenderPlan(cluster_visible=True))
        assert controller.pending is None

        surface.become_ready()

        visibility = [call for call in surface.named("set_layout_property") if call[0] == CLUSTER_LAYER]
        assert visibility[-1] == (CLUSTER_LAYER, "visibility", "visible")
        assert controller.applied_count == 1
        assert controller.pending is None

    def test_sources_deferred_until_ready(self):
        """Test source data waits for readiness too."""
        surface = RecordingSurface(ready=False)
        controller = ViewportController(surface)
        data = {"type": "FeatureCollection", "features": []}

        assert not controller.set_source(STORE_SOURCE, data)
        controller.apply(RenderPlan())
        assert len(surface.ready_callbacks) == 1

        surface.become_ready()

        assert surface.named("set_source_data")[0] == (STORE_SOURCE, data)
