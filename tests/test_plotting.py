"""
Tests for the chart and map builders and the Panel views that host them.
"""

import numpy as np
import holoviews as hv
import pytest

from watershedviz.config import HIGHLIGHT_MARKER_COLOR, MARKER_COLOR, DEFAULT_MAP_CENTER, VARIABLES_BY_ID
from watershedviz.controllers import WatershedVizController
from watershedviz.core.markers import MarkerProjector
from watershedviz.core.series import build_series, SeriesProjector
from watershedviz.plotting.chart import create_series_plot, display_y_limits, build_chart_title
from watershedviz.plotting.map import (
    marker_frame,
    create_marker_points,
    create_boundary_path,
    compute_map_extent,
    nearest_marker,
    hover_radius,
    project_lon_lat,
)
from watershedviz.plotting.sinks import ChartSink, MapSink
from watershedviz.state import SelectionState
from watershedviz.ui.views import ChartView, MarkerMapView


BOUNDARY = {
    "type": "Polygon",
    "coordinates": [[[76.50, 11.70], [76.60, 11.70], [76.60, 11.80], [76.50, 11.70]]],
}


@pytest.fixture
def field_markers(field_store):
    state = SelectionState()
    state.reconcile(field_store.all_plot_ids())
    return MarkerProjector().project(field_store, state)


# ── Chart ─────────────────────────────────────────────────────────────────────

def test_series_plot_layers(store, selection):
    series = SeriesProjector().project(store, selection)
    overlay = create_series_plot(series)

    assert isinstance(overlay, hv.Overlay)
    curve = overlay.get(0)
    assert isinstance(curve, hv.Curve)
    assert list(curve.dimension_values("value")) == [10.0, 20.0]
    assert list(curve.dimension_values("date")) == ["2023-01-01", "2023-01-02"]
    assert curve.get_dimension("value").label == "Soil Moisture (%)"


def test_empty_series_plot():
    series = build_series([], [], VARIABLES_BY_ID["lai"], 0.0, 1.0, plot_id="B")
    overlay = create_series_plot(series)

    assert len(overlay.get(0)) == 0
    assert build_chart_title(series) == "Plot B: no Leaf Area Index data"


def test_chart_titles():
    variable = VARIABLES_BY_ID["moisture"]
    assert build_chart_title(build_series([], [], variable, 0.0, 1.0)) == "No plot selected"
    assert build_chart_title(build_series(["2023-01-01"], [1.5], variable, 1.0, 2.0, "A")) == "Plot A: Soil Moisture"


def test_display_limits_widen_zero_height_range():
    variable = VARIABLES_BY_ID["moisture"]
    assert display_y_limits(build_series(["d"], [7.0], variable, 7.0, 7.0, "A")) == (6.5, 7.5)
    assert display_y_limits(build_series(["d"], [7.5], variable, 7.0, 8.0, "A")) == (7.0, 8.0)


# ── Markers ───────────────────────────────────────────────────────────────────

def test_marker_frame_highlight_drawn_last(field_markers):
    frame = marker_frame(field_markers)

    assert list(frame["plot"]) == ["P2", "P3", "P1"]
    assert list(frame["highlighted"]) == [False, False, True]
    assert frame["color"].iloc[-1] == HIGHLIGHT_MARKER_COLOR
    assert frame["color"].iloc[0] == MARKER_COLOR
    assert frame["size"].iloc[-1] > frame["size"].iloc[0]


def test_marker_frame_hover_is_display_only(field_markers):
    frame = marker_frame(field_markers, hovered_plot="P3")

    assert set(frame.loc[frame["highlighted"], "plot"]) == {"P1", "P3"}
    assert [m.plot_id for m in field_markers.highlighted()] == ["P1"]


def test_marker_frame_popup(field_markers):
    frame = marker_frame(field_markers).set_index("plot")
    popup = frame.loc["P1", "popup"]

    assert "Plot P1" in popup
    assert "27.40 %" in popup
    assert frame.loc["P3", "summary"] == "No Data"
    assert frame.loc["P1", "location"] == "11.7468, 76.5573"


def test_marker_frame_projects_to_mercator(field_markers):
    frame = marker_frame(field_markers).set_index("plot")
    x, y = project_lon_lat(76.5573, 11.7468)
    assert frame.loc["P1", "x"] == pytest.approx(float(x))
    assert frame.loc["P1", "y"] == pytest.approx(float(y))


def test_marker_frame_skips_missing_locations(store, selection):
    markers = MarkerProjector().project(store, selection)
    frame = marker_frame(markers)
    assert frame.empty
    assert "popup" in frame.columns


def test_marker_points(field_markers):
    points = create_marker_points(field_markers)
    assert isinstance(points, hv.Points)
    assert len(points) == 3


def test_nearest_marker(field_markers):
    frame = marker_frame(field_markers)
    x, y = project_lon_lat(76.5621, 11.7511)

    assert nearest_marker(frame, float(x), float(y), max_distance=100.0) == "P2"
    assert nearest_marker(frame, float(x) + 1e6, float(y), max_distance=100.0) is None
    assert nearest_marker(frame, None, None, max_distance=100.0) is None


def test_hover_radius():
    assert hover_radius((0.0, 0.0, 1000.0, 500.0)) == pytest.approx(30.0)


# ── Boundary and extent ───────────────────────────────────────────────────────

def test_boundary_path():
    path = create_boundary_path(BOUNDARY)
    assert isinstance(path, hv.Path)
    xs = path.dimension_values("x")
    assert np.isfinite(xs).sum() == 4


def test_empty_boundary_path():
    assert len(create_boundary_path(None).data) == 0


def test_extent_prefers_boundary(field_markers):
    x0, y0, x1, y1 = compute_map_extent(field_markers, BOUNDARY)
    bx, by = project_lon_lat([76.50, 76.60], [11.70, 11.80])

    assert x0 < bx[0] and x1 > bx[1]
    assert y0 < by[0] and y1 > by[1]


def test_extent_from_markers(field_markers):
    x0, y0, x1, y1 = compute_map_extent(field_markers)
    px, py = project_lon_lat(76.5573, 11.7468)
    assert x0 < px < x1
    assert y0 < py < y1


def test_extent_defaults_to_center():
    x0, y0, x1, y1 = compute_map_extent()
    cx, cy = project_lon_lat(DEFAULT_MAP_CENTER[1], DEFAULT_MAP_CENTER[0])
    assert x0 < cx < x1
    assert y0 < cy < y1


# ── Views ─────────────────────────────────────────────────────────────────────

def test_views_satisfy_sink_protocols():
    assert isinstance(ChartView(), ChartSink)
    assert isinstance(MarkerMapView(), MapSink)


def test_chart_view_set_series(store, selection):
    view = ChartView()
    assert view.series.is_empty

    series = SeriesProjector().project(store, selection)
    view.set_series(series)

    assert view.series is series
    assert isinstance(view.pane.object, hv.Overlay)


def test_map_view_highlights(field_markers):
    view = MarkerMapView()
    view.set_markers(field_markers)
    assert view.highlighted_plots() == ["P1"]

    view.set_hover("P2")
    assert sorted(view.highlighted_plots()) == ["P1", "P2"]

    view.set_hover(None)
    assert view.highlighted_plots() == ["P1"]


def test_map_view_hover_unknown_plot_ignored(field_markers):
    view = MarkerMapView()
    view.set_markers(field_markers)
    view.set_hover("nope")
    assert view.hovered_plot is None


def _tap(view, lon, lat):
    x, y = project_lon_lat(lon, lat)
    view.tap_stream.event(x=float(x), y=float(y))


def test_map_view_tap_reports_nearest_plot(field_markers):
    tapped = []
    view = MarkerMapView(on_select=tapped.append)
    view.set_markers(field_markers)

    _tap(view, 76.5488, 11.7401)
    _tap(view, 86.5488, 11.7401)
    view.tap_stream.event(x=None, y=None)

    assert tapped == ["P3"]


def test_map_taps_follow_markers_after_reorder(field_rows):
    view = MarkerMapView()
    controller = WatershedVizController(ChartView(), view)
    controller.attach_callbacks()
    controller.load_rows(field_rows)
    assert list(view._frame["plot"]) == ["P2", "P3", "P1"]

    _tap(view, 76.5620, 11.7510)
    assert controller.selection.selected_plot == "P2"
    assert list(view._frame["plot"]) == ["P1", "P3", "P2"]

    # P1 now sits in the row P2 occupied when it was tapped
    _tap(view, 76.5573, 11.7468)
    assert controller.selection.selected_plot == "P1"

    _tap(view, 76.5620, 11.7510)
    assert controller.selection.selected_plot == "P2"


def test_map_view_boundary(field_markers):
    view = MarkerMapView()
    view.set_markers(field_markers)
    before = view._extent
    view.set_boundary(BOUNDARY)

    assert view.boundary is BOUNDARY
    assert view._extent != before
