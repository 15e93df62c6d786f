"""
Map and Chart Views

Panel implementations of the view sink contract. Each view owns a
``pn.pane.HoloViews`` that is placed in the dashboard layout.

- ChartView redraws the time-series chart whenever a series arrives.
- MarkerMapView draws tiles, the watershed boundary and plot markers. The
  marker layer is a DynamicMap fed by a Pipe stream so that selection and
  hover changes redraw only the markers. Tapping a marker reports the plot
  through ``on_select``; moving the pointer near a marker highlights it
  until the pointer leaves.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

import panel as pn
import holoviews as hv

from watershedviz.config import (
    CHART_HEIGHT,
    MAP_HEIGHT,
    DEFAULT_MAP_CENTER,
    VARIABLES,
)
from watershedviz.core.markers import ProjectedMarkerSet
from watershedviz.core.series import ProjectedSeries, build_series, EMPTY_Y_RANGE
from watershedviz.plotting.chart import create_series_plot
from watershedviz.plotting.map import (
    create_base_tiles,
    create_boundary_path,
    create_marker_points,
    compute_map_extent,
    marker_frame,
    nearest_marker,
    hover_radius,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Chart View
# =============================================================================

class ChartView:
    """
    Time-series chart pane.

    Parameters
    ----------
    height : int, default=CHART_HEIGHT
        Chart height in pixels

    Attributes
    ----------
    pane : pn.pane.HoloViews
        Pane displaying the chart
    series : ProjectedSeries
        The series currently drawn
    """

    def __init__(self, height: int = CHART_HEIGHT):
        self.height = height
        self.series = build_series([], [], VARIABLES[0], *EMPTY_Y_RANGE)
        self.pane = pn.pane.HoloViews(
            object=create_series_plot(self.series, height=self.height),
            sizing_mode='stretch_width'
        )

    def set_series(self, series: ProjectedSeries) -> None:
        self.series = series
        self.pane.object = create_series_plot(series, height=self.height)


# =============================================================================
# Map View
# =============================================================================

class MarkerMapView:
    """
    Interactive map with plot markers and the watershed boundary.

    Parameters
    ----------
    on_select : callable, optional
        Called with the plot id of a tapped marker
    height : int, default=MAP_HEIGHT
        Map height in pixels
    center : tuple of float
        (lat, lon) used before any boundary or marker is known

    Attributes
    ----------
    pane : pn.pane.HoloViews
        Pane displaying the map
    markers : ProjectedMarkerSet
        Markers currently drawn
    boundary : dict or None
        GeoJSON boundary currently drawn
    hovered_plot : str or None
        Marker currently under the pointer
    marker_stream : hv.streams.Pipe
        Triggers a marker redraw
    tap_stream : hv.streams.Tap
        Click position on the marker layer
    pointer_stream : hv.streams.PointerXY
        Pointer position over the map

    Examples
    --------
    >>> view = MarkerMapView(on_select=controller.select_plot)
    >>> view.set_markers(controller.project_markers())
    >>> view.pane.servable()
    """

    def __init__(
        self,
        on_select: Optional[Callable[[str], Any]] = None,
        height: int = MAP_HEIGHT,
        center=DEFAULT_MAP_CENTER
    ):
        self.on_select = on_select
        self.center = center

        self.markers = ProjectedMarkerSet()
        self.boundary: Optional[Dict[str, Any]] = None
        self.hovered_plot: Optional[str] = None

        self._frame = marker_frame(self.markers)
        self._extent = compute_map_extent(None, None, center)

        self.marker_stream = hv.streams.Pipe(data=[])
        self.tap_stream: Optional[hv.streams.Tap] = None
        self.pointer_stream: Optional[hv.streams.PointerXY] = None

        self.pane = pn.pane.HoloViews(
            object=None,
            height=height,
            sizing_mode='stretch_width'
        )

        self._build_map()

    # -------------------------------------------------------------------------
    # Sink contract
    # -------------------------------------------------------------------------

    def set_markers(self, markers: ProjectedMarkerSet) -> None:
        """Draw a new marker set, refitting the view if the extent changed."""
        self.markers = markers
        if self.hovered_plot not in markers.plot_ids:
            self.hovered_plot = None
        self._update_frame()

        extent = compute_map_extent(markers, self.boundary, self.center)
        if extent != self._extent:
            self._extent = extent
            self._build_map()
        else:
            self.marker_stream.send([])

    def set_boundary(self, boundary: Optional[Dict[str, Any]]) -> None:
        """Draw a new boundary outline and refit the view."""
        self.boundary = boundary
        self._extent = compute_map_extent(self.markers, boundary, self.center)
        self._build_map()

    # -------------------------------------------------------------------------
    # Hover overlay
    # -------------------------------------------------------------------------

    def set_hover(self, plot_id: Optional[str]) -> None:
        """
        Temporarily highlight a marker.

        The hover highlight only affects drawing; the projected markers and
        the selection are unchanged.

        Parameters
        ----------
        plot_id : str or None
            Plot under the pointer; None clears the hover highlight
        """
        if plot_id is not None and plot_id not in self.markers.plot_ids:
            plot_id = None
        if plot_id == self.hovered_plot:
            return

        logger.debug(f"Hover: {self.hovered_plot} -> {plot_id}")
        self.hovered_plot = plot_id
        self._update_frame()
        self.marker_stream.send([])

    def highlighted_plots(self) -> List[str]:
        """Plot ids currently drawn highlighted (selection plus hover)."""
        return [str(p) for p in self._frame.loc[self._frame['highlighted'].astype(bool), 'plot']]

    # -------------------------------------------------------------------------
    # Drawing
    # -------------------------------------------------------------------------

    def _update_frame(self):
        self._frame = marker_frame(self.markers, self.hovered_plot)

    def _draw_markers(self, data):
        """DynamicMap callback for the marker layer."""
        return create_marker_points(self.markers, frame=self._frame)

    def _build_map(self):
        """(Re)build tiles, boundary and marker layers."""
        tiles = create_base_tiles(self._extent)
        boundary_path = create_boundary_path(self.boundary)
        markers_dmap = hv.DynamicMap(self._draw_markers, streams=[self.marker_stream])

        # Resolve clicks by position; row indices change whenever the frame is re-sorted
        self.tap_stream = hv.streams.Tap(x=None, y=None, source=markers_dmap)
        self.tap_stream.add_subscriber(self._on_tap)

        self.pointer_stream = hv.streams.PointerXY(x=None, y=None, source=markers_dmap)
        self.pointer_stream.add_subscriber(self._on_pointer)

        self.pane.object = tiles * boundary_path * markers_dmap
        self.marker_stream.send([])

    # -------------------------------------------------------------------------
    # Stream callbacks
    # -------------------------------------------------------------------------

    def _on_tap(self, x: Optional[float], y: Optional[float]):
        """Report the marker nearest to a click through ``on_select``."""
        if self.on_select is None:
            return

        plot_id = nearest_marker(self._frame, x, y, hover_radius(self._extent))
        if plot_id is None:
            return

        logger.debug(f"Marker tapped: {plot_id}")
        self.on_select(plot_id)

    def _on_pointer(self, x: Optional[float], y: Optional[float]):
        self.set_hover(nearest_marker(self._frame, x, y, hover_radius(self._extent)))
