"""
Map Plotting Module

This module provides the map layers for WatershedViz:
- OpenStreetMap base tiles
- Plot markers with selection highlight, hover overlay and tooltips
- Watershed boundary outline from GeoJSON
- Map extent fitting

All layers are drawn in Web Mercator; longitude/latitude inputs are
projected with HoloViews' transform utilities.
"""

import math
import logging
from typing import Any, Dict, Optional, Tuple

import numpy as np
import pandas as pd
import holoviews as hv
from bokeh.models import HoverTool
from holoviews.util.transform import lon_lat_to_easting_northing

from watershedviz.config import (
    DEFAULT_MAP_CENTER,
    DEFAULT_MAP_SPAN,
    MAP_EXTENT_PADDING,
    BOUNDARY_COLOR,
    BOUNDARY_LINE_WIDTH,
    MARKER_SIZE,
    HIGHLIGHT_MARKER_SIZE,
    MARKER_COLOR,
    HIGHLIGHT_MARKER_COLOR,
    HOVER_RADIUS_FRACTION,
)
from watershedviz.core.markers import ProjectedMarkerSet
from watershedviz.utils.boundary import extract_boundary_segments, merge_segments, boundary_bounds
from watershedviz.utils.formatting import format_location, build_popup_html

logger = logging.getLogger(__name__)

# Smallest half-width (degrees) of a fitted extent
MIN_HALF_SPAN = 0.005

MARKER_COLUMNS = ['x', 'y', 'plot', 'summary', 'location', 'popup', 'highlighted', 'color', 'size']

Extent = Tuple[float, float, float, float]


# =============================================================================
# Projection Helpers
# =============================================================================

def project_lon_lat(lon, lat) -> Tuple[np.ndarray, np.ndarray]:
    """Project longitude/latitude (scalars or arrays) to Web Mercator metres."""
    x, y = lon_lat_to_easting_northing(np.asarray(lon, dtype=float), np.asarray(lat, dtype=float))
    return np.asarray(x, dtype=float), np.asarray(y, dtype=float)


# =============================================================================
# Markers
# =============================================================================

def marker_frame(markers: ProjectedMarkerSet, hovered_plot: Optional[str] = None) -> pd.DataFrame:
    """
    Build the marker table drawn on the map.

    The selected marker and a hovered marker are both drawn highlighted;
    hovering is a display overlay and does not change the projection.
    Highlighted rows come last so they draw on top. Markers whose location
    is not finite are skipped.

    Parameters
    ----------
    markers : ProjectedMarkerSet
        Output of MarkerProjector.project()
    hovered_plot : str, optional
        Plot currently under the pointer

    Returns
    -------
    pd.DataFrame
        Columns: x, y, plot, summary, location, popup, highlighted, color, size
    """
    rows = []
    for marker in markers:
        if not (math.isfinite(marker.latitude) and math.isfinite(marker.longitude)):
            logger.warning(f"Plot {marker.plot_id} has no valid location, marker skipped")
            continue

        shown_highlighted = marker.is_highlighted or marker.plot_id == hovered_plot
        rows.append({
            'lon': marker.longitude,
            'lat': marker.latitude,
            'plot': marker.plot_id,
            'summary': marker.summary_text,
            'location': format_location(marker.latitude, marker.longitude),
            'popup': build_popup_html(
                marker.plot_id,
                markers.variable_label,
                marker.summary_text,
                marker.latitude,
                marker.longitude,
                is_highlighted=marker.is_highlighted
            ),
            'highlighted': shown_highlighted,
            'color': HIGHLIGHT_MARKER_COLOR if shown_highlighted else MARKER_COLOR,
            'size': HIGHLIGHT_MARKER_SIZE if shown_highlighted else MARKER_SIZE,
        })

    if not rows:
        return pd.DataFrame({col: [] for col in MARKER_COLUMNS})

    df = pd.DataFrame(rows)
    df['x'], df['y'] = project_lon_lat(df['lon'].values, df['lat'].values)
    df = df.sort_values('highlighted', kind='stable').reset_index(drop=True)
    return df[MARKER_COLUMNS]


def create_marker_points(
    markers: ProjectedMarkerSet,
    hovered_plot: Optional[str] = None,
    frame: Optional[pd.DataFrame] = None
) -> hv.Points:
    """
    Create the plot marker layer.

    Parameters
    ----------
    markers : ProjectedMarkerSet
        Output of MarkerProjector.project()
    hovered_plot : str, optional
        Plot currently under the pointer (drawn highlighted)
    frame : pd.DataFrame, optional
        Pre-built marker_frame(); built from ``markers`` when omitted

    Returns
    -------
    hv.Points
        Marker points with a popup tooltip (plot, latest value, location)
        and tap selection enabled
    """
    if frame is None:
        frame = marker_frame(markers, hovered_plot)

    hover = HoverTool(tooltips='@popup{safe}')

    return hv.Points(
        frame,
        kdims=['x', 'y'],
        vdims=['plot', 'summary', 'location', 'popup', 'highlighted', 'color', 'size'],
    ).opts(
        color='color',
        size='size',
        line_color='white',
        line_width=1.5,
        tools=[hover, 'tap'],
        nonselection_alpha=1.0,
        selection_alpha=1.0,
    )


def nearest_marker(
    frame: pd.DataFrame,
    x: Optional[float],
    y: Optional[float],
    max_distance: float
) -> Optional[str]:
    """
    Find the marker closest to a pointer position.

    Parameters
    ----------
    frame : pd.DataFrame
        marker_frame() output (Web Mercator x/y)
    x, y : float or None
        Pointer position in Web Mercator metres
    max_distance : float
        Largest distance (metres) that still counts as a hit

    Returns
    -------
    str or None
        Plot id of the nearest marker within ``max_distance``
    """
    if x is None or y is None or frame.empty:
        return None

    distances = np.hypot(frame['x'].values - x, frame['y'].values - y)
    idx = int(np.argmin(distances))
    if distances[idx] > max_distance:
        return None
    return str(frame['plot'].iloc[idx])


def hover_radius(extent: Extent) -> float:
    """Pointer hit radius in metres for a map extent."""
    x0, y0, x1, y1 = extent
    return max(x1 - x0, y1 - y0) * HOVER_RADIUS_FRACTION


# =============================================================================
# Boundary
# =============================================================================

def create_boundary_path(boundary: Optional[Dict[str, Any]]) -> hv.Path:
    """
    Create the watershed boundary outline.

    Parameters
    ----------
    boundary : dict or None
        GeoJSON object (FeatureCollection, Feature or geometry)

    Returns
    -------
    hv.Path
        Boundary outline in Web Mercator; empty when there is no boundary
    """
    segments = extract_boundary_segments(boundary)
    if not segments:
        return hv.Path([], kdims=['x', 'y']).opts(color=BOUNDARY_COLOR, line_width=BOUNDARY_LINE_WIDTH)

    merged = merge_segments(segments)
    # NaN separators stay NaN through the projection
    x, y = project_lon_lat(merged[:, 0], merged[:, 1])

    return hv.Path(
        [np.column_stack([x, y])],
        kdims=['x', 'y']
    ).opts(
        color=BOUNDARY_COLOR,
        line_width=BOUNDARY_LINE_WIDTH,
    )


# =============================================================================
# Extent and Tiles
# =============================================================================

def _pad_range(lo: float, hi: float) -> Tuple[float, float]:
    center = (lo + hi) / 2
    half = max((hi - lo) / 2 * (1 + 2 * MAP_EXTENT_PADDING), MIN_HALF_SPAN)
    return (center - half, center + half)


def compute_map_extent(
    markers: Optional[ProjectedMarkerSet] = None,
    boundary: Optional[Dict[str, Any]] = None,
    center: Tuple[float, float] = DEFAULT_MAP_CENTER
) -> Extent:
    """
    Compute the map view extent in Web Mercator.

    The boundary wins when present, then the marker locations, then a
    fixed window around ``center``.

    Parameters
    ----------
    markers : ProjectedMarkerSet, optional
        Current markers
    boundary : dict, optional
        GeoJSON boundary
    center : tuple of float
        (lat, lon) fallback centre

    Returns
    -------
    tuple of float
        (x_min, y_min, x_max, y_max) in metres
    """
    bounds = boundary_bounds(boundary)

    if bounds is None and markers is not None:
        lats = [m.latitude for m in markers if math.isfinite(m.latitude) and math.isfinite(m.longitude)]
        lons = [m.longitude for m in markers if math.isfinite(m.latitude) and math.isfinite(m.longitude)]
        if lats:
            bounds = (min(lons), min(lats), max(lons), max(lats))

    if bounds is None:
        lat, lon = center
        bounds = (lon - DEFAULT_MAP_SPAN, lat - DEFAULT_MAP_SPAN, lon + DEFAULT_MAP_SPAN, lat + DEFAULT_MAP_SPAN)

    lon_min, lat_min, lon_max, lat_max = bounds
    lon_lo, lon_hi = _pad_range(lon_min, lon_max)
    lat_lo, lat_hi = _pad_range(lat_min, lat_max)

    xs, ys = project_lon_lat([lon_lo, lon_hi], [lat_lo, lat_hi])
    return (float(xs[0]), float(ys[0]), float(xs[1]), float(ys[1]))


def create_base_tiles(extent: Extent) -> hv.Tiles:
    """OpenStreetMap tiles framed to ``extent``."""
    x0, y0, x1, y1 = extent
    return hv.element.tiles.OSM().opts(
        xlim=(x0, x1),
        ylim=(y0, y1),
        xaxis=None,
        yaxis=None,
        responsive=True,
        active_tools=['wheel_zoom'],
    )
