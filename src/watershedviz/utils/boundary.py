"""
Boundary Geometry Utilities

Functions for turning GeoJSON boundary objects into line segments and
bounding boxes for the map overlay.
"""

import logging
from typing import Any, Dict, List, Optional, Tuple

import numpy as np

logger = logging.getLogger(__name__)

_LINE_TYPES = {'LineString', 'MultiLineString', 'Polygon', 'MultiPolygon'}


def _geometry_lines(geometry: Optional[Dict[str, Any]]) -> List[List]:
    """Return the coordinate lines (rings or line strings) of one geometry."""
    if not geometry:
        return []

    geom_type = geometry.get('type')
    coords = geometry.get('coordinates') or []

    if geom_type == 'LineString':
        return [coords]
    if geom_type in ('MultiLineString', 'Polygon'):
        return list(coords)
    if geom_type == 'MultiPolygon':
        return [ring for polygon in coords for ring in polygon]
    if geom_type == 'GeometryCollection':
        return [line for g in geometry.get('geometries', []) for line in _geometry_lines(g)]

    if geom_type not in _LINE_TYPES:
        logger.debug(f"Ignoring boundary geometry of type {geom_type}")
    return []


def extract_boundary_segments(boundary: Optional[Dict[str, Any]]) -> List[np.ndarray]:
    """
    Extract line segments from a GeoJSON object.

    Supports FeatureCollection, Feature and bare geometries (Polygon,
    MultiPolygon, LineString, MultiLineString, GeometryCollection).

    Parameters
    ----------
    boundary : dict or None
        Parsed GeoJSON

    Returns
    -------
    list of np.ndarray
        One (N, 2) array of (lon, lat) per ring or line; lines with fewer
        than two points are skipped

    Examples
    --------
    >>> square = {'type': 'Polygon', 'coordinates': [[[0, 0], [1, 0], [1, 1], [0, 0]]]}
    >>> [seg.shape for seg in extract_boundary_segments(square)]
    [(4, 2)]
    """
    if not boundary:
        return []

    obj_type = boundary.get('type')
    if obj_type == 'FeatureCollection':
        geometries = [f.get('geometry') for f in boundary.get('features', []) if f]
    elif obj_type == 'Feature':
        geometries = [boundary.get('geometry')]
    else:
        geometries = [boundary]

    segments = []
    for geometry in geometries:
        for line in _geometry_lines(geometry):
            try:
                arr = np.asarray(line, dtype=float)
            except (TypeError, ValueError):
                logger.warning("Skipping boundary line with non-numeric coordinates")
                continue
            if arr.ndim != 2 or arr.shape[0] < 2 or arr.shape[1] < 2:
                continue
            # Drop altitude if present
            segments.append(arr[:, :2])

    return segments


def merge_segments(segments: List[np.ndarray]) -> np.ndarray:
    """
    Merge segments into one array with NaN separators.

    Parameters
    ----------
    segments : list of np.ndarray
        (N, 2) coordinate arrays

    Returns
    -------
    np.ndarray
        (total_points + len(segments), 2) array
    """
    if not segments:
        return np.empty((0, 2))

    total_points = sum(len(seg) for seg in segments)
    merged = np.full((total_points + len(segments), 2), np.nan)

    current_idx = 0
    for seg in segments:
        n = len(seg)
        merged[current_idx:current_idx + n] = seg
        current_idx += n + 1

    return merged


def boundary_bounds(boundary: Optional[Dict[str, Any]]) -> Optional[Tuple[float, float, float, float]]:
    """
    Bounding box of a GeoJSON boundary.

    Returns
    -------
    tuple of float or None
        (lon_min, lat_min, lon_max, lat_max), or None without coordinates
    """
    segments = extract_boundary_segments(boundary)
    if not segments:
        return None

    points = np.concatenate(segments)
    points = points[np.isfinite(points).all(axis=1)]
    if len(points) == 0:
        return None

    lon_min, lat_min = points.min(axis=0)
    lon_max, lat_max = points.max(axis=0)
    return (float(lon_min), float(lat_min), float(lon_max), float(lat_max))
