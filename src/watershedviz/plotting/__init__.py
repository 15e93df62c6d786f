"""
WatershedViz Plotting Package

This package provides all plotting and visualization functionality:
- View sink contract (sinks.py)
- Time-series chart (chart.py)
- Map layers: tiles, markers, boundary (map.py)
"""

from watershedviz.plotting.sinks import ChartSink, MapSink

from watershedviz.plotting.chart import (
    create_series_plot,
    display_y_limits,
    build_chart_title,
)

from watershedviz.plotting.map import (
    project_lon_lat,
    marker_frame,
    create_marker_points,
    nearest_marker,
    hover_radius,
    create_boundary_path,
    compute_map_extent,
    create_base_tiles,
)

__all__ = [
    # Sink contract
    'ChartSink',
    'MapSink',

    # Chart
    'create_series_plot',
    'display_y_limits',
    'build_chart_title',

    # Map
    'project_lon_lat',
    'marker_frame',
    'create_marker_points',
    'nearest_marker',
    'hover_radius',
    'create_boundary_path',
    'compute_map_extent',
    'create_base_tiles',
]
