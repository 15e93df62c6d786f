"""
WatershedViz Utilities

Utility functions for formatting display text and handling boundary
geometry.
"""

from watershedviz.utils.formatting import (
    NO_DATA_TEXT,
    format_date_label,
    format_value_summary,
    format_location,
    build_popup_html,
    build_plot_info_markdown,
)
from watershedviz.utils.boundary import (
    extract_boundary_segments,
    merge_segments,
    boundary_bounds,
)

__all__ = [
    # Formatting
    'NO_DATA_TEXT',
    'format_date_label',
    'format_value_summary',
    'format_location',
    'build_popup_html',
    'build_plot_info_markdown',
    # Boundary
    'extract_boundary_segments',
    'merge_segments',
    'boundary_bounds',
]
