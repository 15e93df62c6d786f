"""
UI Widgets Module

This module provides factory functions for creating all Panel widgets used in
WatershedViz. Each function creates a properly configured widget with default
values and settings.
"""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Sequence

import panel as pn

from watershedviz.config import VARIABLES, DEFAULT_VARIABLE, DEFAULT_DATA_PATH, DEFAULT_BOUNDARY_PATH

logger = logging.getLogger(__name__)


# =============================================================================
# Data Source
# =============================================================================

def create_data_source_controls(
    data_path: Optional[Path] = None,
    boundary_path: Optional[Path] = None
) -> Dict[str, pn.widgets.Widget]:
    """
    Create data file inputs and the reload button.

    Parameters
    ----------
    data_path : Path, optional
        Initial measurement CSV path (default: from config)
    boundary_path : Path, optional
        Initial boundary GeoJSON path (default: from config)

    Returns
    -------
    dict
        Dictionary with keys: 'data_path', 'boundary_path', 'reload'

    Examples
    --------
    >>> controls = create_data_source_controls()
    >>> controls['data_path'].value
    'data.csv'
    """
    if data_path is None:
        data_path = DEFAULT_DATA_PATH
    if boundary_path is None:
        boundary_path = DEFAULT_BOUNDARY_PATH

    return {
        'data_path': pn.widgets.TextInput(
            name='Measurements (CSV)',
            value=str(data_path),
            placeholder='Path to measurement CSV...'
        ),
        'boundary_path': pn.widgets.TextInput(
            name='Watershed Boundary (GeoJSON)',
            value=str(boundary_path),
            placeholder='Path to boundary GeoJSON...'
        ),
        'reload': pn.widgets.Button(
            name='Reload Data',
            button_type='primary',
            width=120
        )
    }


# =============================================================================
# Selection
# =============================================================================

def create_plot_selector(plot_ids: Sequence[str] = ()) -> pn.widgets.Select:
    """
    Create the plot selector.

    Parameters
    ----------
    plot_ids : sequence of str
        Initial options (normally empty until data has loaded)

    Returns
    -------
    pn.widgets.Select
        Plot selector widget

    Examples
    --------
    >>> selector = create_plot_selector(['A', 'B'])
    >>> selector.value
    'A'
    """
    options: List[str] = list(plot_ids)
    return pn.widgets.Select(
        name='Plot',
        options=options,
        value=options[0] if options else None
    )


def create_variable_selector() -> pn.widgets.Select:
    """
    Create the variable selector.

    Options map display labels to variable ids.

    Returns
    -------
    pn.widgets.Select
        Variable selector with the four measured variables

    Examples
    --------
    >>> selector = create_variable_selector()
    >>> selector.value
    'moisture'
    """
    return pn.widgets.Select(
        name='Variable',
        options={v.label: v.id for v in VARIABLES},
        value=DEFAULT_VARIABLE
    )


# =============================================================================
# Information Display
# =============================================================================

def create_info_pane() -> pn.pane.Markdown:
    """Create the plot information pane."""
    return pn.pane.Markdown(
        "**Plot Information**: Load data to see plot details.",
        sizing_mode='stretch_width'
    )


def create_status_pane() -> pn.pane.Markdown:
    """Create the load status line shown under the data controls."""
    return pn.pane.Markdown("", sizing_mode='stretch_width')
