"""
WatershedViz UI Module

This module provides the user interface components for WatershedViz:
- widgets: Factory functions for creating Panel widgets
- views: Map and chart views implementing the view sink contract
- layout: Dashboard layout assembly functions

Examples
--------
Create a complete dashboard:

>>> from watershedviz.ui import create_dashboard
>>> dashboard = create_dashboard()
>>>
>>> import panel as pn
>>> pn.serve(dashboard, port=5006)
"""

# Widget factories
from watershedviz.ui.widgets import (
    create_data_source_controls,
    create_plot_selector,
    create_variable_selector,
    create_info_pane,
    create_status_pane,
)

# Views
from watershedviz.ui.views import ChartView, MarkerMapView

# Layout assembly
from watershedviz.ui.layout import (
    create_dashboard,
    create_all_widgets,
    create_sidebar,
    create_main_area,
)

__all__ = [
    # Widget factories
    'create_data_source_controls',
    'create_plot_selector',
    'create_variable_selector',
    'create_info_pane',
    'create_status_pane',

    # Views
    'ChartView',
    'MarkerMapView',

    # Layout assembly
    'create_dashboard',
    'create_all_widgets',
    'create_sidebar',
    'create_main_area',
]
