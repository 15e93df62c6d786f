"""
Dashboard Layout Module

This module provides functions for assembling the complete WatershedViz
dashboard layout from individual widgets and views.
"""

import logging
from typing import Dict, Any, Optional

import panel as pn

from watershedviz.config import WatershedVizConfig, SIDEBAR_WIDTH, config as default_config
from watershedviz.ui.widgets import (
    create_data_source_controls,
    create_plot_selector,
    create_variable_selector,
    create_info_pane,
    create_status_pane,
)
from watershedviz.ui.views import ChartView, MarkerMapView

logger = logging.getLogger(__name__)


# =============================================================================
# Layout Assembly
# =============================================================================

def create_sidebar(widgets: Dict[str, Any], info_pane: pn.pane.Markdown) -> pn.Column:
    """
    Create sidebar with selection controls, data source and plot details.

    Parameters
    ----------
    widgets : dict
        Dictionary of all widget instances
    info_pane : pn.pane.Markdown
        Plot information pane

    Returns
    -------
    pn.Column
        Sidebar column layout
    """
    card_selection = pn.Card(
        widgets['plot_selector'],
        widgets['variable_selector'],
        title="Selection",
        collapsed=False,
        sizing_mode='stretch_width'
    )

    card_plot_info = pn.Card(
        info_pane,
        title="Plot Information",
        collapsed=False,
        sizing_mode='stretch_width'
    )

    card_data_source = pn.Card(
        widgets['data_source']['data_path'],
        widgets['data_source']['boundary_path'],
        widgets['data_source']['reload'],
        widgets['status'],
        title="Data Source",
        collapsed=True,
        sizing_mode='stretch_width'
    )

    return pn.Column(
        pn.pane.Markdown("### Controls"),
        card_selection,
        card_plot_info,
        pn.layout.Divider(),
        card_data_source,
        width=SIDEBAR_WIDTH,
        sizing_mode='stretch_height',
        scroll=True
    )


def create_main_area(map_view: MarkerMapView, chart_view: ChartView) -> pn.Column:
    """
    Create main area with the map above the chart.

    Parameters
    ----------
    map_view : MarkerMapView
        Map with plot markers
    chart_view : ChartView
        Time-series chart

    Returns
    -------
    pn.Column
        Main area column layout
    """
    return pn.Column(
        pn.pane.Markdown("#### Plot Locations"),
        map_view.pane,
        pn.pane.Markdown("#### Time Series"),
        chart_view.pane,
        margin=(0, 0, 0, 20),
        sizing_mode='stretch_width'
    )


def create_all_widgets(app_config: Optional[WatershedVizConfig] = None) -> Dict[str, Any]:
    """
    Create all widgets needed for the dashboard.

    Parameters
    ----------
    app_config : WatershedVizConfig, optional
        Configuration supplying the default file paths

    Returns
    -------
    dict
        Dictionary with keys:
        - 'plot_selector': Plot selector
        - 'variable_selector': Variable selector
        - 'data_source': Data source controls dict
        - 'status': Load status pane
    """
    app_config = app_config or default_config

    return {
        'plot_selector': create_plot_selector(),
        'variable_selector': create_variable_selector(),
        'data_source': create_data_source_controls(app_config.data_path, app_config.boundary_path),
        'status': create_status_pane(),
    }


def create_dashboard(app_config: Optional[WatershedVizConfig] = None) -> pn.Row:
    """
    Create complete dashboard layout.

    This function creates the layout structure but does NOT attach callbacks.
    Callbacks are attached by the controller.

    Parameters
    ----------
    app_config : WatershedVizConfig, optional
        Configuration (pane sizes, map centre, default paths)

    Returns
    -------
    pn.Row
        Complete dashboard layout. The widgets and views are available as
        ``_watershedviz_widgets``, ``_watershedviz_map_view``,
        ``_watershedviz_chart_view`` and ``_watershedviz_info_pane``.

    Examples
    --------
    >>> dashboard = create_dashboard()
    >>> dashboard.servable()
    """
    app_config = app_config or default_config

    widgets = create_all_widgets(app_config)
    info_pane = create_info_pane()

    map_view = MarkerMapView(height=app_config.map_height, center=app_config.map_center)
    chart_view = ChartView(height=app_config.chart_height)

    sidebar = create_sidebar(widgets, info_pane)
    main_area = create_main_area(map_view, chart_view)

    layout = pn.Row(
        sidebar,
        main_area,
        sizing_mode='stretch_both'
    )

    logger.info("Dashboard layout created")

    # Store references for callback attachment
    layout._watershedviz_widgets = widgets
    layout._watershedviz_map_view = map_view
    layout._watershedviz_chart_view = chart_view
    layout._watershedviz_info_pane = info_pane

    return layout
