"""
WatershedViz Dashboard Application

This is the main entry point for the WatershedViz dashboard application.
It assembles all components (data loading, UI, map, chart, callbacks) and
serves the interactive visualization dashboard.

Usage
-----
Run with panel serve:
    $ panel serve app.py --show --port 5006

Or run directly:
    $ python app.py

Input files are read from data.csv and boundary.geojson in the working
directory unless a config.toml overrides them.
"""

import logging

import panel as pn
import holoviews as hv

# Initialize extensions
hv.extension('bokeh')
pn.extension(notifications=True)

# Import WatershedViz modules
from watershedviz.config import WatershedVizConfig
from watershedviz.ui import create_dashboard
from watershedviz.controllers import WatershedVizController

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler(),
    ]
)
logger = logging.getLogger(__name__)


# =============================================================================
# Main Dashboard Assembly
# =============================================================================

def create_watershedviz_dashboard(app_config: WatershedVizConfig | None = None):
    """
    Create and configure the complete WatershedViz dashboard.

    This function:
    1. Creates the UI layout with all widgets and views
    2. Initializes the Controller
    3. Attaches all callbacks
    4. Loads the configured measurement and boundary files

    Returns
    -------
    pn.Row
        Complete dashboard layout ready for serving
    """
    logger.info("Creating WatershedViz dashboard...")

    app_config = app_config or WatershedVizConfig.load_from_file()

    layout = create_dashboard(app_config)

    controller = WatershedVizController(
        chart_sink=layout._watershedviz_chart_view,
        map_sink=layout._watershedviz_map_view,
        widgets=layout._watershedviz_widgets,
        info_pane=layout._watershedviz_info_pane
    )

    controller.attach_callbacks()

    # Initial load: boundary first so the map is fitted before markers arrive
    controller.load_files(app_config.data_path, app_config.boundary_path)

    # Store references for external access
    layout._watershedviz_controller = controller
    layout._watershedviz_store = controller.store
    layout._watershedviz_selection = controller.selection

    logger.info("Dashboard created successfully")

    return layout


# =============================================================================
# Main Entry Point
# =============================================================================

def main():
    """Main entry point when running as script."""
    logger.info("Starting WatershedViz Dashboard Application")

    app_config = WatershedVizConfig.load_from_file()
    dashboard = create_watershedviz_dashboard(app_config)

    logger.info(f"Serving dashboard on http://localhost:{app_config.port}")
    pn.serve(
        dashboard,
        port=app_config.port,
        title=app_config.title,
        show=True,
        autoreload=False
    )


if __name__ == '__main__':
    main()
elif __name__.startswith('bokeh'):
    # For panel serve
    dashboard = create_watershedviz_dashboard()
    dashboard.servable(title="Watershed Data Visualization")
