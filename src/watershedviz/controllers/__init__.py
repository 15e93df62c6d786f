"""
WatershedViz Controllers Module

This module provides the controller layer for WatershedViz, implementing the
Controller pattern to separate application logic from UI components.

The main controller (WatershedVizController) orchestrates:
- Data loading into the record store
- Selection commands and their validation
- Recomputing the chart series and map markers
- Widget state synchronization

Example
-------
>>> from watershedviz.ui import create_dashboard
>>> from watershedviz.controllers import WatershedVizController
>>>
>>> layout = create_dashboard()
>>> controller = WatershedVizController(
...     chart_sink=layout._watershedviz_chart_view,
...     map_sink=layout._watershedviz_map_view,
...     widgets=layout._watershedviz_widgets,
...     info_pane=layout._watershedviz_info_pane
... )
>>> controller.attach_callbacks()
"""

from watershedviz.controllers.app_controller import WatershedVizController

__all__ = ['WatershedVizController']
