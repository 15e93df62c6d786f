"""
WatershedViz Application Controller

This module provides the main Controller class that orchestrates all
application logic for the WatershedViz dashboard.

The WatershedVizController follows the Controller pattern, separating:
- View (map, chart, widgets) - in watershedviz.ui
- Model (record store, selection, projections) - in watershedviz.core
- Controller (this module) - orchestrates View and Model

Every state-changing event (data load, plot change, variable change) reruns
both projections synchronously and pushes the results to the view sinks.
"""

import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Mapping, Optional

import panel as pn

from watershedviz.errors import SelectionError
from watershedviz.state import SelectionState
from watershedviz.core.records import RecordStore, LoadReport
from watershedviz.core.series import SeriesProjector, ProjectedSeries
from watershedviz.core.markers import MarkerProjector, ProjectedMarkerSet
from watershedviz.core.data_loader import load_dataset
from watershedviz.plotting.sinks import ChartSink, MapSink
from watershedviz.utils.formatting import build_plot_info_markdown, NO_DATA_TEXT
from watershedviz.ui.views import MarkerMapView

logger = logging.getLogger(__name__)


class WatershedVizController:
    """
    Main application controller for the WatershedViz dashboard.

    One controller owns one RecordStore and one SelectionState; several
    controllers can coexist without sharing state.

    Parameters
    ----------
    chart_sink : ChartSink
        Receives the projected series
    map_sink : MapSink
        Receives the projected markers and the boundary
    widgets : dict, optional
        Widgets created by create_all_widgets(); may be omitted when the
        controller is driven programmatically
    info_pane : pn.pane.Markdown, optional
        Pane showing details of the selected plot

    Attributes
    ----------
    store : RecordStore
        Loaded measurement records
    selection : SelectionState
        Current (plot, variable) selection
    boundary : dict or None
        Watershed boundary passed through to the map sink

    Example
    -------
    >>> controller = WatershedVizController(chart_view, map_view)
    >>> controller.load_rows(rows)
    >>> controller.select_variable('lai')
    """

    def __init__(
        self,
        chart_sink: ChartSink,
        map_sink: MapSink,
        widgets: Optional[Dict[str, Any]] = None,
        info_pane: Optional[pn.pane.Markdown] = None
    ):
        # View references
        self.chart_sink = chart_sink
        self.map_sink = map_sink
        self.widgets = widgets or {}
        self.info_pane = info_pane

        # Model
        self.store = RecordStore()
        self.selection = SelectionState()
        self.series_projector = SeriesProjector()
        self.marker_projector = MarkerProjector()
        self.boundary: Optional[Dict[str, Any]] = None

        # Flags (prevent redundant refreshes and widget feedback loops)
        self._is_loading = False
        self._syncing_widgets = False

        self._selection_watcher = self.selection.subscribe(self._on_selection_change)

        logger.info("WatershedVizController initialized")

    # =========================================================================
    # Data Loading
    # =========================================================================

    def load_rows(self, rows: Iterable[Mapping[str, Any]]) -> LoadReport:
        """
        Replace the dataset with ``rows`` and refresh all views.

        Malformed rows are dropped. If the selected plot disappears the
        selection falls back to the first plot of the new PlotSet.

        Parameters
        ----------
        rows : iterable of mapping
            Raw parsed rows

        Returns
        -------
        LoadReport
            Accepted and dropped row counts
        """
        try:
            self._is_loading = True
            report = self.store.load(rows)
            self.selection.reconcile(self.store.all_plot_ids())
        finally:
            self._is_loading = False

        if report.dropped:
            self._notify('warning', f"{report.dropped} malformed rows were skipped")

        self._sync_widgets()
        self.refresh()
        self._set_status(f"{report}; {len(self.store.all_plot_ids())} plots")
        return report

    def load_files(
        self,
        data_path: Path | str,
        boundary_path: Path | str | None = None
    ) -> LoadReport:
        """
        Read the measurement CSV (and boundary) from disk and load them.

        Parameters
        ----------
        data_path : Path or str
            Measurement CSV
        boundary_path : Path or str, optional
            Boundary GeoJSON; the current boundary is kept when omitted

        Returns
        -------
        LoadReport
        """
        logger.info(f"Loading data from {data_path}")
        rows, boundary = load_dataset(data_path, boundary_path)

        if boundary_path is not None:
            self.set_boundary(boundary)

        if not rows:
            self._notify('warning', f"No measurements read from {data_path}")

        return self.load_rows(rows)

    def set_boundary(self, boundary: Optional[Dict[str, Any]]) -> None:
        """Pass a boundary object through to the map sink."""
        self.boundary = boundary
        try:
            self.map_sink.set_boundary(boundary)
        except Exception as e:
            logger.error(f"Error drawing boundary: {e}", exc_info=True)
            self._notify('error', f"Boundary error: {e}")

    # =========================================================================
    # Selection Commands
    # =========================================================================

    def select_plot(self, plot_id: str) -> None:
        """
        Select a plot.

        Raises
        ------
        UnknownPlotError
            If the plot is not loaded; the selection is unchanged
        """
        self.selection.set_plot(plot_id)

    def select_variable(self, variable_id: str) -> None:
        """
        Select a variable.

        Raises
        ------
        UnknownVariableError
            If the variable is unknown; the selection is unchanged
        """
        self.selection.set_variable(variable_id)

    def _on_selection_change(self, plot_id: Optional[str], variable_id: str):
        if self._is_loading:
            return
        self._sync_widgets()
        self.refresh()

    # =========================================================================
    # Projection
    # =========================================================================

    def project_series(self) -> ProjectedSeries:
        return self.series_projector.project(self.store, self.selection)

    def project_markers(self) -> ProjectedMarkerSet:
        return self.marker_projector.project(self.store, self.selection)

    def refresh(self) -> None:
        """
        Rerun both projections and push them to the view sinks.
        """
        series = self.project_series()
        markers = self.project_markers()

        try:
            self.chart_sink.set_series(series)
            self.map_sink.set_markers(markers)
        except Exception as e:
            logger.error(f"Error updating views: {e}", exc_info=True)
            self._notify('error', f"Plot error: {e}")

        self._update_info_pane(markers)
        logger.debug(f"Views refreshed for selection {self.selection.snapshot()}")

    def _update_info_pane(self, markers: ProjectedMarkerSet):
        if self.info_pane is None:
            return

        plot_id = self.selection.selected_plot
        marker = markers.get(plot_id) if plot_id is not None else None

        self.info_pane.object = build_plot_info_markdown(
            plot_id,
            record_count=len(self.store.records_for(plot_id)),
            location=self.store.location_for(plot_id),
            date_range=self.store.date_range_for(plot_id),
            variable_label=markers.variable_label,
            summary_text=marker.summary_text if marker is not None else NO_DATA_TEXT,
        )

    # =========================================================================
    # Widget Synchronization
    # =========================================================================

    def _sync_widgets(self):
        """Push the selection into the selector widgets without feedback."""
        plot_selector = self.widgets.get('plot_selector')
        variable_selector = self.widgets.get('variable_selector')

        try:
            self._syncing_widgets = True
            if plot_selector is not None:
                plot_selector.options = list(self.selection.available_plots)
                plot_selector.value = self.selection.selected_plot
            if variable_selector is not None:
                variable_selector.value = self.selection.selected_variable
        finally:
            self._syncing_widgets = False

    def _set_status(self, text: str):
        status = self.widgets.get('status')
        if status is not None:
            status.object = text

    def _notify(self, level: str, message: str):
        if pn.state.notifications:
            getattr(pn.state.notifications, level)(message)

    # =========================================================================
    # Widget Callbacks
    # =========================================================================

    def on_plot_widget_change(self, event):
        """Handle plot selector changes."""
        if self._syncing_widgets or event.new is None:
            return
        self._apply_selection(self.select_plot, event.new)

    def on_variable_widget_change(self, event):
        """Handle variable selector changes."""
        if self._syncing_widgets or event.new is None:
            return
        self._apply_selection(self.select_variable, event.new)

    def on_marker_select(self, plot_id: str):
        """Handle a tapped map marker."""
        self._apply_selection(self.select_plot, plot_id)

    def _apply_selection(self, command, value):
        try:
            command(value)
        except SelectionError as e:
            logger.warning(f"Selection rejected: {e}")
            self._notify('error', str(e))
            self._sync_widgets()

    def on_reload(self, event=None):
        """
        Reload data from the paths in the data source inputs.

        A reload replaces the current dataset wholesale.
        """
        source = self.widgets.get('data_source')
        if not source:
            return

        data_path = source['data_path'].value.strip()
        boundary_path = source['boundary_path'].value.strip() or None

        try:
            report = self.load_files(data_path, boundary_path)
        except Exception as e:
            logger.error(f"Error reloading data: {e}", exc_info=True)
            self._notify('error', f"Data loading error: {e}")
            return

        self._notify('success', f"Loaded {report.accepted} records")

    # =========================================================================
    # Callback Attachment
    # =========================================================================

    def attach_callbacks(self):
        """
        Attach all widget and map callbacks.

        This method should be called once after the controller is initialized.
        """
        logger.info("Attaching callbacks...")

        if 'plot_selector' in self.widgets:
            self.widgets['plot_selector'].param.watch(self.on_plot_widget_change, 'value')

        if 'variable_selector' in self.widgets:
            self.widgets['variable_selector'].param.watch(self.on_variable_widget_change, 'value')

        if 'data_source' in self.widgets:
            self.widgets['data_source']['reload'].on_click(self.on_reload)

        if isinstance(self.map_sink, MarkerMapView):
            self.map_sink.on_select = self.on_marker_select

        logger.info("All callbacks attached")
