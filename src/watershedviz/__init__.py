"""
WatershedViz - Interactive Watershed Plot Visualization

A small Panel dashboard for time-series environmental measurements (soil
moisture, leaf area index, HH/HV radar backscatter) collected at fixed plots
within a watershed.

This package provides:
- A record store for the parsed measurement CSV
- Selection state for the current plot and variable
- Projections of store + selection onto a chart series and a map marker set
- HoloViews/Panel views for the map and chart

Quick Start
-----------
>>> from watershedviz import RecordStore, SelectionState, SeriesProjector
>>> store = RecordStore([{'plot': 'A', 'date': '2023-01-01', 'moisture': 10}])
>>> selection = SelectionState()
>>> selection.reconcile(store.all_plot_ids())
>>> SeriesProjector().project(store, selection).values
(10.0,)

Or serve the dashboard with the provided app.py:

    $ panel serve app.py --show --port 5006
"""

__version__ = "0.1.0"

# Core components
from watershedviz.config import config, WatershedVizConfig, VariableDescriptor, VARIABLES
from watershedviz.errors import (
    WatershedVizError,
    MalformedRowError,
    SelectionError,
    UnknownPlotError,
    UnknownVariableError,
)
from watershedviz.state import SelectionState

# Data layer
from watershedviz.core.records import RecordStore, MeasurementRecord, LoadReport
from watershedviz.core.series import SeriesProjector, ProjectedSeries
from watershedviz.core.markers import MarkerProjector, ProjectedMarker, ProjectedMarkerSet
from watershedviz.core.data_loader import read_measurement_rows, load_boundary

# View contract
from watershedviz.plotting.sinks import ChartSink, MapSink

# Application
from watershedviz.controllers import WatershedVizController
from watershedviz.ui import create_dashboard

__all__ = [
    # Version
    '__version__',

    # Config
    'config',
    'WatershedVizConfig',
    'VariableDescriptor',
    'VARIABLES',

    # Errors
    'WatershedVizError',
    'MalformedRowError',
    'SelectionError',
    'UnknownPlotError',
    'UnknownVariableError',

    # State
    'SelectionState',

    # Data
    'RecordStore',
    'MeasurementRecord',
    'LoadReport',
    'read_measurement_rows',
    'load_boundary',

    # Projections
    'SeriesProjector',
    'ProjectedSeries',
    'MarkerProjector',
    'ProjectedMarker',
    'ProjectedMarkerSet',

    # Views
    'ChartSink',
    'MapSink',

    # Application
    'WatershedVizController',
    'create_dashboard',
]
