"""
Pytest fixtures for WatershedViz tests.

Provides reusable sample rows, a loaded record store, a selection bound to
it, and recording view sinks that capture what the controller pushes.
"""

import pytest
import holoviews as hv

from watershedviz.core.records import RecordStore
from watershedviz.state import SelectionState
from watershedviz.controllers import WatershedVizController


# ── Sample data ───────────────────────────────────────────────────────────────

SCENARIO_ROWS = [
    {"plot": "A", "date": "2023-01-01", "moisture": 10},
    {"plot": "A", "date": "2023-01-02", "moisture": 20},
    {"plot": "B", "date": "2023-01-01", "moisture": 5},
]

FIELD_ROWS = [
    {"plot": "P2", "date": "2023-03-01", "latitude": "11.7510", "longitude": "76.5620",
     "moisture": "31.2", "lai": "1.10", "HH": "-11.5", "HV": "-17.9"},
    {"plot": "P1", "date": "2023-03-15", "latitude": 11.7468, "longitude": 76.5573,
     "moisture": 27.4, "lai": 0.95, "HH": -12.1, "HV": -18.4},
    {"plot": "P1", "date": "2023-03-01", "latitude": 11.7468, "longitude": 76.5573,
     "moisture": 25.0, "lai": "", "HH": -12.8, "HV": -18.9},
    {"plot": "P3", "date": "2023-03-01", "latitude": 11.7401, "longitude": 76.5488,
     "moisture": "n/a", "lai": 1.42, "HH": "", "HV": None},
]


# ── Recording sinks ───────────────────────────────────────────────────────────

class RecordingChartSink:
    """Chart sink that keeps every series it receives."""

    def __init__(self):
        self.calls = []

    def set_series(self, series):
        self.calls.append(series)

    @property
    def last(self):
        return self.calls[-1] if self.calls else None


class RecordingMapSink:
    """Map sink that keeps every marker set and boundary it receives."""

    def __init__(self):
        self.calls = []
        self.boundaries = []

    def set_markers(self, markers):
        self.calls.append(markers)

    def set_boundary(self, boundary):
        self.boundaries.append(boundary)

    @property
    def last(self):
        return self.calls[-1] if self.calls else None


# ── Fixtures ──────────────────────────────────────────────────────────────────

@pytest.fixture(scope="session", autouse=True)
def bokeh_extension():
    """Load the bokeh plotting extension so element options validate."""
    hv.extension("bokeh")


@pytest.fixture
def scenario_rows():
    return [dict(row) for row in SCENARIO_ROWS]


@pytest.fixture
def field_rows():
    return [dict(row) for row in FIELD_ROWS]


@pytest.fixture
def store(scenario_rows):
    return RecordStore(scenario_rows)


@pytest.fixture
def field_store(field_rows):
    return RecordStore(field_rows)


@pytest.fixture
def selection(store):
    """Selection reconciled against the scenario store (plot 'A', moisture)."""
    state = SelectionState()
    state.reconcile(store.all_plot_ids())
    return state


@pytest.fixture
def chart_sink():
    return RecordingChartSink()


@pytest.fixture
def map_sink():
    return RecordingMapSink()


@pytest.fixture
def controller(chart_sink, map_sink):
    return WatershedVizController(chart_sink=chart_sink, map_sink=map_sink)
