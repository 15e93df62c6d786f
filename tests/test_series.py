"""
Tests for the chart series projection and its y-range computation.
"""

import math

import pytest

from watershedviz.core.records import RecordStore
from watershedviz.core.series import SeriesProjector, compute_value_range, EMPTY_Y_RANGE
from watershedviz.state import SelectionState


def _project(rows, plot=None, variable="moisture"):
    store = RecordStore(rows)
    state = SelectionState()
    state.reconcile(store.all_plot_ids())
    if plot is not None:
        state.set_plot(plot)
    state.set_variable(variable)
    return SeriesProjector().project(store, state)


# ── Value range ───────────────────────────────────────────────────────────────

def test_value_range_scenario():
    assert compute_value_range([10.0, 20.0]) == (9.0, 21.0)


def test_value_range_empty():
    assert compute_value_range([]) == EMPTY_Y_RANGE == (0.0, 1.0)


def test_value_range_negative():
    assert compute_value_range([-12.3, -8.1]) == (-13.0, -7.0)


def test_value_range_constant_integer():
    assert compute_value_range([5.0, 5.0]) == (5.0, 5.0)


def test_value_range_constant_fraction():
    assert compute_value_range([5.5]) == (5.0, 6.0)


@pytest.mark.parametrize("values", [
    [0.1, 0.2, 0.3],
    [-18.4, -17.9, -19.1, -18.0],
    [27.4, 31.2, 25.0],
    [1e-3, 1e3],
    [42.0],
])
def test_value_range_contains_all_values(values):
    y_min, y_max = compute_value_range(values)
    assert y_min <= min(values)
    assert y_max >= max(values)
    assert y_min == math.floor(y_min)
    assert y_max == math.ceil(y_max)


# ── Projection ────────────────────────────────────────────────────────────────

def test_scenario_series(store, selection):
    series = SeriesProjector().project(store, selection)

    assert list(series.labels) == ["2023-01-01", "2023-01-02"]
    assert list(series.values) == [10.0, 20.0]
    assert (series.y_min, series.y_max) == (9.0, 21.0)
    assert series.series_label == "Soil Moisture"
    assert series.color == "blue"
    assert series.y_axis_title == "Soil Moisture (%)"
    assert series.plot_id == "A"
    assert series.variable_id == "moisture"


def test_plot_without_values_is_empty(store, selection):
    selection.set_plot("B")
    selection.set_variable("lai")
    series = SeriesProjector().project(store, selection)

    assert series.is_empty
    assert len(series) == 0
    assert series.labels == ()
    assert (series.y_min, series.y_max) == (0.0, 1.0)
    assert series.y_axis_title == "Leaf Area Index"


def test_unset_plot_is_empty():
    series = SeriesProjector().project(RecordStore(), SelectionState())
    assert series.is_empty
    assert series.plot_id is None
    assert (series.y_min, series.y_max) == (0.0, 1.0)


def test_series_sorted_by_date():
    series = _project([
        {"plot": "A", "date": "2023-01-03", "moisture": 3},
        {"plot": "A", "date": "2023-01-01", "moisture": 1},
        {"plot": "A", "date": "2023-01-02", "moisture": 2},
    ])
    assert list(series.labels) == ["2023-01-01", "2023-01-02", "2023-01-03"]
    assert list(series.values) == [1.0, 2.0, 3.0]


def test_equal_dates_keep_storage_order():
    series = _project([
        {"plot": "A", "date": "2023-01-02", "moisture": 7},
        {"plot": "A", "date": "2023-01-01", "moisture": 1},
        {"plot": "A", "date": "2023-01-02", "moisture": 8},
    ])
    assert list(series.values) == [1.0, 7.0, 8.0]


def test_absent_values_are_dropped():
    series = _project([
        {"plot": "A", "date": "2023-01-01", "moisture": 1},
        {"plot": "A", "date": "2023-01-02", "moisture": ""},
        {"plot": "A", "date": "2023-01-03", "moisture": "bad"},
        {"plot": "A", "date": "2023-01-04", "moisture": 4},
    ])
    assert list(series.labels) == ["2023-01-01", "2023-01-04"]
    assert len(series.labels) == len(series.values)


def test_other_plots_excluded():
    series = _project([
        {"plot": "A", "date": "2023-01-01", "moisture": 1},
        {"plot": "B", "date": "2023-01-02", "moisture": 99},
    ], plot="A")
    assert list(series.values) == [1.0]


def test_backscatter_axis_title():
    series = _project([{"plot": "A", "date": "2023-01-01", "HV": -18.2}], variable="HV")
    assert series.y_axis_title == "HV Backscatter (dB)"
    assert series.color == "orange"
    assert (series.y_min, series.y_max) == (-19.0, -18.0)


def test_single_integer_point_collapses_range():
    series = _project([{"plot": "A", "date": "2023-01-01", "moisture": 7}])
    assert (series.y_min, series.y_max) == (7.0, 7.0)


def test_time_of_day_in_labels():
    series = _project([{"plot": "A", "date": "2023-01-01 06:30", "moisture": 1}])
    assert list(series.labels) == ["2023-01-01 06:30"]


def test_projection_is_idempotent(store, selection):
    projector = SeriesProjector()
    assert projector.project(store, selection) == projector.project(store, selection)
