"""
Tests for reading the measurement CSV and boundary GeoJSON from disk.
"""

import json

import pytest

from watershedviz.core.data_loader import read_measurement_rows, load_boundary, load_dataset
from watershedviz.core.records import RecordStore


CSV_TEXT = """plot,date,latitude,longitude,moisture,lai,HH,HV
01,2023-01-01,11.75,76.55,10.5,1.2,-12.1,-18.3
01,2023-01-02,11.75,76.55,,1.3,-11.9,-18.0
02,2023-01-01,11.76,76.56,n/a,0.9,-13.0,-19.1
,2023-01-03,11.76,76.56,4.0,0.9,-13.0,-19.1
"""

BOUNDARY = {
    "type": "FeatureCollection",
    "features": [{
        "type": "Feature",
        "properties": {"name": "watershed"},
        "geometry": {"type": "Polygon", "coordinates": [[[76.5, 11.7], [76.6, 11.7], [76.6, 11.8], [76.5, 11.7]]]},
    }],
}


@pytest.fixture
def csv_path(tmp_path):
    path = tmp_path / "data.csv"
    path.write_text(CSV_TEXT)
    return path


@pytest.fixture
def boundary_path(tmp_path):
    path = tmp_path / "boundary.geojson"
    path.write_text(json.dumps(BOUNDARY))
    return path


def test_read_rows_keeps_plot_ids_as_text(csv_path):
    rows = read_measurement_rows(csv_path)
    assert len(rows) == 4
    assert rows[0]["plot"] == "01"
    assert rows[0]["moisture"] == 10.5


def test_rows_feed_record_store(csv_path):
    store = RecordStore()
    report = store.load(read_measurement_rows(csv_path))

    assert report.accepted == 3
    assert report.dropped == 1
    assert store.all_plot_ids() == ["01", "02"]
    assert store.latest_record_for("01").value("moisture") is None
    assert store.latest_record_for("02").value("moisture") is None
    assert store.latest_record_for("02").value("HV") == -19.1
    assert store.location_for("02") == (11.76, 76.56)


def test_read_missing_file_returns_empty(tmp_path):
    assert read_measurement_rows(tmp_path / "missing.csv") == []


def test_read_header_only(tmp_path):
    path = tmp_path / "empty.csv"
    path.write_text("plot,date,moisture\n")
    assert read_measurement_rows(path) == []


def test_load_boundary(boundary_path):
    assert load_boundary(boundary_path) == BOUNDARY


def test_load_boundary_missing(tmp_path):
    assert load_boundary(tmp_path / "nope.geojson") is None


def test_load_boundary_invalid_json(tmp_path):
    path = tmp_path / "bad.geojson"
    path.write_text("{not json")
    assert load_boundary(path) is None


def test_load_boundary_not_geojson(tmp_path):
    path = tmp_path / "list.geojson"
    path.write_text("[1, 2, 3]")
    assert load_boundary(path) is None


def test_load_dataset(csv_path, boundary_path):
    rows, boundary = load_dataset(csv_path, boundary_path)
    assert len(rows) == 4
    assert boundary["type"] == "FeatureCollection"

    rows, boundary = load_dataset(csv_path)
    assert boundary is None
