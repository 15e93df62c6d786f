"""
WatershedViz Core Module

Record storage, ingestion and the series/marker projections.
"""

from watershedviz.core.records import (
    MeasurementRecord,
    LoadReport,
    RecordStore,
    coerce_float,
    coerce_plot_id,
    coerce_date,
    parse_row,
)

from watershedviz.core.series import (
    ProjectedSeries,
    SeriesProjector,
    compute_value_range,
    build_series,
)

from watershedviz.core.markers import (
    ProjectedMarker,
    ProjectedMarkerSet,
    MarkerProjector,
)

from watershedviz.core.data_loader import (
    read_measurement_rows,
    load_boundary,
    load_dataset,
)

__all__ = [
    # Records
    'MeasurementRecord',
    'LoadReport',
    'RecordStore',
    'coerce_float',
    'coerce_plot_id',
    'coerce_date',
    'parse_row',
    # Series
    'ProjectedSeries',
    'SeriesProjector',
    'compute_value_range',
    'build_series',
    # Markers
    'ProjectedMarker',
    'ProjectedMarkerSet',
    'MarkerProjector',
    # Loading
    'read_measurement_rows',
    'load_boundary',
    'load_dataset',
]
