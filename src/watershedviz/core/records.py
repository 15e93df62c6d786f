"""
Measurement Record Store

Holds the parsed dataset as an ordered sequence of immutable measurement
records and answers the read-only queries the projectors need.

Row coercion is permissive: a row without a plot identifier or a parseable
date is dropped with a warning, and numeric columns that cannot be coerced
are stored as absent values.
"""

import math
import numbers
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

import pandas as pd

from watershedviz.config import (
    VARIABLE_IDS,
    PLOT_COLUMN,
    DATE_COLUMN,
    LATITUDE_COLUMN,
    LONGITUDE_COLUMN,
)
from watershedviz.errors import MalformedRowError

logger = logging.getLogger(__name__)


# =============================================================================
# Data Structures
# =============================================================================

@dataclass(frozen=True)
class MeasurementRecord:
    """
    One (plot, date) measurement.

    Attributes
    ----------
    plot_id : str
        Plot identifier
    date : pd.Timestamp
        Measurement date (timezone-naive)
    latitude : float
        Plot latitude (NaN when missing from the row)
    longitude : float
        Plot longitude (NaN when missing from the row)
    variables : Mapping[str, float or None]
        Value per variable id; None marks an absent value
    """
    plot_id: str
    date: pd.Timestamp
    latitude: float
    longitude: float
    variables: Mapping[str, Optional[float]] = field(default_factory=dict)

    def value(self, variable_id: str) -> Optional[float]:
        """Return the numeric value for ``variable_id`` or None if absent."""
        return self.variables.get(variable_id)

    def has_value(self, variable_id: str) -> bool:
        return self.value(variable_id) is not None


@dataclass
class LoadReport:
    """
    Outcome of a RecordStore.load() call.

    Attributes
    ----------
    accepted : int
        Number of rows stored as records
    dropped : int
        Number of malformed rows skipped
    errors : list of MalformedRowError
        The errors for the dropped rows, in row order
    """
    accepted: int = 0
    dropped: int = 0
    errors: List[MalformedRowError] = field(default_factory=list)

    def __str__(self) -> str:
        return f"{self.accepted} records loaded, {self.dropped} rows dropped"


# =============================================================================
# Row Coercion
# =============================================================================

def coerce_float(value: Any) -> Optional[float]:
    """
    Coerce a raw CSV value to a finite float.

    Parameters
    ----------
    value : Any
        Raw value (number, numeric string, empty string, None, NaN)

    Returns
    -------
    float or None
        The float value, or None when it is absent or not numeric

    Examples
    --------
    >>> coerce_float('12.5')
    12.5
    >>> coerce_float('n/a') is None
    True
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(result):
        return None
    return result


def coerce_plot_id(value: Any) -> Optional[str]:
    """
    Normalise a raw plot identifier to a non-empty string.

    Integral floats (as produced by typed CSV readers) lose their ``.0``
    suffix so that ``3.0`` and ``'3'`` name the same plot.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        if value.is_integer():
            value = int(value)
    text = str(value).strip()
    return text or None


def coerce_date(value: Any) -> Optional[pd.Timestamp]:
    """
    Parse a raw date value into a timezone-naive Timestamp.

    Timezone-aware values are converted to UTC before the timezone is
    dropped so that all stored dates compare with each other.

    Returns
    -------
    pd.Timestamp or None
        Parsed date, or None if the value cannot be parsed
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    elif isinstance(value, numbers.Real):
        # Bare numbers are years or compact dates (20230101), never epoch offsets
        if not math.isfinite(value):
            return None
        value = str(int(value)) if float(value).is_integer() else str(value)

    ts = pd.to_datetime(value, errors='coerce')
    if ts is None or pd.isna(ts):
        return None
    if ts.tzinfo is not None:
        ts = ts.tz_convert('UTC').tz_localize(None)
    return ts


def parse_row(row: Mapping[str, Any], row_index: Optional[int] = None) -> MeasurementRecord:
    """
    Convert one raw ingested row into a MeasurementRecord.

    Parameters
    ----------
    row : mapping
        Column name to raw value
    row_index : int, optional
        Position of the row, used in error messages

    Returns
    -------
    MeasurementRecord

    Raises
    ------
    MalformedRowError
        If the row lacks a plot identifier or a parseable date
    """
    if not isinstance(row, Mapping):
        raise MalformedRowError(f"expected a mapping, got {type(row).__name__}", row_index, row)

    plot_id = coerce_plot_id(row.get(PLOT_COLUMN))
    if plot_id is None:
        raise MalformedRowError("missing plot identifier", row_index, row)

    raw_date = row.get(DATE_COLUMN)
    date = coerce_date(raw_date)
    if date is None:
        raise MalformedRowError(f"unparseable date {raw_date!r}", row_index, row)

    latitude = coerce_float(row.get(LATITUDE_COLUMN))
    longitude = coerce_float(row.get(LONGITUDE_COLUMN))

    variables = {var_id: coerce_float(row.get(var_id)) for var_id in VARIABLE_IDS}

    return MeasurementRecord(
        plot_id=plot_id,
        date=date,
        latitude=latitude if latitude is not None else math.nan,
        longitude=longitude if longitude is not None else math.nan,
        variables=MappingProxyType(variables),
    )


# =============================================================================
# Record Store
# =============================================================================

class RecordStore:
    """
    Ordered, read-only store of measurement records.

    Records keep their ingestion order. Per-plot indexes are rebuilt on
    every load; a load always replaces the previous contents wholesale.

    Examples
    --------
    >>> store = RecordStore()
    >>> report = store.load([{'plot': 'A', 'date': '2023-01-01', 'moisture': 10}])
    >>> store.all_plot_ids()
    ['A']
    """

    def __init__(self, rows: Optional[Iterable[Mapping[str, Any]]] = None):
        self._records: Tuple[MeasurementRecord, ...] = ()
        self._by_plot: Dict[str, List[MeasurementRecord]] = {}
        self._plot_ids: List[str] = []

        if rows is not None:
            self.load(rows)

    def load(self, rows: Iterable[Mapping[str, Any]]) -> LoadReport:
        """
        Replace all records with the parsed ``rows``.

        Malformed rows are dropped and reported; they never abort the load.

        Parameters
        ----------
        rows : iterable of mapping
            Raw parsed rows (column name -> raw value)

        Returns
        -------
        LoadReport
            Accepted and dropped counts plus the per-row errors
        """
        report = LoadReport()
        records: List[MeasurementRecord] = []

        for index, row in enumerate(rows):
            try:
                records.append(parse_row(row, index))
            except MalformedRowError as e:
                logger.warning(f"Dropping malformed row: {e}")
                report.errors.append(e)

        by_plot: Dict[str, List[MeasurementRecord]] = {}
        for record in records:
            by_plot.setdefault(record.plot_id, []).append(record)

        self._records = tuple(records)
        self._by_plot = by_plot
        self._plot_ids = sorted(by_plot)

        report.accepted = len(records)
        report.dropped = len(report.errors)
        logger.info(f"Record store loaded: {report} across {len(self._plot_ids)} plots")
        return report

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._records)

    @property
    def is_empty(self) -> bool:
        return not self._records

    @property
    def records(self) -> Tuple[MeasurementRecord, ...]:
        """All records in storage order."""
        return self._records

    def all_plot_ids(self) -> List[str]:
        """Sorted, deduplicated plot identifiers (the PlotSet)."""
        return list(self._plot_ids)

    def records_for(self, plot_id: Optional[str]) -> List[MeasurementRecord]:
        """Records of one plot in storage order; empty for unknown plots."""
        return list(self._by_plot.get(plot_id, ()))

    def latest_record_for(self, plot_id: Optional[str]) -> Optional[MeasurementRecord]:
        """
        Return the record with the latest date for a plot.

        When two records share the latest date, the one inserted later wins.

        Parameters
        ----------
        plot_id : str
            Plot identifier

        Returns
        -------
        MeasurementRecord or None
            None when the plot has no records
        """
        latest = None
        for record in self._by_plot.get(plot_id, ()):
            if latest is None or record.date >= latest.date:
                latest = record
        return latest

    def location_for(self, plot_id: Optional[str]) -> Optional[Tuple[float, float]]:
        """(latitude, longitude) of the first-seen record for a plot."""
        plot_records = self._by_plot.get(plot_id)
        if not plot_records:
            return None
        first = plot_records[0]
        return (first.latitude, first.longitude)

    def date_range_for(self, plot_id: Optional[str]) -> Optional[Tuple[pd.Timestamp, pd.Timestamp]]:
        """(earliest, latest) record dates for a plot, or None."""
        plot_records = self._by_plot.get(plot_id)
        if not plot_records:
            return None
        dates = [r.date for r in plot_records]
        return (min(dates), max(dates))
