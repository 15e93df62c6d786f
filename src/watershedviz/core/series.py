"""
Series Projection Module

Derives the chart series for the current selection: the selected plot's
records with a value for the selected variable, sorted by date, plus an
auto-scaled y range with 10% padding.
"""

import math
import logging
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from watershedviz.config import VariableDescriptor
from watershedviz.core.records import RecordStore
from watershedviz.state import SelectionState
from watershedviz.utils.formatting import format_date_label

logger = logging.getLogger(__name__)

# Fraction of the value span added above and below the data
Y_PADDING_FRACTION = 0.1

# y range used when there is nothing to draw
EMPTY_Y_RANGE = (0.0, 1.0)


@dataclass(frozen=True)
class ProjectedSeries:
    """
    Display-ready chart series.

    Attributes
    ----------
    labels : tuple of str
        Formatted dates, ascending
    values : tuple of float
        Values aligned with ``labels``
    series_label : str
        Legend label (variable label)
    color : str
        Line colour token
    y_min, y_max : float
        y-axis limits
    y_axis_title : str
        'Label (unit)' or 'Label' for unitless variables
    plot_id : str or None
        Plot the series belongs to
    variable_id : str
        Variable the series shows
    """
    labels: Tuple[str, ...]
    values: Tuple[float, ...]
    series_label: str
    color: str
    y_min: float
    y_max: float
    y_axis_title: str
    plot_id: Optional[str] = None
    variable_id: str = ''

    @property
    def is_empty(self) -> bool:
        return not self.values

    def __len__(self) -> int:
        return len(self.values)


def compute_value_range(values: Sequence[float]) -> Tuple[float, float]:
    """
    Compute padded y-axis limits for a series.

    The limits are ``floor(min - pad)`` and ``ceil(max + pad)`` with
    ``pad = 0.1 * (max - min)``. A constant series gets no padding, so both
    limits collapse onto the floor/ceil of its value. An empty series gets
    (0, 1).

    Parameters
    ----------
    values : sequence of float
        Series values (finite)

    Returns
    -------
    tuple of float
        (y_min, y_max)

    Examples
    --------
    >>> compute_value_range([10.0, 20.0])
    (9.0, 21.0)
    >>> compute_value_range([])
    (0.0, 1.0)
    """
    if not values:
        return EMPTY_Y_RANGE

    lo = min(values)
    hi = max(values)
    padding = (hi - lo) * Y_PADDING_FRACTION

    return (float(math.floor(lo - padding)), float(math.ceil(hi + padding)))


class SeriesProjector:
    """
    Projects the record store and selection onto a chart series.

    The projector is stateless; calling :meth:`project` twice with the same
    store and selection yields equal results.
    """

    def project(self, store: RecordStore, selection: SelectionState) -> ProjectedSeries:
        """
        Compute the chart series for the current selection.

        Parameters
        ----------
        store : RecordStore
            Loaded records
        selection : SelectionState
            Current selection

        Returns
        -------
        ProjectedSeries
            Series for the selected plot and variable; empty (with y range
            0..1) when the plot is unset or has no values for the variable
        """
        variable = selection.variable
        plot_id = selection.selected_plot

        points = []
        for record in store.records_for(plot_id):
            value = record.value(variable.id)
            if value is None:
                continue
            points.append((record.date, value))

        # sorted() is stable: equal dates keep storage order
        points = sorted(points, key=lambda point: point[0])

        labels = [format_date_label(date) for date, _ in points]
        values = [value for _, value in points]
        y_min, y_max = compute_value_range(values)

        logger.debug(f"Projected {len(values)} points for plot={plot_id} variable={variable.id}")

        return build_series(labels, values, variable, y_min, y_max, plot_id)


def build_series(
    labels: List[str],
    values: List[float],
    variable: VariableDescriptor,
    y_min: float,
    y_max: float,
    plot_id: Optional[str] = None
) -> ProjectedSeries:
    """Assemble a ProjectedSeries from its parts and the variable descriptor."""
    return ProjectedSeries(
        labels=tuple(labels),
        values=tuple(values),
        series_label=variable.label,
        color=variable.color,
        y_min=y_min,
        y_max=y_max,
        y_axis_title=variable.axis_title,
        plot_id=plot_id,
        variable_id=variable.id,
    )
