"""
Chart Plotting Module

Builds the HoloViews time-series chart for a projected series: a line with
point markers over categorical date labels, y limits taken from the
projection.
"""

import logging
from typing import Optional, Tuple

import holoviews as hv

from watershedviz.config import CHART_HEIGHT, CHART_POINT_SIZE
from watershedviz.core.series import ProjectedSeries

logger = logging.getLogger(__name__)


def display_y_limits(series: ProjectedSeries) -> Tuple[float, float]:
    """
    y limits handed to Bokeh.

    A constant integer-valued series projects to ``y_min == y_max``; Bokeh
    cannot draw a zero-height range, so the display range is widened by
    half a unit on each side. The projection itself is left untouched.
    """
    if series.y_min == series.y_max:
        return (series.y_min - 0.5, series.y_max + 0.5)
    return (series.y_min, series.y_max)


def build_chart_title(series: ProjectedSeries) -> str:
    if series.plot_id is None:
        return "No plot selected"
    if series.is_empty:
        return f"Plot {series.plot_id}: no {series.series_label} data"
    return f"Plot {series.plot_id}: {series.series_label}"


def create_series_plot(
    series: ProjectedSeries,
    height: int = CHART_HEIGHT,
    title: Optional[str] = None
) -> hv.Overlay:
    """
    Create the time-series chart for a projected series.

    Parameters
    ----------
    series : ProjectedSeries
        Output of SeriesProjector.project()
    height : int, default=CHART_HEIGHT
        Plot height in pixels (width is responsive)
    title : str, optional
        Plot title; derived from the series when omitted

    Returns
    -------
    hv.Overlay
        Curve * Scatter overlay; an empty but valid plot when the series
        has no points

    Examples
    --------
    >>> chart = create_series_plot(series)
    >>> pn.pane.HoloViews(chart)
    """
    date_dim = hv.Dimension('date', label='Date')
    value_dim = hv.Dimension('value', label=series.y_axis_title)

    data = list(zip(series.labels, series.values))

    curve = hv.Curve(
        data,
        kdims=[date_dim],
        vdims=[value_dim],
        label=series.series_label
    ).opts(
        color=series.color,
        line_width=2,
    )

    points = hv.Scatter(
        data,
        kdims=[date_dim],
        vdims=[value_dim],
        label=series.series_label
    ).opts(
        color=series.color,
        size=CHART_POINT_SIZE,
        tools=['hover'],
    )

    return (curve * points).opts(
        ylim=display_y_limits(series),
        xrotation=45,
        height=height,
        responsive=True,
        show_grid=True,
        title=title if title is not None else build_chart_title(series),
        fontsize={'title': '12pt', 'labels': '11pt', 'xticks': '9pt', 'yticks': '9pt'},
    )
