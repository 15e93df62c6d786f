"""
Formatting Utilities

Functions for formatting dates, marker summaries, popup content and the
plot information markdown.
"""

import math
from typing import Any, Optional, Tuple

import pandas as pd

NO_DATA_TEXT = "No Data"


def format_date_label(value: Any) -> str:
    """
    Format a record date as a chart label.

    Dates at midnight render as ``YYYY-MM-DD``; anything with a time of day
    keeps hours and minutes.

    Parameters
    ----------
    value : datetime-like
        Timestamp, datetime, or anything ``pd.Timestamp`` accepts

    Returns
    -------
    str
        Formatted date string

    Examples
    --------
    >>> format_date_label(pd.Timestamp('2023-01-02'))
    '2023-01-02'
    >>> format_date_label(pd.Timestamp('2023-01-02 06:30'))
    '2023-01-02 06:30'
    """
    try:
        ts = pd.Timestamp(value)
    except (TypeError, ValueError):
        return str(value)

    if pd.isna(ts):
        return str(value)

    if ts.hour or ts.minute or ts.second:
        return ts.strftime('%Y-%m-%d %H:%M')
    return ts.strftime('%Y-%m-%d')


def format_value_summary(value: Optional[float], unit: str = "") -> str:
    """
    Format the latest value of a variable for a marker summary.

    Parameters
    ----------
    value : float or None
        Numeric value; None means the value is absent
    unit : str, optional
        Display unit; omitted when empty

    Returns
    -------
    str
        ``'12.35 %'``, ``'0.87'`` for unitless values, or ``'No Data'``
    """
    if value is None or not math.isfinite(value):
        return NO_DATA_TEXT
    if unit:
        return f"{value:.2f} {unit}"
    # Unitless values end at the number, with no trailing space
    return f"{value:.2f}"


def format_location(latitude: float, longitude: float) -> str:
    """Format a plot location with four decimal places."""
    return f"{latitude:.4f}, {longitude:.4f}"


def build_popup_html(
    plot_id: str,
    variable_label: str,
    summary_text: str,
    latitude: float,
    longitude: float,
    is_highlighted: bool = False
) -> str:
    """
    Build the popup/tooltip HTML for a plot marker.

    Parameters
    ----------
    plot_id : str
        Plot identifier
    variable_label : str
        Display label of the selected variable
    summary_text : str
        Latest-value summary from the marker projection
    latitude, longitude : float
        Plot location
    is_highlighted : bool, default=False
        Whether the marker is the selected plot (title drawn in red)

    Returns
    -------
    str
        HTML fragment
    """
    title_color = '#ff0000' if is_highlighted else '#333'
    return (
        f'<div style="padding: 5px; min-width: 150px;">'
        f'<div style="font-weight: bold; color: {title_color}; margin-bottom: 5px; font-size: 14px;">'
        f'Plot {plot_id}</div>'
        f'<div style="margin-bottom: 3px;"><strong>{variable_label}:</strong><br>{summary_text}</div>'
        f'<div style="font-size: 12px; color: #666;">Location: {format_location(latitude, longitude)}</div>'
        f'</div>'
    )


def build_plot_info_markdown(
    plot_id: Optional[str],
    record_count: int = 0,
    location: Optional[Tuple[float, float]] = None,
    date_range: Optional[Tuple[Any, Any]] = None,
    variable_label: str = "",
    summary_text: str = NO_DATA_TEXT,
) -> str:
    """
    Build a markdown summary of the selected plot.

    Parameters
    ----------
    plot_id : str or None
        Selected plot; None renders a placeholder
    record_count : int
        Number of records stored for the plot
    location : tuple of float, optional
        (latitude, longitude)
    date_range : tuple, optional
        (first date, last date)
    variable_label : str
        Label of the selected variable
    summary_text : str
        Latest-value summary for the selected variable

    Returns
    -------
    str
        Markdown-formatted information
    """
    if plot_id is None:
        return "**Plot Information**: Load data to see plot details."

    lines = [f"### Plot {plot_id}\n\n"]
    lines.append(f"- **Records**: {record_count}\n")

    if location is not None:
        lines.append(f"- **Location**: {format_location(*location)}\n")

    if date_range is not None:
        start, end = date_range
        lines.append(f"- **Dates**: {format_date_label(start)} to {format_date_label(end)}\n")

    if variable_label:
        lines.append(f"- **Latest {variable_label}**: {summary_text}\n")

    return "".join(lines)
