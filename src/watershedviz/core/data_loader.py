"""
Watershed Data Loading Module

Reads the measurement CSV and the watershed boundary GeoJSON from disk.

The CSV reader returns raw row mappings; all coercion and validation happens
in the record store so that the same rules apply to rows from any source.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import pandas as pd

from watershedviz.config import PLOT_COLUMN, DATE_COLUMN

logger = logging.getLogger(__name__)


# =============================================================================
# Measurement CSV
# =============================================================================

def read_measurement_rows(path: Path | str) -> List[Dict[str, Any]]:
    """
    Read the measurement CSV into a list of raw row dicts.

    The plot and date columns are kept as strings so that identifiers such
    as ``'01'`` survive; every other column uses pandas type inference.
    Empty cells arrive as NaN and are treated as absent downstream.

    Parameters
    ----------
    path : Path or str
        Path to the CSV file

    Returns
    -------
    list of dict
        One mapping per data row; empty if the file is missing or unreadable

    Examples
    --------
    >>> rows = read_measurement_rows('data.csv')
    >>> rows[0]['plot']
    'P01'
    """
    path = Path(path)

    if not path.is_file():
        logger.error(f"Measurement file not found: {path}")
        return []

    try:
        df = pd.read_csv(
            path,
            dtype={PLOT_COLUMN: str, DATE_COLUMN: str},
            skipinitialspace=True,
            skip_blank_lines=True,
        )
    except (OSError, ValueError, pd.errors.ParserError) as e:
        logger.error(f"Error reading measurements from {path}: {e}")
        return []

    df.columns = [str(c).strip() for c in df.columns]
    rows = df.to_dict(orient='records')

    logger.info(f"Read {len(rows)} rows from {path}")
    return rows


# =============================================================================
# Boundary GeoJSON
# =============================================================================

def load_boundary(path: Path | str) -> Optional[Dict[str, Any]]:
    """
    Load the watershed boundary GeoJSON.

    The object is returned as parsed and passed opaquely to the map view.

    Parameters
    ----------
    path : Path or str
        Path to the GeoJSON file

    Returns
    -------
    dict or None
        Parsed GeoJSON, or None if the file is missing or invalid
    """
    path = Path(path)

    if not path.is_file():
        logger.warning(f"Boundary file not found: {path}")
        return None

    try:
        with open(path, 'r', encoding='utf-8') as f:
            boundary = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Error reading boundary from {path}: {e}")
        return None

    if not isinstance(boundary, dict) or 'type' not in boundary:
        logger.error(f"Boundary file {path} is not a GeoJSON object")
        return None

    logger.info(f"Loaded boundary ({boundary['type']}) from {path}")
    return boundary


def load_dataset(
    data_path: Path | str,
    boundary_path: Path | str | None = None
) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
    """
    Load measurement rows and (optionally) the boundary in one call.

    Returns
    -------
    tuple
        (rows, boundary); boundary is None when not requested or not found
    """
    rows = read_measurement_rows(data_path)
    boundary = load_boundary(boundary_path) if boundary_path is not None else None
    return rows, boundary
