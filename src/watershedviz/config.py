"""
WatershedViz Configuration Module

This module contains all global configuration, constants, and default settings
for the WatershedViz application, including the fixed set of measured
variables.
"""

import logging
from pathlib import Path
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


# =============================================================================
# Variable Descriptors
# =============================================================================

@dataclass(frozen=True)
class VariableDescriptor:
    """
    Static description of one measured variable.

    Attributes
    ----------
    id : str
        Column name in the ingested data (e.g. 'moisture')
    label : str
        Display label used for the chart series and popups
    unit : str
        Display unit; empty for unitless quantities
    color : str
        Colour token for the chart line
    """
    id: str
    label: str
    unit: str
    color: str

    @property
    def axis_title(self) -> str:
        """Axis title: 'Label (unit)', or just 'Label' when unitless."""
        if self.unit:
            return f"{self.label} ({self.unit})"
        return self.label


VARIABLES: Tuple[VariableDescriptor, ...] = (
    VariableDescriptor('moisture', 'Soil Moisture', '%', 'blue'),
    VariableDescriptor('lai', 'Leaf Area Index', '', 'green'),
    VariableDescriptor('HH', 'HH Backscatter', 'dB', 'red'),
    VariableDescriptor('HV', 'HV Backscatter', 'dB', 'orange'),
)

VARIABLES_BY_ID: Dict[str, VariableDescriptor] = {v.id: v for v in VARIABLES}

VARIABLE_IDS: List[str] = [v.id for v in VARIABLES]

DEFAULT_VARIABLE = VARIABLES[0].id


def get_variable(variable_id: str) -> Optional[VariableDescriptor]:
    """Return the descriptor for ``variable_id`` or None if unknown."""
    return VARIABLES_BY_ID.get(variable_id)


# =============================================================================
# Ingestion Columns
# =============================================================================

PLOT_COLUMN = 'plot'
DATE_COLUMN = 'date'
LATITUDE_COLUMN = 'latitude'
LONGITUDE_COLUMN = 'longitude'


# =============================================================================
# Default Paths
# =============================================================================

DEFAULT_DATA_PATH = Path('data.csv')
DEFAULT_BOUNDARY_PATH = Path('boundary.geojson')


# =============================================================================
# Map Settings
# =============================================================================

# Watershed centre (lat, lon) used until a boundary or markers are available
DEFAULT_MAP_CENTER = (11.7468, 76.5573)

# Half-width of the default view in degrees
DEFAULT_MAP_SPAN = 0.05

# Fraction of the fitted extent added around boundary/marker bounds
MAP_EXTENT_PADDING = 0.05

BOUNDARY_COLOR = 'blue'
BOUNDARY_LINE_WIDTH = 2

MARKER_SIZE = 10
HIGHLIGHT_MARKER_SIZE = 14
MARKER_COLOR = 'gray'
HIGHLIGHT_MARKER_COLOR = 'red'

# Pointer distance (fraction of the map extent) that still counts as hovering a marker
HOVER_RADIUS_FRACTION = 0.03


# =============================================================================
# Pane Sizes
# =============================================================================

MAP_HEIGHT = 450
CHART_HEIGHT = 400
CHART_POINT_SIZE = 5
SIDEBAR_WIDTH = 320


# =============================================================================
# Configuration Dataclass
# =============================================================================

@dataclass
class WatershedVizConfig:
    """
    WatershedViz configuration with sensible defaults.

    Values can be overridden from a ``[watershedviz]`` table in a
    config.toml file.
    """

    # Input files
    data_path: Path = DEFAULT_DATA_PATH
    boundary_path: Path = DEFAULT_BOUNDARY_PATH

    # Map defaults
    map_center: Tuple[float, float] = DEFAULT_MAP_CENTER
    map_height: int = MAP_HEIGHT

    # Chart defaults
    chart_height: int = CHART_HEIGHT

    # Server
    port: int = 5006
    title: str = "Watershed Data Visualization"

    @classmethod
    def load_from_file(cls, config_path: Path | None = None) -> 'WatershedVizConfig':
        """
        Load configuration from TOML file if exists, otherwise use defaults.

        Parameters
        ----------
        config_path : Path, optional
            Path to configuration file. If None, searches for config.toml
            in current directory or ~/.watershedviz/

        Returns
        -------
        WatershedVizConfig
            Configuration instance
        """
        search_paths = [
            config_path,
            Path.cwd() / 'config.toml',
            Path.home() / '.watershedviz' / 'config.toml'
        ]

        for path in search_paths:
            if path and path.exists():
                try:
                    import tomllib
                    with open(path, 'rb') as f:
                        data = tomllib.load(f)
                    section = data.get('watershedviz', {})

                    center = section.get('map_center', cls.map_center)
                    return cls(
                        data_path=Path(section.get('data_path', cls.data_path)),
                        boundary_path=Path(section.get('boundary_path', cls.boundary_path)),
                        map_center=(float(center[0]), float(center[1])),
                        map_height=int(section.get('map_height', cls.map_height)),
                        chart_height=int(section.get('chart_height', cls.chart_height)),
                        port=int(section.get('port', cls.port)),
                        title=str(section.get('title', cls.title)),
                    )
                except Exception as e:
                    logger.warning(f"Failed to load config from {path}: {e}")

        return cls()


# Default configuration instance
config = WatershedVizConfig()
