"""
View Sink Contract

The declarative interface between the projectors and whatever draws them.
The controller only talks to these protocols; the Panel/HoloViews views in
``watershedviz.ui.views`` are one implementation, test doubles are another.
"""

from typing import Any, Dict, Optional, Protocol, runtime_checkable

from watershedviz.core.markers import ProjectedMarkerSet
from watershedviz.core.series import ProjectedSeries


@runtime_checkable
class ChartSink(Protocol):
    """Accepts a chart series and draws it."""

    def set_series(self, series: ProjectedSeries) -> None:
        """Replace the drawn series with ``series``."""
        ...


@runtime_checkable
class MapSink(Protocol):
    """Accepts plot markers and a boundary outline and draws them."""

    def set_markers(self, markers: ProjectedMarkerSet) -> None:
        """Replace the drawn markers with ``markers``."""
        ...

    def set_boundary(self, boundary: Optional[Dict[str, Any]]) -> None:
        """Replace the drawn boundary; None removes it."""
        ...
