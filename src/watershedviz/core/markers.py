"""
Marker Projection Module

Derives the map marker set for the current selection: one marker per plot
in the PlotSet with its fixed location, a highlight flag for the selected
plot and a summary of the plot's latest value for the selected variable.
"""

import logging
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from watershedviz.core.records import RecordStore
from watershedviz.state import SelectionState
from watershedviz.utils.formatting import format_value_summary, NO_DATA_TEXT

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProjectedMarker:
    """
    Display payload of one plot marker.

    Attributes
    ----------
    plot_id : str
        Plot identifier
    latitude, longitude : float
        Plot location (first-seen record)
    is_highlighted : bool
        True for the selected plot
    summary_text : str
        Latest value with unit, or 'No Data'
    """
    plot_id: str
    latitude: float
    longitude: float
    is_highlighted: bool
    summary_text: str


@dataclass(frozen=True)
class ProjectedMarkerSet:
    """
    Ordered marker list plus the variable context needed for popups.

    Iterating yields markers in PlotSet (sorted) order.
    """
    markers: Tuple[ProjectedMarker, ...] = ()
    variable_id: str = ''
    variable_label: str = ''
    unit: str = ''

    def __len__(self) -> int:
        return len(self.markers)

    def __iter__(self) -> Iterator[ProjectedMarker]:
        return iter(self.markers)

    def __getitem__(self, index: int) -> ProjectedMarker:
        return self.markers[index]

    @property
    def plot_ids(self) -> List[str]:
        return [m.plot_id for m in self.markers]

    def highlighted(self) -> List[ProjectedMarker]:
        """Markers flagged as selected (zero or one)."""
        return [m for m in self.markers if m.is_highlighted]

    def get(self, plot_id: str) -> Optional[ProjectedMarker]:
        for marker in self.markers:
            if marker.plot_id == plot_id:
                return marker
        return None


class MarkerProjector:
    """Projects the record store and selection onto the map marker set."""

    def project(self, store: RecordStore, selection: SelectionState) -> ProjectedMarkerSet:
        """
        Compute the marker set for the current selection.

        Parameters
        ----------
        store : RecordStore
            Loaded records
        selection : SelectionState
            Current selection

        Returns
        -------
        ProjectedMarkerSet
            One marker per plot, in sorted plot order
        """
        variable = selection.variable
        selected = selection.selected_plot

        markers = []
        for plot_id in store.all_plot_ids():
            latitude, longitude = store.location_for(plot_id)

            latest = store.latest_record_for(plot_id)
            if latest is not None:
                summary = format_value_summary(latest.value(variable.id), variable.unit)
            else:
                summary = NO_DATA_TEXT

            markers.append(ProjectedMarker(
                plot_id=plot_id,
                latitude=latitude,
                longitude=longitude,
                is_highlighted=(plot_id == selected),
                summary_text=summary,
            ))

        return ProjectedMarkerSet(
            markers=tuple(markers),
            variable_id=variable.id,
            variable_label=variable.label,
            unit=variable.unit,
        )
