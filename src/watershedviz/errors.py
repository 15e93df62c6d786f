"""
WatershedViz Exceptions

Exception taxonomy shared by the record store, the selection state and the
controller.

- MalformedRowError is recoverable: the offending row is dropped and the
  load continues.
- UnknownPlotError / UnknownVariableError reject a selection command and
  leave the previous selection in place.

An empty or not-yet-loaded dataset is a valid state and never raises.
"""

from typing import Any, Optional, Sequence


class WatershedVizError(Exception):
    """Base class for all WatershedViz errors."""


class MalformedRowError(WatershedVizError, ValueError):
    """
    Raised when an ingested row cannot become a measurement record.

    Parameters
    ----------
    reason : str
        Human-readable description of the problem
    row_index : int, optional
        Position of the row in the ingested sequence
    row : mapping, optional
        The raw row
    """

    def __init__(self, reason: str, row_index: Optional[int] = None, row: Any = None):
        self.reason = reason
        self.row_index = row_index
        self.row = row
        where = f"row {row_index}: " if row_index is not None else ""
        super().__init__(f"{where}{reason}")


class SelectionError(WatershedVizError, LookupError):
    """Base class for rejected selection commands."""

    kind = "value"

    def __init__(self, value: Any, options: Sequence[str] = ()):
        self.value = value
        self.options = list(options)
        super().__init__(self._message())

    def _message(self) -> str:
        if self.options:
            preview = ", ".join(self.options[:10])
            if len(self.options) > 10:
                preview += ", ..."
            return f"Unknown {self.kind} {self.value!r} (expected one of: {preview})"
        return f"Unknown {self.kind} {self.value!r} (nothing loaded)"

    def __str__(self) -> str:
        return self._message()


class UnknownPlotError(SelectionError):
    """Raised when selecting a plot id that is not in the current PlotSet."""

    kind = "plot"


class UnknownVariableError(SelectionError):
    """Raised when selecting a variable id that is not a known descriptor."""

    kind = "variable"
