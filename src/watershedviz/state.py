"""
WatershedViz Selection State Module

This module provides the selection state for WatershedViz: the currently
selected plot and variable.

The state is a param.Parameterized object so that the controller (and any
other subscriber) can watch it for changes. It is mutated only through its
setters, which validate the new value first and leave the state untouched
when the value is rejected.
"""

import logging
from typing import Callable, Optional, Sequence

import param

from watershedviz.config import VARIABLE_IDS, DEFAULT_VARIABLE, VARIABLES_BY_ID, VariableDescriptor, get_variable
from watershedviz.errors import UnknownPlotError, UnknownVariableError

logger = logging.getLogger(__name__)


class SelectionState(param.Parameterized):
    """
    Current (plot, variable) selection.

    Attributes
    ----------
    selected_plot : str or None
        Currently selected plot; None until data with at least one plot
        has been loaded
    selected_variable : str
        Currently selected variable id; always one of the known variables
    available_plots : list of str
        The PlotSet the selection is validated against

    Examples
    --------
    >>> selection = SelectionState()
    >>> selection.reconcile(['A', 'B'])
    >>> selection.selected_plot
    'A'
    >>> selection.set_variable('lai')
    >>> selection.variable.label
    'Leaf Area Index'
    """

    selected_plot = param.String(default=None, allow_None=True)
    selected_variable = param.Selector(objects=VARIABLE_IDS, default=DEFAULT_VARIABLE)
    available_plots = param.List(default=[], item_type=str)

    @property
    def variable(self) -> VariableDescriptor:
        """Descriptor of the selected variable."""
        return VARIABLES_BY_ID[self.selected_variable]

    # =========================================================================
    # Commands
    # =========================================================================

    def set_plot(self, plot_id: str) -> None:
        """
        Select a plot.

        Parameters
        ----------
        plot_id : str
            Plot identifier from the current PlotSet

        Raises
        ------
        UnknownPlotError
            If ``plot_id`` is not in the current PlotSet
        """
        if plot_id not in self.available_plots:
            raise UnknownPlotError(plot_id, self.available_plots)

        if plot_id != self.selected_plot:
            logger.info(f"Plot selected: {plot_id}")
        self.selected_plot = plot_id

    def set_variable(self, variable_id: str) -> None:
        """
        Select a variable.

        Parameters
        ----------
        variable_id : str
            One of 'moisture', 'lai', 'HH', 'HV'

        Raises
        ------
        UnknownVariableError
            If ``variable_id`` is not a known variable
        """
        if get_variable(variable_id) is None:
            raise UnknownVariableError(variable_id, VARIABLE_IDS)

        if variable_id != self.selected_variable:
            logger.info(f"Variable selected: {variable_id}")
        self.selected_variable = variable_id

    def reconcile(self, plot_ids: Sequence[str]) -> None:
        """
        Adopt a new PlotSet after a data (re)load.

        The current plot is kept if it still exists. Otherwise the selection
        falls back to the first plot of the new sorted PlotSet, or is unset
        when the PlotSet is empty.

        Parameters
        ----------
        plot_ids : sequence of str
            New PlotSet
        """
        plots = sorted(plot_ids)
        if self.selected_plot in plots:
            new_plot = self.selected_plot
        else:
            new_plot = plots[0] if plots else None
            if self.selected_plot is not None:
                logger.info(f"Selected plot {self.selected_plot} no longer present, falling back to {new_plot}")

        self.param.update(available_plots=plots, selected_plot=new_plot)

    # =========================================================================
    # Subscriptions
    # =========================================================================

    def subscribe(self, callback: Callable[[Optional[str], str], None]):
        """
        Register a callback for selection changes.

        Parameters
        ----------
        callback : callable
            Called as ``callback(selected_plot, selected_variable)`` after
            the plot or the variable changes

        Returns
        -------
        param.parameterized.Watcher
            Watcher handle, usable with :meth:`unsubscribe`
        """
        def _on_change(*events):
            callback(self.selected_plot, self.selected_variable)

        return self.param.watch(_on_change, ['selected_plot', 'selected_variable'])

    def unsubscribe(self, watcher) -> None:
        self.param.unwatch(watcher)

    def snapshot(self) -> tuple:
        """Return the selection as a ``(plot, variable)`` tuple."""
        return (self.selected_plot, self.selected_variable)
