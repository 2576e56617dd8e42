"""Refinement studies and plots for the heat solvers."""

from .convergence import RefinementRow, observed_order, refinement_study
from .plots import plot_convergence, plot_solution

__all__ = [
    "RefinementRow",
    "refinement_study",
    "observed_order",
    "plot_solution",
    "plot_convergence",
]
