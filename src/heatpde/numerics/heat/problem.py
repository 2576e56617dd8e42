from __future__ import annotations

from dataclasses import dataclass
from typing import cast

import numpy as np

from ...typing import BoundaryFn, ExerciseFn, FloatArray, ScalarFn
from .domain import HeatDomain

__all__ = ["HeatProblem"]


@dataclass(frozen=True, slots=True)
class HeatProblem:
    """Heat equation u_tau = u_xx with Dirichlet data.

    Parameters
    ----------
    domain:
        Space bounds and time horizon.
    left, right:
        Boundary values ``tau -> u(xleft, tau)`` and ``tau -> u(xright, tau)``.
    initial:
        Initial condition ``x -> u(x, 0)``.
    exercise:
        Optional early-exercise lower bound ``(x, tau) -> g(x, tau)``. Only
        the early-exercise schemes use it.

    All functions must be pure; the solver may call them any number of times.
    """

    domain: HeatDomain
    left: BoundaryFn
    right: BoundaryFn
    initial: ScalarFn
    exercise: ExerciseFn | None = None

    def initial_values(self, x: FloatArray) -> FloatArray:
        return np.array([float(self.initial(float(xi))) for xi in x], dtype=float)

    def exercise_values(self, x: FloatArray, tau: float) -> FloatArray:
        """Evaluate g(x, tau) on an array of nodes.

        A vectorized call is tried first; scalar-only callables fall back to a
        pointwise loop.
        """
        if self.exercise is None:
            raise ValueError("Problem has no exercise function")

        x = np.asarray(x, dtype=float)
        try:
            arr = np.asarray(self.exercise(x, float(tau)), dtype=float)  # type: ignore[arg-type]
            if arr.shape == x.shape:
                return cast(FloatArray, arr)
        except (TypeError, ValueError):
            pass

        return np.array(
            [float(self.exercise(float(xi), float(tau))) for xi in x], dtype=float
        )
