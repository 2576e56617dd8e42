from __future__ import annotations


class HeatPDEError(Exception):
    """Base class for all heatpde failures."""


class InvalidConfigurationError(HeatPDEError, ValueError):
    """Raised when a solve is requested on an unusable configuration.

    Examples are non-positive partition counts, a degenerate domain
    (``xleft >= xright`` or ``taufinal <= 0``) or an early-exercise scheme
    used on a problem without an exercise function. Always raised from the
    ``solve`` call itself, before any grid is allocated.
    """


class ConvergenceError(HeatPDEError):
    """Base class for iterative methods that stop before meeting tolerance.

    Attributes
    ----------
    iterations : int
        Number of sweeps performed before giving up.
    max_change : float
        Largest absolute update in the final sweep.
    """

    def __init__(self, message: str, *, iterations: int, max_change: float) -> None:
        super().__init__(message)
        self.iterations = int(iterations)
        self.max_change = float(max_change)


class SolverConvergenceError(ConvergenceError):
    """Raised when an iterative linear solver (SOR) does not converge."""


class RelaxationConvergenceError(ConvergenceError):
    """Raised when projected SOR exceeds its iteration cap."""
