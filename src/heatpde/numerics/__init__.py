# src/heatpde/numerics/__init__.py
"""
Numerical building blocks (advanced API).

The top-level package `heatpde` exposes the everyday solver API.
This subpackage exposes the tridiagonal algebra, linear solvers and
projected SOR the schemes are built from.
"""

from .linear_solvers import (
    BandedSolver,
    CholeskyBandedSolver,
    LinearSolver,
    SORSolver,
    ThomasSolver,
    available_linear_solvers,
    register_linear_solver,
    resolve_linear_solver,
)
from .psor import PSORResult, projected_sor
from .tridiag import (
    Tridiag,
    solve_tridiag_scipy,
    solve_tridiag_thomas,
    tridiag_mv,
    tridiag_to_dense,
)

__all__ = [
    # Tridiagonal
    "Tridiag",
    "solve_tridiag_thomas",
    "solve_tridiag_scipy",
    "tridiag_mv",
    "tridiag_to_dense",
    # Linear solvers
    "LinearSolver",
    "ThomasSolver",
    "BandedSolver",
    "CholeskyBandedSolver",
    "SORSolver",
    "register_linear_solver",
    "available_linear_solvers",
    "resolve_linear_solver",
    # Projected SOR
    "PSORResult",
    "projected_sor",
]
