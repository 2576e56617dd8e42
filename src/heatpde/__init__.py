"""
heatpde

Finite-difference solvers for the heat equation u_tau = u_xx, including
early-exercise (American-style) variants.

    from heatpde import HeatDomain, HeatProblem, solve_heat_pde
"""

from .config import RelaxationConfig
from .exceptions import (
    ConvergenceError,
    HeatPDEError,
    InvalidConfigurationError,
    RelaxationConvergenceError,
    SolverConvergenceError,
)
from .numerics.heat import (
    BackwardEuler,
    CrankNicolson,
    EarlyExCrankNicolson,
    EarlyExForwardEuler,
    ForwardEuler,
    HeatDomain,
    HeatPDESolver,
    HeatProblem,
    HeatSolution,
    Mesh,
    build_mesh,
    solve_heat_pde,
)
from .numerics.linear_solvers import (
    BandedSolver,
    CholeskyBandedSolver,
    LinearSolver,
    SORSolver,
    ThomasSolver,
)
from .numerics.psor import projected_sor
from .pricers.heat_transform import BlackScholesHeatTransform, bs_price_heat
from .types import ExerciseStyle, OptionType

__all__ = [
    # Types
    "OptionType",
    "ExerciseStyle",
    "RelaxationConfig",
    # Errors
    "HeatPDEError",
    "InvalidConfigurationError",
    "ConvergenceError",
    "SolverConvergenceError",
    "RelaxationConvergenceError",
    # Problem / mesh
    "HeatDomain",
    "HeatProblem",
    "Mesh",
    "build_mesh",
    # Schemes
    "ForwardEuler",
    "BackwardEuler",
    "CrankNicolson",
    "EarlyExForwardEuler",
    "EarlyExCrankNicolson",
    # Linear solvers
    "LinearSolver",
    "ThomasSolver",
    "BandedSolver",
    "CholeskyBandedSolver",
    "SORSolver",
    "projected_sor",
    # Solve
    "HeatSolution",
    "HeatPDESolver",
    "solve_heat_pde",
    # Black-Scholes
    "BlackScholesHeatTransform",
    "bs_price_heat",
]
