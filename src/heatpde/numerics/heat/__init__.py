"""Finite-difference solvers for the 1D heat equation u_tau = u_xx.

Uniform mesh, Dirichlet boundaries, and five time steppers: forward Euler,
backward Euler, Crank-Nicolson, and the early-exercise variants of forward
Euler (projection) and Crank-Nicolson (projected SOR).
"""

from .domain import HeatDomain, Mesh, build_mesh
from .methods import (
    BackwardEuler,
    CrankNicolson,
    EarlyExCrankNicolson,
    EarlyExForwardEuler,
    ForwardEuler,
    HeatScheme,
    HeatSystem,
    StepResult,
    available_methods,
    build_heat_system,
    register_method,
    resolve_method,
)
from .problem import HeatProblem
from .solver import HeatPDESolver, HeatSolution, solve_heat_pde

__all__ = [
    # Domain / mesh
    "HeatDomain",
    "Mesh",
    "build_mesh",
    # Problem
    "HeatProblem",
    # Schemes / registry
    "HeatScheme",
    "HeatSystem",
    "StepResult",
    "ForwardEuler",
    "BackwardEuler",
    "CrankNicolson",
    "EarlyExForwardEuler",
    "EarlyExCrankNicolson",
    "build_heat_system",
    "register_method",
    "available_methods",
    "resolve_method",
    # Solver
    "HeatSolution",
    "HeatPDESolver",
    "solve_heat_pde",
]
