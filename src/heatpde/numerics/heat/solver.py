from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import cast

import numpy as np
from numpy.typing import NDArray

from ...exceptions import InvalidConfigurationError
from ..linear_solvers import LinearSolver, resolve_linear_solver
from .domain import Mesh, build_mesh
from .methods import HeatScheme, build_heat_system, resolve_method
from .problem import HeatProblem

logger = logging.getLogger(__name__)

__all__ = ["HeatSolution", "HeatPDESolver", "solve_heat_pde"]


@dataclass(frozen=True, slots=True)
class HeatSolution:
    """Full space-time solution.

    ``u[j, i]`` approximates ``u(x[i], tau[j])``: rows are time levels,
    columns are space nodes, shape ``(m+1, n+1)``.
    """

    mesh: Mesh
    u: NDArray[np.floating]  # (m+1, n+1)
    method: str
    linear_solver: str | None
    iterations: NDArray[np.integer]  # (m+1,) relaxation sweeps per row

    @property
    def x(self) -> NDArray[np.floating]:
        return self.mesh.x

    @property
    def tau(self) -> NDArray[np.floating]:
        return self.mesh.tau

    @property
    def u_final(self) -> NDArray[np.floating]:
        return cast(NDArray[np.floating], self.u[-1])


def _uses_linear_solver(scheme: HeatScheme) -> bool:
    return scheme.theta > 0.0 and not scheme.early_exercise


def solve_heat_pde(
    problem: HeatProblem,
    n: int,
    m: int,
    *,
    method: str | HeatScheme = "cn",
    linear_solver: str | LinearSolver | None = "thomas",
) -> HeatSolution:
    """Solve u_tau = u_xx on ``problem.domain`` with n space and m time intervals.

    Row 0 holds ``problem.initial`` at every node. For j >= 1 the first and
    last columns hold ``problem.left(tau_j)`` and ``problem.right(tau_j)``
    exactly; the interior is filled by ``method``.

    Raises
    ------
    InvalidConfigurationError
        For n < 1, m < 1, a degenerate domain, or an early-exercise method on a
        problem without ``exercise``.
    numpy.linalg.LinAlgError, SolverConvergenceError
        Propagated from the linear solver.
    RelaxationConvergenceError
        If projected SOR hits its iteration cap on any row.
    """
    mesh = build_mesh(problem.domain, n, m)

    scheme = resolve_method(method)
    if scheme.early_exercise and problem.exercise is None:
        raise InvalidConfigurationError(
            f"Method '{scheme.name}' needs an exercise function on the problem"
        )

    solver = resolve_linear_solver(linear_solver) if _uses_linear_solver(scheme) else None
    solver_name = solver.name if solver is not None else None

    logger.debug(
        "Heat solve method=%s solver=%s n=%d m=%d dx=%.4g dtau=%.4g alpha=%.4g",
        scheme.name,
        solver_name,
        mesh.n,
        mesh.m,
        mesh.dx,
        mesh.dtau,
        mesh.alpha,
    )
    if scheme.theta < 0.5 and mesh.alpha > 0.5:
        logger.warning(
            "Explicit scheme '%s' with alpha=%.4g > 0.5 is not stable; "
            "refine m or use an implicit method",
            scheme.name,
            mesh.alpha,
        )

    system = build_heat_system(mesh.alpha, mesh.n - 1, scheme.theta)

    U = np.empty((mesh.m + 1, mesh.n + 1), dtype=float)
    U[0] = problem.initial_values(mesh.x)
    iterations = np.zeros(mesh.m + 1, dtype=int)

    for j in range(mesh.m):
        res = scheme.step(
            problem=problem,
            mesh=mesh,
            system=system,
            u_n=U[j],
            j=j,
            linear_solver=solver,
        )
        U[j + 1] = res.u
        iterations[j + 1] = res.iterations

    if scheme.early_exercise and iterations.any():
        logger.debug(
            "PSOR rows=%d avg_iters=%.2f max_iters=%d",
            mesh.m,
            float(iterations[1:].mean()),
            int(iterations.max()),
        )

    return HeatSolution(
        mesh=mesh,
        u=U,
        method=scheme.name,
        linear_solver=solver_name,
        iterations=iterations,
    )


@dataclass(frozen=True, slots=True)
class HeatPDESolver:
    """A configured heat solver: problem, scheme and linear solver.

    Instances are immutable; use :meth:`with_linear_solver` /
    :meth:`with_method` to derive variants.
    """

    problem: HeatProblem
    method: str | HeatScheme = "cn"
    linear_solver: str | LinearSolver | None = "thomas"

    def solve(self, n: int, m: int) -> HeatSolution:
        return solve_heat_pde(
            self.problem,
            n,
            m,
            method=self.method,
            linear_solver=self.linear_solver,
        )

    def with_linear_solver(self, linear_solver: str | LinearSolver) -> HeatPDESolver:
        return dataclasses.replace(self, linear_solver=linear_solver)

    def with_method(self, method: str | HeatScheme) -> HeatPDESolver:
        return dataclasses.replace(self, method=method)
