"""Pluggable solvers for the tridiagonal systems of implicit heat schemes.

Implicit time steppers never solve ``A x = b`` themselves; they hand the
system to an injected :class:`LinearSolver`. Any object with a ``name`` and
a ``solve(A, rhs)`` method qualifies, and the built-ins below are also
available by name through a small registry (``linear_solver="thomas"``).

Solvers are stateless: the same instance can be shared between solves.
Failures are raised, never papered over: direct methods raise
:class:`numpy.linalg.LinAlgError`, the SOR solver raises
:class:`~heatpde.exceptions.SolverConvergenceError`.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol, cast, runtime_checkable

import numpy as np
from numpy.typing import NDArray

from ..config import RelaxationConfig
from ..exceptions import SolverConvergenceError
from .tridiag import Tridiag, solve_tridiag_scipy, solve_tridiag_thomas

__all__ = [
    "LinearSolver",
    "ThomasSolver",
    "BandedSolver",
    "CholeskyBandedSolver",
    "SORSolver",
    "register_linear_solver",
    "available_linear_solvers",
    "resolve_linear_solver",
]


@runtime_checkable
class LinearSolver(Protocol):
    """Solve a tridiagonal system ``A x = rhs``."""

    @property
    def name(self) -> str:  # pragma: no cover
        ...

    def solve(
        self, A: Tridiag, rhs: NDArray[np.floating]
    ) -> NDArray[np.floating]:  # pragma: no cover
        ...


@dataclass(frozen=True, slots=True)
class ThomasSolver:
    """Direct elimination in O(M) without pivoting."""

    @property
    def name(self) -> str:
        return "thomas"

    def solve(self, A: Tridiag, rhs: NDArray[np.floating]) -> NDArray[np.floating]:
        return solve_tridiag_thomas(A, rhs)


@dataclass(frozen=True, slots=True)
class BandedSolver:
    """LU with partial pivoting on banded storage (``scipy.linalg.solve_banded``)."""

    @property
    def name(self) -> str:
        return "banded"

    def solve(self, A: Tridiag, rhs: NDArray[np.floating]) -> NDArray[np.floating]:
        return solve_tridiag_scipy(A, rhs)


@dataclass(frozen=True, slots=True)
class CholeskyBandedSolver:
    """Cholesky for symmetric positive definite tridiagonals.

    The implicit heat operators are SPD, so this is a valid (and slightly
    cheaper) alternative to LU. Non-symmetric input raises ``ValueError``;
    indefinite input raises ``LinAlgError`` from SciPy.
    """

    @property
    def name(self) -> str:
        return "cholesky"

    def solve(self, A: Tridiag, rhs: NDArray[np.floating]) -> NDArray[np.floating]:
        from scipy.linalg import solveh_banded

        M = A.check()
        rhs = np.asarray(rhs, dtype=float)
        if rhs.shape != (M,):
            raise ValueError(f"rhs must have shape {(M,)} got {rhs.shape}")
        if M == 0:
            return rhs.copy()
        if not np.array_equal(np.asarray(A.lower), np.asarray(A.upper)):
            raise ValueError("Cholesky solver requires a symmetric matrix")

        # upper form: row 0 holds the superdiagonal, row 1 the diagonal
        ab = np.zeros((2, M), dtype=float)
        ab[0, 1:] = np.asarray(A.upper, dtype=float)
        ab[1, :] = np.asarray(A.diag, dtype=float)
        return cast(NDArray[np.floating], np.asarray(solveh_banded(ab, rhs)))


@dataclass(frozen=True, slots=True)
class SORSolver:
    """Successive over-relaxation (Gauss-Seidel ordering).

    Starts from ``x0 = rhs`` and sweeps until the largest update is below
    ``config.tol``. ``omega=1`` is plain Gauss-Seidel.
    """

    config: RelaxationConfig = field(default_factory=RelaxationConfig)

    @property
    def name(self) -> str:
        if self.config.omega == 1.0:
            return "gauss-seidel"
        return f"sor(omega={self.config.omega:g})"

    def solve(self, A: Tridiag, rhs: NDArray[np.floating]) -> NDArray[np.floating]:
        M = A.check()
        b = np.asarray(rhs, dtype=float)
        if b.shape != (M,):
            raise ValueError(f"rhs must have shape {(M,)} got {b.shape}")

        lower = np.asarray(A.lower, dtype=float)
        diag = np.asarray(A.diag, dtype=float)
        upper = np.asarray(A.upper, dtype=float)
        if np.any(diag == 0.0):
            raise np.linalg.LinAlgError("SOR requires a non-zero diagonal")

        omega = float(self.config.omega)
        x = b.copy()
        if M == 0:
            return x

        max_change = np.inf
        for sweep in range(1, self.config.max_iter + 1):
            max_change = 0.0
            for i in range(M):
                s = b[i]
                if i > 0:
                    s -= lower[i - 1] * x[i - 1]
                if i < M - 1:
                    s -= upper[i] * x[i + 1]
                new = x[i] + omega * (s / diag[i] - x[i])
                if not np.isfinite(new):
                    raise SolverConvergenceError(
                        f"SOR diverged in sweep {sweep} (omega={omega:g})",
                        iterations=sweep,
                        max_change=float("inf"),
                    )
                max_change = max(max_change, abs(new - x[i]))
                x[i] = new
            if max_change < self.config.tol:
                return x

        raise SolverConvergenceError(
            f"SOR did not converge in {self.config.max_iter} sweeps "
            f"(last max change {max_change:.3e})",
            iterations=self.config.max_iter,
            max_change=max_change,
        )


# -----------------------------
# Registry
# -----------------------------

SolverFactory = Callable[[], LinearSolver]
_SOLVER_REGISTRY: dict[str, SolverFactory] = {}


def register_linear_solver(
    name: str,
    factory: SolverFactory,
    *,
    overwrite: bool = False,
    aliases: tuple[str, ...] = (),
) -> None:
    """Register a linear solver factory under one or more names.

    Parameters
    ----------
    name:
        Primary key accepted by ``solve_heat_pde(..., linear_solver=...)``.
    factory:
        Callable returning a new solver instance.
    overwrite:
        If False (default), raise if ``name`` or any alias already exists.
    aliases:
        Additional keys resolving to the same factory.
    """

    for k in (name, *aliases):
        kk = str(k).lower().strip()
        if not kk:
            raise ValueError("Solver name/alias cannot be empty")
        if (not overwrite) and (kk in _SOLVER_REGISTRY):
            raise KeyError(f"Linear solver '{kk}' is already registered")
        _SOLVER_REGISTRY[kk] = factory


def available_linear_solvers() -> list[str]:
    """Return the registered solver keys (sorted)."""

    return sorted(_SOLVER_REGISTRY.keys())


def resolve_linear_solver(solver: str | LinearSolver | None) -> LinearSolver:
    """Turn a solver name (or ``None`` -> ``"thomas"``) into an instance.

    Objects already satisfying :class:`LinearSolver` are returned as-is.
    """

    if solver is None:
        solver = "thomas"

    if isinstance(solver, LinearSolver) and not isinstance(solver, str):
        return solver

    if not isinstance(solver, str):
        raise TypeError(
            f"linear_solver must be a name or a LinearSolver, got {type(solver).__name__}"
        )

    key = solver.lower().strip()
    try:
        factory = _SOLVER_REGISTRY[key]
    except KeyError as e:
        raise ValueError(
            f"Unknown linear solver '{solver}'. "
            f"Available: {', '.join(available_linear_solvers())}"
        ) from e
    return factory()


def _register_builtin_solvers() -> None:
    register_linear_solver("thomas", ThomasSolver, overwrite=True, aliases=("tdma",))
    register_linear_solver("banded", BandedSolver, overwrite=True, aliases=("lu",))
    register_linear_solver("cholesky", CholeskyBandedSolver, overwrite=True)
    register_linear_solver("sor", SORSolver, overwrite=True)
    register_linear_solver(
        "gauss-seidel",
        lambda: SORSolver(RelaxationConfig(omega=1.0)),
        overwrite=True,
        aliases=("gauss_seidel", "gs"),
    )


_register_builtin_solvers()
