"""Projected successive over-relaxation for tridiagonal LCPs.

Solves the linear complementarity problem

    A x >= b,   x >= g,   (A x - b)^T (x - g) = 0

for a tridiagonal ``A`` by SOR sweeps in which every entry is clamped to its
lower bound ``g_i`` immediately after it is relaxed. Later entries of the same
sweep therefore see already-projected neighbours.
"""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from ..exceptions import RelaxationConvergenceError
from .tridiag import Tridiag

__all__ = ["PSORResult", "projected_sor"]


@dataclass(frozen=True, slots=True)
class PSORResult:
    x: NDArray[np.floating]
    iterations: int
    max_change: float


def projected_sor(
    A: Tridiag,
    rhs: NDArray[np.floating],
    lower_bound: NDArray[np.floating],
    *,
    x0: NDArray[np.floating] | None = None,
    omega: float = 1.2,
    tol: float = 1e-6,
    max_iter: int = 10_000,
) -> PSORResult:
    """Solve the tridiagonal LCP by projected SOR.

    Parameters
    ----------
    A:
        System matrix; its diagonal must be non-zero.
    rhs:
        Right-hand side ``b``.
    lower_bound:
        Pointwise obstacle ``g``.
    x0:
        Starting guess. Defaults to ``lower_bound`` (feasible by construction).
    omega, tol, max_iter:
        Relaxation factor, sweep tolerance on the max absolute update, and the
        sweep cap.

    Raises
    ------
    RelaxationConvergenceError
        If ``max_iter`` sweeps pass without the update dropping below ``tol``.
    """
    M = A.check()
    b = np.asarray(rhs, dtype=float)
    g = np.asarray(lower_bound, dtype=float)
    if b.shape != (M,):
        raise ValueError(f"rhs must have shape {(M,)} got {b.shape}")
    if g.shape != (M,):
        raise ValueError(f"lower_bound must have shape {(M,)} got {g.shape}")

    x = np.array(g if x0 is None else x0, dtype=float)
    if x.shape != (M,):
        raise ValueError(f"x0 must have shape {(M,)} got {x.shape}")
    if M == 0:
        return PSORResult(x=x, iterations=0, max_change=0.0)

    lower = np.asarray(A.lower, dtype=float)
    diag = np.asarray(A.diag, dtype=float)
    upper = np.asarray(A.upper, dtype=float)
    if np.any(diag == 0.0):
        raise np.linalg.LinAlgError("Projected SOR requires a non-zero diagonal")

    max_change = np.inf
    for it in range(1, int(max_iter) + 1):
        max_change = 0.0
        for i in range(M):
            s = b[i]
            if i > 0:
                s -= lower[i - 1] * x[i - 1]
            if i < M - 1:
                s -= upper[i] * x[i + 1]
            relaxed = x[i] + omega * (s / diag[i] - x[i])
            new = max(relaxed, g[i])
            if not np.isfinite(new):
                raise RelaxationConvergenceError(
                    f"Projected SOR diverged in sweep {it} (omega={omega:g})",
                    iterations=it,
                    max_change=float("inf"),
                )
            max_change = max(max_change, abs(new - x[i]))
            x[i] = new
        if max_change < tol:
            return PSORResult(x=x, iterations=it, max_change=float(max_change))

    raise RelaxationConvergenceError(
        f"Projected SOR did not converge in {max_iter} sweeps "
        f"(last max change {max_change:.3e}, omega={omega:g})",
        iterations=int(max_iter),
        max_change=float(max_change),
    )
