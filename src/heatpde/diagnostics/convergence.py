from __future__ import annotations

import time
from collections.abc import Callable, Sequence
from dataclasses import asdict, dataclass

import numpy as np
import pandas as pd

from ..numerics.heat import HeatProblem, solve_heat_pde
from ..numerics.heat.methods import HeatScheme
from ..numerics.linear_solvers import LinearSolver

ExactFn = Callable[[np.ndarray, float], np.ndarray]


@dataclass(frozen=True, slots=True)
class RefinementRow:
    n: int
    m: int
    alpha: float
    max_abs_err: float
    runtime_ms: float
    method: str


def refinement_study(
    problem: HeatProblem,
    exact: ExactFn,
    sizes: Sequence[tuple[int, int]],
    *,
    method: str | HeatScheme = "cn",
    linear_solver: str | LinearSolver | None = "thomas",
) -> pd.DataFrame:
    """Solve on each (n, m) and tabulate the final-row error against ``exact``.

    ``exact(x, tau)`` must accept an array of nodes. Rows come back in the
    order of ``sizes`` with columns ``n, m, alpha, max_abs_err, runtime_ms,
    method``.
    """
    if len(sizes) == 0:
        raise ValueError("sizes must be non-empty")

    rows: list[RefinementRow] = []
    for n, m in sizes:
        t0 = time.perf_counter()
        sol = solve_heat_pde(problem, n, m, method=method, linear_solver=linear_solver)
        runtime_ms = 1e3 * (time.perf_counter() - t0)

        ref = np.asarray(exact(sol.x, float(sol.tau[-1])), dtype=float)
        err = float(np.max(np.abs(sol.u_final - ref)))
        rows.append(
            RefinementRow(
                n=int(n),
                m=int(m),
                alpha=float(sol.mesh.alpha),
                max_abs_err=err,
                runtime_ms=float(runtime_ms),
                method=sol.method,
            )
        )

    return pd.DataFrame([asdict(r) for r in rows])


def observed_order(df: pd.DataFrame, *, err_col: str = "max_abs_err") -> pd.Series:
    """Empirical convergence order log(e_k / e_{k+1}) / log(n_{k+1} / n_k)."""
    for c in ("n", err_col):
        if c not in df.columns:
            raise ValueError(f"DataFrame missing required column: {c}")
    n = df["n"].astype(float)
    e = df[err_col].astype(float)
    return np.log(e.shift(1) / e) / np.log(n / n.shift(1))
