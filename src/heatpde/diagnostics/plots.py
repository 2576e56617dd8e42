from __future__ import annotations

from typing import TYPE_CHECKING

import pandas as pd

from ..numerics.heat import HeatSolution
from ._mpl import get_plt, pretty_ax, require_columns

if TYPE_CHECKING:
    from matplotlib.axes import Axes


def plot_solution(sol: HeatSolution, *, ax: Axes | None = None) -> Axes:
    """Colour map of u over (x, tau)."""
    plt = get_plt()
    if ax is None:
        _, ax = plt.subplots(figsize=(7, 4))

    mesh = ax.pcolormesh(sol.x, sol.tau, sol.u, shading="auto", cmap="viridis")
    ax.figure.colorbar(mesh, ax=ax, label="u(x, tau)")
    ax.set_xlabel("x")
    ax.set_ylabel("tau")
    ax.set_title(f"Heat solution ({sol.method}, n={sol.mesh.n}, m={sol.mesh.m})")
    return ax


def plot_convergence(df: pd.DataFrame, *, ax: Axes | None = None) -> Axes:
    """Log-log max error against n, one line per method."""
    require_columns(df, ("n", "max_abs_err", "method"))
    plt = get_plt()
    if ax is None:
        _, ax = plt.subplots(figsize=(6, 4))

    for method, d in df.groupby("method", sort=False):
        d = d.sort_values("n")
        ax.loglog(d["n"], d["max_abs_err"], marker="o", label=str(method))

    ax.set_xlabel("n (space intervals)")
    ax.set_ylabel("max |u - u_exact|")
    ax.legend()
    pretty_ax(ax)
    return ax
