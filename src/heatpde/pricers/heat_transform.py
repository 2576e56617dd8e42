"""Black-Scholes options priced through the heat equation.

With strike K, rate r, dividend yield q and volatility sigma, the change of
variables

    S = K e^x,    t = T - 2 tau / sigma^2,    V(S, t) = K e^{a x + b tau} u(x, tau),
    k = 2 r / sigma^2,  k' = 2 (r - q) / sigma^2,
    a = -(k' - 1) / 2,  b = -(k' - 1)^2 / 4 - k,

turns the Black-Scholes PDE into u_tau = u_xx on tau in [0, sigma^2 T / 2].
The payoff becomes the initial condition, far-field asymptotics become the
Dirichlet boundaries, and for American exercise the transformed intrinsic
value is the lower bound g(x, tau) of the linear complementarity problem.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np

from ..numerics.heat import HeatDomain, HeatProblem, HeatSolution, solve_heat_pde
from ..numerics.heat.methods import HeatScheme
from ..numerics.linear_solvers import LinearSolver
from ..types import ExerciseStyle, OptionType

__all__ = ["BlackScholesHeatTransform", "bs_price_heat"]


@dataclass(frozen=True, slots=True)
class BlackScholesHeatTransform:
    kind: OptionType
    strike: float
    r: float
    sigma: float
    expiry: float
    q: float = 0.0
    style: ExerciseStyle = ExerciseStyle.EUROPEAN

    def __post_init__(self) -> None:
        if self.strike <= 0.0:
            raise ValueError("strike must be positive")
        if self.sigma <= 0.0:
            raise ValueError("sigma must be positive")
        if self.expiry <= 0.0:
            raise ValueError("expiry must be positive")

    @property
    def k(self) -> float:
        return 2.0 * self.r / self.sigma**2

    @property
    def k_div(self) -> float:
        return 2.0 * (self.r - self.q) / self.sigma**2

    @property
    def a(self) -> float:
        return -0.5 * (self.k_div - 1.0)

    @property
    def b(self) -> float:
        return -0.25 * (self.k_div - 1.0) ** 2 - self.k

    @property
    def taufinal(self) -> float:
        return 0.5 * self.sigma**2 * self.expiry

    def time_to_expiry(self, tau: float) -> float:
        return 2.0 * tau / self.sigma**2

    def scaled_payoff(self, x):
        """payoff(K e^x) / K; works on scalars and arrays."""
        ex = np.exp(x)
        if self.kind == OptionType.PUT:
            return np.maximum(1.0 - ex, 0.0)
        return np.maximum(ex - 1.0, 0.0)

    def to_option_value(self, x, tau, u):
        return self.strike * np.exp(self.a * x + self.b * tau) * u

    def initial(self, x: float) -> float:
        return float(np.exp(-self.a * x) * self.scaled_payoff(x))

    def exercise(self, x, tau):
        return np.exp(-self.a * x - self.b * tau) * self.scaled_payoff(x)

    def _scaled_boundary(self, x: float, tau: float) -> float:
        """Far-field option value over K at log-moneyness x."""
        s = self.time_to_expiry(tau)
        fwd = math.exp(x - self.q * s)  # S e^{-q s} / K
        disc = math.exp(-self.r * s)
        if self.kind == OptionType.PUT:
            v = max(disc - fwd, 0.0) if x < 0.0 else 0.0
        else:
            v = max(fwd - disc, 0.0) if x > 0.0 else 0.0
        if self.style == ExerciseStyle.AMERICAN:
            v = max(v, float(self.scaled_payoff(x)))
        return v

    def boundary(self, x: float, tau: float) -> float:
        return float(
            math.exp(-self.a * x - self.b * tau) * self._scaled_boundary(x, tau)
        )

    def bounds(self, spot: float, *, n_sigma: float = 5.0) -> tuple[float, float]:
        """Log-moneyness interval covering spot and strike plus n_sigma std devs."""
        if spot <= 0.0:
            raise ValueError("spot must be positive")
        if n_sigma <= 0.0:
            raise ValueError("n_sigma must be > 0")
        x0 = math.log(spot / self.strike)
        width = n_sigma * self.sigma * math.sqrt(self.expiry)
        return min(x0, 0.0) - width, max(x0, 0.0) + width

    def heat_problem(self, xleft: float, xright: float) -> HeatProblem:
        xl = float(xleft)
        xr = float(xright)
        return HeatProblem(
            domain=HeatDomain(xleft=xl, xright=xr, taufinal=self.taufinal),
            left=lambda tau: self.boundary(xl, tau),
            right=lambda tau: self.boundary(xr, tau),
            initial=self.initial,
            exercise=self.exercise if self.style == ExerciseStyle.AMERICAN else None,
        )


def bs_price_heat(
    kind: OptionType,
    *,
    spot: float,
    strike: float,
    r: float,
    sigma: float,
    expiry: float,
    q: float = 0.0,
    style: ExerciseStyle = ExerciseStyle.EUROPEAN,
    n: int = 400,
    m: int = 200,
    n_sigma: float = 5.0,
    method: str | HeatScheme | None = None,
    linear_solver: str | LinearSolver | None = "thomas",
    return_solution: bool = False,
) -> float | tuple[float, HeatSolution]:
    """Price a vanilla option by solving the transformed heat equation.

    ``method`` defaults to ``"cn"`` for European and ``"early-cn"`` for
    American exercise. The price is read off the final time row by linear
    interpolation at ``x0 = ln(spot / strike)``.
    """
    tr = BlackScholesHeatTransform(
        kind=OptionType(kind),
        strike=strike,
        r=r,
        sigma=sigma,
        expiry=expiry,
        q=q,
        style=ExerciseStyle(style),
    )
    if method is None:
        method = "early-cn" if tr.style == ExerciseStyle.AMERICAN else "cn"

    xl, xr = tr.bounds(spot, n_sigma=n_sigma)
    sol = solve_heat_pde(
        tr.heat_problem(xl, xr), n, m, method=method, linear_solver=linear_solver
    )

    x0 = math.log(spot / strike)
    u0 = float(np.interp(x0, sol.x, sol.u_final))
    price = float(tr.to_option_value(x0, tr.taufinal, u0))
    if return_solution:
        return price, sol
    return price
