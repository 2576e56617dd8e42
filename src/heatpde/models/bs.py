from __future__ import annotations

import math

from scipy.stats import norm

from ..types import OptionType


def _validate_scalar_inputs(
    *, spot: float, strike: float, sigma: float, tau: float
) -> None:
    if spot <= 0.0:
        raise ValueError("spot must be positive")
    if strike <= 0.0:
        raise ValueError("strike must be positive")
    if sigma <= 0.0:
        raise ValueError("sigma must be positive")
    if tau <= 0.0:
        raise ValueError("tau must be positive")


def d1_d2(
    *, spot: float, strike: float, r: float, q: float, sigma: float, tau: float
) -> tuple[float, float]:
    _validate_scalar_inputs(spot=spot, strike=strike, sigma=sigma, tau=tau)
    vol_sqrt_t = sigma * math.sqrt(tau)
    d1 = (math.log(spot / strike) + (r - q + 0.5 * sigma * sigma) * tau) / vol_sqrt_t
    return float(d1), float(d1 - vol_sqrt_t)


def european_price(
    kind: OptionType,
    *,
    spot: float,
    strike: float,
    r: float,
    q: float = 0.0,
    sigma: float,
    tau: float,
) -> float:
    """
    Black–Scholes European call/put with continuous dividend yield q.
    """
    d1, d2 = d1_d2(spot=spot, strike=strike, r=r, q=q, sigma=sigma, tau=tau)
    df_r = math.exp(-r * tau)
    df_q = math.exp(-q * tau)
    if kind == OptionType.CALL:
        return float(spot * df_q * norm.cdf(d1) - strike * df_r * norm.cdf(d2))
    if kind == OptionType.PUT:
        return float(strike * df_r * norm.cdf(-d2) - spot * df_q * norm.cdf(-d1))
    raise ValueError(f"Unsupported option kind: {kind}")
