from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from ...exceptions import InvalidConfigurationError

__all__ = ["HeatDomain", "Mesh", "build_mesh"]


@dataclass(frozen=True, slots=True)
class HeatDomain:
    """Rectangle [xleft, xright] x [0, taufinal] on which u(x, tau) is solved."""

    xleft: float
    xright: float
    taufinal: float

    def validate(self) -> None:
        for name in ("xleft", "xright", "taufinal"):
            if not math.isfinite(float(getattr(self, name))):
                raise InvalidConfigurationError(f"{name} must be finite")
        if not (self.xleft < self.xright):
            raise InvalidConfigurationError("Need xleft < xright")
        if self.taufinal <= 0:
            raise InvalidConfigurationError("taufinal must be > 0")


@dataclass(frozen=True, slots=True)
class Mesh:
    """Uniform (n+1) x (m+1) finite-difference mesh.

    ``x[i] = xleft + i*dx`` for i = 0..n and ``tau[j] = j*dtau`` for j = 0..m.
    ``alpha = dtau / dx**2`` is the Courant ratio.
    """

    domain: HeatDomain
    n: int
    m: int
    dx: float
    dtau: float
    alpha: float
    x: NDArray[np.floating]
    tau: NDArray[np.floating]


def _check_count(name: str, value: object) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
        raise InvalidConfigurationError(
            f"{name} must be an integer, got {type(value).__name__}"
        )
    if value < 1:
        raise InvalidConfigurationError(f"{name} must be >= 1, got {value}")
    return int(value)


def build_mesh(domain: HeatDomain, n: int, m: int) -> Mesh:
    """Validate the domain and partition counts and derive the mesh."""
    n = _check_count("n", n)
    m = _check_count("m", m)
    domain.validate()

    dx = (float(domain.xright) - float(domain.xleft)) / n
    dtau = float(domain.taufinal) / m

    # Pin the end points so boundary nodes sit exactly on the domain edges.
    x = np.linspace(float(domain.xleft), float(domain.xright), n + 1, dtype=float)
    tau = np.linspace(0.0, float(domain.taufinal), m + 1, dtype=float)

    return Mesh(
        domain=domain,
        n=n,
        m=m,
        dx=dx,
        dtau=dtau,
        alpha=dtau / (dx * dx),
        x=x,
        tau=tau,
    )
