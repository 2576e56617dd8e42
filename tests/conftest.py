"""Pytest helpers for the heatpde library."""

from __future__ import annotations

import math

import numpy as np
import pytest

from heatpde.numerics.heat import HeatDomain, HeatProblem


@pytest.fixture
def zero_problem() -> HeatProblem:
    """Zero payoff, zero boundaries on [-1, 1] x [0, 0.5]; solution is u == 0."""
    return HeatProblem(
        domain=HeatDomain(xleft=-1.0, xright=1.0, taufinal=0.5),
        left=lambda tau: 0.0,
        right=lambda tau: 0.0,
        initial=lambda x: 0.0,
        exercise=lambda x, tau: 0.0,
    )


@pytest.fixture
def sine_problem():
    """Factory for u(x,0) = sin(pi x) on [0, 1] with zero boundaries.

    The exact solution is exp(-pi^2 tau) sin(pi x).
    """

    def _make(taufinal: float = 0.1, exercise=None) -> HeatProblem:
        return HeatProblem(
            domain=HeatDomain(xleft=0.0, xright=1.0, taufinal=taufinal),
            left=lambda tau: 0.0,
            right=lambda tau: 0.0,
            initial=lambda x: math.sin(math.pi * x),
            exercise=exercise,
        )

    return _make


@pytest.fixture
def sine_exact():
    def _exact(x, tau):
        return np.exp(-np.pi**2 * tau) * np.sin(np.pi * np.asarray(x, dtype=float))

    return _exact


@pytest.fixture
def drifting_boundary_problem() -> HeatProblem:
    """Non-trivial, time-dependent Dirichlet data.

    The exercise value sits below all boundary and initial data, so the
    early-exercise schemes can run on it too.
    """
    return HeatProblem(
        domain=HeatDomain(xleft=-2.0, xright=3.0, taufinal=0.75),
        left=lambda tau: 0.3 + 0.1 * tau,
        right=lambda tau: -0.2 + math.sin(tau),
        initial=lambda x: math.exp(-x * x),
        exercise=lambda x, tau: -1.0,
    )


@pytest.fixture
def rng():
    """Seeded RNG factory."""

    def _rng(seed: int) -> np.random.Generator:
        return np.random.default_rng(seed)

    return _rng
