import math
import warnings

import numpy as np
import pytest

from heatpde.config import RelaxationConfig
from heatpde.exceptions import InvalidConfigurationError, RelaxationConvergenceError
from heatpde.numerics.heat import (
    EarlyExCrankNicolson,
    EarlyExForwardEuler,
    HeatPDESolver,
    build_heat_system,
    solve_heat_pde,
)
from heatpde.numerics.psor import projected_sor
from heatpde.numerics.tridiag import Tridiag, solve_tridiag_thomas


def _obstacle(x, tau):
    return 0.6 * np.sin(np.pi * np.asarray(x, dtype=float))


def _scalar_obstacle(x: float, tau: float) -> float:
    return max(0.0, 0.4 - 2.0 * abs(x - 0.5)) + 0.1 * tau


# --- Projected SOR ----------------------------------------------------------


def test_psor_without_active_bound_matches_linear_solve() -> None:
    rng = np.random.default_rng(7)
    A = build_heat_system(alpha=1.5, M=30, theta=0.5).A
    rhs = rng.normal(size=30)

    res = projected_sor(A, rhs, np.full(30, -1e9), x0=np.zeros(30), tol=1e-13)

    np.testing.assert_allclose(res.x, solve_tridiag_thomas(A, rhs), atol=1e-10)
    assert res.iterations > 1


def test_psor_solution_satisfies_lcp() -> None:
    rng = np.random.default_rng(11)
    M = 40
    A = build_heat_system(alpha=3.0, M=M, theta=0.5).A
    rhs = rng.normal(size=M)
    g = 0.2 * rng.normal(size=M)

    res = projected_sor(A, rhs, g, omega=1.4, tol=1e-12)
    x = res.x
    residual = A.mv(x) - rhs

    assert np.all(x >= g)
    assert np.all(residual >= -1e-9)
    np.testing.assert_allclose(residual * (x - g), 0.0, atol=1e-9)
    assert np.any(x == g)  # constraint is active somewhere


def test_psor_is_deterministic() -> None:
    rng = np.random.default_rng(3)
    A = build_heat_system(alpha=0.7, M=25, theta=0.5).A
    rhs = rng.normal(size=25)
    g = rng.normal(size=25) * 0.1

    a = projected_sor(A, rhs, g)
    b = projected_sor(A, rhs, g)

    np.testing.assert_array_equal(a.x, b.x)
    assert a.iterations == b.iterations


def test_psor_default_warm_start_is_lower_bound() -> None:
    A = Tridiag.constant(3, -0.5, 2.0, -0.5)
    g = np.array([1.0, 2.0, 3.0])
    # rhs = A g: the bound is already the exact solution, one sweep confirms it
    res = projected_sor(A, A.mv(g), g)
    np.testing.assert_allclose(res.x, g)
    assert res.iterations == 1


def test_psor_iteration_cap() -> None:
    A = build_heat_system(alpha=5.0, M=20, theta=0.5).A
    rhs = np.ones(20)
    with pytest.raises(RelaxationConvergenceError) as exc:
        projected_sor(A, rhs, np.zeros(20), tol=1e-14, max_iter=3)
    assert exc.value.iterations == 3
    assert exc.value.max_change > 0.0


@pytest.mark.filterwarnings("ignore:overflow:RuntimeWarning")
@pytest.mark.filterwarnings("ignore:invalid value:RuntimeWarning")
def test_psor_divergence_raises_instead_of_returning_nan() -> None:
    A = build_heat_system(alpha=2.0, M=10, theta=0.5).A
    rhs = np.linspace(1.0, 2.0, 10)
    with pytest.raises(RelaxationConvergenceError, match="diverged") as exc:
        projected_sor(A, rhs, np.full(10, -np.inf), x0=np.zeros(10), omega=3.0)
    assert exc.value.iterations < 10_000
    assert exc.value.max_change == float("inf")


@pytest.mark.filterwarnings("ignore:overflow:RuntimeWarning")
@pytest.mark.filterwarnings("ignore:invalid value:RuntimeWarning")
def test_early_cn_with_overrelaxation_reports_failure(sine_problem) -> None:
    with pytest.warns(RuntimeWarning, match="outside"):
        cfg = RelaxationConfig(omega=3.0)
    p = sine_problem(exercise=lambda x, tau: -1.0)
    with pytest.raises(RelaxationConvergenceError):
        solve_heat_pde(p, 20, 20, method=EarlyExCrankNicolson(cfg))


def test_psor_empty_system() -> None:
    res = projected_sor(Tridiag.constant(0, -1.0, 2.0, -1.0), np.array([]), np.array([]))
    assert res.x.shape == (0,)
    assert res.iterations == 0


def test_psor_shape_errors() -> None:
    A = Tridiag.constant(4, -1.0, 3.0, -1.0)
    with pytest.raises(ValueError):
        projected_sor(A, np.ones(3), np.zeros(4))
    with pytest.raises(ValueError):
        projected_sor(A, np.ones(4), np.zeros(5))
    with pytest.raises(ValueError):
        projected_sor(A, np.ones(4), np.zeros(4), x0=np.zeros(2))


# --- Relaxation settings -----------------------------------------------------


def test_relaxation_config_defaults() -> None:
    cfg = RelaxationConfig()
    assert cfg.omega == 1.2
    assert cfg.tol == 1e-6
    assert cfg.max_iter > 0


@pytest.mark.parametrize("omega", [0.0, 2.0, 2.5, -1.0])
def test_relaxation_config_warns_outside_unit_interval(omega) -> None:
    with pytest.warns(RuntimeWarning, match="outside"):
        RelaxationConfig(omega=omega)


def test_relaxation_config_quiet_inside_interval() -> None:
    with warnings.catch_warnings():
        warnings.simplefilter("error")
        RelaxationConfig(omega=1.9)


@pytest.mark.parametrize(
    "kwargs",
    [{"tol": 0.0}, {"tol": -1e-3}, {"max_iter": 0}, {"max_iter": 2.5}, {"omega": math.nan}],
)
def test_relaxation_config_rejects_bad_values(kwargs) -> None:
    with pytest.raises(InvalidConfigurationError):
        RelaxationConfig(**kwargs)


# --- Early-exercise schemes --------------------------------------------------


@pytest.mark.parametrize(
    "method, n, m",
    [
        ("early-explicit", 20, 200),
        ("early-cn", 20, 200),
        ("early-cn", 40, 10),
    ],
)
@pytest.mark.parametrize("exercise", [_obstacle, _scalar_obstacle])
def test_solution_never_below_exercise_value(sine_problem, method, n, m, exercise) -> None:
    p = sine_problem(taufinal=0.2, exercise=exercise)
    sol = solve_heat_pde(p, n, m, method=method)

    for j in range(1, m + 1):
        g = p.exercise_values(sol.x[1:-1], float(sol.tau[j]))
        assert np.all(sol.u[j, 1:-1] >= g), f"row {j}"


def test_constraint_is_active_and_changes_solution(sine_problem) -> None:
    free = solve_heat_pde(sine_problem(taufinal=0.2), 40, 40, method="cn")
    p = sine_problem(taufinal=0.2, exercise=_obstacle)
    sol = solve_heat_pde(p, 40, 40, method="early-cn")

    g_final = _obstacle(sol.x, 0.2)
    # free decay falls below the obstacle, the constrained solution does not
    assert np.max(free.u_final[1:-1] - g_final[1:-1]) < 0.0
    np.testing.assert_allclose(sol.u_final[1:-1], g_final[1:-1], atol=1e-5)


def test_early_schemes_agree(sine_problem) -> None:
    p = sine_problem(taufinal=0.2, exercise=_scalar_obstacle)
    cn = solve_heat_pde(p, 40, 800, method="early-cn")
    fe = solve_heat_pde(p, 40, 800, method="early-explicit")

    assert fe.mesh.alpha <= 0.5
    np.testing.assert_allclose(cn.u_final, fe.u_final, atol=1e-2)


def test_psor_iterations_recorded(sine_problem) -> None:
    sol = solve_heat_pde(sine_problem(exercise=_obstacle), 20, 20, method="early-cn")

    assert sol.linear_solver is None
    assert sol.iterations[0] == 0
    assert np.all(sol.iterations[1:] >= 1)


def test_early_cn_deterministic(sine_problem) -> None:
    solver = HeatPDESolver(sine_problem(exercise=_scalar_obstacle), method="early-cn")
    np.testing.assert_array_equal(solver.solve(30, 30).u, solver.solve(30, 30).u)


def test_early_cn_relaxation_settings(sine_problem) -> None:
    p = sine_problem(exercise=_obstacle)
    loose = solve_heat_pde(p, 30, 30, method=EarlyExCrankNicolson(RelaxationConfig(omega=1.0)))
    tight = solve_heat_pde(
        p, 30, 30, method=EarlyExCrankNicolson(RelaxationConfig(omega=1.5, tol=1e-10))
    )
    np.testing.assert_allclose(loose.u, tight.u, atol=1e-4)


def test_early_cn_reports_relaxation_failure(sine_problem) -> None:
    p = sine_problem(exercise=lambda x, tau: 0.0)
    method = EarlyExCrankNicolson(RelaxationConfig(max_iter=1))
    with pytest.raises(RelaxationConvergenceError):
        solve_heat_pde(p, 20, 20, method=method)


@pytest.mark.parametrize("method", ["early-cn", "early-explicit", EarlyExForwardEuler()])
def test_early_schemes_need_exercise_function(sine_problem, method) -> None:
    with pytest.raises(InvalidConfigurationError, match="exercise"):
        solve_heat_pde(sine_problem(), 10, 100, method=method)


def test_european_schemes_ignore_exercise_function(sine_problem) -> None:
    with_ex = solve_heat_pde(sine_problem(exercise=_obstacle), 20, 20, method="cn")
    without = solve_heat_pde(sine_problem(), 20, 20, method="cn")
    np.testing.assert_array_equal(with_ex.u, without.u)
