"""Time-stepping schemes for the heat equation and a small registry.

Every scheme advances one time row ``u_j -> u_{j+1}`` of the mesh. The three
European schemes are members of the theta family

    A u_{j+1} = B u_j + boundary terms,
    A = tridiag(-theta*alpha, 1 + 2*theta*alpha, -theta*alpha),
    B = tridiag((1-theta)*alpha, 1 - 2*(1-theta)*alpha, (1-theta)*alpha),

with theta = 0 (forward Euler), 1 (backward Euler) and 1/2 (Crank-Nicolson).
The early-exercise schemes add the constraint ``u >= g(x, tau)``: forward
Euler by clamping after the update, Crank-Nicolson by projected SOR.

Schemes are looked up by name through the registry so callers can write
``method="cn"`` or register their own stepper.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

import numpy as np
from numpy.typing import NDArray

from ...config import RelaxationConfig
from ..linear_solvers import LinearSolver
from ..psor import projected_sor
from ..tridiag import Tridiag
from .domain import Mesh
from .problem import HeatProblem

__all__ = [
    "HeatSystem",
    "StepResult",
    "HeatScheme",
    "ForwardEuler",
    "BackwardEuler",
    "CrankNicolson",
    "EarlyExForwardEuler",
    "EarlyExCrankNicolson",
    "build_heat_system",
    "register_method",
    "available_methods",
    "resolve_method",
]


@dataclass(frozen=True, slots=True)
class HeatSystem:
    A: Tridiag  # interior system matrix for u_{j+1}
    B: Tridiag  # interior matrix applied to u_j
    alpha: float
    theta: float


@dataclass(frozen=True, slots=True)
class StepResult:
    u: NDArray[np.floating]  # full row j+1, boundaries included
    iterations: int = 0


def build_heat_system(alpha: float, M: int, theta: float) -> HeatSystem:
    """Constant theta-scheme operators on the M = n-1 interior nodes."""
    if not (0.0 <= theta <= 1.0):
        raise ValueError("theta must be in [0, 1]")
    a_impl = theta * alpha
    a_expl = (1.0 - theta) * alpha
    return HeatSystem(
        A=Tridiag.constant(M, -a_impl, 1.0 + 2.0 * a_impl, -a_impl),
        B=Tridiag.constant(M, a_expl, 1.0 - 2.0 * a_expl, a_expl),
        alpha=float(alpha),
        theta=float(theta),
    )


def _theta_rhs(
    system: HeatSystem,
    u_n: NDArray[np.floating],
    left_np1: float,
    right_np1: float,
) -> NDArray[np.floating]:
    """B u_j on the interior plus old/new boundary couplings."""
    rhs = system.B.mv(u_n[1:-1])
    if rhs.shape[0] == 0:
        return rhs
    a_impl = system.theta * system.alpha
    a_expl = (1.0 - system.theta) * system.alpha
    rhs[0] += a_expl * u_n[0] + a_impl * left_np1
    rhs[-1] += a_expl * u_n[-1] + a_impl * right_np1
    return rhs


def _assemble(
    u_int: NDArray[np.floating], left: float, right: float
) -> NDArray[np.floating]:
    u = np.empty(u_int.shape[0] + 2, dtype=float)
    u[0] = left
    u[1:-1] = u_int
    u[-1] = right
    return u


@runtime_checkable
class HeatScheme(Protocol):
    """One row of a heat-equation time march.

    ``step`` receives the full row ``u_n`` at ``tau[j]`` and returns the full
    row at ``tau[j+1]`` (boundary values included).
    """

    @property
    def name(self) -> str:  # pragma: no cover
        ...

    @property
    def theta(self) -> float:  # pragma: no cover
        ...

    @property
    def early_exercise(self) -> bool:  # pragma: no cover
        ...

    def step(
        self,
        *,
        problem: HeatProblem,
        mesh: Mesh,
        system: HeatSystem,
        u_n: NDArray[np.floating],
        j: int,
        linear_solver: LinearSolver | None,
    ) -> StepResult:  # pragma: no cover
        ...


@dataclass(frozen=True, slots=True)
class ForwardEuler:
    """Explicit scheme. Stable only for ``alpha <= 1/2`` (not enforced)."""

    @property
    def name(self) -> str:
        return "explicit"

    @property
    def theta(self) -> float:
        return 0.0

    @property
    def early_exercise(self) -> bool:
        return False

    def step(
        self,
        *,
        problem: HeatProblem,
        mesh: Mesh,
        system: HeatSystem,
        u_n: NDArray[np.floating],
        j: int,
        linear_solver: LinearSolver | None = None,
    ) -> StepResult:
        tau_np1 = float(mesh.tau[j + 1])
        left = float(problem.left(tau_np1))
        right = float(problem.right(tau_np1))
        u_int = _theta_rhs(system, u_n, left, right)
        return StepResult(u=_assemble(u_int, left, right))


@dataclass(frozen=True, slots=True)
class _ImplicitTheta:
    def _solve_row(
        self,
        *,
        problem: HeatProblem,
        mesh: Mesh,
        system: HeatSystem,
        u_n: NDArray[np.floating],
        j: int,
        linear_solver: LinearSolver | None,
    ) -> StepResult:
        if linear_solver is None:
            raise ValueError("Implicit schemes need a linear solver")
        tau_np1 = float(mesh.tau[j + 1])
        left = float(problem.left(tau_np1))
        right = float(problem.right(tau_np1))
        rhs = _theta_rhs(system, u_n, left, right)

        u_int = np.asarray(linear_solver.solve(system.A, rhs), dtype=float)
        if u_int.shape != rhs.shape:
            raise ValueError(
                f"linear solver must return shape {rhs.shape} got {u_int.shape}"
            )
        return StepResult(u=_assemble(u_int, left, right))


@dataclass(frozen=True, slots=True)
class BackwardEuler(_ImplicitTheta):
    """Fully implicit scheme, unconditionally stable."""

    @property
    def name(self) -> str:
        return "implicit"

    @property
    def theta(self) -> float:
        return 1.0

    @property
    def early_exercise(self) -> bool:
        return False

    def step(self, **kwargs) -> StepResult:
        return self._solve_row(**kwargs)


@dataclass(frozen=True, slots=True)
class CrankNicolson(_ImplicitTheta):
    """Second order in time and space, unconditionally stable."""

    @property
    def name(self) -> str:
        return "cn"

    @property
    def theta(self) -> float:
        return 0.5

    @property
    def early_exercise(self) -> bool:
        return False

    def step(self, **kwargs) -> StepResult:
        return self._solve_row(**kwargs)


@dataclass(frozen=True, slots=True)
class EarlyExForwardEuler:
    """Explicit update followed by ``max(u, g)`` on every interior node."""

    @property
    def name(self) -> str:
        return "early-explicit"

    @property
    def theta(self) -> float:
        return 0.0

    @property
    def early_exercise(self) -> bool:
        return True

    def step(
        self,
        *,
        problem: HeatProblem,
        mesh: Mesh,
        system: HeatSystem,
        u_n: NDArray[np.floating],
        j: int,
        linear_solver: LinearSolver | None = None,
    ) -> StepResult:
        tau_np1 = float(mesh.tau[j + 1])
        left = float(problem.left(tau_np1))
        right = float(problem.right(tau_np1))
        u_int = _theta_rhs(system, u_n, left, right)
        g = problem.exercise_values(mesh.x[1:-1], tau_np1)
        return StepResult(u=_assemble(np.maximum(u_int, g), left, right))


@dataclass(frozen=True, slots=True)
class EarlyExCrankNicolson:
    """Crank-Nicolson with the exercise constraint solved by projected SOR.

    The injected linear solver is not used: projected SOR solves the system
    and enforces ``u >= g`` in the same sweep. Each row starts from the
    exercise values at the target time level.
    """

    relaxation: RelaxationConfig = field(default_factory=RelaxationConfig)

    @property
    def name(self) -> str:
        return "early-cn"

    @property
    def theta(self) -> float:
        return 0.5

    @property
    def early_exercise(self) -> bool:
        return True

    def step(
        self,
        *,
        problem: HeatProblem,
        mesh: Mesh,
        system: HeatSystem,
        u_n: NDArray[np.floating],
        j: int,
        linear_solver: LinearSolver | None = None,
    ) -> StepResult:
        tau_np1 = float(mesh.tau[j + 1])
        left = float(problem.left(tau_np1))
        right = float(problem.right(tau_np1))
        rhs = _theta_rhs(system, u_n, left, right)
        g = problem.exercise_values(mesh.x[1:-1], tau_np1)

        cfg = self.relaxation
        res = projected_sor(
            system.A,
            rhs,
            g,
            omega=cfg.omega,
            tol=cfg.tol,
            max_iter=cfg.max_iter,
        )
        return StepResult(u=_assemble(res.x, left, right), iterations=res.iterations)


# -----------------------------
# Registry
# -----------------------------

SchemeFactory = Callable[[], HeatScheme]
_METHOD_REGISTRY: dict[str, SchemeFactory] = {}


def register_method(
    name: str,
    factory: SchemeFactory,
    *,
    overwrite: bool = False,
    aliases: tuple[str, ...] = (),
) -> None:
    """Register a scheme factory under one or more names.

    Parameters
    ----------
    name:
        Primary key users pass to ``solve_heat_pde(..., method=...)``.
    factory:
        Callable returning a new scheme instance.
    overwrite:
        If False (default), raise if ``name`` or any alias already exists.
    aliases:
        Additional strings that resolve to the same factory.
    """

    for k in (name, *aliases):
        kk = str(k).lower().strip()
        if not kk:
            raise ValueError("Method name/alias cannot be empty")
        if (not overwrite) and (kk in _METHOD_REGISTRY):
            raise KeyError(f"Method '{kk}' is already registered")
        _METHOD_REGISTRY[kk] = factory


def available_methods() -> list[str]:
    """Return the currently registered method keys (sorted)."""

    return sorted(_METHOD_REGISTRY.keys())


def resolve_method(method: str | HeatScheme | None) -> HeatScheme:
    """Resolve a method name (``None`` -> ``"cn"``) or pass a scheme through."""

    if method is None:
        method = "cn"

    if isinstance(method, HeatScheme) and not isinstance(method, str):
        return method

    key = str(method).lower().strip()
    try:
        factory = _METHOD_REGISTRY[key]
    except KeyError as e:
        raise ValueError(
            f"Unknown method '{method}'. Available: {', '.join(available_methods())}"
        ) from e
    return factory()


def _register_builtin_methods() -> None:
    register_method(
        "explicit",
        ForwardEuler,
        overwrite=True,
        aliases=("forward-euler", "forward", "fe", "explicit-euler"),
    )
    register_method(
        "implicit",
        BackwardEuler,
        overwrite=True,
        aliases=("backward-euler", "backward", "be", "implicit-euler"),
    )
    register_method(
        "cn",
        CrankNicolson,
        overwrite=True,
        aliases=("crank-nicolson", "crank_nicolson", "crank"),
    )
    register_method(
        "early-explicit",
        EarlyExForwardEuler,
        overwrite=True,
        aliases=("early-fe", "american-explicit", "american-fe"),
    )
    register_method(
        "early-cn",
        EarlyExCrankNicolson,
        overwrite=True,
        aliases=("early-crank-nicolson", "american-cn", "psor"),
    )


_register_builtin_methods()
