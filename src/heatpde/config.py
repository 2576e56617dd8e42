from __future__ import annotations

import math
import warnings
from dataclasses import dataclass

from heatpde.exceptions import InvalidConfigurationError


@dataclass(frozen=True, slots=True)
class RelaxationConfig:
    """Settings shared by the SOR linear solver and projected SOR.

    Parameters
    ----------
    omega : float, default 1.2
        Over-relaxation factor. Convergence needs ``0 < omega < 2``; values
        outside that range are accepted but warned about.
    tol : float, default 1e-6
        Stop once the largest absolute update of a sweep drops below ``tol``.
    max_iter : int, default 10_000
        Hard cap on the number of sweeps per solve.
    """

    omega: float = 1.2
    tol: float = 1e-6
    max_iter: int = 10_000

    def __post_init__(self) -> None:
        if not math.isfinite(self.omega):
            raise InvalidConfigurationError("omega must be finite")
        if not (self.tol > 0.0):
            raise InvalidConfigurationError("tol must be > 0")
        if isinstance(self.max_iter, bool) or int(self.max_iter) != self.max_iter:
            raise InvalidConfigurationError("max_iter must be an integer")
        if self.max_iter <= 0:
            raise InvalidConfigurationError("max_iter must be > 0")
        if not (0.0 < self.omega < 2.0):
            warnings.warn(
                f"omega={self.omega:g} is outside (0, 2); SOR is expected to diverge",
                RuntimeWarning,
                stacklevel=3,
            )
