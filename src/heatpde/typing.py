from __future__ import annotations

from collections.abc import Callable
from typing import TypeAlias

import numpy as np
from numpy.typing import NDArray

# typing only
FloatArray: TypeAlias = NDArray[np.floating]
BoundaryFn: TypeAlias = Callable[[float], float]  # tau -> u(x_bound, tau)
ScalarFn: TypeAlias = Callable[[float], float]  # x -> u(x, 0)
ExerciseFn: TypeAlias = Callable[[float, float], float]  # (x, tau) -> intrinsic value
