# src/heatpde/numerics/tridiag.py
from __future__ import annotations

from dataclasses import dataclass
from typing import cast

import numpy as np
from numpy.typing import NDArray

__all__ = [
    "Tridiag",
    "tridiag_mv",
    "solve_tridiag_thomas",
    "solve_tridiag_scipy",
    "tridiag_to_dense",
]


@dataclass(frozen=True, slots=True)
class Tridiag:
    """Tridiagonal matrix stored as its three diagonals.

    ``lower[k]`` sits at row ``k+1``, column ``k``; ``upper[k]`` at row ``k``,
    column ``k+1``.
    """

    lower: NDArray[np.floating]
    diag: NDArray[np.floating]
    upper: NDArray[np.floating]

    @classmethod
    def constant(cls, M: int, lower: float, diag: float, upper: float) -> Tridiag:
        """Toeplitz tridiagonal of size ``M`` with constant diagonals."""
        if M < 0:
            raise ValueError("M must be >= 0")
        off = max(M - 1, 0)
        return cls(
            lower=np.full(off, float(lower)),
            diag=np.full(M, float(diag)),
            upper=np.full(off, float(upper)),
        )

    def check(self) -> int:
        """
        Validate internal shapes and return M (system size).

        M == 0 is allowed with all three diagonals empty.
        """
        diag = np.asarray(self.diag)
        if diag.ndim != 1:
            raise ValueError("diag must be 1D")

        M = int(diag.shape[0])
        off = (max(M - 1, 0),)

        if np.shape(self.lower) != off or np.shape(self.upper) != off:
            raise ValueError(
                f"lower/upper must have shape {off} got "
                f"{np.shape(self.lower)}, {np.shape(self.upper)}"
            )
        return M

    def mv(self, u: NDArray[np.floating]) -> NDArray[np.floating]:
        self.check()
        return tridiag_mv(Bl=self.lower, Bd=self.diag, Bu=self.upper, u=u)


def tridiag_mv(
    Bl: NDArray[np.floating],  # (M-1,)
    Bd: NDArray[np.floating],  # (M,)
    Bu: NDArray[np.floating],  # (M-1,)
    u: NDArray[np.floating],  # (M,)
) -> NDArray[np.floating]:
    """
    Compute y = T u for the tridiagonal T with diagonals (Bl, Bd, Bu).

      y[0]   = Bd[0]*u[0] + Bu[0]*u[1]
      y[j]   = Bl[j-1]*u[j-1] + Bd[j]*u[j] + Bu[j]*u[j+1]
      y[M-1] = Bl[M-2]*u[M-2] + Bd[M-1]*u[M-1]
    """
    Bd = np.asarray(Bd, dtype=float)
    Bl = np.asarray(Bl, dtype=float)
    Bu = np.asarray(Bu, dtype=float)
    u = np.asarray(u, dtype=float)

    if Bd.ndim != 1:
        raise ValueError("Bd must be 1D")

    M = int(Bd.shape[0])
    if u.shape != (M,):
        raise ValueError(f"u must have shape {(M,)} got {u.shape}")

    off = (max(M - 1, 0),)
    if Bl.shape != off or Bu.shape != off:
        raise ValueError(f"Bl,Bu must have shape {off} got {Bl.shape}, {Bu.shape}")

    y = Bd * u
    if M > 1:
        y[1:] += Bl * u[:-1]
        y[:-1] += Bu * u[1:]
    return cast(NDArray[np.floating], y)


def solve_tridiag_thomas(
    A: Tridiag,
    rhs: NDArray[np.floating],
    *,
    overwrite: bool = False,
) -> NDArray[np.floating]:
    """
    Solve A x = rhs with the Thomas algorithm.

    Notes:
    - No pivoting. Intended for diagonally dominant systems such as the
      implicit heat operators.
    - Raises np.linalg.LinAlgError on (near-)zero pivots.
    - With overwrite=True and float64 inputs, A.upper and rhs are used as
      scratch space.
    """
    M = A.check()

    rhs = np.asarray(rhs)
    if rhs.shape != (M,):
        raise ValueError(f"rhs must have shape {(M,)} got {rhs.shape}")

    dtype = np.result_type(A.lower, A.diag, A.upper, rhs, np.float64)
    lower = np.asarray(A.lower).astype(dtype, copy=False)
    diag = np.asarray(A.diag).astype(dtype, copy=False)
    c = np.asarray(A.upper).astype(dtype, copy=not overwrite)  # modified upper
    d = rhs.astype(dtype, copy=not overwrite)  # modified rhs

    if M == 0:
        return d.copy()

    tol = 100.0 * np.finfo(dtype).eps

    # Forward sweep
    denom = diag[0]
    if abs(denom) < tol:
        raise np.linalg.LinAlgError("Near-zero pivot at row 0")
    if M > 1:
        c[0] = c[0] / denom
    d[0] = d[0] / denom

    for i in range(1, M):
        denom = diag[i] - lower[i - 1] * c[i - 1]
        if abs(denom) < tol:
            raise np.linalg.LinAlgError(f"Near-zero pivot at row {i}")
        if i < M - 1:
            c[i] = c[i] / denom
        d[i] = (d[i] - lower[i - 1] * d[i - 1]) / denom

    # Back substitution
    x = np.empty(M, dtype=dtype)
    x[M - 1] = d[M - 1]
    for i in range(M - 2, -1, -1):
        x[i] = d[i] - c[i] * x[i + 1]
    return x


def solve_tridiag_scipy(A: Tridiag, rhs: NDArray[np.floating]) -> NDArray[np.floating]:
    """
    Solve A x = rhs with SciPy's banded LU. SciPy is imported lazily.

    Singular systems raise np.linalg.LinAlgError (SciPy re-uses it).
    """
    from scipy.linalg import solve_banded

    M = A.check()

    rhs = np.asarray(rhs)
    if rhs.shape != (M,):
        raise ValueError(f"rhs must have shape {(M,)} got {rhs.shape}")

    if M == 0:
        return cast(NDArray[np.floating], rhs.astype(float, copy=True))

    ab = np.zeros((3, M), dtype=np.result_type(A.lower, A.diag, A.upper, rhs, np.float64))
    ab[0, 1:] = np.asarray(A.upper)
    ab[1, :] = np.asarray(A.diag)
    ab[2, :-1] = np.asarray(A.lower)

    res = solve_banded((1, 1), ab, rhs)
    return cast(NDArray[np.floating], np.asarray(res))


def tridiag_to_dense(A: Tridiag) -> NDArray[np.floating]:
    """Expand a :class:`Tridiag` into a dense (M, M) matrix."""
    M = A.check()
    out = np.zeros((M, M), dtype=np.result_type(A.lower, A.diag, A.upper, np.float64))
    idx = np.arange(M)
    out[idx, idx] = A.diag
    out[idx[1:], idx[:-1]] = A.lower
    out[idx[:-1], idx[1:]] = A.upper
    return out
