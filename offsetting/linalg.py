import numpy as np
from numpy.typing import NDArray

# Singular values below this fraction of the largest one are treated as zero.
SINGULAR_VALUE_CUTOFF = 1e-10


def solve_linear_system(a: NDArray[np.float64], b: NDArray[np.float64]) -> NDArray[np.float64]:
    """
    Solve the dense square system a @ x = b.

    Uses an SVD least-squares solve, so a singular matrix gives the
    minimum-norm solution instead of an error. For a well-conditioned matrix
    this is the exact solution.
    """
    a = np.asarray(a, dtype=np.float64)
    b = np.asarray(b, dtype=np.float64)
    if a.ndim != 2 or a.shape[0] != a.shape[1]:
        raise ValueError(f"Expected a square matrix, got shape {a.shape}")
    if b.shape[0] != a.shape[0]:
        raise ValueError(f"Right-hand side of length {b.shape[0]} does not match matrix of size {a.shape[0]}")
    x, _, _, _ = np.linalg.lstsq(a, b, rcond=SINGULAR_VALUE_CUTOFF)
    return x
