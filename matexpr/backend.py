# --- Purpose: Contains the dense execution kernels. ---

import numpy as np

from .errors import DimensionMismatch


def matmul(A: np.ndarray, B: np.ndarray) -> np.ndarray:
    """Performs dense matrix multiplication: C = A @ B."""
    if A.shape[1] != B.shape[0]:
        raise DimensionMismatch("multiply", A.shape, B.shape)
    return A @ B


def add(A: np.ndarray, B: np.ndarray) -> np.ndarray:
    """Performs dense elementwise addition: C = A + B."""
    if A.shape != B.shape:
        raise DimensionMismatch("add", A.shape, B.shape)
    return A + B
