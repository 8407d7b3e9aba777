# --- Purpose: Handles the concrete in-memory representation of a matrix. ---

import numpy as np
from .config import DEFAULT_DTYPE


def as_matrix(data):
    """
    Converts an array-like into a read-only 2-D numpy array.

    Arrays that already carry a dtype keep it; nested lists and other
    array-likes are converted to DEFAULT_DTYPE. The returned object is a
    view, so wrapping an existing ndarray does not copy its data, but the
    view itself cannot be written through.
    """
    if isinstance(data, np.ndarray):
        matrix = np.asarray(data).view()
    else:
        matrix = np.asarray(data, dtype=DEFAULT_DTYPE)

    if matrix.ndim != 2:
        raise ValueError(f"Expected a 2-dimensional matrix, got {matrix.ndim} dimension(s).")

    matrix.flags.writeable = False
    return matrix


def rows(matrix) -> int:
    """Number of rows of a dense matrix."""
    return int(matrix.shape[0])


def cols(matrix) -> int:
    """Number of columns of a dense matrix."""
    return int(matrix.shape[1])
