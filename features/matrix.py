"""Slice-and-reshape helpers turning a flat feature vector into model inputs."""

import numpy as np


def vector_to_matrix(
    values,
    start: int,
    end: int,
    num_rows: int = None,
    num_cols: int = None,
) -> np.ndarray:
    """Row-major reshape of values[start:end] into a float32 matrix.

    Without a shape the slice becomes a single row (1, end - start).

    Raises:
        ValueError: on an empty or out-of-range slice, or a shape that does
            not match the slice length
    """
    if not start < end:
        raise ValueError(f"start ({start}) must be < end ({end})")
    if start < 0:
        raise ValueError(f"start ({start}) must be >= 0")
    if end > len(values):
        raise ValueError(f"end ({end}) exceeds vector length ({len(values)})")

    if num_rows is None and num_cols is None:
        num_rows, num_cols = 1, end - start
    if num_rows is None or num_cols is None or num_rows * num_cols != end - start:
        raise ValueError(
            f"cannot reshape {end - start} values into ({num_rows}, {num_cols})"
        )

    return np.asarray(values[start:end], dtype=np.float32).reshape(num_rows, num_cols)
