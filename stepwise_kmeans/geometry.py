import math
from typing import NamedTuple, Sequence

import numpy as np
import pandas as pd


class Point(NamedTuple):
    x: float
    y: float


def distance(a, b) -> float:
    """Euclidean distance between two 2-D points."""
    return math.hypot(a[0] - b[0], a[1] - b[1])


def pairwise_distances(X, Y) -> np.ndarray:
    """Distance matrix of shape (len(X), len(Y)) between two point arrays."""
    diffs = X[:, None, :] - Y[None, :, :]
    return np.sqrt(np.einsum("ijk,ijk->ij", diffs, diffs))


def paired_distances(A, B) -> np.ndarray:
    """Distance between A[i] and B[i] for every row i."""
    return np.linalg.norm(np.asarray(B, dtype=float) - np.asarray(A, dtype=float), axis=1)


def as_array(points) -> np.ndarray:
    """
    Coerce a dataset or centroid set into a float array of shape (n, 2).

    Accepts a sequence of Points (or any pairs), a numpy array, or a
    pandas DataFrame with two columns.
    """
    if isinstance(points, pd.DataFrame):
        arr = points.to_numpy(dtype=float)
    elif isinstance(points, np.ndarray):
        arr = points.astype(float, copy=False)
    elif isinstance(points, Sequence):
        arr = np.array([tuple(p) for p in points], dtype=float)
    else:
        raise ValueError("Input must be a sequence of points, numpy array or pandas DataFrame")

    if arr.size == 0:
        return np.empty((0, 2))
    if arr.ndim != 2 or arr.shape[1] != 2:
        raise ValueError(f"Expected points of shape (n, 2), got {arr.shape}")
    if not np.all(np.isfinite(arr)):
        raise ValueError("Points must have finite coordinates")
    return arr


def to_points(arr) -> tuple:
    """Turn an (n, 2) array back into a tuple of Points."""
    return tuple(Point(float(x), float(y)) for x, y in np.asarray(arr, dtype=float).reshape(-1, 2))
