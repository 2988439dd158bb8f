"""Leaf-node geometry helpers. No engine imports."""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.spatial.distance import cdist

Bounds = tuple[float, float, float, float]


def as_points(values: ArrayLike) -> NDArray[np.float64]:
    """Coerce an (n, 2) sequence into a fresh float64 array."""
    pts = np.array(values, dtype=np.float64)
    if pts.size == 0:
        return pts.reshape(0, 2)
    if pts.ndim != 2 or pts.shape[1] != 2:
        raise ValueError(f"Expected an (n, 2) point array, got shape {pts.shape}")
    return pts


def bounds_of(points: NDArray[np.float64]) -> Bounds:
    """Compute (xmin, ymin, xmax, ymax) of a non-empty point set."""
    if len(points) == 0:
        raise ValueError("Cannot compute bounds of an empty point set")
    return (
        float(np.min(points[:, 0])),
        float(np.min(points[:, 1])),
        float(np.max(points[:, 0])),
        float(np.max(points[:, 1])),
    )


def bounds_center(bounds: Bounds) -> tuple[float, float]:
    xmin, ymin, xmax, ymax = bounds
    return ((xmin + xmax) / 2, (ymin + ymax) / 2)


def median_value(values: Sequence[float] | NDArray[np.float64]) -> float:
    """Numeric median. Even counts average the two middle values; empty → 0.0."""
    arr = np.sort(np.asarray(values, dtype=np.float64))
    n = len(arr)
    if n == 0:
        return 0.0
    mid = n // 2
    if n % 2 == 0:
        return float((arr[mid - 1] + arr[mid]) / 2)
    return float(arr[mid])


def median_pairwise_distance(points: NDArray[np.float64], sample_cap: int = 2000) -> float:
    """Median of pairwise distances, gathered whole rows at a time.

    Rows are i < j in index order (scipy's condensed order). A new row is only
    started while the number of distances gathered so far is <= sample_cap, so
    the sample can overshoot the cap by at most one row.
    """
    n = len(points)
    if n < 2:
        return 0.0

    # row i holds n - 1 - i distances
    row_lengths = np.arange(n - 1, 0, -1)
    gathered_before = np.concatenate([[0], np.cumsum(row_lengths)[:-1]])
    rows = int(np.count_nonzero(gathered_before <= sample_cap))

    # only the sampled rows are computed; keep j > i of each
    block = cdist(points[:rows], points)
    upper = np.arange(n)[np.newaxis, :] > np.arange(rows)[:, np.newaxis]

    return median_value(block[upper])


def median_size(sizes: Sequence[float] | NDArray[np.float64]) -> float:
    """Median of precomputed item sizes (bbox diagonals)."""
    return median_value(sizes)


def bbox_diagonal(bbox: Bounds) -> float:
    xmin, ymin, xmax, ymax = bbox
    return float(np.hypot(xmax - xmin, ymax - ymin))
