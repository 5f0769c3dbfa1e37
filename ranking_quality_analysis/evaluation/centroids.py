"""Group centroids (element-wise mean vectors)."""

from __future__ import annotations

import math
from typing import Hashable, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from ranking_quality_analysis.data.dataset import FeatureDataset
from ranking_quality_analysis.data.partition import Group
from ranking_quality_analysis.errors import EmptyGroupError


def compute_centroid(vectors: ArrayLike) -> NDArray[np.float64]:
    """Return the element-wise arithmetic mean of ``vectors``.

    Column sums use ``math.fsum`` (exactly rounded), so the result does not
    depend on member order down to the last bit.

    Parameters
    ----------
    vectors : ArrayLike
        Member vectors, shape (n, d).

    Raises
    ------
    EmptyGroupError
        If there are no member vectors.
    """
    X = np.asarray(vectors, dtype=np.float64)
    if X.ndim >= 1 and X.shape[0] == 0:
        raise EmptyGroupError("Cannot compute the centroid of an empty group.")
    if X.ndim != 2:
        raise ValueError(f"Member vectors must be 2-D (n, d). Got ndim={X.ndim}.")
    n = X.shape[0]
    sums = np.array([math.fsum(column) for column in X.T], dtype=np.float64)
    return sums / n


def compute_group_centroids(
    dataset: FeatureDataset, groups: Sequence[Group]
) -> dict[Hashable, NDArray[np.float64]]:
    """Compute one centroid per group, keyed by group label."""
    centroids: dict[Hashable, NDArray[np.float64]] = {}
    for group in groups:
        if len(group) == 0:
            raise EmptyGroupError(f"Group {group.label!r} has no members.")
        rows = dataset.values[dataset.positions(group.members)]
        centroid = compute_centroid(rows)
        centroid.setflags(write=False)
        centroids[group.label] = centroid
    return centroids


__all__ = ["compute_centroid", "compute_group_centroids"]
