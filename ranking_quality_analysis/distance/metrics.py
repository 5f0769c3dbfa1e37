"""Distance functions over real-valued feature vectors.

Every metric exposes two entry points:

``pairwise(query, points)``
    Distances from one query vector to each row of a 2-D array. This is what
    the brute-force neighbour ranker calls.
``distance(a, b)``
    Distance between two vectors. Implemented as a one-row ``pairwise`` call,
    so both paths return bit-identical values for the same pair.

The weighted metric computes

    d(a, b) = sqrt((a - b)^T W (a - b))

for a caller-supplied symmetric positive semi-definite weight matrix ``W``.
With ``W`` the inverse covariance this is the Mahalanobis distance; with the
identity it reduces to the Euclidean distance.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy.spatial.distance import cdist

from ranking_quality_analysis.errors import DimensionMismatchError, ShapeError


def _as_query_and_points(
    query: ArrayLike, points: ArrayLike
) -> tuple[NDArray[np.float64], NDArray[np.float64]]:
    q = np.asarray(query, dtype=np.float64)
    X = np.asarray(points, dtype=np.float64)
    if q.ndim != 1:
        raise DimensionMismatchError(f"Query must be a 1-D vector. Got ndim={q.ndim}.")
    if X.ndim == 1:
        X = X[np.newaxis, :]
    if X.ndim != 2:
        raise DimensionMismatchError(f"Points must be 2-D (n, d). Got ndim={X.ndim}.")
    if X.shape[1] != q.shape[0]:
        raise DimensionMismatchError(
            f"Dimensionality mismatch: query has {q.shape[0]} features, "
            f"points have {X.shape[1]}."
        )
    return q, X


class DistanceMetric(ABC):
    """Symmetric, non-negative dissimilarity between feature vectors."""

    name: str = "abstract"

    @abstractmethod
    def pairwise(self, query: ArrayLike, points: ArrayLike) -> NDArray[np.float64]:
        """Return distances from ``query`` (shape (d,)) to each row of ``points`` (n, d)."""

    def distance(self, a: ArrayLike, b: ArrayLike) -> float:
        """Return the distance between two vectors of equal dimensionality."""
        b = np.asarray(b, dtype=np.float64)
        if b.ndim != 1:
            raise DimensionMismatchError(f"Expected a 1-D vector. Got ndim={b.ndim}.")
        return float(self.pairwise(a, b[np.newaxis, :])[0])

    def __eq__(self, other: object) -> bool:
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self).__name__)

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"


class EuclideanDistance(DistanceMetric):
    """Ordinary L2 distance."""

    name = "euclidean"

    def pairwise(self, query: ArrayLike, points: ArrayLike) -> NDArray[np.float64]:
        q, X = _as_query_and_points(query, points)
        return cdist(q[np.newaxis, :], X, metric="euclidean")[0]


class ManhattanDistance(DistanceMetric):
    """L1 (city block) distance."""

    name = "manhattan"

    def pairwise(self, query: ArrayLike, points: ArrayLike) -> NDArray[np.float64]:
        q, X = _as_query_and_points(query, points)
        return cdist(q[np.newaxis, :], X, metric="cityblock")[0]


class MatrixWeightedDistance(DistanceMetric):
    """Quadratic-form distance ``sqrt((a-b)^T W (a-b))``.

    The weight matrix is copied on construction and frozen. Only squareness
    is checked; symmetry and positive semi-definiteness are the caller's
    responsibility. Quadratic forms that come out marginally negative through
    round-off are clipped to zero before the square root.

    Two instances compare equal iff their matrices are element-wise equal,
    and hash consistently with that, so instances can be used as dict keys.

    Parameters
    ----------
    weight_matrix : ArrayLike
        Square matrix of shape (d, d).

    Raises
    ------
    ShapeError
        If ``weight_matrix`` is not a 2-D square matrix.
    """

    name = "weighted"

    def __init__(self, weight_matrix: ArrayLike) -> None:
        W = np.array(weight_matrix, dtype=np.float64, copy=True)
        if W.ndim != 2 or W.shape[0] != W.shape[1]:
            raise ShapeError(f"Weight matrix must be square (d, d). Got shape {W.shape}.")
        W.setflags(write=False)
        self._weight_matrix = W
        self._hash: int | None = None

    @property
    def weight_matrix(self) -> NDArray[np.float64]:
        """Read-only view of the weight matrix."""
        return self._weight_matrix

    @property
    def dimensionality(self) -> int:
        return self._weight_matrix.shape[0]

    def pairwise(self, query: ArrayLike, points: ArrayLike) -> NDArray[np.float64]:
        q, X = _as_query_and_points(query, points)
        if q.shape[0] != self.dimensionality:
            raise DimensionMismatchError(
                f"Vectors have {q.shape[0]} features but the weight matrix is "
                f"{self.dimensionality}x{self.dimensionality}."
            )
        diff = X - q
        quad = np.einsum("ij,jk,ik->i", diff, self._weight_matrix, diff)
        return np.sqrt(np.maximum(quad, 0.0))

    def __eq__(self, other: object) -> bool:
        if self is other:
            return True
        if type(self) is not type(other):
            return False
        return bool(np.array_equal(self._weight_matrix, other._weight_matrix))

    def __hash__(self) -> int:
        if self._hash is None:
            W = self._weight_matrix
            self._hash = hash((type(self).__name__, W.shape, tuple(W.ravel().tolist())))
        return self._hash

    def __repr__(self) -> str:
        d = self.dimensionality
        return f"{type(self).__name__}(d={d})"


__all__ = [
    "DistanceMetric",
    "EuclideanDistance",
    "ManhattanDistance",
    "MatrixWeightedDistance",
]
