"""Tests for the distance functions and the metric registry."""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from ranking_quality_analysis.distance.metrics import (
    EuclideanDistance,
    ManhattanDistance,
    MatrixWeightedDistance,
)
from ranking_quality_analysis.distance.registry import get_distance_metric
from ranking_quality_analysis.errors import DimensionMismatchError, ShapeError


def _random_psd(d: int, rng: np.random.Generator) -> np.ndarray:
    A = rng.normal(size=(d, d))
    return A @ A.T


class TestMatrixWeightedDistance:
    """Tests for the quadratic-form (Mahalanobis-weighted) distance."""

    @pytest.mark.parametrize("d", [1, 2, 5, 12])
    def test_symmetric_and_zero_on_identical(self, d):
        rng = np.random.default_rng(d)
        metric = MatrixWeightedDistance(_random_psd(d, rng))
        for _ in range(20):
            a, b = rng.normal(size=d), rng.normal(size=d)
            assert metric.distance(a, b) == metric.distance(b, a)
            assert metric.distance(a, a) == 0.0
            assert metric.distance(a, b) >= 0.0

    @pytest.mark.parametrize("shape", [(2, 3), (3, 2), (1, 4), (5, 1), (3,), (2, 2, 2)])
    def test_non_square_matrix_rejected(self, shape):
        with pytest.raises(ShapeError):
            MatrixWeightedDistance(np.ones(shape))

    def test_identity_matches_euclidean(self):
        rng = np.random.default_rng(0)
        weighted = MatrixWeightedDistance(np.eye(4))
        euclidean = EuclideanDistance()
        for _ in range(50):
            a, b = rng.normal(scale=10.0, size=4), rng.normal(scale=10.0, size=4)
            assert abs(weighted.distance(a, b) - euclidean.distance(a, b)) <= 1e-12

    def test_known_value(self):
        metric = MatrixWeightedDistance([[2.0, 0.0], [0.0, 0.5]])
        # diff = (1, 2): 2*1 + 0.5*4 = 4
        assert_allclose(metric.distance([0.0, 0.0], [1.0, 2.0]), 2.0, rtol=1e-15)

    def test_dimension_mismatch_with_matrix(self):
        metric = MatrixWeightedDistance(np.eye(2))
        with pytest.raises(DimensionMismatchError):
            metric.distance([1.0, 2.0, 3.0], [1.0, 2.0, 3.0])

    def test_matrix_copied_and_frozen(self):
        W = np.eye(2)
        metric = MatrixWeightedDistance(W)
        W[0, 0] = 100.0
        assert metric.weight_matrix[0, 0] == 1.0
        with pytest.raises(ValueError):
            metric.weight_matrix[0, 0] = 5.0

    def test_equality_and_hash(self):
        W = np.array([[1.0, 0.2], [0.2, 3.0]])
        m1 = MatrixWeightedDistance(W)
        m2 = MatrixWeightedDistance(W.copy())
        m3 = MatrixWeightedDistance(np.eye(2))

        assert m1 == m2
        assert hash(m1) == hash(m2)
        assert m1 != m3
        assert m1 != EuclideanDistance()

        cache = {m1: "first"}
        assert cache[m2] == "first"
        assert m3 not in cache

    def test_signed_zero_entries_hash_equal(self):
        m1 = MatrixWeightedDistance([[1.0, 0.0], [0.0, 1.0]])
        m2 = MatrixWeightedDistance([[1.0, -0.0], [-0.0, 1.0]])
        assert m1 == m2
        assert hash(m1) == hash(m2)

    def test_pairwise_matches_distance(self):
        rng = np.random.default_rng(3)
        metric = MatrixWeightedDistance(_random_psd(3, rng))
        q = rng.normal(size=3)
        X = rng.normal(size=(10, 3))
        expected = [metric.distance(q, x) for x in X]
        assert_allclose(metric.pairwise(q, X), expected, rtol=1e-14)


class TestVectorMetrics:
    @pytest.mark.parametrize("metric", [EuclideanDistance(), ManhattanDistance()])
    def test_symmetric_and_zero(self, metric):
        rng = np.random.default_rng(11)
        a, b = rng.normal(size=6), rng.normal(size=6)
        assert metric.distance(a, b) == metric.distance(b, a)
        assert metric.distance(a, a) == 0.0

    def test_known_values(self):
        a, b = [0.0, 0.0], [3.0, 4.0]
        assert EuclideanDistance().distance(a, b) == pytest.approx(5.0)
        assert ManhattanDistance().distance(a, b) == pytest.approx(7.0)

    @pytest.mark.parametrize("metric", [EuclideanDistance(), ManhattanDistance()])
    def test_dimension_mismatch(self, metric):
        with pytest.raises(DimensionMismatchError):
            metric.distance([1.0, 2.0], [1.0, 2.0, 3.0])

    def test_stateless_metrics_compare_by_type(self):
        assert EuclideanDistance() == EuclideanDistance()
        assert hash(EuclideanDistance()) == hash(EuclideanDistance())
        assert EuclideanDistance() != ManhattanDistance()


class TestRegistry:
    def test_lookup_is_case_insensitive(self):
        assert isinstance(get_distance_metric("Euclidean"), EuclideanDistance)
        assert isinstance(get_distance_metric("manhattan"), ManhattanDistance)

    def test_weighted_takes_matrix(self):
        metric = get_distance_metric("weighted", weight_matrix=np.eye(3))
        assert metric == MatrixWeightedDistance(np.eye(3))

    def test_unknown_metric(self):
        with pytest.raises(ValueError, match="Unknown metric"):
            get_distance_metric("cosine-ish")
