"""Tests for percentile binning and the online mean/variance accumulator."""

import numpy as np
import pytest
from numpy.testing import assert_allclose

from ranking_quality_analysis.errors import EmptyGroupError
from ranking_quality_analysis.evaluation.binning import (
    MeanVariance,
    RankPositionBinner,
    percentile_bin,
)


class TestPercentileBin:
    def test_known_positions(self):
        assert [percentile_bin(i, 3) for i in range(3)] == [0, 33, 66]
        assert percentile_bin(0, 200) == 0
        assert percentile_bin(199, 200) == 99
        assert percentile_bin(1, 2) == 50

    def test_clamped(self):
        assert percentile_bin(5, 5) == 99
        assert percentile_bin(-1, 3) == 0
        assert percentile_bin(7, 3, num_bins=4) == 3

    def test_deterministic(self):
        for n in (1, 7, 99, 100, 101, 1000):
            for ind in range(0, n, max(1, n // 13)):
                assert percentile_bin(ind, n, 100) == percentile_bin(ind, n, 100)
                assert 0 <= percentile_bin(ind, n, 100) < 100

    def test_empty_group(self):
        with pytest.raises(EmptyGroupError):
            percentile_bin(0, 0)

    def test_invalid_bins(self):
        with pytest.raises(ValueError):
            percentile_bin(0, 3, num_bins=0)


class TestMeanVariance:
    def test_matches_two_pass(self):
        rng = np.random.default_rng(42)
        samples = rng.beta(5, 2, size=1000)
        acc = MeanVariance()
        for x in samples:
            acc.add(x)
        assert acc.count == samples.size
        assert_allclose(acc.mean, np.mean(samples), rtol=1e-9)
        assert_allclose(acc.variance(ddof=0), np.var(samples), rtol=1e-9)
        assert_allclose(acc.variance(ddof=1), np.var(samples, ddof=1), rtol=1e-9)

    def test_merge_matches_sequential(self):
        rng = np.random.default_rng(1)
        samples = rng.normal(loc=0.7, scale=0.1, size=300)
        sequential = MeanVariance()
        for x in samples:
            sequential.add(x)

        merged = MeanVariance()
        for chunk in np.array_split(samples, 7):
            part = MeanVariance()
            for x in chunk:
                part.add(x)
            merged.merge(part)

        assert merged.count == sequential.count
        assert_allclose(merged.mean, sequential.mean, rtol=1e-12)
        assert_allclose(merged.variance(), sequential.variance(), rtol=1e-10)

    def test_merge_with_empty(self):
        acc = MeanVariance().add(0.5).add(1.0)
        before = (acc.count, acc.mean, acc.m2)
        acc.merge(MeanVariance())
        assert (acc.count, acc.mean, acc.m2) == before

        empty = MeanVariance().merge(acc)
        assert (empty.count, empty.mean, empty.m2) == before

    def test_undefined_variance_is_nan(self):
        assert np.isnan(MeanVariance().variance())
        assert np.isnan(MeanVariance().add(1.0).variance(ddof=1))
        assert MeanVariance().add(1.0).variance(ddof=0) == 0.0


class TestRankPositionBinner:
    def test_frame_layout(self):
        binner = RankPositionBinner(10)
        binner.add(0, 4, 1.0)
        binner.add(0, 4, 0.5)
        binner.add(3, 4, 0.25)
        df = binner.to_frame()

        assert list(df.columns) == ["percentile", "count", "mean_auc", "variance_auc"]
        assert len(df) == 10
        assert_allclose(df["percentile"], np.arange(10) / 10)
        assert df["count"].tolist() == [2, 0, 0, 0, 0, 0, 0, 1, 0, 0]
        assert df.loc[0, "mean_auc"] == pytest.approx(0.75)
        assert df.loc[0, "variance_auc"] == pytest.approx(0.0625)
        assert df.loc[7, "variance_auc"] == 0.0
        assert binner.total_count == 3

    def test_empty_bins_use_fill(self):
        df = RankPositionBinner(5).to_frame()
        assert (df["count"] == 0).all()
        assert df["mean_auc"].isna().all()
        assert df["variance_auc"].isna().all()

        filled = RankPositionBinner(5).to_frame(empty_fill=0.0)
        assert (filled["mean_auc"] == 0.0).all()

    def test_sample_variance_needs_two_samples(self):
        binner = RankPositionBinner(2)
        binner.add(0, 2, 0.9)
        df = binner.to_frame(ddof=1)
        assert df.loc[0, "mean_auc"] == pytest.approx(0.9)
        assert np.isnan(df.loc[0, "variance_auc"])

    def test_merge(self):
        a, b = RankPositionBinner(4), RankPositionBinner(4)
        a.add(0, 2, 1.0)
        b.add(0, 2, 0.0)
        b.add(1, 2, 0.5)
        a.merge(b)
        assert a[0].count == 2
        assert a[0].mean == pytest.approx(0.5)
        assert a[2].count == 1

    def test_merge_bin_count_mismatch(self):
        with pytest.raises(ValueError):
            RankPositionBinner(4).merge(RankPositionBinner(5))
