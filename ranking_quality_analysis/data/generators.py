"""Synthetic labelled datasets for smoke runs and tests.

Exports:
- generate_blobs_dataset(...) -> tuple[FeatureDataset, pd.Series, dict]
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

import pandas as pd
from sklearn.datasets import make_blobs

from ranking_quality_analysis.data.dataset import FeatureDataset


def generate_blobs_dataset(
    n_samples: int = 200,
    n_features: int = 2,
    n_clusters: int = 3,
    cluster_std: float = 1.0,
    seed: Optional[int] = None,
) -> Tuple[FeatureDataset, pd.Series, Dict[str, Any]]:
    """Generate isotropic Gaussian blobs with their ground-truth labels.

    Returns
    -------
    dataset : FeatureDataset
        Points indexed ``S0..S{n-1}`` with features ``F0..F{d-1}``.
    labels : pd.Series
        Blob index per point, aligned to the dataset index.
    metadata : dict
        Generator parameters, for logging alongside results.
    """
    X, y = make_blobs(
        n_samples=n_samples,
        n_features=n_features,
        centers=n_clusters,
        cluster_std=cluster_std,
        random_state=seed,
    )
    index = [f"S{j}" for j in range(n_samples)]
    frame = pd.DataFrame(X, index=index, columns=[f"F{j}" for j in range(n_features)])
    labels = pd.Series(y, index=index, name="label")
    metadata = {
        "n_samples": n_samples,
        "n_features": n_features,
        "n_clusters": n_clusters,
        "noise": cluster_std,
        "name": f"blobs_{n_samples}x{n_features}",
        "generator": "blobs",
    }
    return FeatureDataset(frame), labels, metadata


__all__ = ["generate_blobs_dataset"]
