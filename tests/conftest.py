import os
import sys

import numpy as np
import pytest

# Ensure the project root is on sys.path so tests can import
# ``ranking_quality_analysis`` without installing the package.
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from ranking_quality_analysis.data.dataset import FeatureDataset  # noqa: E402
from ranking_quality_analysis.data.generators import generate_blobs_dataset  # noqa: E402
from ranking_quality_analysis.data.partition import groups_from_mapping  # noqa: E402


@pytest.fixture
def line_dataset() -> FeatureDataset:
    """1-D points 0, 1, 10, 11 with IDs 0..3."""
    return FeatureDataset.from_array(np.array([[0.0], [1.0], [10.0], [11.0]]))


@pytest.fixture
def line_groups():
    return groups_from_mapping({"A": [0, 1], "B": [2, 3]})


@pytest.fixture
def blobs():
    dataset, labels, _ = generate_blobs_dataset(
        n_samples=150, n_features=3, n_clusters=3, cluster_std=1.0, seed=7
    )
    return dataset, labels
