"""Input side of the evaluator: feature storage and ground-truth groups."""

from .dataset import FeatureDataset, FeatureStore
from .generators import generate_blobs_dataset
from .partition import (
    Group,
    LabelPartition,
    PartitionProvider,
    groups_from_mapping,
    validate_partition,
)

__all__ = [
    "FeatureDataset",
    "FeatureStore",
    "Group",
    "LabelPartition",
    "PartitionProvider",
    "generate_blobs_dataset",
    "groups_from_mapping",
    "validate_partition",
]
