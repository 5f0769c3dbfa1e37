"""
Central configuration for the ranking-quality analysis library.
"""

import numpy as np

# --- Binning Parameters ---

# Number of percentile bins over the normalized within-group rank position.
NUM_BINS: int = 100

# Delta degrees of freedom for the per-bin AUC variance.
# 0 -> population variance (a single sample yields 0.0)
# 1 -> sample variance (bins with count <= 1 emit EMPTY_BIN_FILL)
VARIANCE_DDOF: int = 0

# Value emitted for mean/variance of a bin that received no samples.
EMPTY_BIN_FILL: float = np.nan

# --- Distance Parameters ---

# Metric used when none is given explicitly.
# Options: 'euclidean', 'manhattan', 'weighted'
DEFAULT_METRIC: str = "euclidean"

# --- Error Policy ---

# When False, an empty group or a group spanning the whole dataset aborts the
# run. When True, such groups are skipped, logged, and reported on the result.
SKIP_DEGENERATE_GROUPS: bool = False

# --- Parallelism ---

# Default number of joblib workers for per-point scoring.
N_JOBS: int = 1

# Environment variable that overrides N_JOBS (e.g. "1" to force sequential).
N_JOBS_ENV_VAR: str = "RQA_N_JOBS"

# Groups with fewer members than this are always scored sequentially.
MIN_POINTS_FOR_PARALLEL: int = 64
