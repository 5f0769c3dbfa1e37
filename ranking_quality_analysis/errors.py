"""
Exceptions raised by the ranking-quality evaluator.

All concrete errors also derive from ``ValueError`` so callers that only
guard against bad input values keep working.
"""


class RankingQualityError(Exception):
    """Base exception for ranking-quality evaluation errors."""

    pass


class DimensionMismatchError(RankingQualityError, ValueError):
    """Raised when a metric is applied to vectors of different dimensionality."""

    pass


class ShapeError(RankingQualityError, ValueError):
    """Raised when a weight matrix is not square."""

    pass


class EmptyGroupError(RankingQualityError, ValueError):
    """Raised when a ground-truth group has no members."""

    pass


class DegenerateInputError(RankingQualityError, ValueError):
    """Raised when a ranking has no positives or no negatives."""

    pass


__all__ = [
    "RankingQualityError",
    "DimensionMismatchError",
    "ShapeError",
    "EmptyGroupError",
    "DegenerateInputError",
]
