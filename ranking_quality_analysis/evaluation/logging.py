"""Small logging helpers for the ranking-quality evaluator.

Functions are kept separate so they can be imported and reused elsewhere
without pulling in the driver module.
"""

from __future__ import annotations

import logging


def _default_evaluation_logger() -> logging.Logger:
    return logging.getLogger("ranking_quality_analysis.evaluation.ranking_quality")


def log_evaluation_start(
    n_points: int, n_groups: int, metric: object, logger: logging.Logger | None = None
) -> None:
    """Log the start of an evaluation run."""
    logger = logger or _default_evaluation_logger()
    logger.info("%s", "=" * 80)
    logger.info("RANKING QUALITY EVALUATION")
    logger.info("%s", "=" * 80)
    logger.info("Evaluating %r on %d points in %d groups.", metric, n_points, n_groups)


def log_group_start(
    index: int, total: int, label: object, size: int, logger: logging.Logger | None = None
) -> None:
    """Log the start of scoring for one group."""
    logger = logger or _default_evaluation_logger()
    logger.debug("Scoring group %d/%d: %r (%d points)", index, total, label, size)


def log_skipped_group(label: object, reason: str, logger: logging.Logger | None = None) -> None:
    logger = logger or _default_evaluation_logger()
    logger.warning("Skipping group %r: %s", label, reason)


def log_evaluation_completion(
    n_scored: int, n_skipped: int, elapsed: float, logger: logging.Logger | None = None
) -> None:
    """Log the completion of an evaluation run."""
    logger = logger or _default_evaluation_logger()
    logger.info(
        "Scored %d points (%d group(s) skipped) in %.2fs.", n_scored, n_skipped, elapsed
    )
