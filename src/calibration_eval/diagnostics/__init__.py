"""
Diagnostics for calibration error magnitudes.

Public API
----------
QualityTier
    Excellent / Good / Poor grade of a relative absolute error.
QualityThresholds
    Tier boundaries (0.05 / 0.20) and score weights (100 / 75).
QualityCounts / QualityBreakdown
    Tier counts, and counts plus headline score.
classify_quality / classify_quality_array
    Scalar and vectorised tier classification.
count_quality_tiers / score_quality / quality_breakdown
    Aggregate grading of many targets. The score of zero targets is None.
ErrorBin / error_distribution / error_distribution_df
    Histogram of relative absolute errors over fixed half-open bins.
"""

from __future__ import annotations

from .distribution import (
    ERROR_BIN_EDGES,
    ErrorBin,
    error_distribution,
    error_distribution_df,
)
from .quality import (
    QualityBreakdown,
    QualityCounts,
    QualityThresholds,
    QualityTier,
    classify_quality,
    classify_quality_array,
    count_quality_tiers,
    quality_breakdown,
    score_quality,
)

__all__ = [
    "ERROR_BIN_EDGES",
    "ErrorBin",
    "QualityBreakdown",
    "QualityCounts",
    "QualityThresholds",
    "QualityTier",
    "classify_quality",
    "classify_quality_array",
    "count_quality_tiers",
    "error_distribution",
    "error_distribution_df",
    "quality_breakdown",
    "score_quality",
]
