"""
Calibration Evaluation Toolkit

DataFrame-based diagnostics for calibrated survey weights. Given a training
log of (epoch, area, metric, estimate, target, error) rows, this package
downsamples epochs, parses metric identifiers into income-band and
demographic facets, grades relative errors into quality tiers, and aggregates
and ranks results across income bands and local areas.
"""

import logging

from .config import DEFAULT_CONFIG, EvaluationConfig
from .schema import COLUMNS, Record, records_to_frame
from .ingest import parse_training_log, read_training_log
from .facets import (
    AnalysisKind,
    BandedFacet,
    BandKind,
    FlatFacet,
    UnstructuredFacet,
    format_banded_metric,
    parse_metric,
)
from .diagnostics import (
    QualityThresholds,
    QualityTier,
    classify_quality,
    count_quality_tiers,
    error_distribution,
    score_quality,
)
from .dataframe import (
    aggregate_bands,
    aggregate_by_area,
    metric_trajectory,
    prepare_training_log,
    rank_areas,
    select_epochs,
    summarize_bands,
    summarize_training_log,
)

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "COLUMNS",
    "DEFAULT_CONFIG",
    "AnalysisKind",
    "BandKind",
    "BandedFacet",
    "EvaluationConfig",
    "FlatFacet",
    "QualityThresholds",
    "QualityTier",
    "Record",
    "UnstructuredFacet",
    "aggregate_bands",
    "aggregate_by_area",
    "classify_quality",
    "count_quality_tiers",
    "error_distribution",
    "format_banded_metric",
    "metric_trajectory",
    "parse_metric",
    "parse_training_log",
    "prepare_training_log",
    "rank_areas",
    "read_training_log",
    "records_to_frame",
    "score_quality",
    "select_epochs",
    "summarize_bands",
    "summarize_training_log",
]
