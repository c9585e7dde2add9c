"""
Pandas / DataFrame views of a calibration training log: epoch selection,
band series, local-area summaries, trajectories and headline figures.
"""

from .epochs import EpochSelection, filter_to_selection, latest_snapshot, select_epochs
from .bands import (
    BandPoint,
    BandSeriesSummary,
    aggregate_bands,
    band_points_to_frame,
    list_income_sources,
    summarize_bands,
)
from .areas import (
    AreaComparison,
    AreaPoint,
    AreaRanking,
    AreaSlot,
    AreaSummary,
    aggregate_by_area,
    area_slots,
    area_summaries_to_frame,
    compare_areas,
    list_areas,
    rank_areas,
    summarize_area,
)
from .trajectory import list_areas_for_metric, list_metrics, metric_trajectory
from .summary import TrainingLogSummary, summarize_selection, summarize_training_log
from .prepared import PreparedLog, prepare_training_log

__all__ = [
    "AreaComparison",
    "AreaPoint",
    "AreaRanking",
    "AreaSlot",
    "AreaSummary",
    "BandPoint",
    "BandSeriesSummary",
    "EpochSelection",
    "PreparedLog",
    "TrainingLogSummary",
    "aggregate_bands",
    "aggregate_by_area",
    "area_slots",
    "area_summaries_to_frame",
    "band_points_to_frame",
    "compare_areas",
    "filter_to_selection",
    "latest_snapshot",
    "list_areas",
    "list_areas_for_metric",
    "list_income_sources",
    "list_metrics",
    "metric_trajectory",
    "prepare_training_log",
    "rank_areas",
    "select_epochs",
    "summarize_area",
    "summarize_bands",
    "summarize_selection",
    "summarize_training_log",
]
