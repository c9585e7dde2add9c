"""
Prepared view of a loaded training log.

Every view of a training log (headline summary, band series, local areas,
trajectories) needs the same two derived structures: the epoch selection and
the parsed facet of each metric. :func:`prepare_training_log` computes both
exactly once per loaded table and :class:`PreparedLog` hands them to each
consumer, so nothing is re-derived per view.

The view is immutable. Loading a new table means preparing a new view.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

import pandas as pd

from ..config import DEFAULT_CONFIG, EvaluationConfig
from ..facets.catalogue import AnalysisKind
from ..facets.parser import DEFAULT_NAMESPACE, BandKind, FacetKind, MetricFacet, parse_metric
from ..schema import COLUMNS, EPOCH, METRIC
from ..utils.validation import ensure_columns_present
from .areas import (
    AreaComparison,
    AreaRanking,
    AreaSummary,
    aggregate_by_area,
    compare_areas,
    list_areas,
    rank_areas,
    summarize_area,
)
from .bands import BandPoint, aggregate_bands, list_income_sources
from .epochs import EpochSelection, filter_to_selection, select_epochs
from .summary import TrainingLogSummary, summarize_selection
from .trajectory import metric_trajectory

logger = logging.getLogger(__name__)


@dataclass(frozen=True, eq=False)
class PreparedLog:
    """
    A training log with its epoch selection and metric facets computed once.

    Fields:
    - frame: the full table as loaded
    - selection: epoch downsampling result
    - selected: rows at the selected epochs
    - latest: rows at the maximum epoch
    - facets: read-only mapping of metric -> facet for every metric in ``frame``
    - config: the conventions every view uses
    """

    frame: pd.DataFrame
    selection: EpochSelection
    selected: pd.DataFrame
    latest: pd.DataFrame
    facets: Mapping[str, MetricFacet]
    config: EvaluationConfig

    def facet_of(self, metric: str) -> MetricFacet:
        facet = self.facets.get(metric)
        return facet if facet is not None else parse_metric(metric)

    def facet_counts(self) -> dict[FacetKind, int]:
        """Number of distinct metrics of each facet shape."""
        counts = {kind: 0 for kind in FacetKind}
        for facet in self.facets.values():
            counts[facet.facet_kind] += 1
        return counts

    # -----------------------------------------------------------------
    # Views
    # -----------------------------------------------------------------

    def summary(self) -> TrainingLogSummary:
        return summarize_selection(self.selected, self.selection, thresholds=self.config.quality)

    def income_sources(
        self,
        kind: BandKind | str | None = None,
        *,
        namespace: str | None = DEFAULT_NAMESPACE,
    ) -> list[str]:
        return list_income_sources(
            self.latest, kind=kind, namespace=namespace, facet_of=self.facet_of
        )

    def band_series(
        self,
        source: str,
        kind: BandKind | str = BandKind.AMOUNT,
        *,
        area: str | None = None,
        namespace: str | None = DEFAULT_NAMESPACE,
    ) -> list[BandPoint]:
        return aggregate_bands(
            self.latest,
            source,
            kind,
            facet_of=self.facet_of,
            area=area,
            namespace=namespace,
            reserved_band_index=self.config.reserved_band_index,
        )

    def areas(self) -> list[str]:
        return list_areas(self.latest)

    def area_summaries(self, analysis_kind: AnalysisKind | str) -> list[AreaSummary]:
        return aggregate_by_area(
            self.latest,
            analysis_kind,
            drop_non_positive_target=self.config.drop_non_positive_targets,
        )

    def area_summary(self, area: str, analysis_kind: AnalysisKind | str) -> AreaSummary | None:
        return summarize_area(
            self.latest,
            area,
            analysis_kind,
            drop_non_positive_target=self.config.drop_non_positive_targets,
        )

    def compare(
        self, primary: str, secondary: str, analysis_kind: AnalysisKind | str
    ) -> AreaComparison:
        return compare_areas(
            self.latest,
            primary,
            secondary,
            analysis_kind,
            drop_non_positive_target=self.config.drop_non_positive_targets,
        )

    def area_ranking(self, analysis_kind: AnalysisKind | str) -> AreaRanking:
        return rank_areas(self.area_summaries(analysis_kind), top_n=self.config.ranking_size)

    def trajectory(self, metric: str, area: str) -> pd.DataFrame:
        return metric_trajectory(self.selected, metric, area, thresholds=self.config.quality)


def prepare_training_log(
    df: pd.DataFrame,
    config: EvaluationConfig | None = None,
) -> PreparedLog:
    """
    Compute the epoch selection and metric facets of a loaded training log.

    Parameters
    ----------
    df : pandas.DataFrame
        Canonical training-log table (see :mod:`calibration_eval.schema`).

    config : EvaluationConfig, optional
        Conventions for every view. Defaults to :data:`DEFAULT_CONFIG`.

    Returns
    -------
    PreparedLog
    """
    cfg = config or DEFAULT_CONFIG
    ensure_columns_present(df, COLUMNS, context="prepare_training_log")

    selection = select_epochs(df, cfg.epoch_cap)
    selected = filter_to_selection(df, selection)
    if selection.selected:
        latest = selected[selected[EPOCH] == selection.max_epoch]
    else:
        latest = selected.iloc[0:0]

    facets = {str(m): parse_metric(m) for m in pd.unique(df[METRIC])}

    if selection.is_downsampled:
        logger.info(
            "Downsampled %d epochs to %d (step=%d, cap=%d).",
            selection.total_epochs,
            len(selection.selected),
            selection.step,
            selection.cap,
        )
    logger.debug(
        "Prepared training log: %d rows, %d metrics, latest epoch %d.",
        len(df),
        len(facets),
        selection.max_epoch,
    )

    return PreparedLog(
        frame=df,
        selection=selection,
        selected=selected,
        latest=latest,
        facets=MappingProxyType(facets),
        config=cfg,
    )
