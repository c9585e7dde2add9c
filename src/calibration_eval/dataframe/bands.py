"""
Income-band series from a training-log snapshot.

Banded metrics (see :mod:`calibration_eval.facets.parser`) describe one
income source split into numbered bands, either as income amounts or as
counts of people. This module pulls the rows of one ``(source, kind)`` pair
under one namespace (``hmrc`` unless told otherwise) out of a table and
lines them up as an ordered band series so estimates can be compared to
targets band by band.

Rows are taken verbatim: missing bands are simply absent from the series and
are never zero-filled or interpolated. The reserved total band (index 55) is
always excluded.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Any

import pandas as pd

from ..diagnostics.quality import QualityBreakdown, QualityThresholds, quality_breakdown
from ..facets.parser import (
    DEFAULT_NAMESPACE,
    TOTAL_BAND_INDEX,
    BandedFacet,
    BandKind,
    MetricFacet,
    parse_metric,
)
from ..schema import AREA, ERROR, ESTIMATE, METRIC, REL_ABS_ERROR, TARGET
from ..utils.validation import ensure_columns_present

FacetOf = Callable[[str], MetricFacet]

_REQUIRED = (AREA, METRIC, ESTIMATE, TARGET, ERROR, REL_ABS_ERROR)


@dataclass(frozen=True)
class BandPoint:
    """One band of a series, with values copied from its training-log row."""

    band: BandedFacet
    area: str
    estimate: float
    target: float
    error: float
    rel_abs_error: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "area": self.area,
            "metric": self.band.metric,
            "source": self.band.source,
            "kind": self.band.kind.value,
            "band_index": self.band.band_index,
            "lower_bound": self.band.lower_bound,
            "upper_bound": self.band.upper_bound,
            "display_range": self.band.display_range,
            "estimate": self.estimate,
            "target": self.target,
            "error": self.error,
            "rel_abs_error": self.rel_abs_error,
        }


@dataclass(frozen=True)
class BandSeriesSummary:
    """
    Summary statistics of one band series.

    ``mean_rel_error``, ``best`` and ``worst`` are None for an empty series.
    Ties for best/worst go to the first band in ascending order.
    """

    count: int
    mean_rel_error: float | None
    best: BandPoint | None
    worst: BandPoint | None
    quality: QualityBreakdown


def aggregate_bands(
    records: pd.DataFrame,
    source: str,
    kind: BandKind | str = BandKind.AMOUNT,
    *,
    facet_of: FacetOf = parse_metric,
    area: str | None = None,
    namespace: str | None = DEFAULT_NAMESPACE,
    reserved_band_index: int = TOTAL_BAND_INDEX,
) -> list[BandPoint]:
    """
    Build the ordered band series for one income source.

    Parameters
    ----------
    records : pandas.DataFrame
        Training-log rows, usually the latest-epoch snapshot.

    source : str
        Income source, e.g. ``"pension"``.

    kind : BandKind or str, default "amount"
        ``"amount"`` for income amounts, ``"count"`` for counts of people.

    facet_of : callable, default parse_metric
        Maps a metric string to its facet. Pass a prepared lookup to reuse
        facets parsed once per table.

    area : str, optional
        Restrict to rows of one area.

    namespace : str or None, default "hmrc"
        Namespace prefix the metric must carry (the part before ``/``).
        ``None`` accepts any namespace, including none; bands of the same
        index from different namespaces then appear side by side.

    reserved_band_index : int, default 55
        Band index of the all-bands total, never included in the output.

    Returns
    -------
    list[BandPoint]
        Points sorted ascending by ``lower_bound`` (band index breaks ties).
    """
    ensure_columns_present(records, _REQUIRED, context="aggregate_bands")
    kind = BandKind(kind)

    if area is not None:
        records = records[records[AREA] == area]

    wanted: dict[str, BandedFacet] = {}
    for metric in pd.unique(records[METRIC]):
        facet = facet_of(metric)
        if (
            _in_namespace(facet, namespace)
            and facet.source == source
            and facet.kind is kind
            and facet.band_index != reserved_band_index
        ):
            wanted[metric] = facet

    if not wanted:
        return []

    subset = records[records[METRIC].isin(list(wanted))]
    points = [
        BandPoint(
            band=wanted[metric],
            area=str(row_area),
            estimate=float(estimate),
            target=float(target),
            error=float(error),
            rel_abs_error=float(rel),
        )
        for row_area, metric, estimate, target, error, rel in subset[
            list(_REQUIRED)
        ].itertuples(index=False, name=None)
    ]
    points.sort(key=lambda p: (p.band.lower_bound, p.band.band_index))
    return points


def summarize_bands(
    points: Sequence[BandPoint],
    thresholds: QualityThresholds | None = None,
) -> BandSeriesSummary:
    """Count, mean relative error, best / worst band and quality breakdown of a series."""
    rels = [p.rel_abs_error for p in points]
    breakdown = quality_breakdown(rels, thresholds)
    if not points:
        return BandSeriesSummary(
            count=0, mean_rel_error=None, best=None, worst=None, quality=breakdown
        )

    return BandSeriesSummary(
        count=len(points),
        mean_rel_error=sum(rels) / len(rels),
        best=min(points, key=lambda p: p.rel_abs_error),
        worst=max(points, key=lambda p: p.rel_abs_error),
        quality=breakdown,
    )


def list_income_sources(
    records: pd.DataFrame,
    *,
    kind: BandKind | str | None = None,
    namespace: str | None = DEFAULT_NAMESPACE,
    facet_of: FacetOf = parse_metric,
) -> list[str]:
    """
    Sorted distinct income sources among the banded metrics of ``records``.

    ``namespace`` filters as in :func:`aggregate_bands`.
    """
    ensure_columns_present(records, [METRIC], context="list_income_sources")
    kind = BandKind(kind) if kind is not None else None

    sources: set[str] = set()
    for metric in pd.unique(records[METRIC]):
        facet = facet_of(metric)
        if _in_namespace(facet, namespace) and (kind is None or facet.kind is kind):
            sources.add(facet.source)
    return sorted(sources)


def band_points_to_frame(points: Sequence[BandPoint]) -> pd.DataFrame:
    """One row per band point, in series order."""
    columns = [
        "area",
        "metric",
        "source",
        "kind",
        "band_index",
        "lower_bound",
        "upper_bound",
        "display_range",
        "estimate",
        "target",
        "error",
        "rel_abs_error",
    ]
    return pd.DataFrame([p.to_dict() for p in points], columns=columns)


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------


def _in_namespace(facet: MetricFacet, namespace: str | None) -> bool:
    if not isinstance(facet, BandedFacet):
        return False
    return namespace is None or facet.namespace == namespace
