"""
Local-area (geographic) aggregation and ranking.

For each area, the categories of a flat catalogue (age decades or
employment-income brackets) are looked up by exact metric match, giving one
point per category that has data. Areas are then scored by the unweighted
mean relative absolute error of their points and ranked.

Missing vs zero targets
-----------------------
A catalogue category with no row for an area contributes no point. In
addition, by default a point whose ``target`` is not strictly positive is
also treated as missing. That policy conflates "no data" with "target is
legitimately zero", so it is exposed as the ``drop_non_positive_target``
keyword; :func:`area_slots` reports the raw per-category state (row present
or absent) without any filtering.

Areas left with no points are never returned: their mean error is undefined.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Any

import pandas as pd

from ..facets.catalogue import AnalysisKind, CatalogueEntry, catalogue_for
from ..schema import AREA, ERROR, ESTIMATE, METRIC, REL_ABS_ERROR, TARGET
from ..utils.validation import ensure_columns_present

_REQUIRED = (AREA, METRIC, ESTIMATE, TARGET, ERROR, REL_ABS_ERROR)


@dataclass(frozen=True)
class AreaPoint:
    """Values of one catalogue category for one area."""

    entry: CatalogueEntry
    estimate: float
    target: float
    error: float
    rel_abs_error: float

    @property
    def category(self) -> str:
        return self.entry.label

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "metric": self.entry.metric,
            "estimate": self.estimate,
            "target": self.target,
            "error": self.error,
            "rel_abs_error": self.rel_abs_error,
        }


@dataclass(frozen=True)
class AreaSlot:
    """One catalogue category for one area; ``point`` is None when the area has no row for it."""

    entry: CatalogueEntry
    point: AreaPoint | None

    @property
    def is_missing(self) -> bool:
        return self.point is None


@dataclass(frozen=True)
class AreaSummary:
    """
    Surviving points of one area and their error statistics.

    Only built for areas with at least one point, so ``mean_rel_error`` is
    always defined.
    """

    area: str
    points: tuple[AreaPoint, ...]
    mean_rel_error: float
    total_abs_error: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "area": self.area,
            "n_points": len(self.points),
            "mean_rel_error": self.mean_rel_error,
            "total_abs_error": self.total_abs_error,
            "points": [p.to_dict() for p in self.points],
        }


@dataclass(frozen=True)
class AreaRanking:
    """
    Best and worst areas by mean relative error.

    ``best`` is ascending (best first), ``worst`` is descending (worst first).
    ``average`` is the unweighted mean of per-area means, or None when no
    area qualifies.
    """

    best: tuple[AreaSummary, ...]
    worst: tuple[AreaSummary, ...]
    average: float | None
    n_areas: int


@dataclass(frozen=True)
class AreaComparison:
    """Side-by-side summaries of two areas (either may be None when it has no points)."""

    primary: AreaSummary | None
    secondary: AreaSummary | None


def area_slots(
    records: pd.DataFrame,
    area: str,
    analysis_kind: AnalysisKind | str,
    *,
    catalogue: Sequence[CatalogueEntry] | None = None,
) -> list[AreaSlot]:
    """
    Per-category lookup for one area, without any target filtering.

    Returns one slot per catalogue entry, in catalogue order. When several
    rows match (e.g. more than one epoch was passed in) the first wins.
    """
    ensure_columns_present(records, _REQUIRED, context="area_slots")
    entries = _resolve_catalogue(analysis_kind, catalogue)
    rows = _first_rows(records[records[AREA] == area], entries)
    return [AreaSlot(entry=e, point=rows.get((area, e.metric))) for e in entries]


def aggregate_by_area(
    records: pd.DataFrame,
    analysis_kind: AnalysisKind | str,
    *,
    catalogue: Sequence[CatalogueEntry] | None = None,
    drop_non_positive_target: bool = True,
) -> list[AreaSummary]:
    """
    Summarise every area over a flat catalogue.

    Parameters
    ----------
    records : pandas.DataFrame
        Training-log rows, usually the latest-epoch snapshot.

    analysis_kind : AnalysisKind or str
        ``"age"`` or ``"employment"``; selects the default catalogue.

    catalogue : sequence of CatalogueEntry, optional
        Explicit catalogue overriding the one implied by ``analysis_kind``.

    drop_non_positive_target : bool, default True
        Treat points with ``target <= 0`` as missing data.

    Returns
    -------
    list[AreaSummary]
        One summary per area with at least one surviving point, sorted by
        area name.
    """
    ensure_columns_present(records, _REQUIRED, context="aggregate_by_area")
    entries = _resolve_catalogue(analysis_kind, catalogue)
    rows = _first_rows(records, entries)

    summaries: list[AreaSummary] = []
    for area in sorted({str(a) for a in records[AREA].unique()}):
        slots = [AreaSlot(entry=e, point=rows.get((area, e.metric))) for e in entries]
        summary = _summarize_slots(area, slots, drop_non_positive_target)
        if summary is not None:
            summaries.append(summary)
    return summaries


def summarize_area(
    records: pd.DataFrame,
    area: str,
    analysis_kind: AnalysisKind | str,
    *,
    catalogue: Sequence[CatalogueEntry] | None = None,
    drop_non_positive_target: bool = True,
) -> AreaSummary | None:
    """Summary of a single area, or None if it has no surviving points."""
    slots = area_slots(records, area, analysis_kind, catalogue=catalogue)
    return _summarize_slots(area, slots, drop_non_positive_target)


def compare_areas(
    records: pd.DataFrame,
    primary: str,
    secondary: str,
    analysis_kind: AnalysisKind | str,
    *,
    catalogue: Sequence[CatalogueEntry] | None = None,
    drop_non_positive_target: bool = True,
) -> AreaComparison:
    """Summaries of two areas over the same catalogue."""
    kwargs = {"catalogue": catalogue, "drop_non_positive_target": drop_non_positive_target}
    return AreaComparison(
        primary=summarize_area(records, primary, analysis_kind, **kwargs),
        secondary=summarize_area(records, secondary, analysis_kind, **kwargs),
    )


def rank_areas(summaries: Sequence[AreaSummary], top_n: int = 5) -> AreaRanking:
    """
    Rank areas by mean relative error.

    Summaries without points are ignored. Ties keep the input order.
    """
    if top_n < 0:
        raise ValueError(f"top_n must be non-negative; got {top_n}.")

    eligible = [s for s in summaries if s.points]
    if not eligible:
        return AreaRanking(best=(), worst=(), average=None, n_areas=0)

    ordered = sorted(eligible, key=lambda s: s.mean_rel_error)
    worst = ordered[-top_n:][::-1] if top_n else []
    return AreaRanking(
        best=tuple(ordered[:top_n]),
        worst=tuple(worst),
        average=sum(s.mean_rel_error for s in eligible) / len(eligible),
        n_areas=len(eligible),
    )


def list_areas(records: pd.DataFrame) -> list[str]:
    """Sorted distinct area names."""
    ensure_columns_present(records, [AREA], context="list_areas")
    return sorted({str(a) for a in records[AREA].unique()})


def area_summaries_to_frame(summaries: Sequence[AreaSummary]) -> pd.DataFrame:
    """One row per area: area, n_points, mean_rel_error, total_abs_error."""
    columns = ["area", "n_points", "mean_rel_error", "total_abs_error"]
    rows = [{k: v for k, v in s.to_dict().items() if k in columns} for s in summaries]
    return pd.DataFrame(rows, columns=columns)


# ---------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------


def _resolve_catalogue(
    analysis_kind: AnalysisKind | str,
    catalogue: Sequence[CatalogueEntry] | None,
) -> tuple[CatalogueEntry, ...]:
    if catalogue is not None:
        return tuple(catalogue)
    return catalogue_for(analysis_kind)


def _first_rows(
    records: pd.DataFrame, entries: Sequence[CatalogueEntry]
) -> dict[tuple[str, str], AreaPoint]:
    by_metric = {e.metric: e for e in entries}
    subset = records[records[METRIC].isin(list(by_metric))]
    subset = subset.drop_duplicates(subset=[AREA, METRIC], keep="first")

    out: dict[tuple[str, str], AreaPoint] = {}
    for area, metric, estimate, target, error, rel in subset[list(_REQUIRED)].itertuples(
        index=False, name=None
    ):
        out[(str(area), metric)] = AreaPoint(
            entry=by_metric[metric],
            estimate=float(estimate),
            target=float(target),
            error=float(error),
            rel_abs_error=float(rel),
        )
    return out


def _summarize_slots(
    area: str, slots: Sequence[AreaSlot], drop_non_positive_target: bool
) -> AreaSummary | None:
    points = tuple(
        s.point
        for s in slots
        if s.point is not None and (not drop_non_positive_target or s.point.target > 0)
    )
    if not points:
        return None
    return AreaSummary(
        area=area,
        points=points,
        mean_rel_error=sum(p.rel_abs_error for p in points) / len(points),
        total_abs_error=sum(abs(p.error) for p in points),
    )
