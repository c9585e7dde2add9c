from __future__ import annotations

import pandas as pd
import pytest

from calibration_eval.dataframe import (
    aggregate_by_area,
    area_slots,
    area_summaries_to_frame,
    compare_areas,
    list_areas,
    rank_areas,
    summarize_area,
)
from calibration_eval.facets import AGE_BANDS, AnalysisKind
from calibration_eval.schema import Record, records_to_frame


def _row(area: str, metric: str, rel: float, *, target: float = 100.0) -> Record:
    error = rel * target
    return Record(
        area=area,
        metric=metric,
        estimate=target + error,
        target=target,
        error=error,
        abs_error=abs(error),
        rel_abs_error=rel,
        validated=False,
        epoch=10,
    )


def _build_sample_df() -> pd.DataFrame:
    return records_to_frame(
        [
            _row("Leeds", "age/20_30", 0.10),
            _row("Leeds", "age/30_40", 0.30),
            _row("Leeds", "age/40_50", 0.90, target=0.0),
            _row("York", "age/0_10", 0.02),
            _row("York", "hmrc/employment_income/amount/20000_30000", 0.40),
            _row("Bath", "age/70_80", 0.50, target=0.0),
            _row("Bath", "hmrc/pension_income_band_1_0_to_12_570", 0.01),
        ]
    )


def test_aggregate_by_area_means_and_exclusions():
    summaries = aggregate_by_area(_build_sample_df(), AnalysisKind.AGE)

    # Bath's only age point has a zero target, so Bath has no summary.
    assert [s.area for s in summaries] == ["Leeds", "York"]

    leeds, york = summaries
    assert [p.category for p in leeds.points] == ["20-30 years", "30-40 years"]
    assert leeds.mean_rel_error == pytest.approx(0.20)
    assert leeds.total_abs_error == pytest.approx(10.0 + 30.0)
    assert york.mean_rel_error == pytest.approx(0.02)


def test_aggregate_by_area_keeps_zero_targets_when_policy_disabled():
    summaries = aggregate_by_area(
        _build_sample_df(), "age", drop_non_positive_target=False
    )

    by_area = {s.area: s for s in summaries}
    assert set(by_area) == {"Bath", "Leeds", "York"}
    assert len(by_area["Leeds"].points) == 3
    assert by_area["Leeds"].mean_rel_error == pytest.approx((0.10 + 0.30 + 0.90) / 3)


def test_aggregate_by_area_employment_catalogue():
    summaries = aggregate_by_area(_build_sample_df(), AnalysisKind.EMPLOYMENT)

    assert [s.area for s in summaries] == ["York"]
    assert summaries[0].points[0].category == "£20K-£30K"


def test_aggregate_by_area_custom_catalogue_and_unknown_kind():
    df = _build_sample_df()

    summaries = aggregate_by_area(df, "age", catalogue=AGE_BANDS[:1])
    assert [s.area for s in summaries] == ["York"]

    with pytest.raises(ValueError):
        aggregate_by_area(df, "income")


def test_area_slots_distinguishes_missing_from_present():
    slots = area_slots(_build_sample_df(), "Leeds", "age")

    assert len(slots) == len(AGE_BANDS)
    present = [s.entry.metric for s in slots if not s.is_missing]
    assert present == ["age/20_30", "age/30_40", "age/40_50"]
    # The zero-target row is still reported here; filtering happens later.
    zero = next(s for s in slots if s.entry.metric == "age/40_50")
    assert zero.point.target == 0.0


def test_area_lookup_first_row_wins_on_duplicates():
    df = records_to_frame(
        [
            _row("Leeds", "age/20_30", 0.10),
            _row("Leeds", "age/20_30", 0.99),
        ]
    )

    summary = summarize_area(df, "Leeds", "age")

    assert summary.mean_rel_error == pytest.approx(0.10)


def test_summarize_and_compare_areas():
    df = _build_sample_df()

    assert summarize_area(df, "Bath", "age") is None
    assert summarize_area(df, "Nowhere", "age") is None

    cmp = compare_areas(df, "Leeds", "Bath", "age")
    assert cmp.primary.area == "Leeds"
    assert cmp.secondary is None


def test_rank_areas_best_worst_and_average():
    df = records_to_frame(
        [_row(f"Area {i}", "age/20_30", i / 100) for i in range(1, 8)]
    )
    summaries = aggregate_by_area(df, "age")

    ranking = rank_areas(summaries, top_n=5)

    assert [s.area for s in ranking.best] == [f"Area {i}" for i in range(1, 6)]
    assert [s.area for s in ranking.worst] == [f"Area {i}" for i in range(7, 2, -1)]
    assert ranking.average == pytest.approx(0.04)
    assert ranking.n_areas == 7


def test_rank_areas_fewer_than_top_n_and_empty():
    df = records_to_frame([_row("A", "age/20_30", 0.3), _row("B", "age/20_30", 0.1)])

    ranking = rank_areas(aggregate_by_area(df, "age"))
    assert [s.area for s in ranking.best] == ["B", "A"]
    assert [s.area for s in ranking.worst] == ["A", "B"]

    empty = rank_areas([])
    assert empty.best == () and empty.worst == ()
    assert empty.average is None

    with pytest.raises(ValueError):
        rank_areas([], top_n=-1)


def test_list_areas_and_frame_export():
    df = _build_sample_df()

    assert list_areas(df) == ["Bath", "Leeds", "York"]

    frame = area_summaries_to_frame(aggregate_by_area(df, "age"))
    assert list(frame.columns) == ["area", "n_points", "mean_rel_error", "total_abs_error"]
    assert frame["n_points"].tolist() == [2, 1]
