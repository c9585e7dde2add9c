from __future__ import annotations

import pytest

from calibration_eval.diagnostics import (
    ERROR_BIN_EDGES,
    QualityTier,
    error_distribution,
    error_distribution_df,
)


def test_error_distribution_bins_are_half_open():
    values = [0.0, 0.049, 0.05, 0.1, 0.2, 0.35, 0.5, 1.0, 7.0]

    bins = error_distribution(values)

    assert [b.count for b in bins] == [2, 1, 1, 1, 1, 1, 2]
    assert sum(b.count for b in bins) == len(values)


def test_error_distribution_labels_and_tiers():
    bins = error_distribution([0.01])

    assert [b.label for b in bins] == [
        "0-5%",
        "5-10%",
        "10-20%",
        "20-30%",
        "30-50%",
        "50-100%",
        "100%+",
    ]
    assert [b.tier for b in bins] == [
        QualityTier.EXCELLENT,
        QualityTier.GOOD,
        QualityTier.GOOD,
        QualityTier.POOR,
        QualityTier.POOR,
        QualityTier.POOR,
        QualityTier.POOR,
    ]


def test_error_distribution_shares_sum_to_100():
    bins = error_distribution([0.01, 0.02, 0.3, 0.6])

    assert bins[0].share_pct == pytest.approx(50.0)
    assert sum(b.share_pct for b in bins) == pytest.approx(100.0)


def test_error_distribution_of_nothing_has_undefined_shares():
    bins = error_distribution([])

    assert len(bins) == len(ERROR_BIN_EDGES) - 1
    assert all(b.count == 0 for b in bins)
    assert all(b.share_pct is None for b in bins)


def test_error_distribution_ignores_nan():
    bins = error_distribution([float("nan"), 0.01])

    assert bins[0].count == 1
    assert bins[0].share_pct == pytest.approx(100.0)


def test_error_distribution_rejects_bad_edges():
    with pytest.raises(ValueError):
        error_distribution([0.1], edges=[0.0])
    with pytest.raises(ValueError):
        error_distribution([0.1], edges=[0.0, 0.5, 0.2])


def test_error_distribution_df_has_one_row_per_bin():
    df = error_distribution_df([0.01, 0.5])

    assert len(df) == len(ERROR_BIN_EDGES) - 1
    assert {"range", "count", "share_pct", "tier"}.issubset(df.columns)
    assert df["count"].sum() == 2
