from __future__ import annotations

import io
import logging

import pytest

from calibration_eval.ingest import parse_training_log, read_training_log
from calibration_eval.schema import COLUMNS

HEADER = "index,name,metric,estimate,target,error,abs_error,rel_abs_error,validation,epoch"


def _csv(*rows: str) -> str:
    return "\n".join([HEADER, *rows]) + "\n"


def test_parse_training_log_maps_columns_and_types():
    text = _csv(
        "0,Bristol West,age/20_30,1100,1000,100,100,0.1,True,5",
        "1,Bristol West,hmrc/pension_income_band_3_10_000_to_20_000,950.5,1000,-49.5,49.5,0.0495,False,5",
    )

    df = parse_training_log(text)

    assert list(df.columns) == list(COLUMNS)
    assert len(df) == 2
    assert df.loc[0, "area"] == "Bristol West"
    assert df.loc[1, "metric"] == "hmrc/pension_income_band_3_10_000_to_20_000"
    assert df.loc[1, "estimate"] == pytest.approx(950.5)
    assert df.loc[1, "error"] == pytest.approx(-49.5)
    assert df["epoch"].tolist() == [5, 5]
    assert df["epoch"].dtype == "int64"


def test_short_rows_are_skipped_and_logged(caplog):
    text = _csv(
        "0,Bristol West,age/20_30,1100,1000,100,100,0.1,True,5",
        "1,Bristol West,age/30_40,1100",
        "2,Leeds Central,age/20_30,900,1000,-100,100,0.1,True,5",
    )

    with caplog.at_level(logging.WARNING, logger="calibration_eval.ingest.training_log"):
        df = parse_training_log(text)

    assert len(df) == 2
    assert df["area"].tolist() == ["Bristol West", "Leeds Central"]
    assert any("malformed" in r.getMessage().lower() for r in caplog.records)


def test_unparsable_numbers_default_to_zero():
    text = _csv("0,A,age/0_10,abc,,n/a,x,?,True,oops")

    df = parse_training_log(text)

    row = df.iloc[0]
    assert row["estimate"] == 0.0
    assert row["target"] == 0.0
    assert row["error"] == 0.0
    assert row["rel_abs_error"] == 0.0
    assert row["epoch"] == 0


def test_validation_is_true_only_for_exact_literal():
    text = _csv(
        "0,A,age/0_10,1,1,0,0,0,True,1",
        "1,A,age/0_10,1,1,0,0,0,true,1",
        "2,A,age/0_10,1,1,0,0,0,TRUE,1",
        "3,A,age/0_10,1,1,0,0,0,1,1",
    )

    df = parse_training_log(text)

    assert df["validated"].tolist() == [True, False, False, False]


def test_fractional_epoch_is_truncated():
    df = parse_training_log(_csv("0,A,age/0_10,1,1,0,0,0,True,3.7"))

    assert df["epoch"].tolist() == [3]


def test_blank_lines_are_ignored():
    text = HEADER + "\n\n0,A,age/0_10,1,1,0,0,0,True,1\n   \n1,A,age/10_20,1,1,0,0,0,True,1\n"

    df = parse_training_log(text)

    assert len(df) == 2


def test_row_of_empty_fields_is_kept_with_zero_values(caplog):
    with caplog.at_level(logging.WARNING, logger="calibration_eval.ingest.training_log"):
        df = parse_training_log(_csv(",,,,,,,,,"))

    assert len(df) == 1
    row = df.iloc[0]
    assert row["area"] == ""
    assert row["metric"] == ""
    for col in ("estimate", "target", "error", "abs_error", "rel_abs_error"):
        assert row[col] == 0.0
    assert not row["validated"]
    assert row["epoch"] == 0
    assert not caplog.records


def test_malformed_row_reports_its_line_number_after_blank_lines(caplog):
    text = HEADER + "\n\n0,A,age/0_10,1,1,0,0,0,True,1\n\n1,A,age/10_20\n"

    with caplog.at_level(logging.WARNING, logger="calibration_eval.ingest.training_log"):
        df = parse_training_log(text)

    assert len(df) == 1
    assert any("line 5" in r.getMessage() for r in caplog.records)


def test_header_only_or_empty_text_yields_empty_frame(caplog):
    with caplog.at_level(logging.ERROR, logger="calibration_eval.ingest.training_log"):
        empty = parse_training_log("")
        header_only = parse_training_log(HEADER)

    for df in (empty, header_only):
        assert list(df.columns) == list(COLUMNS)
        assert len(df) == 0
    assert caplog.records


def test_quoted_area_names_with_commas_are_kept_whole():
    df = parse_training_log(_csv('0,"Richmond, Surrey",age/0_10,1,1,0,0,0,True,1'))

    assert df.loc[0, "area"] == "Richmond, Surrey"


def test_read_training_log_accepts_path_and_buffer(tmp_path):
    text = _csv("0,A,age/0_10,1,1,0,0,0,True,1")
    path = tmp_path / "training_log.csv"
    path.write_text(text, encoding="utf-8")

    from_path = read_training_log(path)
    from_str = read_training_log(str(path))
    from_buffer = read_training_log(io.StringIO(text))

    for df in (from_path, from_str, from_buffer):
        assert len(df) == 1
        assert df.loc[0, "metric"] == "age/0_10"


def test_read_training_log_missing_file_is_a_hard_failure(tmp_path):
    with pytest.raises(FileNotFoundError):
        read_training_log(tmp_path / "does_not_exist.csv")


def test_read_training_log_rejects_non_path_non_buffer():
    with pytest.raises(TypeError):
        read_training_log(42)
