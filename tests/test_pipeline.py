"""Tests for the one-shot prepare() pipeline."""
from __future__ import annotations

import pytest

from chartprep.data.errors import ColumnNotFoundError, DataSourceError
from chartprep.data.normalize import rules_from_mapping
from chartprep.pipeline import prepare


def test_load_only(plants_csv):
    result = prepare(plants_csv)
    assert result.summary is None
    assert result.output is result.table
    assert result.table["height"].dtype == float


def test_normalize_then_aggregate(plants_csv, growth_rules):
    result = prepare(
        plants_csv, column="growth_form", rules=growth_rules,
        by=["growth_form_clean"], stats=["height:mean", "count"],
    )
    assert result.output is result.summary
    assert result.summary["count"].sum() == len(result.table) == 7
    assert set(result.summary["growth_form_clean"]) == {"Shrub", "Tree", "Unknown"}


def test_count_is_default_stat(plants_csv):
    result = prepare(plants_csv, by=["site"])
    assert result.summary.columns.tolist() == ["site", "count"]
    assert dict(zip(result.summary["site"], result.summary["count"])) == {"East": 1, "North": 3, "South": 3}


def test_custom_target_and_default(plants_csv, growth_rules):
    result = prepare(plants_csv, column="growth_form", rules=growth_rules, target="form", default="Other")
    assert result.table["form"].tolist()[-2:] == ["Other", "Other"]


def test_declared_measurements(plants_csv):
    result = prepare(plants_csv, measurements=["height"], by=["site"], stats=["height:sum"])
    assert result.table["width"].dtype != float
    north = result.summary[result.summary["site"] == "North"]["height_sum"].iloc[0]
    assert north == pytest.approx(17.0)


def test_rules_without_column_skip_normalization(plants_csv, growth_rules):
    result = prepare(plants_csv, rules=growth_rules)
    assert "growth_form_clean" not in result.table.columns


def test_errors_propagate(plants_csv, tmp_path):
    with pytest.raises(DataSourceError):
        prepare(tmp_path / "missing.csv")
    with pytest.raises(ColumnNotFoundError):
        prepare(plants_csv, by=["habitat"])


def test_numeric_looking_labels_match_rules(tmp_path):
    p = tmp_path / "codes.csv"
    p.write_text("code,v\n1,10\n2,20\n")
    rules = rules_from_mapping({"One": ["1"], "Two": ["2"]})
    result = prepare(p, column="code", rules=rules, by=["code_clean"], stats=["v:mean"])
    assert result.table["code_clean"].tolist() == ["One", "Two"]
    assert result.table["v"].dtype == float
    assert result.summary["v_mean"].tolist() == [10.0, 20.0]
