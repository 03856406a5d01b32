"""Tests for category-label normalization."""
from __future__ import annotations

import json

import pandas as pd
import pytest

from chartprep.data.errors import ColumnNotFoundError, DataSourceError, NormalizationError
from chartprep.data.normalize import (
    canonical_labels, get_ruleset, load_rules, map_labels, normalize_column,
    rules_from_mapping, unmatched_values,
)
from chartprep.data.schemas import CategoryRule


def test_growth_form_example(growth_rules):
    df = pd.DataFrame({"form": ["shrub", "Shrub", "Tree", "Tree; Shrub"]})
    out = normalize_column(df, "form", growth_rules, default="Unknown")
    assert out["form_clean"].tolist() == ["Shrub", "Shrub", "Tree", "Tree"]


def test_source_column_untouched(growth_rules):
    df = pd.DataFrame({"form": ["shrub", "oak"]})
    out = normalize_column(df, "form", growth_rules)
    assert df.columns.tolist() == ["form"]
    assert out["form"].tolist() == ["shrub", "oak"]


def test_unmatched_and_missing_get_default(growth_rules):
    df = pd.DataFrame({"form": ["vine", None, "Tree"]})
    out = normalize_column(df, "form", growth_rules, default="Other")
    assert out["form_clean"].tolist() == ["Other", "Other", "Tree"]


def test_first_match_wins():
    rules = [
        CategoryRule("Tree", frozenset({"Tree; Shrub"})),
        CategoryRule("Shrub", frozenset({"Tree; Shrub", "shrub"})),
    ]
    assert map_labels(pd.Series(["Tree; Shrub", "shrub"]), rules).tolist() == ["Tree", "Shrub"]


def test_pattern_rule():
    rules = [CategoryRule("Grass", pattern=r"(?i)grass|poa")]
    out = map_labels(pd.Series(["Bunch grass", "Poa sp.", "oak", None]), rules)
    assert out.tolist() == ["Grass", "Grass", "Unknown", "Unknown"]


def test_custom_target_name(growth_rules):
    df = pd.DataFrame({"form": ["shrub"]})
    out = normalize_column(df, "form", growth_rules, target="growth")
    assert out["growth"].tolist() == ["Shrub"]


def test_missing_column(growth_rules):
    df = pd.DataFrame({"form": ["shrub"]})
    with pytest.raises(ColumnNotFoundError) as exc_info:
        normalize_column(df, "habit", growth_rules)
    assert exc_info.value.column == "habit"
    assert isinstance(exc_info.value, KeyError)


def test_idempotent(growth_rules):
    df = pd.DataFrame({"form": ["shrub", "Tree; Shrub", "moss", None]})
    once = normalize_column(df, "form", growth_rules)
    twice = normalize_column(once, "form_clean", growth_rules, target="form_again")
    assert twice["form_again"].tolist() == once["form_clean"].tolist()


def test_target_cannot_replace_source(growth_rules):
    df = pd.DataFrame({"form": ["shrub"]})
    with pytest.raises(NormalizationError):
        normalize_column(df, "form", growth_rules, target="form")


def test_canonical_label_matches_own_rule():
    # canonical label not listed among its own variants
    rules = [CategoryRule("Shrub", frozenset({"shrub"}))]
    assert map_labels(pd.Series(["Shrub"]), rules).tolist() == ["Shrub"]


def test_output_only_declared_labels(growth_rules, plants_csv):
    from chartprep.data.loader import load_table

    out = normalize_column(load_table(plants_csv), "growth_form", growth_rules)
    assert set(out["growth_form_clean"]) <= canonical_labels(growth_rules, "Unknown")


def test_deterministic(growth_rules, plants_csv):
    from chartprep.data.loader import load_table

    df = load_table(plants_csv)
    a = normalize_column(df, "growth_form", growth_rules)
    b = normalize_column(df, "growth_form", growth_rules)
    pd.testing.assert_frame_equal(a, b)


def test_unmatched_values(growth_rules):
    df = pd.DataFrame({"form": ["shrub", "vine", "grass", "vine", None]})
    assert unmatched_values(df, "form", growth_rules) == ["grass", "vine"]


def test_rules_from_mapping_keeps_order():
    rules = rules_from_mapping({"B": ["b"], "A": ["a", "aa"]})
    assert [r.label for r in rules] == ["B", "A"]
    assert rules[1].variants == frozenset({"a", "aa"})


def test_load_rules_mapping(tmp_path):
    p = tmp_path / "rules.json"
    p.write_text(json.dumps({"Shrub": ["shrub"], "Tree": "tree"}))
    rules = load_rules(p)
    assert [r.label for r in rules] == ["Shrub", "Tree"]
    assert rules[1].variants == frozenset({"tree"})


def test_load_rules_list(tmp_path):
    p = tmp_path / "rules.json"
    p.write_text(json.dumps([{"label": "Grass", "pattern": "grass"}, {"label": "Tree", "variants": ["tree"]}]))
    rules = load_rules(p)
    assert rules[0].pattern == "grass"
    assert rules[1].variants == frozenset({"tree"})


@pytest.mark.parametrize("content", [
    "not json",
    "42",
    '[{"variants": ["x"]}]',
    '{"A": 3}',
    '[{"label": "X", "pattern": "(unclosed"}]',
    '[{"label": "X", "pattern": 5}]',
])
def test_load_rules_rejects_bad_files(tmp_path, content):
    p = tmp_path / "rules.json"
    p.write_text(content)
    with pytest.raises(DataSourceError):
        load_rules(p)


def test_get_ruleset_builtin_and_folder(tmp_path):
    assert "Shrub" in {r.label for r in get_ruleset("growth_form")}
    (tmp_path / "mine.json").write_text(json.dumps({"X": ["x"]}))
    assert [r.label for r in get_ruleset("mine", folder=tmp_path)] == ["X"]
    with pytest.raises(DataSourceError):
        get_ruleset("nothing-here", folder=tmp_path)
