"""Tests for the in-memory dataset registry."""
from __future__ import annotations

import pandas as pd
import pytest

from chartprep.data.errors import ColumnNotFoundError, DatasetNotFoundError
from chartprep.data.normalize import rules_from_mapping
from chartprep.data.store import DataStore


def test_load_skips_broken_files(store):
    assert store.is_loaded
    assert store.names() == ["plants"]
    assert "broken" in store.errors
    assert "line 2 has 3 fields" in store.errors["broken"]


def test_measurements_are_inferred(store):
    kinds = {c["name"]: c["kind"] for c in store.columns("plants")}
    assert kinds == {
        "site": "category",
        "species": "category",
        "growth_form": "category",
        "height": "measurement",
        "width": "measurement",
    }


def test_declared_measurements_only(data_dir):
    store = DataStore(data_dir).load(measurements={"plants": ["height"]})
    kinds = {c["name"]: c["kind"] for c in store.columns("plants")}
    assert kinds["height"] == "measurement"
    assert kinds["width"] == "category"


def test_missing_counts(store):
    missing = {c["name"]: c["missing"] for c in store.columns("plants")}
    assert missing["growth_form"] == 1
    assert missing["height"] == 0


def test_categories_include_missing(store):
    cats = store.categories("plants", "growth_form")
    counts = {c["value"]: c["count"] for c in cats}
    assert counts["Tree"] == 2
    assert counts[None] == 1
    assert sum(counts.values()) == 7


def test_unknown_dataset(store):
    with pytest.raises(DatasetNotFoundError, match="nope"):
        store.get("nope")


def test_unknown_column(store):
    with pytest.raises(ColumnNotFoundError):
        store.categories("plants", "colour")


def test_row_count(store):
    assert store.row_count() == 7
    assert store.row_count("plants") == 7


def test_summarize_after_normalizing(store, growth_rules):
    out = store.summarize(
        "plants", ["growth_form_clean"], ["height:mean", "count"],
        column="growth_form", rules=growth_rules,
    )
    assert out["growth_form_clean"].tolist() == ["Shrub", "Tree", "Unknown"]
    assert out["count"].tolist() == [2, 3, 2]
    assert out["height_mean"].iloc[0] == pytest.approx(1.75)
    assert out["height_mean"].iloc[1] == pytest.approx(23.5 / 3)
    # stored table is not modified
    assert "growth_form_clean" not in store.get("plants").columns


def test_normalized_copy(store, growth_rules):
    df = store.normalized("plants", "growth_form", growth_rules, target="form")
    assert df["form"].tolist()[:3] == ["Tree", "Shrub", "Tree"]


def test_add_replaces_error(store):
    store.add("broken", pd.DataFrame({"a": ["1"], "b": ["2"]}))
    assert "broken" not in store.errors
    assert store.names() == ["broken", "plants"]


def test_reload_swaps_contents(data_dir, store):
    (data_dir / "extra.csv").write_text("g,v\nA,1\n")
    store.load()
    assert store.names() == ["extra", "plants"]


def test_duplicate_stems_get_suffix(tmp_path):
    (tmp_path / "sub").mkdir()
    (tmp_path / "t.csv").write_text("x\n1\n")
    (tmp_path / "sub" / "t.csv").write_text("x\n2\n")
    store = DataStore(tmp_path).load()
    assert store.names() == ["t", "t-2"]


def test_empty_folder(tmp_path):
    store = DataStore(tmp_path / "none").load()
    assert store.is_loaded
    assert store.names() == []
    assert store.row_count() == 0


def test_code_like_labels_normalize_as_written(data_dir):
    (data_dir / "plots.csv").write_text("code,v\n1,10\n2,20\n2,30\n")
    store = DataStore(data_dir).load()
    rules = rules_from_mapping({"One": ["1"], "Two": ["2"]})
    # inference still makes the stored column numeric
    assert store.columns("plots")[0]["kind"] == "measurement"
    assert store.normalized("plots", "code", rules)["code_clean"].tolist() == ["One", "Two", "Two"]
    out = store.summarize("plots", ["code_clean"], ["v:sum"], column="code", rules=rules)
    assert out["v_sum"].tolist() == [10.0, 50.0]
    assert {c["value"] for c in store.categories("plots", "code")} == {"1", "2"}
