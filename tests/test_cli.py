"""Tests for the command-line entry point."""
from __future__ import annotations

import json

import pandas as pd
import pytest

from chartprep.cli import build_parser, main


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "summarize" in capsys.readouterr().out


def test_list_folder(data_dir, capsys):
    assert main(["list", "--folder", str(data_dir)]) == 0
    out = capsys.readouterr().out
    assert "plants" in out
    assert "FAILED" in out


def test_list_categories(plants_csv, capsys):
    assert main(["list", "--categories", str(plants_csv), "--column", "growth_form"]) == 0
    out = capsys.readouterr().out
    assert "Tree; Shrub" in out
    assert "6 distinct" in out


def test_normalize_writes_csv(plants_csv, tmp_path, capsys):
    out_path = tmp_path / "out" / "clean.csv"
    rc = main(["normalize", str(plants_csv), "--column", "growth_form",
               "--rules", "growth_form", "-o", str(out_path)])
    assert rc == 0
    df = pd.read_csv(out_path)
    assert df["growth_form_clean"].tolist() == ["Tree", "Shrub", "Tree", "Shrub", "Tree", "Graminoid", "Unknown"]
    assert "Graminoid" in capsys.readouterr().out


def test_normalize_reports_unmatched(plants_csv, tmp_path, capsys):
    rules = tmp_path / "rules.json"
    rules.write_text(json.dumps({"Tree": ["Tree"]}))
    assert main(["normalize", str(plants_csv), "--column", "growth_form", "--rules", str(rules)]) == 0
    assert "Unmatched raw values" in capsys.readouterr().out


def test_normalize_needs_rules(plants_csv):
    with pytest.raises(SystemExit):
        main(["normalize", str(plants_csv), "--column", "growth_form"])


def test_summarize_outputs(plants_csv, tmp_path, capsys):
    csv_out = tmp_path / "s.csv"
    json_out = tmp_path / "s.json"
    xlsx_out = tmp_path / "s.xlsx"
    rc = main([
        "summarize", str(plants_csv), "--by", "site", "--stat", "height:mean", "--stat", "count",
        "--csv", str(csv_out), "--json", str(json_out), "--excel", str(xlsx_out),
    ])
    assert rc == 0
    assert "7 records" in capsys.readouterr().out
    assert pd.read_csv(csv_out)["count"].sum() == 7
    rows = json.loads(json_out.read_text())
    assert rows[0] == {"site": "East", "height_mean": 1.0, "count": 1}
    assert xlsx_out.exists()


def test_summarize_with_normalization(plants_csv, tmp_path):
    csv_out = tmp_path / "s.csv"
    rc = main([
        "summarize", str(plants_csv), "--by", "growth_form_clean",
        "--column", "growth_form", "--rules", "growth_form", "--csv", str(csv_out),
    ])
    assert rc == 0
    df = pd.read_csv(csv_out)
    assert dict(zip(df["growth_form_clean"], df["count"])) == {"Graminoid": 1, "Shrub": 2, "Tree": 3, "Unknown": 1}


def test_summarize_bad_stat_returns_error(plants_csv, capsys):
    rc = main(["summarize", str(plants_csv), "--by", "site", "--stat", "site:mean"])
    assert rc == 1
    assert "non-numeric" in capsys.readouterr().err


def test_missing_file_returns_error(tmp_path, capsys):
    assert main(["summarize", str(tmp_path / "nope.csv"), "--by", "site"]) == 1
    assert "not found" in capsys.readouterr().err


def test_plot(plants_csv, tmp_path):
    out = tmp_path / "chart.png"
    rc = main(["plot", str(plants_csv), "--by", "site", "--stat", "height:mean",
               "--x", "site", "--y", "height_mean", "--geom", "col", "-o", str(out),
               "--width", "4", "--height", "3"])
    assert rc == 0
    assert out.exists()


def test_plot_bad_geom(plants_csv, tmp_path):
    rc = main(["plot", str(plants_csv), "--x", "height", "--y", "width",
               "--geom", "pie", "-o", str(tmp_path / "c.png")])
    assert rc == 1


def test_parser_repeatable_flags():
    args = build_parser().parse_args(["summarize", "f.csv", "--by", "a", "--by", "b", "--measure", "v"])
    assert args.by == ["a", "b"]
    assert args.measure == ["v"]
    assert args.stat is None
