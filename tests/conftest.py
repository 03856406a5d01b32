"""Shared fixtures: small survey-style CSVs written to tmp dirs."""
from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from chartprep.data.normalize import rules_from_mapping
from chartprep.data.store import DataStore


PLANTS_CSV = """site,species,growth_form,height,width
North,Acer rubrum,Tree,12.5,4.0
North,Rosa woodsii,shrub,1.5,1.0
North,Salix exigua,Tree; Shrub,3.0,2.0
South,Ribes aureum,Shrub,2.0,1.5
South,Pinus edulis,Tree,8.0,3.5
South,Poa pratensis,grass,0.4,0.2
East,Unknown sp.,,1.0,0.5
"""


@pytest.fixture
def plants_csv(tmp_path: Path) -> Path:
    p = tmp_path / "plants.csv"
    p.write_text(PLANTS_CSV)
    return p


@pytest.fixture
def growth_rules():
    return rules_from_mapping({
        "Shrub": ["shrub", "Shrub"],
        "Tree": ["Tree", "Tree; Shrub"],
    })


@pytest.fixture
def gv_frame() -> pd.DataFrame:
    return pd.DataFrame({"g": ["A", "A", "B"], "v": [10.0, 20.0, 5.0]})


@pytest.fixture
def data_dir(tmp_path: Path) -> Path:
    d = tmp_path / "data"
    d.mkdir()
    (d / "plants.csv").write_text(PLANTS_CSV)
    (d / "broken.csv").write_text("a,b\n1,2,3\n")
    return d


@pytest.fixture
def store(data_dir: Path) -> DataStore:
    return DataStore(data_dir).load()
