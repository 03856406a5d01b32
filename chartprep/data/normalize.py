"""
Category-label normalization: collapse spelling variants into canonical labels.
"""
from __future__ import annotations

import json
import re
from pathlib import Path
from typing import Iterable, Mapping

import pandas as pd

from chartprep.config import BUILTIN_RULESETS, CLEAN_SUFFIX, DEFAULT_LABEL, RULES_FOLDER
from chartprep.data.errors import DataSourceError, NormalizationError, require_columns
from chartprep.data.schemas import CategoryRule


# ---------------------------------------------------------------------------
# Rule construction
# ---------------------------------------------------------------------------

def rules_from_mapping(mapping: Mapping[str, Iterable[str]]) -> list[CategoryRule]:
    """Build rules from {canonical_label: [variants...]}, keeping insertion order."""
    return [CategoryRule(label=label, variants=frozenset(variants)) for label, variants in mapping.items()]


def _rule_from_obj(obj: dict, path: Path) -> CategoryRule:
    if not isinstance(obj, dict) or "label" not in obj:
        raise DataSourceError(f"{path.name}: each rule needs a 'label' ({obj!r})", path)
    variants = obj.get("variants", [])
    if isinstance(variants, str):
        variants = [variants]
    pattern = obj.get("pattern")
    if pattern is not None:
        try:
            re.compile(pattern)
        except (re.error, TypeError) as exc:
            raise DataSourceError(f"{path.name}: bad pattern for rule '{obj['label']}' ({exc})", path)
    return CategoryRule(label=str(obj["label"]), variants=frozenset(variants), pattern=pattern)


def load_rules(path: str | Path) -> list[CategoryRule]:
    """Read a rule list from JSON.

    Accepts either a mapping ({"Shrub": ["shrub", "Shrub"], ...}) or a list of
    {"label": ..., "variants": [...], "pattern": ...} objects.
    """
    path = Path(path)
    try:
        raw = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        raise DataSourceError(f"Rule file not found: {path}", path)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DataSourceError(f"{path.name}: unreadable rule file ({exc})", path)

    if isinstance(raw, dict):
        if not all(isinstance(v, (list, str)) for v in raw.values()):
            raise DataSourceError(f"{path.name}: rule mapping values must be lists of variants", path)
        return rules_from_mapping({k: [v] if isinstance(v, str) else v for k, v in raw.items()})
    if isinstance(raw, list):
        return [_rule_from_obj(obj, path) for obj in raw]
    raise DataSourceError(f"{path.name}: expected a JSON object or list of rules", path)


def get_ruleset(name_or_path: str | Path, folder: Path = RULES_FOLDER) -> list[CategoryRule]:
    """Built-in ruleset by name, else <folder>/<name>.json, else a direct JSON path."""
    key = str(name_or_path)
    if key in BUILTIN_RULESETS:
        return rules_from_mapping(BUILTIN_RULESETS[key])
    named = Path(folder) / f"{key}.json"
    if named.exists():
        return load_rules(named)
    return load_rules(Path(name_or_path))


def canonical_labels(rules: Iterable[CategoryRule], default: str = DEFAULT_LABEL) -> set[str]:
    """Every label a normalized column can hold."""
    return {r.label for r in rules} | {default}


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------

def map_labels(
    values: pd.Series,
    rules: Iterable[CategoryRule],
    default: str = DEFAULT_LABEL,
) -> pd.Series:
    """Canonical label for each value — first matching rule wins, else default."""
    result = pd.Series(default, index=values.index, dtype=object)
    claimed = pd.Series(False, index=values.index)
    for rule in rules:
        hit = rule.matches(values) & ~claimed
        result[hit] = rule.label
        claimed |= hit
    return result


def normalize_column(
    df: pd.DataFrame,
    column: str,
    rules: Iterable[CategoryRule],
    target: str | None = None,
    default: str = DEFAULT_LABEL,
) -> pd.DataFrame:
    """Return a copy of df with a derived canonical-label column.

    The raw column is left as loaded; the derived column is named
    `target` or, by default, "<column>_clean". A target naming some other
    existing column replaces that column in the copy.
    """
    require_columns(df, [column])
    target = target or f"{column}{CLEAN_SUFFIX}"
    if target == column:
        raise NormalizationError(f"Target column '{target}' would overwrite the raw column it is derived from")
    return df.assign(**{target: map_labels(df[column], rules, default).to_numpy()})


def unmatched_values(
    df: pd.DataFrame,
    column: str,
    rules: Iterable[CategoryRule],
) -> list[str]:
    """Distinct raw values that fall through to the default label."""
    require_columns(df, [column])
    rules = list(rules)
    raw = df[column].dropna()
    claimed = pd.Series(False, index=raw.index)
    for rule in rules:
        claimed |= rule.matches(raw)
    return sorted(raw[~claimed].astype(str).unique().tolist())
