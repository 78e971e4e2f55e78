# maestage/ops/artifacts.py
from __future__ import annotations
import json
from collections.abc import Mapping
import numpy as np
import pandas as pd
from pathlib import Path
from typing import Any, Optional

from ..exceptions import StagingError

_SEQUENCE_TYPES = (list, tuple, np.ndarray)

def read_json(path: str | Path) -> Any:
    with open(path) as f:
        return json.load(f)

def read_table(path: str | Path, fmt: Optional[str] = None, row_names: Optional[str] = None) -> pd.DataFrame:
    """
    Read one staged table.

    fmt:       "csv", "parquet" or "json" (a list of records); inferred from the suffix if None
    row_names: column holding the row labels; it becomes the index and is dropped
    """
    p = Path(path)
    fmt = (fmt or p.suffix.lstrip(".")).lower()
    if fmt == "csv":
        df = pd.read_csv(p)
    elif fmt == "parquet":
        df = pd.read_parquet(p)
    elif fmt == "json":
        records = read_json(p)
        if not isinstance(records, list):
            raise StagingError(f"{p} must hold a list of records, got {type(records).__name__}")
        df = pd.DataFrame.from_records(records) if records else pd.DataFrame()
    else:
        raise StagingError(f"Unknown table format '{fmt}' for {p}")

    if row_names is not None:
        if row_names not in df.columns:
            raise StagingError(f"row names column '{row_names}' not found in {p}")
        df = df.set_index(row_names)
        df.index.name = None
        df.index = df.index.astype(str)
    return df

# nested columns
SCALAR_KEY = "value"  # where plain values go when their column also holds nested ones

def _nested(v) -> bool:
    return isinstance(v, (Mapping,) + _SEQUENCE_TYPES)

def _is_nested(s: pd.Series) -> bool:
    return s.dtype == object and any(_nested(v) for v in s)

def _flatten_value(v, key: str, sep: str, out: dict) -> None:
    # depth-first, in key / position order
    if isinstance(v, Mapping):
        for k, x in v.items():
            _flatten_value(x, f"{key}{sep}{k}", sep, out)
    elif isinstance(v, _SEQUENCE_TYPES):
        for i, x in enumerate(v):
            _flatten_value(x, f"{key}{sep}{i}", sep, out)
    else:
        out[key] = v

def _expand(s: pd.Series, sep: str) -> pd.DataFrame:
    records = []
    for v in s:
        rec: dict = {}
        if _nested(v):
            _flatten_value(v, str(s.name), sep, rec)
        elif not pd.isna(v):
            rec[f"{s.name}{sep}{SCALAR_KEY}"] = v
        records.append(rec)
    columns = list(dict.fromkeys(k for rec in records for k in rec))
    return pd.DataFrame(records, index=s.index, columns=columns)

def flatten_nested(df: pd.DataFrame, sep: str = ".") -> pd.DataFrame:
    """
    Expand columns holding mappings or lists into top-level columns.

    {"meta": {"batch": 1}} -> "meta.batch"; {"tags": ["a", "b"]} -> "tags.0", "tags.1".
    Plain values sharing a column with nested ones land in "<column>.value".
    """
    nested = [c for c in df.columns if _is_nested(df[c])]
    if not nested:
        return df
    parts = [_expand(df[c], sep) if c in nested else df[[c]] for c in df.columns]
    return pd.concat(parts, axis=1)
