# maestage/ops/anndata_io.py

from __future__ import annotations
from functools import singledispatch
from pathlib import Path
from typing import Any, Iterable, Mapping

import anndata as ad
import pandas as pd


@singledispatch
def experiment_colnames(obj: Any) -> pd.Index:
    """Column labels of one experiment, i.e. the identifiers the sample map points at."""
    raise TypeError(f"cannot determine column names for an experiment of type {type(obj).__name__}")

@experiment_colnames.register(ad.AnnData)
def _(obj: ad.AnnData) -> pd.Index:    # noqa: F811
    # observations are the experiment's columns (cells / samples)
    return obj.obs_names

@experiment_colnames.register(pd.DataFrame)
def _(obj: pd.DataFrame) -> pd.Index:    # noqa: F811
    return obj.columns


def materialize_experiment_classes(parts: Iterable[Mapping[str, Any]]) -> None:
    """
    Touch every loaded experiment on the calling process.

    Loads run in workers may import the modules defining the experiment
    classes only there; enumerating the column labels here makes sure the
    coordinator has the same types available before the experiments are
    merged into one container.
    """
    for part in parts:
        for obj in part.values():
            list(experiment_colnames(obj))


def read_h5ad(path: str | Path) -> ad.AnnData:
    return ad.read_h5ad(path)
