# maestage/container.py
from __future__ import annotations
import logging
from typing import Any, Dict, Iterator, Mapping, Optional

import pandas as pd

from .exceptions import AssemblyError
from .ops.anndata_io import experiment_colnames

logger = logging.getLogger(__name__)

SAMPLE_MAP_COLUMNS = ("assay", "primary", "colname")


class MultiAssayData:
    """
    Several experiments sharing one table of subject annotations.

    - experiments: name -> experiment (AnnData: obs are columns; DataFrame: columns are columns)
    - sample_map:  one row per (assay, primary, colname); ``assay`` is categorical
                   over the experiment names, in experiment order
    - col_data:    one row per subject, indexed by the ``primary`` identifiers
    - metadata:    free-form auxiliary metadata
    - mcols:       optional per-experiment annotations

    Sample map rows whose ``assay`` is missing are dropped on construction; any
    other broken cross reference raises AssemblyError.
    """

    def __init__(
        self,
        experiments: Mapping[str, Any],
        sample_map: pd.DataFrame,
        col_data: pd.DataFrame,
        metadata: Optional[Mapping[str, Any]] = None,
    ):
        self.experiments: Dict[str, Any] = dict(experiments)
        self.sample_map = sample_map.reset_index(drop=True)
        self.col_data = col_data
        self.metadata: Dict[str, Any] = dict(metadata or {})
        self.mcols: Optional[pd.DataFrame] = None
        self._validate()

    @property
    def names(self) -> list[str]:
        return list(self.experiments)

    def colnames(self) -> Dict[str, list]:
        return {name: list(experiment_colnames(obj)) for name, obj in self.experiments.items()}

    def __len__(self) -> int:
        return len(self.experiments)

    def __contains__(self, name: object) -> bool:
        return name in self.experiments

    def __getitem__(self, name: str) -> Any:
        return self.experiments[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self.experiments)

    def __repr__(self) -> str:
        lines = [f"MultiAssayData with {len(self)} experiment(s)"]
        for name, obj in self.experiments.items():
            lines.append(f"  [{name}] {type(obj).__name__} with {len(experiment_colnames(obj))} column(s)")
        lines.append(f"sample_map: {len(self.sample_map)} row(s)")
        lines.append(f"col_data: {self.col_data.shape[0]} row(s) x {self.col_data.shape[1]} column(s)")
        return "\n".join(lines)

    def _validate(self) -> None:
        sm = self.sample_map
        missing = [c for c in SAMPLE_MAP_COLUMNS if c not in sm.columns]
        if missing:
            raise AssemblyError(f"sample map is missing column(s): {', '.join(missing)}")
        if not isinstance(self.col_data, pd.DataFrame):
            raise AssemblyError(f"col_data must be a DataFrame, got {type(self.col_data).__name__}")

        assay = sm["assay"]
        if not isinstance(assay.dtype, pd.CategoricalDtype):
            raise AssemblyError("sample map 'assay' must be categorical over the experiment names")
        if list(assay.cat.categories) != self.names:
            raise AssemblyError(
                f"sample map categories {list(assay.cat.categories)} do not match "
                f"the experiments {self.names}"
            )
        n_na = int(assay.isna().sum())
        if n_na:
            logger.warning("Dropping %d sample map row(s) that refer to experiments not present", n_na)
            self.sample_map = sm = sm.loc[assay.notna().to_numpy()].reset_index(drop=True)
            assay = sm["assay"]

        lost = ~sm["primary"].isin(self.col_data.index)
        if lost.any():
            raise AssemblyError(f"primary '{sm.loc[lost, 'primary'].iloc[0]}' is not in col_data")

        for name, obj in self.experiments.items():
            cols = sm.loc[(assay == name).to_numpy(), "colname"]
            bad = ~cols.isin(experiment_colnames(obj))
            if bad.any():
                raise AssemblyError(f"column '{cols[bad].iloc[0]}' is not in experiment '{name}'")
