# maestage/api/sample_map.py
from __future__ import annotations
import logging
from typing import Any, Sequence

import pandas as pd

from ..config import SampleMapColumns
from ..exceptions import DuplicateExperimentError
from ..protocols import LoadingProvider
from ..types import Resource

logger = logging.getLogger(__name__)


def reconcile_sample_map(
    raw: pd.DataFrame,
    experiment_names: Sequence[str],
    columns: SampleMapColumns = SampleMapColumns(),
) -> pd.DataFrame:
    """
    Re-encode a raw sample mapping against the experiments that were actually loaded.

    ``assay`` becomes categorical with exactly ``experiment_names`` as its
    categories, in that order; experiments that were not loaded become NaN.
    """
    names = list(experiment_names)
    if len(set(names)) != len(names):
        dupes = sorted({n for n in names if names.count(n) > 1})
        raise DuplicateExperimentError(f"duplicated experiment name(s): {', '.join(dupes)}")

    for name in (columns.experiment, columns.sample, columns.column):
        if name not in raw.columns:
            raise KeyError(f"sample mapping has no '{name}' column")

    assay = pd.Categorical(raw[columns.experiment].to_numpy(), categories=names)
    mapping = pd.DataFrame({
        "assay": assay,
        "primary": raw[columns.sample].to_numpy(),
        "colname": raw[columns.column].to_numpy(),
    })

    n_lost = int(mapping["assay"].isna().sum())
    if n_lost:
        logger.warning("%d sample map row(s) refer to experiments that were not loaded", n_lost)
    return mapping


def load_sample_map(
    resource: Resource,
    project: Any,
    provider: LoadingProvider,
    experiment_names: Sequence[str],
    columns: SampleMapColumns = SampleMapColumns(),
) -> pd.DataFrame:
    meta = provider.acquire_metadata(project, resource.path)
    raw = provider.load_object(meta, project)
    return reconcile_sample_map(raw, experiment_names, columns)
