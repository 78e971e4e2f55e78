# maestage/api/assemble.py
from __future__ import annotations
import logging
from typing import Any, Mapping, Optional, Union

import pandas as pd

from ..config import LoadConfig, SampleMapColumns
from ..container import MultiAssayData
from ..contract_errors import ContractError, ensure_methods
from ..logging_utils import configure_logging
from ..ops.dispatch import resolve_backend
from ..ops.staging import StagingProvider
from ..protocols import LoadBackend, LoadingProvider
from ..types import Manifest, as_manifest
from .coldata import load_column_data
from .experiments import dispatch_experiments, merge_experiments
from .sample_map import load_sample_map
from .select import choose_experiments

logger = logging.getLogger(__name__)


def assemble_multiassay(
    experiments: Mapping[str, Any],
    sample_map: pd.DataFrame,
    col_data: pd.DataFrame,
    other_data: Optional[Mapping[str, Any]],
    project: Any,
    provider: LoadingProvider,
) -> MultiAssayData:
    mae = MultiAssayData(experiments, sample_map=sample_map, col_data=col_data)
    return provider.restore_metadata(mae, None, other_data, project)


def load_multiassay(
    manifest: Union[Manifest, Mapping[str, Any]],
    project: Any,
    experiments=None,
    backend: Union[None, str, LoadBackend] = None,
    include_nested: bool = True,
    *,
    provider: Optional[LoadingProvider] = None,
    sample_map_columns: SampleMapColumns = SampleMapColumns(),
) -> MultiAssayData:
    """
    Load a staged multi-assay dataset.

    manifest:       Manifest, or the staged metadata dict ({"dataset": {...}})
    project:        whatever the provider resolves paths against (a staging directory by default)
    experiments:    None for all, experiment names, or 1-based positions; order and repeats are kept
    backend:        None/"serial", "thread", "process", or a LoadBackend instance
    include_nested: keep nested columns in the subject data instead of flattening them
    provider:       LoadingProvider; defaults to StagingProvider()
    """
    manifest = as_manifest(manifest)
    provider = provider if provider is not None else StagingProvider()
    ensure_methods(provider, require={"acquire_metadata": 2, "load_object": 2, "restore_metadata": 4})
    if backend is None or isinstance(backend, str):
        backend = resolve_backend(backend)
    ensure_methods(backend, require={"map": 2})
    if not hasattr(backend, "parallel"):
        raise ContractError(f"{type(backend).__name__} has no 'parallel' attribute.")

    keep = choose_experiments(experiments, manifest.experiments)
    chosen = [manifest.experiments[i] for i in keep]
    logger.info("Loading %d of %d experiment(s) with %s",
                len(chosen), len(manifest.experiments), type(backend).__name__)

    parts = dispatch_experiments(chosen, project, provider, backend)
    loaded = merge_experiments(parts)

    sample_map = load_sample_map(manifest.sample_map, project, provider, list(loaded), sample_map_columns)
    col_data = load_column_data(manifest.col_data, project, provider, include_nested=include_nested)

    mae = assemble_multiassay(loaded, sample_map, col_data, manifest.other_data, project, provider)
    logger.info("Assembled %d experiment(s), %d subject(s)", len(mae), mae.col_data.shape[0])
    return mae


def load_multiassay_with_config(
    manifest: Union[Manifest, Mapping[str, Any]],
    project: Any,
    cfg: LoadConfig = LoadConfig(),
    *,
    provider: Optional[LoadingProvider] = None,
) -> MultiAssayData:
    if cfg.log_level is not None:
        configure_logging(cfg.log_level)
    return load_multiassay(
        manifest,
        project,
        experiments=cfg.experiments,
        backend=cfg.make_backend(),
        include_nested=cfg.include_nested,
        provider=provider,
        sample_map_columns=cfg.sample_map_columns,
    )
