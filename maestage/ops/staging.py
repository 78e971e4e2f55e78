# maestage/ops/staging.py
from __future__ import annotations
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Callable, Dict, Optional

import pandas as pd

from ..exceptions import StagingError
from .anndata_io import read_h5ad
from .artifacts import flatten_nested, read_json, read_table

logger = logging.getLogger(__name__)

Loader = Callable[..., Any]
_LOADERS: Dict[str, Loader] = {}


def register_loader(kind: str, *, overwrite: bool = False):
    """Register a loader for metadata whose ``$schema`` starts with ``kind/``."""
    def deco(fn: Loader) -> Loader:
        if kind in _LOADERS and not overwrite:
            raise ValueError(f"a loader for '{kind}' is already registered")
        _LOADERS[kind] = fn
        return fn
    return deco


def schema_kind(meta: Mapping[str, Any]) -> str:
    schema = meta.get("$schema")
    if not schema:
        raise StagingError(f"metadata for '{meta.get('path', '?')}' has no '$schema'")
    return str(schema).split("/", 1)[0]


class StagingProvider:
    """
    Reads objects staged in a directory.

    Every object at ``<project>/<path>`` is described by ``<project>/<path>.json``;
    the kind prefix of its ``$schema`` picks the loader.
    """

    def acquire_metadata(self, project: str | Path, path: str) -> Dict[str, Any]:
        meta_path = Path(project) / f"{path}.json"
        if not meta_path.is_file():
            raise StagingError(f"no metadata for '{path}' in {project}")
        meta = read_json(meta_path)
        if not isinstance(meta, Mapping):
            raise StagingError(f"metadata for '{path}' must be a JSON object")
        meta = dict(meta)
        meta.setdefault("path", path)
        return meta

    def load_object(self, metadata: Mapping[str, Any], project: str | Path, **options) -> Any:
        kind = schema_kind(metadata)
        loader = _LOADERS.get(kind)
        if loader is None:
            raise StagingError(f"no loader registered for '{kind}' (at '{metadata.get('path', '?')}')")
        logger.debug("Loading %s '%s'", kind, metadata.get("path"))
        return loader(self, metadata, project, **options)

    def restore_metadata(self, container, column_metadata, global_metadata, project):
        if column_metadata is not None:
            mcols = self._load_reference(column_metadata, project)
            if not isinstance(mcols, pd.DataFrame):
                raise StagingError(f"column metadata must load as a DataFrame, got {type(mcols).__name__}")
            container.mcols = mcols

        if global_metadata is not None:
            other = self._load_reference(global_metadata, project)
            if not isinstance(other, Mapping):
                raise StagingError(f"auxiliary metadata must be a mapping, got {type(other).__name__}")
            container.metadata.update(other)
        return container

    def _load_reference(self, ref: Any, project) -> Any:
        # {"resource": {"path": ...}} points at another staged object; anything else is literal
        if isinstance(ref, Mapping) and isinstance(ref.get("resource"), Mapping):
            meta = self.acquire_metadata(project, ref["resource"]["path"])
            return self.load_object(meta, project)
        return ref


def _object_path(meta: Mapping[str, Any], project) -> Path:
    return Path(project) / meta["path"]


@register_loader("data_frame")
def _load_data_frame(provider, meta, project, include_nested: bool = True, **_):
    opts = meta.get("data_frame", {})
    df = read_table(_object_path(meta, project), fmt=opts.get("format"), row_names=opts.get("row_names"))
    if not include_nested:
        df = flatten_nested(df)
    return df


@register_loader("anndata")
def _load_anndata(provider, meta, project, **_):
    return read_h5ad(_object_path(meta, project))


@register_loader("json")
def _load_json(provider, meta, project, **_):
    return read_json(_object_path(meta, project))


@register_loader("multi_assay_experiment")
def _load_multi_assay(provider, meta, project, include_nested: bool = True, **_):
    from ..api.assemble import load_multiassay
    return load_multiassay(meta, project, include_nested=include_nested, provider=provider)
