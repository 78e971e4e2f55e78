# maestage/api/experiments.py
from __future__ import annotations
import logging
from functools import partial
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

from ..exceptions import DuplicateExperimentError
from ..ops.anndata_io import materialize_experiment_classes
from ..protocols import LoadBackend, LoadingProvider
from ..types import ExperimentDescriptor

logger = logging.getLogger(__name__)


def load_experiment(descriptor: ExperimentDescriptor, project: Any, provider: LoadingProvider) -> Dict[str, Any]:
    meta = provider.acquire_metadata(project, descriptor.resource.path)
    obj = provider.load_object(meta, project)
    logger.debug("Loaded experiment '%s' (%s)", descriptor.name, type(obj).__name__)
    return {descriptor.name: obj}


def dispatch_experiments(
    descriptors: Sequence[ExperimentDescriptor],
    project: Any,
    provider: LoadingProvider,
    backend: Optional[LoadBackend] = None,
) -> list[Dict[str, Any]]:
    """
    Load every descriptor, returning one ``{name: experiment}`` per descriptor in
    descriptor order. The first failing load aborts the lot.
    """
    load_one = partial(load_experiment, project=project, provider=provider)
    if backend is None or not backend.parallel:
        return [load_one(d) for d in descriptors]

    parts = backend.map(load_one, list(descriptors))
    materialize_experiment_classes(parts)
    return parts


def merge_experiments(parts: Iterable[Mapping[str, Any]]) -> Dict[str, Any]:
    merged: Dict[str, Any] = {}
    for part in parts:
        for name, obj in part.items():
            if name in merged:
                raise DuplicateExperimentError(f"experiment '{name}' was loaded more than once")
            merged[name] = obj
    return merged
