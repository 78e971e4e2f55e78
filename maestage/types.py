# maestage/types.py
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence, Tuple, Union

import numpy as np

from .exceptions import ManifestError


@dataclass(frozen=True)
class Resource:
    path: str


@dataclass(frozen=True)
class ExperimentDescriptor:
    name: str
    resource: Resource


@dataclass(frozen=True)
class Manifest:
    """
    Staged layout of a multi-assay dataset.

    - experiments: one descriptor per staged experiment, in staging order
    - sample_map:  long table linking subjects to experiment columns
    - col_data:    subject-level annotations
    - other_data:  opaque auxiliary metadata handed to the provider as-is
    """
    experiments: Tuple[ExperimentDescriptor, ...]
    sample_map: Resource
    col_data: Resource
    other_data: Optional[Mapping[str, Any]] = None

    @classmethod
    def from_dict(cls, info: Mapping[str, Any]) -> "Manifest":
        ds = info.get("dataset", info)
        exps = tuple(
            ExperimentDescriptor(name=_need(e, "name"), resource=_resource(e, "experiment"))
            for e in _need(ds, "experiments")
        )
        return cls(
            experiments=exps,
            sample_map=_resource(_need(ds, "sample_mapping"), "sample_mapping"),
            col_data=_resource(_need(ds, "sample_data"), "sample_data"),
            other_data=ds.get("other_data"),
        )


def _need(d: Mapping[str, Any], key: str) -> Any:
    if key not in d:
        raise ManifestError(f"manifest entry is missing required key '{key}'")
    return d[key]


def _resource(d: Mapping[str, Any], where: str) -> Resource:
    res = d.get("resource")
    if not isinstance(res, Mapping) or "path" not in res:
        raise ManifestError(f"'{where}' has no resource path")
    return Resource(path=str(res["path"]))


def as_manifest(obj: Union[Manifest, Mapping[str, Any]]) -> Manifest:
    return obj if isinstance(obj, Manifest) else Manifest.from_dict(obj)


# experiment selection: All / ByName / ByIndex
@dataclass(frozen=True)
class AllExperiments:
    pass


@dataclass(frozen=True)
class ByName:
    names: Tuple[str, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class ByIndex:
    positions: Tuple[int, ...] = field(default_factory=tuple)  # 1-based


Selection = Union[AllExperiments, ByName, ByIndex]


def _is_int(x) -> bool:
    return isinstance(x, (int, np.integer)) and not isinstance(x, (bool, np.bool_))


def as_selection(experiments: Union[None, str, int, Sequence[Any], Selection]) -> Selection:
    """Coerce the user-facing ``experiments`` argument into a selection variant."""
    if experiments is None:
        return AllExperiments()
    if isinstance(experiments, (AllExperiments, ByName, ByIndex)):
        return experiments
    if isinstance(experiments, str):
        return ByName((experiments,))
    if _is_int(experiments):
        return ByIndex((int(experiments),))

    items = list(experiments)
    if all(isinstance(x, str) for x in items):
        return ByName(tuple(items))
    if all(_is_int(x) for x in items):
        return ByIndex(tuple(int(x) for x in items))
    raise TypeError("'experiments' must be None, experiment names, or 1-based experiment positions")
