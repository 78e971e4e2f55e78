# maestage/api/select.py
from __future__ import annotations
from typing import Any, Sequence

from ..exceptions import ExperimentIndexError, ExperimentNotFoundError
from ..types import AllExperiments, ByIndex, ByName, ExperimentDescriptor, as_selection


def choose_experiments(experiments: Any, descriptors: Sequence[ExperimentDescriptor]) -> list[int]:
    """
    Resolve the ``experiments`` argument into 0-based positions in ``descriptors``.

    None keeps everything in manifest order. Names map to the first descriptor
    carrying that name; positions are 1-based. Requested order and repeats are kept.
    """
    sel = as_selection(experiments)
    n = len(descriptors)

    if isinstance(sel, AllExperiments):
        return list(range(n))

    if isinstance(sel, ByName):
        first: dict[str, int] = {}
        for i, d in enumerate(descriptors):
            first.setdefault(d.name, i)
        for name in sel.names:
            if name not in first:
                raise ExperimentNotFoundError(f"cannot find '{name}' in the available experiments")
        return [first[name] for name in sel.names]

    if isinstance(sel, ByIndex):
        if any(p <= 0 or p > n for p in sel.positions):
            raise ExperimentIndexError(
                "'experiments' must be positive and no greater than the total "
                f"number of experiments ({n})"
            )
        return [p - 1 for p in sel.positions]

    raise TypeError(f"unsupported selection {sel!r}")
