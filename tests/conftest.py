from __future__ import annotations

import json
import random
import threading
import time
from pathlib import Path
from typing import Any, Dict, Mapping

import anndata as ad
import numpy as np
import pandas as pd
import pytest

from maestage.exceptions import StagingError
from maestage.ops.artifacts import flatten_nested
from maestage.types import ExperimentDescriptor, Manifest, Resource


def make_experiment(colnames, n_features: int = 3) -> ad.AnnData:
    return ad.AnnData(
        X=np.arange(len(colnames) * n_features, dtype=float).reshape(len(colnames), n_features),
        obs=pd.DataFrame(index=list(colnames)),
        var=pd.DataFrame(index=[f"gene{i}" for i in range(n_features)]),
    )


class InMemoryProvider:
    """Provider over a dict of path -> object, with optional random latency."""

    def __init__(self, objects: Mapping[str, Any], max_latency: float = 0.0, seed: int = 0):
        self.objects = dict(objects)
        self.max_latency = max_latency
        self._rng = random.Random(seed)
        self._lock = threading.Lock()
        self.loaded: list[str] = []

    def acquire_metadata(self, project, path):
        if path not in self.objects:
            raise StagingError(f"no metadata for '{path}'")
        return {"path": path}

    def load_object(self, metadata, project, **options):
        if self.max_latency:
            with self._lock:
                delay = self._rng.uniform(0, self.max_latency)
            time.sleep(delay)
        obj = self.objects[metadata["path"]]
        if isinstance(obj, Exception):
            raise obj
        with self._lock:
            self.loaded.append(metadata["path"])
        if isinstance(obj, pd.DataFrame) and not options.get("include_nested", True):
            obj = flatten_nested(obj)
        return obj

    def restore_metadata(self, container, column_metadata, global_metadata, project):
        if global_metadata is not None:
            container.metadata.update(global_metadata)
        return container


def two_gene_manifest(other_data=None) -> Manifest:
    return Manifest(
        experiments=(
            ExperimentDescriptor("geneA", Resource("exp/geneA")),
            ExperimentDescriptor("geneB", Resource("exp/geneB")),
        ),
        sample_map=Resource("sample_map"),
        col_data=Resource("coldata"),
        other_data=other_data,
    )


def two_gene_objects() -> Dict[str, Any]:
    return {
        "exp/geneA": make_experiment(["a1", "a2"]),
        "exp/geneB": make_experiment(["b1", "b2"]),
        "sample_map": pd.DataFrame({
            "experiment": ["geneA", "geneA", "geneB", "geneB"],
            "sample": ["p1", "p2", "p2", "p3"],
            "column": ["a1", "a2", "b1", "b2"],
        }),
        "coldata": pd.DataFrame({"age": [30, 40, 50]}, index=["p1", "p2", "p3"]),
    }


@pytest.fixture
def manifest() -> Manifest:
    return two_gene_manifest()


@pytest.fixture
def provider() -> InMemoryProvider:
    return InMemoryProvider(two_gene_objects())


def _write_meta(root: Path, path: str, meta: dict) -> None:
    target = root / f"{path}.json"
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(json.dumps({**meta, "path": path}))


@pytest.fixture
def staging_dir(tmp_path: Path) -> Path:
    """
    A staged two-experiment dataset:
      dataset.json                 multi_assay_experiment manifest
      exp/geneA.h5ad, geneB.h5ad   anndata experiments
      sample_map.csv               4 rows, 2 per experiment
      coldata.json                 3 subjects, one nested column
      other.json                   auxiliary metadata
    """
    root = tmp_path / "staged"
    (root / "exp").mkdir(parents=True)

    for name, cols in {"geneA": ["a1", "a2"], "geneB": ["b1", "b2"]}.items():
        make_experiment(cols).write_h5ad(root / "exp" / f"{name}.h5ad")
        _write_meta(root, f"exp/{name}.h5ad", {"$schema": "anndata/v1.json"})

    two_gene_objects()["sample_map"].to_csv(root / "sample_map.csv", index=False)
    _write_meta(root, "sample_map.csv", {"$schema": "data_frame/v1.json", "data_frame": {"format": "csv"}})

    records = [
        {"subject": "p1", "age": 30, "site": {"name": "north", "batch": 1}},
        {"subject": "p2", "age": 40, "site": {"name": "south", "batch": 1}},
        {"subject": "p3", "age": 50, "site": {"name": "south", "batch": 2}},
    ]
    (root / "coldata.json").write_text(json.dumps(records))
    _write_meta(root, "coldata.json", {
        "$schema": "data_frame/v1.json",
        "data_frame": {"format": "json", "row_names": "subject"},
    })

    (root / "other.json").write_text(json.dumps({"study": "demo", "version": 2}))
    _write_meta(root, "other.json", {"$schema": "json/v1.json"})

    _write_meta(root, "dataset.json", {
        "$schema": "multi_assay_experiment/v1.json",
        "dataset": {
            "experiments": [
                {"name": "geneA", "resource": {"path": "exp/geneA.h5ad"}},
                {"name": "geneB", "resource": {"path": "exp/geneB.h5ad"}},
            ],
            "sample_mapping": {"resource": {"path": "sample_map.csv"}},
            "sample_data": {"resource": {"path": "coldata.json"}},
            "other_data": {"resource": {"path": "other.json"}},
        },
    })
    return root
