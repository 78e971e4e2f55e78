from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Mapping, Optional, Sequence, Union

from .ops.dispatch import resolve_backend

@dataclass(frozen=True)
class SampleMapColumns:
    # field names in the staged sample mapping
    experiment: str = "experiment"
    sample: str = "sample"
    column: str = "column"

@dataclass(frozen=True)
class LoadConfig:
    experiments: Optional[Sequence[Union[str, int]]] = None  # names, or 1-based positions
    backend: str = "serial"        # serial | thread | process
    n_workers: Optional[int] = None
    include_nested: bool = True
    sample_map_columns: SampleMapColumns = field(default_factory=SampleMapColumns)
    log_level: Optional[str] = None  # configure logging before loading when set

    @classmethod
    def from_mapping(cls, cfg: Mapping[str, Any]) -> "LoadConfig":
        cols = dict(cfg.get("sample_map_columns") or {})
        experiments = cfg.get("experiments")
        return cls(
            experiments=tuple(experiments) if experiments is not None else None,
            backend=str(cfg.get("backend") or "serial"),
            n_workers=int(cfg["n_workers"]) if cfg.get("n_workers") is not None else None,
            include_nested=bool(cfg.get("include_nested", True)),
            sample_map_columns=SampleMapColumns(**cols),
            log_level=cfg.get("log_level"),
        )

    def make_backend(self):
        return resolve_backend(self.backend, n_workers=self.n_workers)
