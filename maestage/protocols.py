from __future__ import annotations
from typing import Protocol, Any, Callable, Iterable, Mapping, Optional, runtime_checkable

@runtime_checkable
class LoadingProvider(Protocol):
    def acquire_metadata(self, project: Any, path: str) -> Mapping[str, Any]: ...
    def load_object(self, metadata: Mapping[str, Any], project: Any, **options) -> Any: ...
    def restore_metadata(self, container, column_metadata: Optional[Mapping[str, Any]],
                         global_metadata: Optional[Mapping[str, Any]], project: Any) -> Any: ...

@runtime_checkable
class LoadBackend(Protocol):
    parallel: bool
    def map(self, fn: Callable[[Any], Any], items: Iterable[Any]) -> list: ...
