from .api.assemble import assemble_multiassay, load_multiassay, load_multiassay_with_config
from .config import LoadConfig, SampleMapColumns
from .container import MultiAssayData
from .logging_utils import configure_logging
from .ops.dispatch import (
    ExecutorBackend,
    ProcessPoolBackend,
    SerialBackend,
    ThreadPoolBackend,
    resolve_backend,
)
from .ops.staging import StagingProvider, register_loader
from .types import AllExperiments, ByIndex, ByName, ExperimentDescriptor, Manifest, Resource

__all__ = [
    "load_multiassay",
    "load_multiassay_with_config",
    "assemble_multiassay",
    "LoadConfig",
    "SampleMapColumns",
    "MultiAssayData",
    "configure_logging",
    "SerialBackend",
    "ExecutorBackend",
    "ThreadPoolBackend",
    "ProcessPoolBackend",
    "resolve_backend",
    "StagingProvider",
    "register_loader",
    "Manifest",
    "ExperimentDescriptor",
    "Resource",
    "AllExperiments",
    "ByName",
    "ByIndex",
]
