class SelectionError(ValueError):
    """Raised when the requested experiments cannot be resolved against the manifest."""
    pass

class ExperimentNotFoundError(SelectionError):
    """Raised when a requested experiment name is not in the manifest."""
    pass

class ExperimentIndexError(SelectionError):
    """Raised when a requested experiment position is outside [1, n]."""
    pass

class AnnotationShapeError(TypeError):
    """Raised when the subject annotations do not load as a DataFrame."""
    pass

class AssemblyError(ValueError):
    """Raised when the experiments, sample map and column data do not fit together."""
    pass

class DuplicateExperimentError(AssemblyError):
    pass

class StagingError(Exception):
    """Raised by the staging provider when a staged object cannot be read."""
    pass

class ManifestError(StagingError):
    pass
