# maestage/api/coldata.py
from __future__ import annotations
from typing import Any

import pandas as pd

from ..exceptions import AnnotationShapeError
from ..protocols import LoadingProvider
from ..types import Resource


def load_column_data(resource: Resource, project: Any, provider: LoadingProvider,
                     include_nested: bool = True) -> pd.DataFrame:
    meta = provider.acquire_metadata(project, resource.path)
    coldata = provider.load_object(meta, project, include_nested=include_nested)
    if not isinstance(coldata, pd.DataFrame):
        raise AnnotationShapeError(
            f"subject data at '{resource.path}' must load as a DataFrame, got {type(coldata).__name__}"
        )
    return coldata
