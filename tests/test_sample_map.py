import logging

import pandas as pd
import pytest

from maestage.api.sample_map import load_sample_map, reconcile_sample_map
from maestage.config import SampleMapColumns
from maestage.exceptions import DuplicateExperimentError
from maestage.types import Resource

from conftest import InMemoryProvider


@pytest.fixture
def raw() -> pd.DataFrame:
    return pd.DataFrame({
        "experiment": ["protein", "rna", "unknown"],
        "sample": ["p1", "p2", "p3"],
        "column": ["c1", "c2", "c3"],
    })


def test_categories_follow_loaded_names(raw) -> None:
    mapping = reconcile_sample_map(raw, ["rna", "protein"])

    assert list(mapping.columns) == ["assay", "primary", "colname"]
    assert list(mapping["assay"].cat.categories) == ["rna", "protein"]
    assert mapping["assay"].iloc[0] == "protein"
    assert mapping["assay"].iloc[1] == "rna"
    assert list(mapping["assay"].cat.codes) == [1, 0, -1]


def test_unloaded_experiment_becomes_na_not_error(raw, caplog) -> None:
    with caplog.at_level(logging.WARNING, logger="maestage.api.sample_map"):
        mapping = reconcile_sample_map(raw, ["rna", "protein"])

    assert mapping["assay"].isna().tolist() == [False, False, True]
    assert "1 sample map row(s)" in caplog.text


def test_primary_and_colname_pass_through(raw) -> None:
    mapping = reconcile_sample_map(raw, ["rna", "protein"])

    assert mapping["primary"].tolist() == ["p1", "p2", "p3"]
    assert mapping["colname"].tolist() == ["c1", "c2", "c3"]


def test_category_order_is_not_value_order(raw) -> None:
    mapping = reconcile_sample_map(raw, ["unknown", "protein", "rna"])

    assert list(mapping["assay"].cat.categories) == ["unknown", "protein", "rna"]
    assert not mapping["assay"].isna().any()


def test_source_index_is_dropped(raw) -> None:
    raw.index = ["x", "y", "z"]
    mapping = reconcile_sample_map(raw, ["rna", "protein"])
    assert list(mapping.index) == [0, 1, 2]


def test_custom_raw_field_names() -> None:
    raw = pd.DataFrame({"assay_name": ["rna"], "subject": ["p1"], "barcode": ["AAAC"]})
    cols = SampleMapColumns(experiment="assay_name", sample="subject", column="barcode")

    mapping = reconcile_sample_map(raw, ["rna"], cols)

    assert mapping.to_dict(orient="list") == {"assay": ["rna"], "primary": ["p1"], "colname": ["AAAC"]}


def test_missing_raw_field(raw) -> None:
    with pytest.raises(KeyError, match="column"):
        reconcile_sample_map(raw.drop(columns="column"), ["rna"])


def test_duplicate_loaded_names_are_refused(raw) -> None:
    with pytest.raises(DuplicateExperimentError, match="rna"):
        reconcile_sample_map(raw, ["rna", "protein", "rna"])


def test_load_sample_map_goes_through_provider(raw) -> None:
    provider = InMemoryProvider({"maps/sm": raw})

    mapping = load_sample_map(Resource("maps/sm"), "proj", provider, ["protein"])

    assert provider.loaded == ["maps/sm"]
    assert list(mapping["assay"].cat.categories) == ["protein"]
    assert mapping["assay"].isna().tolist() == [False, True, True]
