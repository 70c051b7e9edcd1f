"""
Tests for the persisted JSON form of the canonical model.
"""

import json

import pytest
from pydantic import ValidationError

from structural_exchange.converters.importer import import_from_sections
from structural_exchange.converters.section_codec import split_sections
from structural_exchange.models import MaterialKind, WoodProperties
from structural_exchange.persistence.model_serializer import (
    FORMAT_VERSION,
    load_model,
    model_from_dict,
    model_to_dict,
    save_model,
)


class TestSaveLoad:

    def test_round_trip_is_lossless(self, sample_model, tmp_path):
        path = save_model(sample_model, tmp_path / "model.json")
        assert load_model(path) == sample_model

    def test_round_trip_of_imported_model(self, building_text, tmp_path):
        model = import_from_sections(split_sections(building_text))
        path = save_model(model, tmp_path / "nested" / "dir" / "model.json")
        assert path.exists()
        assert load_model(path) == model

    def test_output_is_deterministic(self, sample_model, tmp_path):
        first = save_model(sample_model, tmp_path / "a.json").read_text()
        second = save_model(sample_model.model_copy(deep=True), tmp_path / "b.json").read_text()
        assert first == second

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_model(tmp_path / "absent.json")


class TestPersistedForm:

    def test_envelope_and_camel_case(self, sample_model):
        data = model_to_dict(sample_model)
        assert data["formatVersion"] == FORMAT_VERSION
        level = data["model"]["layout"]["levels"][0]
        assert level["floorTypeId"] == "FT-1"
        assert "floor_type_id" not in level

    def test_material_kind_tag(self, sample_model):
        data = model_to_dict(sample_model)
        materials = data["model"]["properties"]["materials"]
        assert [m["properties"]["kind"] for m in materials] == ["steel", "concrete"]
        assert materials[0]["properties"]["weightDensity"] == 490.0

    def test_kind_tag_selects_variant(self):
        data = {
            "properties": {
                "materials": [
                    {"id": "MAT-1", "name": "DF", "properties": {"kind": "wood", "fb": 900}},
                ]
            }
        }
        model = model_from_dict(data)
        material = model.properties.materials[0]
        assert isinstance(material.properties, WoodProperties)
        assert material.kind is MaterialKind.WOOD
        assert material.properties.fb == 900.0

    def test_unknown_kind_is_rejected(self):
        data = {"properties": {"materials": [{"id": "M", "name": "X", "properties": {"kind": "unobtainium"}}]}}
        with pytest.raises(ValidationError):
            model_from_dict(data)

    def test_nulls_are_omitted(self, sample_model):
        data = model_to_dict(sample_model)
        column = data["model"]["elements"]["columns"][0]
        assert "endPoint" not in column
        assert json.dumps(data)

    def test_bare_model_dict_accepted(self, sample_model):
        bare = model_to_dict(sample_model)["model"]
        assert model_from_dict(bare) == sample_model

    def test_unsupported_version(self, sample_model):
        data = model_to_dict(sample_model)
        data["formatVersion"] = "9.9"
        with pytest.raises(ValueError, match="Unsupported model format version"):
            model_from_dict(data)
