"""
Tests for the reference resolver and the reference field table.
"""

import pytest

from structural_exchange.config.settings import DEFAULT_NAMES, default_name
from structural_exchange.core.context import OperationReport
from structural_exchange.core.errors import UnresolvedReferenceWarning
from structural_exchange.core.references import (
    REFERENCE_DEFAULTS,
    REFERENCE_FIELDS,
    ModelIndex,
    ReferenceResolver,
    entity_name,
    iter_references,
    references_to,
)
from structural_exchange.models import COLLECTIONS


@pytest.fixture
def resolver(sample_model):
    return ReferenceResolver(ModelIndex(sample_model), report=OperationReport())


# ============================================================================
# Reference Table
# ============================================================================

class TestReferenceTable:

    def test_every_field_names_known_collections(self):
        for ref in REFERENCE_FIELDS:
            assert ref.owner in COLLECTIONS
            for target in ref.targets:
                assert target in COLLECTIONS

    def test_every_default_exists(self):
        for key in REFERENCE_DEFAULTS.values():
            assert key in DEFAULT_NAMES

    def test_references_to_beams_include_line_loads(self):
        owners = {(ref.owner, ref.attribute) for ref in references_to("beams")}
        assert ("line_loads", "element_id") in owners

    def test_iter_references_yields_populated_values(self, sample_model):
        found = {(ref.owner, entity.id, ref.attribute, value) for ref, entity, value in iter_references(sample_model)}
        assert ("walls", "WL-1", "properties_id", "WP-1") in found
        assert ("load_combinations", "LC-1", "load_definition_ids", "LD-2") in found
        assert not any(value is None for *_, value in found)


# ============================================================================
# Resolution
# ============================================================================

class TestResolve:

    def test_hit_returns_entity(self, resolver):
        wall_property = resolver.resolve_in("wall_properties", "WP-1")
        assert wall_property.name == "Wall12"
        assert resolver.report.is_clean

    def test_miss_returns_default_and_warns(self, resolver):
        result = resolver.resolve({"a": 1}, "b", default=0, field="things", owner_id="X-1")
        assert result == 0
        warning = resolver.report.warnings[0]
        assert isinstance(warning, UnresolvedReferenceWarning)
        assert warning.ref_id == "b"
        assert warning.owner_id == "X-1"

    def test_unset_reference_is_silent(self, resolver):
        assert resolver.resolve({"a": 1}, None, default="d") == "d"
        assert resolver.resolve({"a": 1}, "", default="d") == "d"
        assert resolver.report.is_clean

    def test_resolve_without_report_does_not_raise(self, sample_model):
        resolver = ReferenceResolver(ModelIndex(sample_model))
        assert resolver.resolve_in("levels", "LV-missing", default="fallback") == "fallback"


class TestResolveName:

    def test_existing_name(self, resolver):
        assert resolver.resolve_name("frame_properties", "FRP-1") == "W10X12"

    @pytest.mark.parametrize(
        "collection,expected",
        [
            ("wall_properties", "Default"),
            ("floor_properties", "Default"),
            ("frame_properties", "Unknown"),
            ("diaphragms", "D1"),
            ("levels", "Story1"),
        ],
    )
    def test_missing_name_uses_literal_default(self, resolver, collection, expected):
        assert resolver.resolve_name(collection, "NOPE-1", owner_id="WL-1") == expected
        assert len(resolver.report.warnings) == 1

    def test_explicit_default_wins(self, resolver):
        assert resolver.resolve_name("materials", None, default="Steel") == "Steel"

    def test_unnamed_entity_resolves_to_its_id(self, sample_model):
        sample_model.loads.surface_loads[0].name = None
        resolver = ReferenceResolver(ModelIndex(sample_model), report=OperationReport())
        surface = sample_model.loads.surface_loads[0]
        assert resolver.resolve_name("surface_loads", "SL-1") == entity_name(surface) == "SL-1"
        assert resolver.report.is_clean

    def test_default_name_unknown_field(self):
        with pytest.raises(KeyError):
            default_name("widgets")


# ============================================================================
# Index
# ============================================================================

class TestModelIndex:

    def test_find_searches_targets_in_order(self, sample_model):
        index = ModelIndex(sample_model)
        found = index.find("BM-1", ("braces", "beams", "columns"))
        assert found.id == "BM-1"
        assert index.find("BM-404", ("beams",)) is None
        assert index.find(None, ("beams",)) is None

    def test_contains(self, sample_model):
        index = ModelIndex(sample_model)
        assert index.contains("LV-1", ("levels",))
        assert not index.contains("LV-9", ("levels",))
