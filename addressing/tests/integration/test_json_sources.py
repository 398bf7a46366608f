"""
tests/integration/test_json_sources.py
──────────────────────────────────────────────────────────────────────────────
Integration tests for the JSON file adapters.

Definition files are written to pytest's tmp_path, so no external resources
are needed; the tests exercise real file reads end-to-end through
SubdivisionRepository and ZoneMatcher.

Run with:
  pytest -m integration addressing/tests/integration -v
"""
from __future__ import annotations

import json

import pytest

from addressing.adapters.json_definition_source import JsonDefinitionSource
from addressing.adapters.json_zone_source import JsonZoneSource
from addressing.domain.exceptions import (
    DefinitionLoadError,
    InvalidDefinitionError,
    PatternError,
)
from addressing.domain.models import Address
from addressing.ports.definition_source_port import DefinitionSourcePort
from addressing.ports.zone_source_port import ZoneSourcePort
from addressing.services.subdivision_repository import SubdivisionRepository
from addressing.services.zone_matcher import ZoneMatcher
from addressing.tests.conftest import DEFINITIONS

pytestmark = pytest.mark.integration


@pytest.fixture
def definition_dir(tmp_path):
    directory = tmp_path / "subdivision"
    directory.mkdir()
    for group_id, record in DEFINITIONS.items():
        (directory / f"{group_id}.json").write_text(
            json.dumps(record, ensure_ascii=False), encoding="utf-8"
        )
    return directory


@pytest.fixture
def json_source(definition_dir):
    return JsonDefinitionSource(definition_dir)


class TestJsonDefinitionSource:
    def test_satisfies_port(self, json_source):
        assert isinstance(json_source, DefinitionSourcePort)

    def test_has_data(self, json_source):
        assert json_source.has_data("BR") is True
        assert json_source.has_data("RS") is False

    def test_load_definitions(self, json_source):
        record = json_source.load_definitions("BR")
        assert record["country_code"] == "BR"
        assert list(record["subdivisions"]) == ["SC", "SP", "AC"]

    def test_missing_file_returns_none(self, json_source):
        assert json_source.load_definitions("RS") is None

    def test_corrupt_file_raises(self, json_source, definition_dir):
        (definition_dir / "PT.json").write_text("{not json", encoding="utf-8")
        assert json_source.has_data("PT") is True
        with pytest.raises(DefinitionLoadError):
            json_source.load_definitions("PT")

    def test_non_object_file_raises(self, json_source, definition_dir):
        (definition_dir / "PT.json").write_text("[]", encoding="utf-8")
        with pytest.raises(DefinitionLoadError):
            json_source.load_definitions("PT")

    def test_path_like_group_ids_are_rejected(self, json_source):
        assert json_source.has_data("../subdivision/BR") is False
        with pytest.raises(DefinitionLoadError):
            json_source.load_definitions("../BR")


class TestRepositoryOverJsonFiles:
    def test_scenario(self, json_source):
        repository = SubdivisionRepository(json_source)

        subdivision = repository.get("SC", ["BR"])
        assert subdivision.country_code == "BR"
        assert subdivision.iso_code == "BR-SC"

        child = repository.get("Abelardo Luz", ["BR", "SC"])
        assert child.parent.code == "SC"
        assert child.parent is subdivision
        assert subdivision.children["Abelardo Luz"] is child

    def test_unicode_codes(self, json_source):
        repository = SubdivisionRepository(json_source)
        assert repository.get_list(["CN", "Shanghai Shi"], locale="zh-Hans") == {
            "Huangpu Qu": "黄浦区"
        }

    def test_read_failure_propagates(self, json_source, definition_dir):
        (definition_dir / "PT.json").write_text("{oops", encoding="utf-8")
        repository = SubdivisionRepository(json_source)
        with pytest.raises(DefinitionLoadError):
            repository.get_all(["PT"])

    def test_unknown_paths_are_empty(self, json_source):
        repository = SubdivisionRepository(json_source)
        assert repository.get_all(["RS"]) == {}
        assert repository.get_all(["BR", "SC", "Abelardo Luz"]) == {}
        assert repository.get("X", ["../etc"]) is None


class TestJsonZoneSource:
    ZONES = [
        {
            "id": "south",
            "label": "South",
            "territories": [
                {"country_code": "BR", "administrative_area": "SC"},
                {"country_code": "BR", "included_postal_codes": "/^9[0-9]{4}/"},
            ],
        },
        {
            "id": "portugal_mainland",
            "label": "Portugal (mainland)",
            "territories": [
                {"country_code": "PT", "excluded_postal_codes": "9000:9999"},
            ],
        },
    ]

    def test_list_document(self, tmp_path):
        path = tmp_path / "zones.json"
        path.write_text(json.dumps(self.ZONES), encoding="utf-8")
        source = JsonZoneSource(path)
        assert isinstance(source, ZoneSourcePort)
        zones = source.load_zones()
        assert [z.id for z in zones] == ["south", "portugal_mainland"]

    def test_wrapped_document(self, tmp_path):
        path = tmp_path / "zones.json"
        path.write_text(json.dumps({"zones": self.ZONES}), encoding="utf-8")
        matcher = ZoneMatcher(JsonZoneSource(path))
        assert [z.id for z in matcher.match(Address(country_code="BR", postal_code="90000"))] == ["south"]
        assert matcher.match(Address(country_code="PT", postal_code="9500")) == []
        assert [z.id for z in matcher.match(Address(country_code="PT", postal_code="1000"))] == [
            "portugal_mainland"
        ]

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(DefinitionLoadError):
            JsonZoneSource(tmp_path / "nope.json").load_zones()

    def test_malformed_zone_raises(self, tmp_path):
        path = tmp_path / "zones.json"
        path.write_text(json.dumps([{"id": "x", "territories": []}]), encoding="utf-8")
        with pytest.raises(InvalidDefinitionError):
            JsonZoneSource(path).load_zones()

    def test_wrong_document_shape_raises(self, tmp_path):
        path = tmp_path / "zones.json"
        path.write_text(json.dumps({"id": "x"}), encoding="utf-8")
        with pytest.raises(InvalidDefinitionError):
            JsonZoneSource(path).load_zones()

    def test_bad_pattern_fails_at_load(self, tmp_path):
        zones = [
            {
                "id": "x",
                "label": "X",
                "territories": [{"country_code": "BR", "included_postal_codes": "/(/"}],
            }
        ]
        path = tmp_path / "zones.json"
        path.write_text(json.dumps(zones), encoding="utf-8")
        with pytest.raises(PatternError):
            JsonZoneSource(path).load_zones()
