"""
tests/conftest.py
──────────────────────────────────────────────────────────────────────────────
Fixtures and in-memory sources for the unit tests.

The sources satisfy the ports structurally (no base class) and record each
call, so tests can assert exactly when the repository reaches for data.

Fixture hierarchy:
  definitions   → in-memory group records (Brazil + a Chinese sample)
  mock_source   → implements DefinitionSourcePort, counts every call
  repository    → SubdivisionRepository wired with mock_source
  zones         → a few Zone objects
  zone_matcher  → ZoneMatcher wired with an in-memory zone source
"""
from __future__ import annotations

import copy
import threading
from typing import Any, Optional

import pytest

from addressing.domain.models import Zone
from addressing.services.subdivision_repository import SubdivisionRepository, build_group_id
from addressing.services.zone_matcher import ZoneMatcher


# ── In-memory definition data ──────────────────────────────────────────────

BR_SC = build_group_id(["BR", "SC"])
BR_SP = build_group_id(["BR", "SP"])
CN_SH = build_group_id(["CN", "Shanghai Shi"])

DEFINITIONS: dict[str, dict[str, Any]] = {
    "BR": {
        "country_code": "BR",
        "locale": "pt",
        "subdivisions": {
            "SC": {
                "name": "Santa Catarina",
                "iso_code": "BR-SC",
                "postal_code_pattern": "8[89]",
                "postal_code_pattern_type": "full",
                "has_children": True,
            },
            "SP": {
                "name": "São Paulo",
                "iso_code": "BR-SP",
                "postal_code_pattern": "[01][1-9]",
                "has_children": True,
            },
            "AC": {
                "name": "Acre",
                "iso_code": "BR-AC",
            },
        },
    },
    BR_SC: {
        "country_code": "BR",
        "parents": ["BR", "SC"],
        "locale": "pt",
        "subdivisions": {
            "Abelardo Luz": [],
            "Florianópolis": {},
        },
    },
    BR_SP: {
        "country_code": "BR",
        "parents": ["BR", "SP"],
        "locale": "pt",
        "subdivisions": {
            "Anhumas": {},
        },
    },
    "CN": {
        "country_code": "CN",
        "locale": "zh-Hans",
        "subdivisions": {
            "Beijing Shi": {
                "local_code": "北京市",
                "name": "Beijing Shi",
                "iso_code": "CN-BJ",
            },
            "Shanghai Shi": {
                "local_code": "上海市",
                "iso_code": "CN-SH",
                "has_children": True,
            },
        },
    },
    CN_SH: {
        "country_code": "CN",
        "parents": ["CN", "Shanghai Shi"],
        "locale": "zh-Hans",
        "subdivisions": {
            "Huangpu Qu": {"local_code": "黄浦区", "local_name": "黄浦区"},
        },
    },
}


# ── Mock adapters ──────────────────────────────────────────────────────────

class MockDefinitionSource:
    """In-memory fake definition source that records every call."""

    def __init__(self, definitions: dict[str, dict[str, Any]]) -> None:
        self._definitions = definitions
        self.has_data_calls: list[str] = []
        self.load_calls: list[str] = []
        self._lock = threading.Lock()

    def has_data(self, group_id: str) -> bool:
        with self._lock:
            self.has_data_calls.append(group_id)
        return group_id in self._definitions

    def load_definitions(self, group_id: str) -> Optional[dict[str, Any]]:
        with self._lock:
            self.load_calls.append(group_id)
        record = self._definitions.get(group_id)
        # Hand out a copy, like a fresh file read would.
        return copy.deepcopy(record) if record is not None else None


class InMemoryZoneSource:
    """Fake ZoneSourcePort returning pre-built zones."""

    def __init__(self, zones: list[Zone]) -> None:
        self._zones = zones
        self.calls = 0

    def load_zones(self) -> list[Zone]:
        self.calls += 1
        return list(self._zones)


# ── pytest fixtures ────────────────────────────────────────────────────────

@pytest.fixture
def definitions() -> dict[str, dict[str, Any]]:
    return copy.deepcopy(DEFINITIONS)


@pytest.fixture
def mock_source(definitions):
    return MockDefinitionSource(definitions)


@pytest.fixture
def repository(mock_source):
    return SubdivisionRepository(mock_source)


@pytest.fixture
def zones() -> list[Zone]:
    return [
        Zone(
            id="santa_catarina",
            label="Santa Catarina",
            territories=[{"country_code": "BR", "administrative_area": "SC"}],
        ),
        Zone(
            id="br_south_postal",
            label="Southern Brazil by postal code",
            territories=[
                {
                    "country_code": "BR",
                    "included_postal_codes": "/^(8[89]|9[0-9])/",
                    "excluded_postal_codes": "88888-888",
                },
            ],
        ),
        Zone(
            id="anywhere_cn_or_sp",
            label="China or São Paulo",
            territories=[
                {"country_code": "CN"},
                {"country_code": "BR", "administrative_area": "SP"},
            ],
        ),
    ]


@pytest.fixture
def zone_source(zones):
    return InMemoryZoneSource(zones)


@pytest.fixture
def zone_matcher(zone_source):
    return ZoneMatcher(zone_source)
