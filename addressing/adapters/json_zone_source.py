"""
adapters/json_zone_source.py
──────────────────────────────────────────────────────────────────────────────
Loads zone definitions from a JSON file.

Accepted document shapes:
  [ {zone}, … ]
  {"zones": [ {zone}, … ]}

Zone record:
  {
    "id": "south_br",
    "label": "Southern Brazil",
    "territories": [
      {"country_code": "BR", "administrative_area": "SC"},
      {"country_code": "BR", "included_postal_codes": "/^9[0-9]{4}/"}
    ]
  }

Every postal code pattern is parsed at load time, so a malformed regex in the
static data fails here with PatternError instead of on the first address
that happens to reach it.
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from addressing.domain.exceptions import DefinitionLoadError, InvalidDefinitionError
from addressing.domain.models import Zone
from addressing.domain.postal_code import parse_postal_code_pattern

logger = logging.getLogger(__name__)


class JsonZoneSource:
    """Reads Zone objects from a JSON document on disk."""

    def __init__(self, zone_path: Path | str) -> None:
        self._path = Path(zone_path)
        logger.debug("JsonZoneSource ready | path=%s", self._path)

    def load_zones(self) -> list[Zone]:
        """Load, validate and return every zone in declaration order.

        Raises:
            DefinitionLoadError:    If the file is missing or not valid JSON.
            InvalidDefinitionError: If a zone record is malformed.
            PatternError:           If a postal code pattern is malformed.
        """
        try:
            payload = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise DefinitionLoadError(f"Cannot read zones {self._path}: {exc}") from exc

        zones = [self._parse_zone(record) for record in _zone_records(payload, self._path)]
        logger.info("Loaded zones | count=%d file=%s", len(zones), self._path.name)
        return zones

    def _parse_zone(self, record: Any) -> Zone:
        try:
            zone = Zone.model_validate(record)
        except ValidationError as exc:
            raise InvalidDefinitionError(f"Invalid zone in {self._path}: {exc}") from exc
        for territory in zone.territories:
            for pattern in (territory.included_postal_codes, territory.excluded_postal_codes):
                if pattern:
                    parse_postal_code_pattern(pattern)
        return zone


def _zone_records(payload: Any, path: Path) -> list[Any]:
    if isinstance(payload, dict):
        payload = payload.get("zones")
    if not isinstance(payload, list):
        raise InvalidDefinitionError(
            f"Zones file {path} must hold a list or an object with a 'zones' list"
        )
    return payload
