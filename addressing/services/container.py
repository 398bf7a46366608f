"""
services/container.py
──────────────────────────────────────────────────────────────────────────────
Wiring for the CLI and any other long-lived caller.

Concrete adapters are named here and nowhere else.

Definition locations come from settings (SUBDIVISION_DEFINITION_PATH,
ZONE_DEFINITION_PATH) — no code changes are needed to point at another data
set.

Replace the definition storage:
  - from addressing.adapters.json_definition_source import JsonDefinitionSource
  + from addressing.adapters.sqlite_definition_source import SqliteDefinitionSource

Process-wide cache:
  @lru_cache(maxsize=1) makes get_subdivision_repository() return the same
  repository across calls, so every caller in the process shares one group
  cache and sees the same Subdivision instances.
"""
from __future__ import annotations

import logging
from functools import lru_cache

from addressing.adapters.json_definition_source import JsonDefinitionSource
from addressing.adapters.json_zone_source import JsonZoneSource
from addressing.config.settings import Settings, get_settings
from addressing.domain.exceptions import ConfigurationError
from addressing.services.subdivision_repository import SubdivisionRepository
from addressing.services.zone_matcher import ZoneMatcher

logger = logging.getLogger(__name__)


def _build_definition_source(settings: Settings) -> JsonDefinitionSource:
    path = settings.subdivision_definition_path
    if not path.is_dir():
        raise ConfigurationError(
            f"SUBDIVISION_DEFINITION_PATH '{path}' is not a directory."
        )
    logger.info("Subdivision definitions: %s", path)
    return JsonDefinitionSource(path)


@lru_cache(maxsize=1)
def get_subdivision_repository() -> SubdivisionRepository:
    """Build and return the process-wide SubdivisionRepository singleton.

    Raises:
        ConfigurationError: If the definition directory does not exist.
    """
    return SubdivisionRepository(_build_definition_source(get_settings()))


@lru_cache(maxsize=1)
def get_zone_matcher() -> ZoneMatcher:
    """Build and return the ZoneMatcher singleton.

    Raises:
        ConfigurationError: If the zone definition file does not exist.
    """
    path = get_settings().zone_definition_path
    if not path.is_file():
        raise ConfigurationError(f"ZONE_DEFINITION_PATH '{path}' is not a file.")
    logger.info("Zone definitions: %s", path)
    return ZoneMatcher(JsonZoneSource(path))
