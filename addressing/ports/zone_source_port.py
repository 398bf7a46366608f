"""
ports/zone_source_port.py
──────────────────────────────────────────────────────────────────────────────
Abstract interface for the store of static zone definitions.

Current implementation: JsonZoneSource (one JSON document).
"""
from __future__ import annotations

from typing import Protocol, runtime_checkable

from addressing.domain.models import Zone


@runtime_checkable
class ZoneSourcePort(Protocol):
    """Contract for the zone definition backend."""

    def load_zones(self) -> list[Zone]:
        """Return every zone, in declaration order.

        Raises:
            DefinitionLoadError:    If the definitions cannot be read.
            InvalidDefinitionError: If a zone is malformed.
        """
        ...
