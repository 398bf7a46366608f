"""
services/zone_matcher.py
──────────────────────────────────────────────────────────────────────────────
Finds the zones an address belongs to.

Zones are loaded ONCE from the injected ZoneSourcePort (lazily, on the first
call) and reused; they are immutable static data.
"""
from __future__ import annotations

import logging
import threading
from typing import Optional

from addressing.domain.models import Zone
from addressing.ports.address_port import AddressPort
from addressing.ports.zone_source_port import ZoneSourcePort

logger = logging.getLogger(__name__)


class ZoneMatcher:
    """Match addresses against a fixed set of zones.

    Args:
        source: Any object satisfying ZoneSourcePort.
    """

    def __init__(self, source: ZoneSourcePort) -> None:
        self._source = source
        self._zones: Optional[list[Zone]] = None
        self._lock = threading.Lock()

    # ── Public API ─────────────────────────────────────────────────────────

    @property
    def zones(self) -> list[Zone]:
        if self._zones is None:
            with self._lock:
                if self._zones is None:
                    self._zones = self._source.load_zones()
                    logger.debug("ZoneMatcher loaded %d zones", len(self._zones))
        return list(self._zones)

    def get(self, zone_id: str) -> Optional[Zone]:
        """Return a zone by id, or None."""
        return next((z for z in self.zones if z.id == zone_id), None)

    def match(self, address: AddressPort) -> list[Zone]:
        """Return every zone containing the address, in declaration order.

        Raises:
            PatternError: If a territory pattern is malformed.
        """
        matched = [z for z in self.zones if z.match(address)]
        logger.debug(
            "Zone match | country=%s postal_code=%s matched=%s",
            address.country_code,
            address.postal_code,
            [z.id for z in matched],
        )
        return matched
