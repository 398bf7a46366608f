"""
ports/definition_source_port.py
──────────────────────────────────────────────────────────────────────────────
Abstract interface for the store of pre-built subdivision definitions.

Definitions are split into GROUPS: one group per set of siblings.

  Top-level group   id = country code              e.g. "BR"
  Nested group      id = "<country>-<digest>"      e.g. "BR-3e8f…"

(see services/subdivision_repository.build_group_id for the digest).

The port separates the two concerns on purpose:
  1. has_data          — cheap existence check, False means "no such group"
  2. load_definitions  — the actual read, which may fail

A group that does not exist is NOT an error.  A group that exists but cannot
be read IS one (DefinitionLoadError), so the repository never confuses broken
data with missing data.

Current implementation: JsonDefinitionSource (one JSON file per group).
"""
from __future__ import annotations

from typing import Any, Optional, Protocol, runtime_checkable


@runtime_checkable
class DefinitionSourcePort(Protocol):
    """Contract for the subdivision definition backend."""

    def has_data(self, group_id: str) -> bool:
        """Report whether definitions exist for a group.

        Args:
            group_id: Group identifier (country code or "<cc>-<digest>").

        Returns:
            True if load_definitions() can be called for this group.
        """
        ...

    def load_definitions(self, group_id: str) -> Optional[dict[str, Any]]:
        """Load the raw definition record of a group.

        The record holds:
          country_code  (str, required)
          parents       (list[str], optional; omitted for top-level groups)
          locale        (str, optional)
          subdivisions  (dict code → {name, local_code, local_name, iso_code,
                         postal_code_pattern, postal_code_pattern_type,
                         has_children})

        Returns:
            The record dict, or None if the group has no data.

        Raises:
            DefinitionLoadError: If the data exists but cannot be read/parsed.
        """
        ...
