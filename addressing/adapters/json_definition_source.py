"""
adapters/json_definition_source.py
──────────────────────────────────────────────────────────────────────────────
Implements DefinitionSourcePort over a directory of JSON files.

Layout:
  <definition_path>/BR.json                                  top-level group
  <definition_path>/BR-<md5 of "SC">.json                    localities of SC
  …

Each file holds one group record:
  {
    "country_code": "BR",
    "parents": ["BR", "SC"],          (omitted for top-level groups)
    "locale": "pt",
    "subdivisions": {"Abelardo Luz": {}, …}
  }

A missing file means "no such group" (has_data → False).  A file that exists
but cannot be read or parsed raises DefinitionLoadError — broken data is
never reported as absent.

To swap the storage (e.g. a database or a packaged resource bundle):
  1. Write a new adapter implementing DefinitionSourcePort
  2. Change ONE line in services/container.py
"""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

from addressing.domain.exceptions import DefinitionLoadError

logger = logging.getLogger(__name__)


class JsonDefinitionSource:
    """JSON-file implementation of DefinitionSourcePort.

    Injected into SubdivisionRepository via services/container.py.
    """

    def __init__(self, definition_path: Path | str) -> None:
        self._path = Path(definition_path)
        logger.debug("JsonDefinitionSource ready | path=%s", self._path)

    @property
    def definition_path(self) -> Path:
        return self._path

    # ── DefinitionSourcePort implementation ────────────────────────────────

    def has_data(self, group_id: str) -> bool:
        if not _is_valid_group_id(group_id):
            logger.warning("Rejected group id %r", group_id)
            return False
        return self._file_for(group_id).is_file()

    def load_definitions(self, group_id: str) -> Optional[dict[str, Any]]:
        """Read and parse <group_id>.json.

        Returns None when the file does not exist.
        """
        path = self._file_for(group_id)
        try:
            with path.open(encoding="utf-8") as fh:
                data = json.load(fh)
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError, UnicodeDecodeError) as exc:
            raise DefinitionLoadError(f"Cannot read definitions {path}: {exc}") from exc

        if not isinstance(data, dict):
            raise DefinitionLoadError(
                f"Definitions {path} must hold a JSON object, got {type(data).__name__}"
            )
        logger.debug("Read definitions | group=%s file=%s", group_id, path.name)
        return data

    # ── Private helpers ────────────────────────────────────────────────────

    def _file_for(self, group_id: str) -> Path:
        if not _is_valid_group_id(group_id):
            raise DefinitionLoadError(f"Invalid group id {group_id!r}")
        return self._path / f"{group_id}.json"


def _is_valid_group_id(group_id: str) -> bool:
    # Group ids are country codes or "<cc>-<hex>": never path components.
    return bool(group_id) and not (
        "/" in group_id or "\\" in group_id or group_id.startswith(".")
    )
