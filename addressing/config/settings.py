"""
config/settings.py
──────────────────────────────────────────────────────────────────────────────
Where the definition data lives and how loudly the CLI logs.

Each value is read from the environment once, when Settings is built; a .env
file next to pyproject.toml is loaded first and never overrides variables
already set in the environment.

  SUBDIVISION_DEFINITION_PATH  → directory holding one <group_id>.json per group
  ZONE_DEFINITION_PATH         → JSON file holding the zone definitions
  LOG_LEVEL                    → default log level for the CLI
"""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

_PROJECT_ROOT = Path(__file__).parent.parent.parent

# .env beside pyproject.toml
load_dotenv(_PROJECT_ROOT / ".env")


def _env(key: str, default: str) -> str:
    return os.getenv(key, default)


def _env_path(key: str, default: Path) -> Path:
    return Path(os.getenv(key, str(default)))


@dataclass(frozen=True)
class Settings:
    """Resolved configuration. Frozen; rebuild via get_settings.cache_clear()."""

    # ── Definition sources ─────────────────────────────────────────────────
    subdivision_definition_path: Path = field(
        default_factory=lambda: _env_path(
            "SUBDIVISION_DEFINITION_PATH",
            _PROJECT_ROOT / "resources" / "subdivision",
        )
    )
    zone_definition_path: Path = field(
        default_factory=lambda: _env_path(
            "ZONE_DEFINITION_PATH",
            _PROJECT_ROOT / "resources" / "zones.json",
        )
    )

    # ── Logging ────────────────────────────────────────────────────────────
    log_level: str = field(
        default_factory=lambda: _env("LOG_LEVEL", "WARNING")
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Process-wide Settings, built on first call."""
    return Settings()
