"""
services/subdivision_repository.py
──────────────────────────────────────────────────────────────────────────────
Lazy, memoised access to the subdivision hierarchy.

Architecture:
  • Accepts any DefinitionSourcePort via constructor injection.
  • Subdivisions are grouped by parent path: every call resolves exactly ONE
    group, loading it from the source on first use.  Nothing is loaded
    eagerly downward; children are a LazySubdivisionCollection that asks the
    repository for the next level when first read.
  • The repository is the arena: it owns every Subdivision it built.  A
    child's ``parent`` is the very instance cached for the parent path, so
    identity holds across calls.

Parent paths:
  ["BR"]            → administrative areas of Brazil        (group "BR")
  ["BR", "SC"]      → localities of Santa Catarina          (group "BR-<md5>")
  ["BR", "SC", "X"] → dependent localities of locality X

Cache states per group id:
  (no key)   not attempted
  None       known absent — never asks the source again
  _Group     loaded

Thread safety:
  A group is built in a local dict and published with one assignment, so
  readers never see a partial group.  First loads of the same group id are
  serialised by a per-group lock: at most one load is in flight per id and
  every caller gets the same instances.  Loading a nested group takes the
  locks of its (shorter) ancestor paths only, so no lock is ever re-entered.
  clear() bumps a generation counter instead of dropping the locks; a load
  begun under an older generation is returned but never published.
"""
from __future__ import annotations

import hashlib
import json
import logging
import threading
from collections.abc import Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import Optional, Sequence

from pydantic import ValidationError

from addressing.domain.exceptions import InvalidDefinitionError
from addressing.domain.models import GroupDefinition, Subdivision
from addressing.ports.definition_source_port import DefinitionSourcePort

logger = logging.getLogger(__name__)

_MISSING = object()


# ── Group id ───────────────────────────────────────────────────────────────

def build_group_id(parents: Sequence[str]) -> str:
    """Build the identifier of the group holding the children of ``parents``.

    The country code alone identifies the top-level group.  Deeper groups
    append the MD5 hex digest of the remaining codes joined with "-", which
    keeps file names ASCII-safe whatever the script of the codes.

    Raises:
        ValueError: If ``parents`` is empty.

    Examples:
        >>> build_group_id(["BR"])
        'BR'
        >>> len(build_group_id(["BR", "SC"]))
        35
    """
    if not parents:
        raise ValueError("The parents argument must not be empty.")
    country_code, *rest = parents
    if not rest:
        return country_code
    encoded = json.dumps(rest, ensure_ascii=False, separators=(",", ":"))
    digest = hashlib.md5(encoded.encode("utf-8"), usedforsecurity=False)
    return f"{country_code}-{digest.hexdigest()}"


# ── Cached group ───────────────────────────────────────────────────────────

@dataclass(frozen=True)
class _Group:
    """A fully built sibling group, as published in the cache."""

    subdivisions: Mapping[str, Subdivision]  # source order
    by_local_code: Mapping[str, str]
    by_iso_code: Mapping[str, str]
    expandable: frozenset[str]  # codes flagged has_children
    locale: Optional[str]

    def find(self, code: str) -> Optional[Subdivision]:
        """Look up by code, then local code, then ISO code."""
        subdivision = self.subdivisions.get(code)
        if subdivision is not None:
            return subdivision
        primary = self.by_local_code.get(code) or self.by_iso_code.get(code)
        return self.subdivisions.get(primary) if primary else None


# ── Lazy children ──────────────────────────────────────────────────────────

class LazySubdivisionCollection(Mapping[str, Subdivision]):
    """Children of a subdivision, loaded from the repository on first read."""

    def __init__(self, repository: SubdivisionRepository, parents: tuple[str, ...]) -> None:
        self._repository = repository
        self._parents = parents

    @property
    def parents(self) -> tuple[str, ...]:
        return self._parents

    def _subdivisions(self) -> Mapping[str, Subdivision]:
        return self._repository._group_subdivisions(self._parents)

    def __getitem__(self, code: str) -> Subdivision:
        return self._subdivisions()[code]

    def __iter__(self) -> Iterator[str]:
        return iter(self._subdivisions())

    def __len__(self) -> int:
        return len(self._subdivisions())

    def __repr__(self) -> str:
        return f"LazySubdivisionCollection(parents={list(self._parents)!r})"


# ── Service class ──────────────────────────────────────────────────────────

class SubdivisionRepository:
    """Read-only repository of country subdivisions.

    Args:
        source: Any object satisfying DefinitionSourcePort.
    """

    def __init__(self, source: DefinitionSourcePort) -> None:
        self._source = source
        self._groups: dict[str, Optional[_Group]] = {}
        self._group_locks: dict[str, threading.Lock] = {}
        self._lock = threading.Lock()
        self._generation = 0
        logger.debug("SubdivisionRepository init | source=%s", type(source).__name__)

    # ── Public API ─────────────────────────────────────────────────────────

    def get(self, code: str, parents: Sequence[str]) -> Optional[Subdivision]:
        """Return a subdivision by code, local code or ISO code.

        Args:
            code:    Primary, local or ISO 3166-2 code.  The primary code is
                     checked first.
            parents: Parent path, e.g. ["BR"] or ["BR", "SC"].

        Returns:
            The Subdivision, or None if the group or code is unknown.

        Raises:
            InvalidDefinitionError: If the group's definitions are malformed.
            DefinitionLoadError:    If the source fails to read the group.
        """
        group = self._load_group(tuple(parents))
        if group is None:
            return None
        return group.find(code)

    def get_all(self, parents: Sequence[str]) -> dict[str, Subdivision]:
        """Return every subdivision of a group, keyed by code, in source order.

        Unknown or empty groups return an empty dict.
        """
        return dict(self._group_subdivisions(tuple(parents)))

    def get_list(
        self,
        parents: Sequence[str],
        locale: Optional[str] = None,
    ) -> dict[str, str]:
        """Return code → display name for a group, for populating dropdowns.

        Keys are always the primary codes, as in get_all.  When ``locale``
        shares a language with the group locale ("zh" or "zh-Hans-CN" for a
        group in "zh-Hans"), local names are used where defined.
        """
        group = self._load_group(tuple(parents))
        if group is None:
            return {}

        use_local = bool(locale and group.locale) and _locale_matches(locale, group.locale)
        if not use_local:
            return {code: s.name for code, s in group.subdivisions.items()}
        return {code: s.local_name or s.name for code, s in group.subdivisions.items()}

    def clear(self) -> None:
        """Drop every cached group; subsequent lookups reload from the source.

        Loads already in flight still return their result to their caller but
        do not publish it.
        """
        with self._lock:
            self._groups.clear()
            self._generation += 1
        logger.info("SubdivisionRepository cache cleared")

    # ── Private helpers ────────────────────────────────────────────────────

    def _group_subdivisions(self, parents: tuple[str, ...]) -> Mapping[str, Subdivision]:
        group = self._load_group(parents)
        if group is None:
            return MappingProxyType({})
        return group.subdivisions

    def _load_group(self, parents: tuple[str, ...]) -> Optional[_Group]:
        """Return the cached group for ``parents``, loading it at most once."""
        group_id = build_group_id(parents)
        cached = self._groups.get(group_id, _MISSING)
        if cached is not _MISSING:
            return cached

        with self._lock:
            group_lock = self._group_locks.setdefault(group_id, threading.Lock())
            generation = self._generation
        with group_lock:
            # Another caller may have published it while we waited.
            cached = self._groups.get(group_id, _MISSING)
            if cached is not _MISSING:
                logger.debug("Group loaded concurrently | group=%s", group_id)
                return cached
            group = self._build_group(group_id, parents)
            with self._lock:
                if generation == self._generation:
                    self._groups[group_id] = group
                else:
                    logger.debug("Cache cleared during load | group=%s not published", group_id)
            return group

    def _build_group(self, group_id: str, parents: tuple[str, ...]) -> Optional[_Group]:
        # ── 1. Resolve the parent (nested groups only) ─────────────────────
        parent: Optional[Subdivision] = None
        if len(parents) > 1:
            ancestor_group = self._load_group(parents[:-1])
            if ancestor_group is not None:
                parent = ancestor_group.find(parents[-1])
            if parent is None or parent.code not in ancestor_group.expandable:
                logger.debug(
                    "No children expected | parents=%s (group %s marked absent)",
                    list(parents),
                    group_id,
                )
                return None

        # ── 2. Load raw definitions ────────────────────────────────────────
        if not self._source.has_data(group_id):
            logger.debug("No data for group %s", group_id)
            return None
        raw = self._source.load_definitions(group_id)
        if raw is None:
            logger.warning("Source reported data for %s but returned none", group_id)
            return None

        try:
            definition = GroupDefinition.model_validate(raw)
        except ValidationError as exc:
            raise InvalidDefinitionError(
                f"Invalid definitions for group {group_id}: {exc}"
            ) from exc
        _check_declared_path(group_id, definition, parents)

        # ── 3. Build every node before publishing ──────────────────────────
        subdivisions: dict[str, Subdivision] = {}
        by_local_code: dict[str, str] = {}
        by_iso_code: dict[str, str] = {}
        expandable: set[str] = set()
        for code, entry in definition.subdivisions.items():
            if entry.has_children:
                children: Mapping[str, Subdivision] = LazySubdivisionCollection(
                    self, parents + (code,)
                )
                expandable.add(code)
            else:
                children = MappingProxyType({})
            subdivisions[code] = Subdivision(
                country_code=definition.country_code,
                code=code,
                name=entry.name or code,
                local_code=entry.local_code,
                local_name=entry.local_name or entry.local_code,
                iso_code=entry.iso_code,
                postal_code_pattern=entry.postal_code_pattern,
                locale=definition.locale,
                parent=parent,
                children=children,
            )
            if entry.local_code:
                by_local_code.setdefault(entry.local_code, code)
            if entry.iso_code:
                by_iso_code.setdefault(entry.iso_code, code)

        logger.info(
            "Loaded subdivision group | group=%s parents=%s count=%d",
            group_id,
            list(parents),
            len(subdivisions),
        )
        return _Group(
            subdivisions=MappingProxyType(subdivisions),
            by_local_code=MappingProxyType(by_local_code),
            by_iso_code=MappingProxyType(by_iso_code),
            expandable=frozenset(expandable),
            locale=definition.locale,
        )


# ── Helpers ────────────────────────────────────────────────────────────────

def _check_declared_path(
    group_id: str,
    definition: GroupDefinition,
    parents: tuple[str, ...],
) -> None:
    """Reject a group whose declared country or parents disagree with the request."""
    if definition.country_code != parents[0]:
        raise InvalidDefinitionError(
            f"Group {group_id} declares country {definition.country_code!r}, "
            f"expected {parents[0]!r}."
        )
    # The 'parents' key is omitted when it holds just the country code.
    declared = tuple(definition.parents) if definition.parents else parents[:1]
    if declared != parents:
        raise InvalidDefinitionError(
            f"Group {group_id} declares parents {list(declared)!r}, "
            f"expected {list(parents)!r}."
        )


def _locale_candidates(locale: str) -> list[str]:
    """Fallback chain of a locale: zh_Hant_TW → zh-hant-tw, zh-hant, zh."""
    parts = locale.replace("_", "-").lower().split("-")
    return ["-".join(parts[:i]) for i in range(len(parts), 0, -1)]


def _locale_matches(requested: str, group_locale: str) -> bool:
    return not set(_locale_candidates(requested)).isdisjoint(_locale_candidates(group_locale))
