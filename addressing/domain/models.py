"""
domain/models.py
──────────────────────────────────────────────────────────────────────────────
Pure domain objects — no imports from adapters or services.

  Subdivision         one node of a country's hierarchy
                      (administrative area → locality → dependent locality)
  GroupDefinition     raw record of one sibling group, as stored on disk
  ZoneTerritory       one wildcard + postal-code rule
  Zone                named union of territories
  Address             read-only address value

Subdivision is a frozen dataclass rather than a Pydantic model: its parent
and children references form a cycle, and they are excluded from equality,
hashing and repr so comparisons stay on the scalar attributes.  Everything
that is parsed from static definitions (groups, zones) is Pydantic.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from addressing.domain.exceptions import InvalidDefinitionError
from addressing.domain.postal_code import match_postal_code

if TYPE_CHECKING:
    from addressing.ports.address_port import AddressPort


# ── Subdivision ────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Subdivision:
    """A country subdivision.

    Built only by SubdivisionRepository.  ``code`` is the latin-script value
    stored on an address ("CA" for California, "Grand Cayman", …); ``name``
    is what dropdowns show.  ``local_code`` / ``local_name`` carry the
    non-latin form (Cyrillic in Russia, Chinese in China…) and ``locale`` is
    set from the group when the country uses one.

    ``iso_code`` (ISO 3166-2, e.g. "US-CA") only exists for administrative
    areas.  ``postal_code_pattern`` replaces the country-level pattern when
    defined.
    """

    country_code: str
    code: str
    name: str
    local_code: Optional[str] = None
    local_name: Optional[str] = None
    iso_code: Optional[str] = None
    postal_code_pattern: Optional[str] = None
    locale: Optional[str] = None
    parent: Optional[Subdivision] = field(default=None, compare=False, repr=False)
    children: Mapping[str, Subdivision] = field(
        default_factory=lambda: MappingProxyType({}), compare=False, repr=False
    )

    def __post_init__(self) -> None:
        for required in ("country_code", "code", "name"):
            if not getattr(self, required):
                raise InvalidDefinitionError(f"Missing required property {required}.")
        if self.parent is not None and self.parent.country_code != self.country_code:
            raise InvalidDefinitionError(
                f"Subdivision {self.code!r} ({self.country_code}) cannot have a "
                f"parent from {self.parent.country_code}."
            )

    def has_children(self) -> bool:
        """Whether the subdivision has children.

        Reading a lazily bound collection loads the next level.
        """
        return len(self.children) > 0


# ── Raw group definitions ──────────────────────────────────────────────────

def _empty_list_to_dict(value: Any) -> Any:
    # Definitions exported by PHP tooling encode an empty map as [].
    if isinstance(value, list) and not value:
        return {}
    return value


class SubdivisionDefinition(BaseModel):
    """One entry of a group's ``subdivisions`` map (the key is the code)."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    name:                     Optional[str] = None
    local_code:               Optional[str] = None
    local_name:               Optional[str] = None
    iso_code:                 Optional[str] = None
    postal_code_pattern:      Optional[str] = None
    postal_code_pattern_type: Optional[str] = None
    has_children:             bool = False


class GroupDefinition(BaseModel):
    """A sibling group record as returned by a DefinitionSourcePort."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    country_code: str = Field(..., min_length=1)
    parents:      Optional[list[str]] = None
    locale:       Optional[str] = None
    subdivisions: dict[str, SubdivisionDefinition] = Field(default_factory=dict)

    @field_validator("subdivisions", mode="before")
    @classmethod
    def coerce_subdivisions(cls, v: Any) -> Any:
        v = _empty_list_to_dict(v)
        if isinstance(v, dict):
            return {code: _empty_list_to_dict(d) for code, d in v.items()}
        return v


# ── Zones ──────────────────────────────────────────────────────────────────

class ZoneTerritory(BaseModel):
    """A territory rule inside a zone.

    Any of administrative_area / locality / dependent_locality left empty
    matches every value at that level.  The postal code patterns can be a
    regular expression ("/(35|38)[0-9]{3}/") or a comma-separated list of
    codes and ranges ("98, 100:200, 250").
    """

    model_config = ConfigDict(frozen=True)

    country_code:          str = Field(..., min_length=1)
    administrative_area:   Optional[str] = None
    locality:              Optional[str] = None
    dependent_locality:    Optional[str] = None
    included_postal_codes: Optional[str] = None
    excluded_postal_codes: Optional[str] = None

    @field_validator(
        "administrative_area",
        "locality",
        "dependent_locality",
        "included_postal_codes",
        "excluded_postal_codes",
        mode="before",
    )
    @classmethod
    def empty_to_none(cls, v: Any) -> Any:
        return v or None

    def match(self, address: AddressPort) -> bool:
        """Check whether the address belongs to the territory.

        Raises:
            PatternError: If a postal code pattern is malformed.
        """
        if address.country_code != self.country_code:
            return False
        if self.administrative_area and self.administrative_area != address.administrative_area:
            return False
        if self.locality and self.locality != address.locality:
            return False
        if self.dependent_locality and self.dependent_locality != address.dependent_locality:
            return False
        return match_postal_code(
            address.postal_code,
            self.included_postal_codes,
            self.excluded_postal_codes,
        )


class Zone(BaseModel):
    """A named region: the union of its territories."""

    model_config = ConfigDict(frozen=True)

    id:          str = Field(..., min_length=1)
    label:       str = Field(..., min_length=1)
    territories: list[ZoneTerritory] = Field(..., min_length=1)

    @property
    def country_codes(self) -> list[str]:
        """Distinct territory country codes, in declaration order."""
        return list(dict.fromkeys(t.country_code for t in self.territories))

    def match(self, address: AddressPort) -> bool:
        """True if any territory matches the address."""
        return any(t.match(address) for t in self.territories)


# ── Address ────────────────────────────────────────────────────────────────

class Address(BaseModel):
    """Minimal read-only address satisfying AddressPort."""

    model_config = ConfigDict(frozen=True)

    country_code:        str
    administrative_area: Optional[str] = None
    locality:            Optional[str] = None
    dependent_locality:  Optional[str] = None
    postal_code:         Optional[str] = None
