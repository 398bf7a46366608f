"""
ports/address_port.py
──────────────────────────────────────────────────────────────────────────────
Read-only view of a postal address, as consumed by zone matching.

Addresses are owned by the calling application (an order, a customer record,
a form submission…).  Zone matching only reads these five attributes, so any
object exposing them satisfies the port; domain/models.Address is a ready-made
implementation.
"""
from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class AddressPort(Protocol):
    """Contract for an address tested against zone territories."""

    @property
    def country_code(self) -> str:
        """Two-letter CLDR country code."""
        ...

    @property
    def administrative_area(self) -> Optional[str]:
        """Subdivision code of the top level (state, province…)."""
        ...

    @property
    def locality(self) -> Optional[str]:
        """Subdivision code of the second level (city…)."""
        ...

    @property
    def dependent_locality(self) -> Optional[str]:
        """Subdivision code of the third level (neighbourhood, district…)."""
        ...

    @property
    def postal_code(self) -> Optional[str]:
        ...
