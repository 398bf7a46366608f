"""
domain/exceptions.py
──────────────────────────────────────────────────────────────────────────────
Custom exception hierarchy.

All exceptions are rooted at AddressingError so callers can catch broadly
(except AddressingError) or narrowly (except PatternError).

A lookup that finds nothing is NOT an error: repositories return None or an
empty dict.  Only bad static data and unreadable sources raise.

  InvalidDefinitionError → a definition is missing required fields or is
                           malformed; the whole sibling group is rejected
  PatternError           → a postal code pattern cannot be compiled
  DefinitionLoadError    → existing definition data could not be read
  ConfigurationError     → settings are unusable (bad paths, …)
"""
from __future__ import annotations


class AddressingError(Exception):
    """Base exception for all application errors."""


class ConfigurationError(AddressingError):
    """Raised when required configuration is missing or invalid."""


class InvalidDefinitionError(AddressingError, ValueError):
    """Raised when a subdivision or zone definition fails validation."""


class PatternError(AddressingError, ValueError):
    """Raised when a postal code pattern is malformed."""


class DefinitionLoadError(AddressingError):
    """Raised when a definition source fails to read data it reports as present."""
