"""
Addressing — Subdivision Repository & Zone Matching
====================================================
Hexagonal (Ports & Adapters) architecture.

Layer map
─────────────────────────────────────────────────────
  config/       All tuneable settings
  domain/       Pure business objects (models, postal code matching,
                exceptions) — no I/O
  ports/        Protocols for definition sources and addresses
  adapters/     Concrete implementations of each Port (JSON files…)
  services/     Repository, zone matcher and wiring; adapters only via container
  interfaces/   Delivery layer: CLI
  tests/        unit (mocks) / integration (tmp files) / e2e (CLI)

Swapping the definition storage:
  1. Write a new adapter in adapters/ implementing DefinitionSourcePort
  2. Point _build_definition_source in services/container.py at it
"""
__version__ = "1.0.0"
