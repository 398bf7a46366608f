"""
interfaces/cli.py
──────────────────────────────────────────────────────────────────────────────
Command-line interface for subdivision lookups and zone matching.

Usage:
  # Administrative areas of Brazil
  python -m addressing.interfaces.cli subdivisions BR

  # Localities of Santa Catarina, as JSON
  python -m addressing.interfaces.cli subdivisions BR SC --json

  # Local names where the group locale matches
  python -m addressing.interfaces.cli subdivisions CN --locale zh-Hans

  # Zones containing an address
  python -m addressing.interfaces.cli zones --country BR --area SC --postal-code 88000-000

  # Via installed entry-point (pyproject.toml [project.scripts])
  addressing-lookup subdivisions BR

Exit codes:
  0 — success
  1 — fatal error (bad definitions, unreadable files, …)
  2 — argument error
"""
from __future__ import annotations

import argparse
import json
import logging
import sys

from addressing.config.settings import get_settings
from addressing.domain.models import Address
from addressing.services.container import get_subdivision_repository, get_zone_matcher

logger = logging.getLogger(__name__)


# ── Argument parser ────────────────────────────────────────────────────────

def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="addressing-lookup",
        description="Look up country subdivisions and match addresses to zones.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    p.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable debug logging.",
    )
    sub = p.add_subparsers(dest="command")

    s = sub.add_parser("subdivisions", help="List the children of a parent path.")
    s.add_argument(
        "parents",
        nargs="+",
        metavar="CODE",
        help="Country code followed by subdivision codes, e.g. BR SC.",
    )
    s.add_argument(
        "--locale", "-l",
        help="Use local codes/names when the locale matches the data.",
    )
    s.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output results as JSON.",
    )

    z = sub.add_parser("zones", help="List the zones containing an address.")
    z.add_argument("--country", "-c", required=True, dest="country_code")
    z.add_argument("--area", "-a", dest="administrative_area")
    z.add_argument("--locality", dest="locality")
    z.add_argument("--dependent-locality", dest="dependent_locality")
    z.add_argument("--postal-code", "-p", dest="postal_code")
    z.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output results as JSON.",
    )
    return p


# ── Commands ───────────────────────────────────────────────────────────────

def _run_subdivisions(args: argparse.Namespace) -> int:
    repository = get_subdivision_repository()
    items = repository.get_list(args.parents, locale=args.locale)
    if args.json_output:
        print(json.dumps(items, indent=2, ensure_ascii=False))
    elif not items:
        print(f"No subdivisions under {' / '.join(args.parents)}", file=sys.stderr)
    else:
        for code, name in items.items():
            print(f"{code}\t{name}")
    return 0


def _run_zones(args: argparse.Namespace) -> int:
    address = Address(
        country_code=args.country_code,
        administrative_area=args.administrative_area,
        locality=args.locality,
        dependent_locality=args.dependent_locality,
        postal_code=args.postal_code,
    )
    zones = get_zone_matcher().match(address)
    if args.json_output:
        print(json.dumps([{"id": z.id, "label": z.label} for z in zones], indent=2,
                         ensure_ascii=False))
    else:
        for zone in zones:
            print(f"{zone.id}\t{zone.label}")
    return 0


def run(args: argparse.Namespace) -> int:
    """Execute the selected command.

    Returns:
        Exit code (0 = success, 1 = error).
    """
    handler = _run_subdivisions if args.command == "subdivisions" else _run_zones
    try:
        return handler(args)
    except Exception as exc:
        logger.exception("Command %s failed", args.command)
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1


def main() -> None:
    """Entry point for the addressing-lookup console script."""
    parser = _build_parser()
    args = parser.parse_args()

    log_level = logging.DEBUG if args.verbose else get_settings().log_level.upper()
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )

    if not args.command:
        parser.print_help()
        sys.exit(2)

    sys.exit(run(args))


if __name__ == "__main__":
    main()
