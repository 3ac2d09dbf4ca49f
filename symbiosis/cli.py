"""
Symbiosis CLI: inspect how names resolve across contexts.

Provides commands for:
- directions: List the six legal directions
- explain: Show which context answers a name, and which others could
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
import types
from typing import Any


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="symbiosis",
        description="Symbiosis: ordered multi-context name resolution",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # directions
    directions_parser = subparsers.add_parser(
        "directions",
        help="List the legal context directions",
    )
    directions_parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output as JSON",
    )
    directions_parser.add_argument(
        "--plain",
        action="store_true",
        help="Plain text output (no rich formatting)",
    )

    # explain
    explain_parser = subparsers.add_parser(
        "explain",
        help="Explain how a name resolves",
    )
    explain_parser.add_argument(
        "name",
        help="Member name to resolve",
    )
    explain_parser.add_argument(
        "--context", "-c",
        action="append",
        default=[],
        dest="contexts",
        metavar="REF",
        help="Inner context as 'module' or 'module:attr' (repeatable, in order)",
    )
    explain_parser.add_argument(
        "--outer", "-o",
        metavar="REF",
        help="Outer context reference (default: an empty namespace)",
    )
    explain_parser.add_argument(
        "--kernel", "-k",
        metavar="REF",
        help="Kernel context reference (default: from config, else builtins)",
    )
    explain_parser.add_argument(
        "--direction", "-d",
        help="Direction name, e.g. IOK or KOI (default: from config, else IOK)",
    )
    explain_parser.add_argument(
        "--private",
        action="store_true",
        help="Consider restricted members too",
    )
    explain_parser.add_argument(
        "--profile", "-p",
        help="Profile from .symbiosis.toml",
    )
    explain_parser.add_argument(
        "--json",
        action="store_true",
        dest="json_output",
        help="Output as JSON",
    )
    explain_parser.add_argument(
        "--plain",
        action="store_true",
        help="Plain text output (no rich formatting)",
    )

    args = parser.parse_args(argv)

    # Setup logging
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    if args.command == "directions":
        return handle_directions(args)
    elif args.command == "explain":
        return handle_explain(args)
    else:
        parser.print_help()
        return 0


def handle_directions(args: argparse.Namespace) -> int:
    """Handle the directions command."""
    from symbiosis.direction import DIRECTIONS
    from symbiosis.display import display_directions

    if args.json_output:
        data = {d.name: [g.value for g in d] for d in DIRECTIONS}
        print(json.dumps(data, indent=2))
    else:
        display_directions(plain=args.plain)
    return 0


def _noop(scope: Any) -> None:
    return None


def handle_explain(args: argparse.Namespace) -> int:
    """Handle the explain command."""
    from symbiosis._refs import import_object
    from symbiosis.closure import Closure
    from symbiosis.config import resolve_settings
    from symbiosis.display import display_trace, trace_to_dicts
    from symbiosis.errors import SymbiosisError
    from symbiosis.trigger import trigger_for

    try:
        resolved = resolve_settings(args.profile)
        contexts = [import_object(ref) for ref in args.contexts]
        outer = import_object(args.outer) if args.outer else types.SimpleNamespace()
        kernel = import_object(args.kernel) if args.kernel else resolved.kernel
        trigger = trigger_for(
            "private" if args.private else resolved.visibility,
            Closure(_noop, outer=outer),
            *contexts,
            direction=args.direction or resolved.direction,
            kernel=kernel,
        )
        # Contexts whose attribute protocol refuses lookups fail here
        steps = trigger.explain(args.name)
    except (
        SymbiosisError,
        ValueError,
        ImportError,
        AttributeError,
        TypeError,
        LookupError,
        NotImplementedError,
    ) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json_output:
        print(
            json.dumps(
                {
                    "name": args.name,
                    "direction": trigger.direction.name,
                    "visibility": trigger.visibility,
                    "resolved": any(step.winner for step in steps),
                    "steps": trace_to_dicts(steps),
                },
                indent=2,
            )
        )
    else:
        display_trace(args.name, trigger, steps, plain=args.plain)

    return 0 if any(step.winner for step in steps) else 1


if __name__ == "__main__":
    sys.exit(main())
