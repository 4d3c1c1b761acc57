"""
paramdispatch CLI: Read-Only Interface over the sample component tree.

Commands:
    paramdispatch names: Show handled parameter names
    paramdispatch apply [options]: Distribute parameters and show results

The CLI only ever configures the built-in sample tree. It is a way to see
routing, coercion, replay and unresolved-name diagnostics at work.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional

from ..configurable import Configurable
from ..errors import ParameterError
from ..sources import load_properties, merge_sources, parse_assignments
from .sample import SampleTree, build_sample_tree, sample_values


# =============================================================================
# OUTPUT FORMATTING
# =============================================================================

def format_component(component: Configurable) -> str:
    """Format one component and its current settings."""
    settings = ", ".join(f"{key}={value!r}" for key, value in component.describe().items())
    return f"[{component.name}] {settings}"


def format_unresolved(names: frozenset[str]) -> str:
    if not names:
        return "Unresolved: (none)"
    return f"Unresolved: {', '.join(sorted(names))}"


# =============================================================================
# CLI COMMANDS
# =============================================================================

def cmd_names(args: argparse.Namespace) -> int:
    """Show every parameter name the sample tree can handle."""
    tree = build_sample_tree()

    print("paramdispatch: Handled Parameters")
    print("=" * 50)
    for name in tree.sampler.parameter_dispatcher.list_handled_names():
        print(f"  • {name}")
    return 0


def collect_values(args: argparse.Namespace) -> dict[str, str]:
    """Merge --properties and -p inputs; fall back to the sample values."""
    sources = []
    if args.properties:
        sources.append(load_properties(args.properties))
    if args.param:
        sources.append(parse_assignments(args.param))
    if not sources:
        return sample_values()
    return merge_sources(*sources)


def apply_values(tree: SampleTree, values: dict[str, str], strict: bool, late: bool) -> frozenset[str]:
    """
    Submit values to the sample tree.

    With late, the output component is attached after the first submission
    and receives the parameters by replay. A strict check then needs a
    second submission, which is how a host retries deferred resolution.
    """
    if not late:
        return tree.sampler.configure(values, strict=strict)

    tree.sampler.configure(values, strict=False)
    tree.attach_output()
    if strict:
        return tree.sampler.configure(values, strict=True)
    return tree.sampler.parameter_dispatcher.query_unresolved()


def cmd_apply(args: argparse.Namespace) -> int:
    """Distribute parameters through the sample tree."""
    print("paramdispatch")
    print("=" * 50)

    try:
        values = collect_values(args)
        tree = build_sample_tree(attach_output=not args.late)
        unresolved = apply_values(tree, values, args.strict, args.late)
    except (ParameterError, OSError) as e:
        print("ERROR: Parameter distribution failed")
        print(f"Reason: {e}")
        return 1

    print(f"Submitted {len(values)} parameters")
    print()
    for component in tree.components():
        print(format_component(component))
    print()
    print(format_unresolved(unresolved))
    return 0


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="paramdispatch",
        description="paramdispatch: Hierarchical Parameter Distribution",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    # Names command
    names_parser = subparsers.add_parser(
        "names",
        help="Show handled parameter names",
    )
    names_parser.set_defaults(func=cmd_names)

    # Apply command
    apply_parser = subparsers.add_parser(
        "apply",
        help="Distribute parameters through the sample tree",
    )
    apply_parser.add_argument(
        "-p", "--param",
        action="append",
        metavar="NAME=VALUE",
        help="Parameter assignment (repeatable)",
    )
    apply_parser.add_argument(
        "--properties",
        metavar="FILE",
        help="Properties file to read parameters from",
    )
    apply_parser.add_argument(
        "--strict",
        action="store_true",
        help="Fail if any parameter cannot be handled",
    )
    apply_parser.add_argument(
        "--late",
        action="store_true",
        help="Attach the output component after submitting",
    )
    apply_parser.set_defaults(func=cmd_apply)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
