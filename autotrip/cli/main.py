"""
autotrip CLI — estimate automobile trip emissions from the command line.

Commands:
    autotrip evaluate [name=value ...]   — Resolve one quantity
    autotrip explain [name=value ...]    — Resolve and show the full trace
    autotrip committees                  — List a model's committees

Characteristics are given as name=value pairs, e.g.

    autotrip evaluate make=Toyota model=Prius year=2010 country=US

Without --reference the bundled sample reference data is used, with a
table geocoder for a few sample addresses.
"""

from __future__ import annotations

import argparse
import sys
from typing import Any, Optional

from ..characterization import characterize
from ..config import settings
from ..decision.engine import DecisionEngine
from ..domain import AutotripError, Timeframe, is_absent
from ..geo import GreatCircleRouter, StaticGeocoder
from ..logs import configure_logging
from ..models import DEFAULT_TARGETS, get_model
from ..reference.loader import load_reference_data
from ..reference.sample import SAMPLE_GEOCODES, sample_reference_data


# =============================================================================
# OUTPUT FORMATTING
# =============================================================================

def format_value(value: Any) -> str:
    """Format a resolved value for display."""
    if is_absent(value):
        return "unknown"
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, float):
        return f"{value:.4f}"
    name = getattr(value, "name", None)
    if isinstance(name, str) and name:
        return name
    return str(value)


def format_tags(tags) -> str:
    return ", ".join(sorted(tag.value for tag in tags)) or "none"


# =============================================================================
# ARGUMENT HANDLING
# =============================================================================

def parse_pairs(pairs: list[str]) -> dict[str, str]:
    """Split name=value arguments. Raises ValueError on a malformed pair."""
    raw: dict[str, str] = {}
    for pair in pairs:
        name, sep, value = pair.partition("=")
        if not sep or not name.strip():
            raise ValueError(f"Expected name=value, got '{pair}'")
        raw[name.strip()] = value
    return raw


def build_engine(args: argparse.Namespace) -> DecisionEngine:
    """Engine for the requested model with reference data and collaborators."""
    model = get_model(args.model)
    reference_path = args.reference or settings.reference_data_path
    if reference_path:
        reference = load_reference_data(reference_path)
    else:
        reference = sample_reference_data()
    return DecisionEngine(
        model,
        reference=reference,
        geocoder=StaticGeocoder(SAMPLE_GEOCODES),
        router=GreatCircleRouter(settings.router_detour_factor),
    )


def _decide(args: argparse.Namespace):
    engine = build_engine(args)
    characteristics = characterize(parse_pairs(args.characteristics), engine.reference, engine.model)
    timeframe = Timeframe.parse(args.timeframe) if args.timeframe else None
    comply = args.comply if args.comply else settings.compliance
    target = args.target or DEFAULT_TARGETS.get(engine.model.name, "")
    return engine.evaluate(target, characteristics, timeframe, comply)


# =============================================================================
# CLI COMMANDS
# =============================================================================

def cmd_evaluate(args: argparse.Namespace) -> int:
    """Resolve one quantity and print it with its provenance."""
    try:
        decision = _decide(args)
    except (AutotripError, OSError, ValueError) as e:
        print("ERROR: Evaluation failed")
        print(f"Reason: {e}")
        return 1

    provenance = decision.provenance
    print(f"{decision.target}: {format_value(decision.value)}")
    if provenance.quorum_name:
        print(f"Method: {provenance.quorum_name}")
        print(f"Complies: {format_tags(provenance.complies)}")
    elif provenance.known:
        print("Method: client input")
    print(f"Timeframe: {decision.timeframe}")
    return 0


def cmd_explain(args: argparse.Namespace) -> int:
    """Resolve one quantity and print the full resolution trace."""
    try:
        decision = _decide(args)
    except (AutotripError, OSError, ValueError) as e:
        print("ERROR: Evaluation failed")
        print(f"Reason: {e}")
        return 1

    print(f"autotrip — {args.model} model")
    print("=" * 50)
    print()
    print(decision.explain())
    return 0


def cmd_committees(args: argparse.Namespace) -> int:
    """List every committee of a model, most-preferred quorum first."""
    try:
        model = get_model(args.model)
    except AutotripError as e:
        print(f"ERROR: {e}")
        return 1

    print(f"autotrip — {model.name} model committees")
    print("=" * 50)
    for quantity in model.quantities():
        committee = model.get(quantity)
        print()
        print(quantity + (f" — {committee.description}" if committee.description else ""))
        for rank, quorum in enumerate(committee, start=1):
            print(f"  {rank}. {quorum.name}")
            if quorum.requires:
                print(f"     requires: {', '.join(quorum.requires)}")
            if quorum.appreciates:
                print(f"     appreciates: {', '.join(quorum.appreciates)}")
            print(f"     complies: {format_tags(quorum.complies)}")

    client_only = sorted(model.characteristics() - set(model.quantities()))
    print()
    print(f"Client-only characteristics: {', '.join(client_only)}")
    return 0


# =============================================================================
# MAIN ENTRY POINT
# =============================================================================

def _add_model_argument(parser: argparse.ArgumentParser) -> None:
    # Omitted here means the top-level --model value stands.
    parser.add_argument(
        "--model",
        default=argparse.SUPPRESS,
        help="Model to evaluate against: impact or carbon",
    )


def _add_evaluation_arguments(parser: argparse.ArgumentParser) -> None:
    _add_model_argument(parser)
    parser.add_argument(
        "characteristics",
        nargs="*",
        metavar="name=value",
        help="Trip characteristics",
    )
    parser.add_argument(
        "--target",
        help="Quantity to resolve (default: the model's headline quantity)",
    )
    parser.add_argument(
        "--timeframe",
        help="YYYY or YYYY-MM-DD/YYYY-MM-DD (default: this year)",
    )
    parser.add_argument(
        "--comply",
        action="append",
        metavar="STANDARD",
        help="Only use methods complying with STANDARD (repeatable)",
    )
    parser.add_argument(
        "--reference",
        help="JSON reference data file (default: bundled sample data)",
    )


def create_parser() -> argparse.ArgumentParser:
    """Create the CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="autotrip",
        description="autotrip — automobile trip emission estimates with provenance",
    )
    parser.add_argument(
        "--model",
        default=settings.default_model,
        help="Model to evaluate against: impact or carbon",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log every quorum decision",
    )

    subparsers = parser.add_subparsers(
        title="commands",
        description="Available commands",
        dest="command",
    )

    # Evaluate command
    evaluate_parser = subparsers.add_parser(
        "evaluate",
        help="Resolve one quantity",
    )
    _add_evaluation_arguments(evaluate_parser)
    evaluate_parser.set_defaults(func=cmd_evaluate)

    # Explain command
    explain_parser = subparsers.add_parser(
        "explain",
        help="Resolve one quantity and show how",
    )
    _add_evaluation_arguments(explain_parser)
    explain_parser.set_defaults(func=cmd_explain)

    # Committees command
    committees_parser = subparsers.add_parser(
        "committees",
        help="List the model's committees and quorums",
    )
    _add_model_argument(committees_parser)
    committees_parser.set_defaults(func=cmd_committees)

    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Main entry point for the CLI."""
    parser = create_parser()
    args = parser.parse_args(argv)

    configure_logging("DEBUG" if args.verbose else settings.log_level, settings.log_format)

    if args.command is None:
        parser.print_help()
        return 0

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
