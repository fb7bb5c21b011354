"""
Knowledge Tree CLI
==================

Runs the validator and the layout over a JSON snapshot file, in the
node-query wire format (a list of nodes, or {"nodes": [...]}).

COMMANDS:
- validate: Decide on a proposed link
- layout:   Compute positions, encoding and camera
- metrics:  Structural summary of the hierarchy forest

USAGE:
    python -m knowtree.cli validate snapshot.json NODE_A NODE_B child
    python -m knowtree.cli layout snapshot.json --seed 7 --viewport 1280x800
"""
import argparse
import json
import random
import sys
from typing import List, Optional

from pydantic import ValidationError

from .api.mapper import parse_snapshot, parse_camera, decision_to_dict, layout_to_dict
from .contracts.graph import GraphSnapshot, LinkIntent
from .core.roles import TerminalScope, partition_roles
from .core.topology import ParentForest
from .core.validator import RelationshipValidator, ValidatorConfig
from .visualization.camera import Viewport
from .visualization.pipeline import compute_layout


def load_snapshot(path: str) -> GraphSnapshot:
    with open(path, 'r') as f:
        return parse_snapshot(json.load(f))


def parse_viewport(value: str) -> Viewport:
    try:
        width, height = value.lower().split("x")
        return Viewport(float(width), float(height))
    except ValueError:
        raise argparse.ArgumentTypeError(f"viewport must look like 1280x800, got {value!r}")


def emit(payload: dict) -> None:
    print(json.dumps(payload, indent=2))


def cmd_validate(args) -> int:
    snapshot = load_snapshot(args.snapshot)
    validator = RelationshipValidator(ValidatorConfig(terminal_scope=TerminalScope(args.terminal_scope)))
    decision = validator.validate(snapshot, args.from_id, args.to_id, LinkIntent.parse(args.intent))

    emit(decision_to_dict(decision))
    if not decision.accepted:
        print(f"[!] Rejected: {decision.message}", file=sys.stderr)
        return 1
    print(f"[*] Accepted: {decision.from_node_id} -> {decision.to_node_id} ({decision.kind.value})",
          file=sys.stderr)
    return 0


def cmd_layout(args) -> int:
    snapshot = load_snapshot(args.snapshot)
    camera = parse_camera(json.loads(args.camera)) if args.camera else None
    rng = random.Random(args.seed) if args.seed is not None else None

    result = compute_layout(snapshot, previous_camera=camera, viewport=args.viewport, rng=rng)
    emit(layout_to_dict(result))

    print(f"[*] Placed {len(result.view.nodes)} nodes, {len(result.view.edges)} edges", file=sys.stderr)
    for entry in result.diagnostics:
        print(f"    {entry.event_type.value}: {entry.subject_id} - {entry.message}", file=sys.stderr)
    return 0


def cmd_metrics(args) -> int:
    snapshot = load_snapshot(args.snapshot)
    roles = partition_roles(snapshot)
    metrics = ParentForest.build(snapshot, members=roles.hierarchy_ids).compute_metrics()
    emit({
        "hierarchyNodes": metrics.node_count,
        "parentEdges": metrics.edge_count,
        "roots": metrics.root_count,
        "depth": metrics.depth,
        "acyclic": metrics.is_acyclic,
        "satellites": len(roles.satellite_ids),
        "danglingEdges": len(snapshot.dangling_edges()),
    })
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Knowledge tree validator and layout")
    subparsers = parser.add_subparsers(dest="command")

    validate_parser = subparsers.add_parser("validate", help="Validate a proposed link")
    validate_parser.add_argument("snapshot", help="Path to snapshot JSON")
    validate_parser.add_argument("from_id", help="Source node id")
    validate_parser.add_argument("to_id", help="Target node id")
    validate_parser.add_argument("intent", choices=[i.value for i in LinkIntent])
    validate_parser.add_argument(
        "--terminal-scope",
        choices=[s.value for s in TerminalScope],
        default=TerminalScope.INCIDENT.value,
    )

    layout_parser = subparsers.add_parser("layout", help="Compute the layout")
    layout_parser.add_argument("snapshot", help="Path to snapshot JSON")
    layout_parser.add_argument("--camera", help='Previous camera, e.g. {"x": 0, "y": 0, "ratio": 1.5}')
    layout_parser.add_argument("--seed", type=int, help="Seed for fallback placements")
    layout_parser.add_argument("--viewport", type=parse_viewport, help="WIDTHxHEIGHT")

    metrics_parser = subparsers.add_parser("metrics", help="Summarize the hierarchy")
    metrics_parser.add_argument("snapshot", help="Path to snapshot JSON")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    commands = {
        "validate": cmd_validate,
        "layout": cmd_layout,
        "metrics": cmd_metrics,
    }
    command = commands.get(args.command)
    if command is None:
        parser.print_help()
        return 1

    try:
        return command(args)
    except (OSError, json.JSONDecodeError, ValidationError, ValueError) as e:
        print(f"[!] {e}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
