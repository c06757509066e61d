#!/usr/bin/env python3
import argparse
import json
import sys

from campus_router.orchestrator import run_once


def _parse_values(raw: str) -> list:
    try:
        values = json.loads(raw)
    except json.JSONDecodeError as e:
        raise argparse.ArgumentTypeError(f"--values must be a JSON array: {e}") from e
    if not isinstance(values, list):
        raise argparse.ArgumentTypeError("--values must be a JSON array")
    return values


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Route form responses to campus sheets")
    parser.add_argument("--config", required=True, help="Path to YAML config")
    parser.add_argument("--workbook", help="Override the workbook path from the config")
    parser.add_argument("--json", dest="as_json", action="store_true", help="Print the run result as JSON")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("replay", help="Route every source row not yet copied to a destination")

    submit = sub.add_parser("submit", help="Append one response to the source sheet and route it")
    submit.add_argument("--values", required=True, type=_parse_values, help="Response row as a JSON array")

    classify = sub.add_parser("classify", help="Show the category of campus names")
    classify.add_argument("names", nargs="+", help="Campus names")

    sub.add_parser("campuses", help="List the campus names routed to each destination sheet")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command in ("classify", "campuses"):
        from campus_router.config import load_config
        from campus_router.registry import default_registry

        cfg = load_config(args.config)
        registry = default_registry(split_special=cfg.split_special)
        if args.command == "campuses":
            out = {sheet: sorted(registry.names(category)) for category, sheet in cfg.destinations().items()}
        else:
            out = {name: registry.classify(name).value for name in args.names}
        if args.as_json:
            print(json.dumps(out, ensure_ascii=False))
        else:
            for key, value in out.items():
                print(f"{key}\t{', '.join(value) if isinstance(value, list) else value}")
        return 0

    record = args.values if args.command == "submit" else None
    result = run_once(args.config, record=record, workbook=args.workbook, submit=record is not None)
    if args.as_json:
        print(json.dumps(result.to_dict(), ensure_ascii=False))
    else:
        print(f"{result.mode}: status={result.status.value} processed={result.processed} "
              f"routed={result.routed} unrouted={result.unrouted} duplicates={result.duplicates}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
