"""lottieload CLI: inspect Lottie documents and bundles."""

import argparse
import logging
import os
import sys
from importlib.metadata import version as get_version, PackageNotFoundError
from pathlib import Path
from typing import Any, Dict

LOG_LEVEL_ENV = "LOTTIELOAD_LOG_LEVEL"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _log_level_from_env(default: str = "WARNING") -> str:
    raw = os.getenv(LOG_LEVEL_ENV)
    if not raw:
        return default
    level = raw.strip().upper()
    if level not in LOG_LEVELS:
        return default
    return level


def _ms(delta) -> float:
    return round(delta.total_seconds() * 1000.0, 3)


def _summarize(result) -> Dict[str, Any]:
    """Build a JSON-friendly summary of a LoadResult."""
    composition = result.composition
    asset_counts: Dict[str, int] = {}
    for asset in composition.assets:
        asset_counts[asset.kind] = asset_counts.get(asset.kind, 0) + 1

    summary: Dict[str, Any] = {
        "name": composition.name,
        "version": composition.version,
        "width": composition.width,
        "height": composition.height,
        "frame_rate": composition.frame_rate,
        "in_point": composition.in_point,
        "out_point": composition.out_point,
        "duration_seconds": round(composition.duration_seconds, 6),
        "layer_count": len(composition.layers),
        "asset_counts": asset_counts,
    }
    diagnostics = result.diagnostics
    if diagnostics is not None:
        summary["diagnostics"] = {
            "file_name": diagnostics.file_name,
            "read_ms": _ms(diagnostics.read_time),
            "parse_ms": _ms(diagnostics.parse_time),
            "validation_ms": _ms(diagnostics.validation_time),
            "json_parsing_issues": [issue.model_dump() for issue in diagnostics.json_parsing_issues],
            "validation_issues": [issue.model_dump() for issue in diagnostics.validation_issues],
        }
    return summary


def _print_summary(summary: Dict[str, Any]) -> None:
    print("[OK] Load complete")
    print(f"  Name: {summary['name'] or '(unnamed)'}")
    print(f"  Size: {summary['width']:g}x{summary['height']:g}")
    print(f"  Frame rate: {summary['frame_rate']:g}")
    print(f"  Duration: {summary['duration_seconds']:g}s")
    print(f"  Layers: {summary['layer_count']}")
    for kind, count in sorted(summary["asset_counts"].items()):
        print(f"  Assets ({kind}): {count}")
    diagnostics = summary.get("diagnostics")
    if diagnostics is None:
        return
    print(f"  Read: {diagnostics['read_ms']}ms")
    print(f"  Parse: {diagnostics['parse_ms']}ms")
    print(f"  Validation: {diagnostics['validation_ms']}ms")
    print(f"  Parse issues: {len(diagnostics['json_parsing_issues'])}")
    for issue in diagnostics["json_parsing_issues"]:
        print(f"    {issue['code']}: {issue['description']}")
    print(f"  Validation issues: {len(diagnostics['validation_issues'])}")
    for issue in diagnostics["validation_issues"]:
        print(f"    {issue['code']}: {issue['description']}")


def main():
    """Main CLI entry point for lottieload commands."""
    try:
        lottieload_version = get_version("lottieload")
    except PackageNotFoundError:
        lottieload_version = "dev"

    parser = argparse.ArgumentParser(
        prog="lottieload",
        description="lottieload: load and inspect Lottie compositions (.json, .lottie, .zip)"
    )
    parser.add_argument("--version", action="version", version=f"lottieload {lottieload_version}")
    # Common arguments
    parent_parser = argparse.ArgumentParser(add_help=False)
    parent_parser.add_argument(
        "--quiet",
        action="store_true",
        help="Suppress all non-error output."
    )
    parent_parser.add_argument(
        "--log-level",
        default=None,
        choices=LOG_LEVELS,
        help=f"Logging level (defaults to ${LOG_LEVEL_ENV} or WARNING)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    inspect_parser = subparsers.add_parser(
        "inspect",
        help="Load a composition and print a summary",
        parents=[parent_parser]
    )
    inspect_parser.add_argument(
        "path",
        type=Path,
        help="Path to a .json, .lottie or .zip file"
    )
    inspect_parser.add_argument(
        "--diagnostics",
        action="store_true",
        help="Include phase timings, parse issues and validation issues"
    )
    inspect_parser.add_argument(
        "--json",
        dest="as_json",
        action="store_true",
        help="Print the summary as canonical JSON"
    )
    inspect_parser.add_argument(
        "--storage",
        action="store_true",
        help="Read the file as plain JSON through the storage provider, whatever its extension"
    )

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        sys.exit(1)

    logging.basicConfig(
        level=args.log_level or _log_level_from_env(),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.command == "inspect":
        # Lazy import: only import the loader when a command runs
        from .api import load, load_storage
        from .contracts import LoadOptions
        from .errors import LottieLoadError
        from ._internal.canonical_json import canonical_dumps

        options = LoadOptions.INCLUDE_DIAGNOSTICS if args.diagnostics else LoadOptions.NONE
        try:
            path = Path(args.path).resolve()
            result = load_storage(path, options) if args.storage else load(path, options)
        except LottieLoadError as e:
            print(f"Error: {e}", file=sys.stderr)
            sys.exit(1)
        except Exception as e:
            print(f"Unexpected error: {e}", file=sys.stderr)
            import traceback
            traceback.print_exc()
            sys.exit(1)

        if args.quiet:
            return
        summary = _summarize(result)
        if args.as_json:
            print(canonical_dumps(summary))
        else:
            _print_summary(summary)
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
