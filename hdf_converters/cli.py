"""Command-line interface and main entry point."""

from __future__ import annotations
from typing import List, Optional
from pathlib import Path
import argparse
import json
import logging
import sys

from hdf_converters.ckl.mapper import ChecklistResults
from hdf_converters.converters.trufflehog import TrufflehogMapper
from hdf_converters.core.config import Cfg
from hdf_converters.core.constants import APP_NAME, VERSION
from hdf_converters.core.logging import LOG
from hdf_converters.exceptions import HDFError
from hdf_converters.io.file_ops import FO
from hdf_converters.summary import severity_counts, status_counts


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=APP_NAME,
        description=f"{APP_NAME} v{VERSION}: convert security tool output to HDF",
    )
    parser.add_argument("--version", action="version", version=VERSION)
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")

    sub = parser.add_subparsers(dest="command", metavar="COMMAND")
    sub.required = True

    ckl = sub.add_parser("ckl2hdf", help="Convert a STIG checklist (.ckl) to HDF")
    ckl.add_argument("input", help="Checklist file")
    ckl.add_argument("output", help="HDF output file (directory with --split)")
    ckl.add_argument("--with-raw", action="store_true", help="Include the parsed checklist in passthrough")
    ckl.add_argument("--split", action="store_true", help="Write one HDF file per STIG block")
    ckl.add_argument("--parent-name", help=f"Parent profile name (default: {Cfg.PARENT_PROFILE})")

    truffle = sub.add_parser("trufflehog2hdf", help="Convert a TruffleHog JSON export to HDF")
    truffle.add_argument("input", help="TruffleHog JSON or JSON lines file")
    truffle.add_argument("output", help="HDF output file")
    truffle.add_argument("--with-raw", action="store_true", help="Include the findings in passthrough")

    summary = sub.add_parser("summary", help="Print control status and severity counts of an HDF file")
    summary.add_argument("input", help="HDF file")

    return parser


def _ckl2hdf(args: argparse.Namespace) -> dict:
    results = ChecklistResults(
        FO.read(args.input),
        with_raw=args.with_raw,
        parent_name=args.parent_name,
    )
    if not args.split:
        execution = results.to_hdf()
        FO.write_json(args.output, execution)
        return {"output": str(args.output), "profiles": len(execution["profiles"])}

    outdir = Path(args.output)
    stem = Path(args.input).stem
    written = []
    for idx, execution in enumerate(results.to_hdf_split(), 1):
        written.append(str(FO.write_json(outdir / f"{stem}_{idx}.json", execution)))
    return {"outputs": written}


def _trufflehog2hdf(args: argparse.Namespace) -> dict:
    execution = TrufflehogMapper(FO.read(args.input), with_raw=args.with_raw).to_hdf()
    FO.write_json(args.output, execution)
    controls = sum(len(p["controls"]) for p in execution["profiles"])
    return {"output": str(args.output), "controls": controls}


def _summary(args: argparse.Namespace) -> dict:
    try:
        execution = json.loads(FO.read(args.input))
    except ValueError as exc:
        raise HDFError(f"Invalid HDF JSON: {exc}", {"path": args.input}) from exc
    if not isinstance(execution, dict):
        raise HDFError("HDF file must hold a JSON object", {"path": args.input})
    return {"status": status_counts(execution), "severity": severity_counts(execution)}


COMMANDS = {
    "ckl2hdf": _ckl2hdf,
    "trufflehog2hdf": _trufflehog2hdf,
    "summary": _summary,
}


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main CLI entry point.

    Args:
        argv: Command-line arguments (None = sys.argv)

    Returns:
        Exit code (0 = success, 1 = conversion error, 2 = usage error)
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        LOG.set_console_level(logging.DEBUG)

    try:
        with LOG.scope(command=args.command):
            result = COMMANDS[args.command](args)
        print(json.dumps(result, indent=2, ensure_ascii=False))
        return 0
    except KeyboardInterrupt:
        print("\nOperation cancelled by user", file=sys.stderr)
        return 130
    except HDFError as exc:
        LOG.e(f"Conversion failed: {exc}", exc=args.verbose)
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
