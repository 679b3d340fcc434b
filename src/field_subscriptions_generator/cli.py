"""Command line interface for field subscription generation."""

from __future__ import annotations

import argparse
from pathlib import Path
from typing import Optional

from .generator import CompilationError, ConfigLoadError, WriteError, run_generation
from .logging import configure_logging
from .verify import format_report


def build_parser() -> argparse.ArgumentParser:
    """Build the CLI parser."""
    parser = argparse.ArgumentParser(
        prog="field-subscriptions-generator",
        description="Generate observable properties and subscriptions for marked class fields",
    )
    parser.add_argument(
        "--input",
        required=True,
        nargs="+",
        help="Python source files containing marked fields",
    )
    parser.add_argument("--output", required=True, help="Output directory for generated modules")
    parser.add_argument("--root", help="Import root used to derive dotted module names")
    parser.add_argument("--config", help="Path to a YAML generator configuration")
    parser.add_argument(
        "--verify",
        action="store_true",
        help="Merge generated units into the loaded sources and check every companion",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Run CLI and return process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(verbose=bool(args.verbose))

    try:
        run = run_generation(
            input_paths=[Path(path) for path in args.input],
            output_dir=Path(args.output),
            verify=bool(args.verify),
            config_path=Path(args.config) if args.config else None,
            source_root=Path(args.root) if args.root else None,
        )
    except (CompilationError, ConfigLoadError, WriteError) as exc:
        parser.error(str(exc))
        return 2

    for warning in run.result.warnings:
        print(f"Warning: {warning}")

    if run.verification_report is not None:
        print(format_report(run.verification_report))
        if run.verification_report.mismatch_count > 0:
            return 1

    return 0


if __name__ == "__main__":
    raise SystemExit(main())
