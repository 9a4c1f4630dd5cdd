"""hits2mcpl CLI entry point.

This module maps ``<input_file.txt> <output_file.mcpl>`` plus options
onto a conversion call and reports the outcome as process exit codes.
"""

from __future__ import annotations

import argparse
from dataclasses import replace
from pathlib import Path
import sys
from typing import NoReturn, Sequence

from core.config import ConversionConfig, parse_pdg_code, parse_weight
from core.errors import Hits2McplError
from core.logging_config import configure_logging
from core.types import ConversionOptions, ConversionSummary
from ingest.pipeline import convert_hits

USAGE_EXIT_CODE = 1


class _UsageParser(argparse.ArgumentParser):
    """Argument parser that exits with code 1 on usage errors."""

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        self.exit(USAGE_EXIT_CODE, f"{self.prog}: error: {message}\n")


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = _UsageParser(
        prog="hits2mcpl",
        description="Convert a text list of particle hits into an MCPL file",
    )
    parser.add_argument("input_file", help="Text file with 'x y z px py pz ekin' records")
    parser.add_argument("output_file", help="MCPL file to create")
    parser.add_argument("--pdgcode", type=_pdg_code_arg, help="Particle code (default 2112)")
    parser.add_argument("--weight", type=_weight_arg, help="Particle weight (default 1)")
    parser.add_argument("--comment", help="Header comment")
    parser.add_argument("--source-name", help="Header source label (default: output file)")
    parser.add_argument("--no-gzip", action="store_true", help="Leave the MCPL file uncompressed")
    parser.add_argument(
        "--verify",
        action="store_true",
        help="Reread the finished file and check its header and particle count",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the hits2mcpl CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    try:
        args = parser.parse_args(argv)
    except SystemExit as exit_request:
        return exit_request.code if isinstance(exit_request.code, int) else USAGE_EXIT_CODE
    try:
        config = _build_config(args)
        configure_logging(config.log_level)
        options = ConversionOptions(
            input_path=Path(args.input_file).expanduser(),
            output_path=Path(args.output_file).expanduser(),
            source_name=args.source_name if args.source_name is not None else args.output_file,
            verify=args.verify,
        )
        summary = convert_hits(options, config)
    except Hits2McplError as error:
        print(f"error={error}")
        return 1
    print(_render_summary(summary))
    return 0


def _build_config(args: argparse.Namespace) -> ConversionConfig:
    """Build config from env and apply CLI overrides.

    Args:
        args: Parsed CLI args.

    Returns:
        Effective runtime configuration.
    """
    config = ConversionConfig.from_env()
    if args.pdgcode is not None:
        config = replace(config, pdg_code=args.pdgcode)
    if args.weight is not None:
        config = replace(config, weight=args.weight)
    if args.comment is not None:
        config = replace(config, header_comment=args.comment)
    if args.no_gzip:
        config = replace(config, compress=False)
    return config


def _render_summary(summary: ConversionSummary) -> str:
    return (
        f"output={summary.output_path}\t"
        f"read={summary.records_read}\t"
        f"accepted={summary.records_accepted}\t"
        f"rejected={summary.records_rejected}"
    )


def _pdg_code_arg(raw_value: str) -> int:
    try:
        return parse_pdg_code(raw_value)
    except Hits2McplError as error:
        raise argparse.ArgumentTypeError(str(error)) from error


def _weight_arg(raw_value: str) -> float:
    try:
        return parse_weight(raw_value)
    except Hits2McplError as error:
        raise argparse.ArgumentTypeError(str(error)) from error
