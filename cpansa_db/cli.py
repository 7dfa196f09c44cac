"""
Command-line interface for the advisory database generator.
"""

import argparse
import logging
import sys
from pathlib import Path

from .assembler import DatabaseAssembler
from .config import GeneratorConfig
from .exceptions import GeneratorError
from .serializers import (
    FORMATS,
    export_summary_csv,
    export_worksheets,
    render,
    write_output,
)


logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Generate the CPAN security advisory database"
    )

    parser.add_argument(
        "sources",
        nargs="*",
        type=Path,
        help="Advisory YAML files. Default: cpansa/CPANSA-*.yml under --source-root"
    )

    parser.add_argument(
        "--source-root",
        type=Path,
        default=Path("."),
        help="Directory searched for advisory files when none are given. Default: ."
    )

    parser.add_argument(
        "--output",
        default="-",
        help="Output file, or - for standard output. Default: -"
    )

    parser.add_argument(
        "--format",
        dest="output_format",
        choices=FORMATS,
        default="perl",
        help="Output format. Default: perl"
    )

    parser.add_argument(
        "--no-output",
        action="store_true",
        help="Build the database without writing it"
    )

    parser.add_argument(
        "--previous",
        type=Path,
        default=None,
        help="Previously generated database used to derive the serial. Default: --output"
    )

    parser.add_argument(
        "--package-index",
        type=Path,
        default=None,
        help="Local 02packages.details.txt(.gz) instead of downloading it"
    )

    parser.add_argument(
        "--skip-releases",
        action="store_true",
        help="Do not query MetaCPAN for release history"
    )

    parser.add_argument(
        "--summary-csv",
        type=Path,
        default=None,
        help="Write a per-distribution summary CSV"
    )

    parser.add_argument(
        "--worksheets",
        type=Path,
        default=None,
        help="Write dists and module2dist sheets to an Excel file"
    )

    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("--quiet", action="store_true", help="Only report problems")
    verbosity.add_argument("--verbose", action="store_true", help="Report debug detail")

    return parser


def configure_logging(quiet: bool, verbose: bool) -> None:
    level = logging.INFO
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", stream=sys.stderr)


def main(argv=None):
    """Main entry point for the CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.quiet, args.verbose)

    previous = args.previous
    if previous is None and args.output != "-":
        previous = Path(args.output)

    config = GeneratorConfig(
        source_root=args.source_root,
        previous_output=previous,
        show_progress=not args.quiet,
    )

    try:
        database, stamp = DatabaseAssembler(config).build(
            sources=args.sources,
            package_index=args.package_index,
            skip_releases=args.skip_releases,
        )

        if not args.no_output:
            write_output(render(database, stamp, args.output_format), args.output)
        if args.summary_csv:
            logger.info("Summary saved to: %s", export_summary_csv(database, args.summary_csv))
        if args.worksheets:
            logger.info("Worksheets saved to: %s", export_worksheets(database, args.worksheets))

    except GeneratorError as e:
        logger.error("%s", e)
        sys.exit(1)

    logger.info(
        "Generated database %s: %d distributions, %d modules",
        stamp, len(database.dists), len(database.module2dist),
    )
    return 0


if __name__ == "__main__":
    main()
