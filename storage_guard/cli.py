#!/usr/bin/env python3
"""
Command line interface for storage layout upgrade checks.

Commands:
    extract   Save the storage layout of a contract from a build-info file
    diff      Show how the storage of a contract changed between two versions
    check     Fail if the updated storage layout is unsafe to deploy

ORIGINAL and UPDATED may each be a layout snapshot written by ``extract``
(JSON or YAML) or a Hardhat/Foundry build-info file. Build-info inputs need
``--contract``.
"""

import argparse
import logging
import sys
from typing import List, Optional

import structlog
from colorama import just_fix_windows_console

from .analysis.compatibility import (
    assert_storage_upgrade_safe,
    get_storage_upgrade_operations,
)
from .config import LOG_FORMATS, LOG_LEVELS, OUTPUT_FORMATS, Settings
from .core.errors import StorageUpgradeErrors, UpgradesError
from .core.layout import StorageLayout
from .report import (
    LAYOUT_FORMATS,
    dump_data,
    dump_layout,
    layout_format_for_path,
    load_data,
    operations_to_dicts,
    render_operations,
    render_upgrade_errors,
)
from .utils.log import configure_logging
from .utils.solc_output import is_build_info, layout_from_build_info, layout_from_solc

logger = structlog.get_logger()


def load_layout_source(file_path: str, contract_name: Optional[str]) -> StorageLayout:
    """
    Load a storage layout from a snapshot or a build-info file.

    Raises:
        ValueError: If a build-info file is given without a contract name
    """
    data = load_data(file_path)

    if is_build_info(data):
        if not contract_name:
            raise ValueError(f"--contract is required to read build info file {file_path}")
        return layout_from_solc(data["input"], data["output"], contract_name)

    if not isinstance(data, dict):
        raise ValueError(f"Unrecognized layout file: {file_path}")

    logger.debug("Loaded storage layout snapshot", path=file_path)
    return StorageLayout.from_dict(data)


def cmd_extract(args: argparse.Namespace, settings: Settings) -> int:
    layout = layout_from_build_info(args.build_info, args.contract)

    if args.output:
        fmt = args.format or layout_format_for_path(args.output)
        with open(args.output, "w") as f:
            dump_layout(layout, fmt, f)
        logger.info("Saved storage layout", path=args.output, variables=len(layout))
    else:
        dump_layout(layout, args.format or "json", sys.stdout)

    return 0


def cmd_diff(args: argparse.Namespace, settings: Settings) -> int:
    original = load_layout_source(args.original, args.contract)
    updated = load_layout_source(args.updated, args.contract)
    operations = get_storage_upgrade_operations(original, updated)

    if settings.output_format == "text":
        print(render_operations(operations, original, updated))
    else:
        dump_data(operations_to_dicts(operations), settings.output_format, sys.stdout)

    return 0


def cmd_check(args: argparse.Namespace, settings: Settings) -> int:
    original = load_layout_source(args.original, args.contract)
    updated = load_layout_source(args.updated, args.contract)

    try:
        assert_storage_upgrade_safe(original, updated)
    except StorageUpgradeErrors as e:
        logger.error("Storage layout is incompatible", errors=len(e.errors))
        if settings.output_format == "text":
            print(render_upgrade_errors(e, color=settings.color))
        else:
            dump_data(
                {"compatible": False, "errors": [err.to_dict() for err in e.errors]},
                settings.output_format,
                sys.stdout,
            )
        return 1

    if settings.output_format == "text":
        print("Storage layout is compatible.")
    else:
        dump_data({"compatible": True, "errors": []}, settings.output_format, sys.stdout)
    return 0


def build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="storage-guard",
        description="Check that a new contract version keeps a compatible storage layout",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        choices=LOG_LEVELS,
        help=f"Logging level (default: {settings.log_level})",
    )
    parser.add_argument(
        "--log-format",
        default=settings.log_format,
        choices=LOG_FORMATS,
        help=f"Log renderer (default: {settings.log_format})",
    )
    parser.add_argument(
        "--output-format",
        default=settings.output_format,
        choices=OUTPUT_FORMATS,
        help=f"Format of diff/check results (default: {settings.output_format})",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable bold output",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    extract = subparsers.add_parser("extract", help="Extract a storage layout snapshot")
    extract.add_argument("build_info", help="Path to a Hardhat or Foundry build-info file")
    extract.add_argument("--contract", required=True, help="Contract name, or path.sol:Name")
    extract.add_argument("--output", "-o", help="File to save the layout to (default: stdout)")
    extract.add_argument("--format", choices=LAYOUT_FORMATS, help="Snapshot format (default: from extension)")
    extract.set_defaults(func=cmd_extract)

    for name, func, help_text in (
        ("diff", cmd_diff, "Show storage changes between two versions"),
        ("check", cmd_check, "Fail if the storage upgrade is unsafe"),
    ):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument("original", help="Layout snapshot or build info of the deployed version")
        sub.add_argument("updated", help="Layout snapshot or build info of the new version")
        sub.add_argument("--contract", help="Contract name, required for build-info inputs")
        sub.set_defaults(func=func)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    try:
        settings = Settings.from_env()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    parser = build_parser(settings)
    args = parser.parse_args(argv)

    settings.log_level = args.log_level
    settings.log_format = args.log_format
    settings.output_format = args.output_format
    if args.no_color:
        settings.color = False
    if settings.color:
        just_fix_windows_console()  # ANSI bold on Windows consoles

    configure_logging(settings.log_level, settings.log_format)

    # Set logging level
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        return args.func(args, settings)

    except KeyboardInterrupt:
        logger.info("Interrupted by user")
        return 130  # Standard exit code for Ctrl+C

    except (UpgradesError, ValueError, OSError) as e:
        logger.error("Storage check failed", error=str(e))
        return 1


if __name__ == "__main__":
    sys.exit(main())
