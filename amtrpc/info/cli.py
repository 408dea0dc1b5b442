"""CLI entry point for the AMT info query (standalone-capable)."""

from __future__ import annotations

import argparse
import json
import sys

from loguru import logger
from tabulate import tabulate

from amtrpc.amt.heci import DEFAULT_TIMEOUT
from amtrpc.amt.pthi import AMTCommand
from amtrpc.exceptions import CommandLineError, ReturnCode
from amtrpc.info.collector import INFO_ITEMS, OPT_IN_ITEMS, AMTInfoCollector
from amtrpc.maintenance.flags import FlagSet
from amtrpc.network.enumerator import IPRouteEnumerator


def build_flagset() -> FlagSet:
    flagset = FlagSet("amtinfo", "Display information about AMT status and configuration")
    for flag, description in INFO_ITEMS.items():
        flagset.add_argument(f"-{flag}", dest=flag, action="store_true", help=description)
    flagset.add_argument("-json", dest="json_output", action="store_true", help="JSON output")
    flagset.add_argument(
        "-t",
        dest="timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help=f"AMT timeout in seconds (default: {DEFAULT_TIMEOUT:g})",
    )
    return flagset


def selected_items(parsed: argparse.Namespace) -> set[str]:
    """Items requested on the command line; all default items when none is given."""
    selected = {flag for flag in INFO_ITEMS if getattr(parsed, flag)}
    return selected or set(INFO_ITEMS) - OPT_IN_ITEMS


def main(args: list[str] | None = None, collector: AMTInfoCollector | None = None) -> int:
    """Main entry point for the info CLI; returns the process exit code."""
    try:
        parsed = build_flagset().parse(sys.argv[1:] if args is None else args, argparse.Namespace())
    except CommandLineError as e:
        logger.error(str(e))
        return int(e.return_code)

    if collector is None:
        collector = AMTInfoCollector(AMTCommand(timeout=parsed.timeout), IPRouteEnumerator(), timeout=parsed.timeout)

    data, rows = collector.collect(selected_items(parsed))
    if parsed.json_output:
        print(json.dumps(data, indent=2))
    else:
        print(tabulate(rows, tablefmt="plain"))
    return int(ReturnCode.SUCCESS)


if __name__ == "__main__":
    sys.exit(main())
