"""Orchestrator CLI that dispatches to sub-CLIs.

Sub-commands:
  maintenance  Keep AMT clock, hostname, IP settings and password in sync
  amtinfo      Display information about AMT status and configuration

Examples:
  amtrpc maintenance syncclock -u wss://server/activate -password <PW>

  amtrpc maintenance syncip -staticip 192.168.1.7 -netmask 255.255.255.0 -local

  amtrpc amtinfo -lan -json
"""

from __future__ import annotations

import os
import sys

from tabulate import tabulate

from amtrpc import __version__, configure_logging
from amtrpc import glogger
from amtrpc.exceptions import ReturnCode

COMMANDS = {
    "maintenance": ("amtrpc.maintenance.cli", "Maintain AMT clock, hostname, IP settings and password"),
    "amtinfo": ("amtrpc.info.cli", "Display information about AMT status and configuration"),
}


def _print_usage() -> None:
    print("usage: amtrpc <command> [options]\n")
    print("Available commands:")
    for cmd, (_, desc) in COMMANDS.items():
        print(f"  {cmd:14s}  {desc}")
    print("\nRun 'amtrpc <command> -h' for command-specific options.")


def _print_startup_banner() -> None:
    startup_rows = [
        ["version", __version__],
        ["command", " ".join(sys.argv[1:3])],
    ]

    for var in ("BUILDTIME", "LOGURU_LEVEL"):
        val = os.environ.get(var)
        if val:
            startup_rows.append([var, val])

    table_str = tabulate(startup_rows, tablefmt="mixed_grid")
    lines = table_str.split("\n")
    table_width = len(lines[0])
    title = "amtrpc starting up"
    title_border = "┍" + "━" * (table_width - 2) + "┑"
    title_row = "│ " + title.center(table_width - 4) + " │"
    separator = lines[0].replace("┍", "┝").replace("┑", "┥").replace("┯", "┿")

    glogger.opt(raw=True).debug(
        "\n{}\n", title_border + "\n" + title_row + "\n" + separator + "\n" + "\n".join(lines[1:])
    )


def main() -> None:
    """Main entry point: dispatch to a sub-CLI and exit with its return code."""
    configure_logging()
    _print_startup_banner()

    if len(sys.argv) < 2 or sys.argv[1] in ("-h", "--help"):
        _print_usage()
        sys.exit(ReturnCode.SUCCESS if len(sys.argv) >= 2 else ReturnCode.INCORRECT_COMMAND_LINE_PARAMETERS)

    command = sys.argv[1]
    if command not in COMMANDS:
        print(f"amtrpc: unknown command '{command}'\n", file=sys.stderr)
        _print_usage()
        sys.exit(ReturnCode.INCORRECT_COMMAND_LINE_PARAMETERS)

    module_path, _ = COMMANDS[command]

    # Import and call the sub-CLI's main(), passing remaining args
    from importlib import import_module

    module = import_module(module_path)
    try:
        rc = module.main(sys.argv[2:])
    except KeyboardInterrupt:
        print("\nAborted.", file=sys.stderr)
        sys.exit(130)
    sys.exit(rc)


if __name__ == "__main__":
    main()
