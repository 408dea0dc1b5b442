"""CLI entry point for AMT maintenance (standalone-capable)."""

from __future__ import annotations

import sys

from loguru import logger
from tabulate import tabulate

from amtrpc.amt.pthi import AMTCommand
from amtrpc.exceptions import ReturnCode
from amtrpc.maintenance.dispatcher import MaintenanceCommandDispatcher
from amtrpc.maintenance.models import MaintenanceSession
from amtrpc.network.enumerator import IPRouteEnumerator


def _report(session: MaintenanceSession) -> str:
    """Render the prepared maintenance request without secrets."""
    if session.json_output:
        return session.model_dump_json(indent=2)
    rows: list[list[str]] = [["command", session.subcommand], ["url", session.url or "-"], ["local", str(session.local)]]
    if session.subcommand == "syncip":
        for name, value in session.ip_configuration.model_dump().items():
            rows.append([name, value or "-"])
    elif session.subcommand == "synchostname":
        rows.append(["hostname", session.hostname_info.hostname])
        rows.append(["dns suffix (OS)", session.hostname_info.dns_suffix_os or "-"])
    elif session.subcommand == "changepassword":
        rows.append(["new password", "static" if session.static_password else "random"])
    return tabulate(rows, tablefmt="plain")


def main(args: list[str] | None = None) -> int:
    """Main entry point for the maintenance CLI; returns the process exit code."""
    argv = list(sys.argv[1:] if args is None else args)
    session = MaintenanceSession()
    dispatcher = MaintenanceCommandDispatcher(amt_command=AMTCommand(), net_enumerator=IPRouteEnumerator())

    subcommand = argv[0] if argv else None
    rc = dispatcher.dispatch(subcommand, argv[1:], session)
    if rc == ReturnCode.SUCCESS:
        logger.info(f"maintenance {session.subcommand} prepared")
        print(_report(session))
    return int(rc)


if __name__ == "__main__":
    sys.exit(main())
