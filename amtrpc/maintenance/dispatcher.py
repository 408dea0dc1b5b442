"""Maintenance sub-command dispatch and shared preconditions."""

from __future__ import annotations

import getpass
from functools import partial
from typing import Callable, Sequence

from loguru import logger

from amtrpc.amt.base import BaseAMTCommand
from amtrpc.amt.exceptions import AMTError
from amtrpc.exceptions import MissingPasswordError, MissingURLError, OSNetworkLookupError, ReturnCode
from amtrpc.maintenance.flags import PROG, add_ip_flags, new_maintenance_flagset
from amtrpc.maintenance.models import MaintenanceSession
from amtrpc.maintenance.pipeline import Step, run_steps
from amtrpc.maintenance.resolver import IPConfigurationResolver
from amtrpc.network.enumerator import NetworkEnumerator
from amtrpc.network.lookup import get_os_dns_suffix, lookup_os_hostname

Handler = Callable[[MaintenanceSession, Sequence[str]], None]


def maintenance_usage(executable: str = PROG) -> str:
    usage = "\nRemote Provisioning Client (RPC) - used for activation, deactivation, maintenance and status of AMT\n\n"
    usage += f"Usage: {executable} maintenance COMMAND [OPTIONS]\n\n"
    usage += "Supported Maintenance Commands:\n"
    usage += "  changepassword Change the AMT password. A random password is generated by default. Specify -static to set manually. AMT password is required\n"
    usage += f"                 Example: {executable} maintenance changepassword -u wss://server/activate\n"
    usage += "  syncdeviceinfo Sync device information. AMT password is required\n"
    usage += f"                 Example: {executable} maintenance syncdeviceinfo -u wss://server/activate\n"
    usage += "  syncclock      Sync the host OS clock to AMT. AMT password is required\n"
    usage += f"                 Example: {executable} maintenance syncclock -u wss://server/activate\n"
    usage += "  synchostname   Sync the hostname of the client to AMT. AMT password is required\n"
    usage += f"                 Example: {executable} maintenance synchostname -u wss://server/activate\n"
    usage += "  syncip         Sync the IP configuration of the host OS to AMT Network Settings. AMT password is required\n"
    usage += (
        f"                 Example: {executable} maintenance syncip -staticip 192.168.1.7 -netmask 255.255.255.0"
        " -gateway 192.168.1.1 -primarydns 8.8.8.8 -secondarydns 4.4.4.4 -u wss://server/activate\n"
    )
    usage += "                 If a static ip is not specified, the ip address and netmask of the host OS is used\n"
    usage += f"\nRun '{executable} maintenance COMMAND -h' for more information on a command.\n"
    return usage


def read_password_from_user() -> str:
    """Prompt for the AMT password on the terminal; empty on end of input."""
    try:
        return getpass.getpass("Please enter AMT Password: ")
    except EOFError:
        return ""


class MaintenanceCommandDispatcher:
    """Run one maintenance sub-command against a session.

    The sub-command handler parses its flags and gathers host state; only
    when it succeeds are the shared password and URL preconditions checked.
    Host lookups and the password prompt are injectable for testing.
    """

    def __init__(
        self,
        amt_command: BaseAMTCommand,
        net_enumerator: NetworkEnumerator,
        hostname_lookup: Callable[[], str] = lookup_os_hostname,
        dns_suffix_lookup: Callable[[], str] | None = None,
        password_reader: Callable[[], str] = read_password_from_user,
    ):
        self.amt_command = amt_command
        self.net_enumerator = net_enumerator
        self.hostname_lookup = hostname_lookup
        self.dns_suffix_lookup = dns_suffix_lookup or partial(get_os_dns_suffix, amt_command, net_enumerator)
        self.password_reader = password_reader
        self.handlers: dict[str, Handler] = {
            "syncclock": self.handle_sync_clock,
            "synchostname": self.handle_sync_hostname,
            "syncip": self.handle_sync_ip,
            "changepassword": self.handle_change_password,
            "syncdeviceinfo": self.handle_sync_device_info,
        }

    def print_usage(self) -> str:
        usage = maintenance_usage()
        print(usage)
        return usage

    def dispatch(self, subcommand: str | None, args: Sequence[str], session: MaintenanceSession) -> ReturnCode:
        """Run ``subcommand`` with ``args`` and return the resulting code."""
        handler = self.handlers.get(subcommand or "")
        if handler is None:
            if subcommand:
                logger.error(f"Unknown maintenance command '{subcommand}'")
            self.print_usage()
            return ReturnCode.INCORRECT_COMMAND_LINE_PARAMETERS

        session.subcommand = subcommand or ""
        return run_steps(
            [
                Step(f"maintenance {subcommand}", partial(handler, session, args)),
                Step("password", partial(self.require_password, session)),
                Step("url", partial(self.require_url, session)),
            ]
        )

    def require_password(self, session: MaintenanceSession) -> None:
        if not session.password:
            session.password = self.password_reader()
            if not session.password:
                raise MissingPasswordError("AMT password is required")
        session.local_config.password = session.password

    def require_url(self, session: MaintenanceSession) -> None:
        # local commands never reach the provisioning server
        if session.local or session.url:
            return
        print("\n-u flag is required and cannot be empty\n")
        self.print_usage()
        raise MissingURLError("-u flag is required and cannot be empty")

    def handle_sync_clock(self, session: MaintenanceSession, args: Sequence[str]) -> None:
        new_maintenance_flagset("syncclock", "Sync the host OS clock to AMT").parse(args, session)

    def handle_sync_device_info(self, session: MaintenanceSession, args: Sequence[str]) -> None:
        new_maintenance_flagset("syncdeviceinfo", "Sync device information").parse(args, session)

    def handle_change_password(self, session: MaintenanceSession, args: Sequence[str]) -> None:
        flagset = new_maintenance_flagset("changepassword", "Change the AMT password")
        flagset.add_argument("-static", dest="static_password", metavar="PASSWORD", help="specify a new password for AMT")
        flagset.parse(args, session)

    def handle_sync_hostname(self, session: MaintenanceSession, args: Sequence[str]) -> None:
        new_maintenance_flagset("synchostname", "Sync the hostname of the client to AMT").parse(args, session)

        try:
            session.hostname_info.dns_suffix_os = self.dns_suffix_lookup()
        except (AMTError, OSError) as e:
            logger.error(f"Unable to read OS DNS suffix: {e}")

        try:
            hostname = self.hostname_lookup()
        except OSError as e:
            raise OSNetworkLookupError(f"Unable to read OS hostname: {e}") from e
        if not hostname:
            raise OSNetworkLookupError("OS hostname is not available")
        session.hostname_info.hostname = hostname

    def handle_sync_ip(self, session: MaintenanceSession, args: Sequence[str]) -> None:
        flagset = new_maintenance_flagset("syncip", "Sync the IP configuration of the host OS to AMT Network Settings")
        add_ip_flags(flagset, session.ip_configuration)
        flagset.parse(args, session)
        IPConfigurationResolver(self.amt_command, self.net_enumerator).resolve(session.ip_configuration)
