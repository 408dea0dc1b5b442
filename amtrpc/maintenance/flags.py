"""Single-dash flag sets for maintenance sub-commands."""

from __future__ import annotations

import argparse
import sys
from typing import Any, NoReturn, Sequence

from pydantic import ValidationError

from amtrpc.exceptions import CommandLineError, InvalidFlagValueError
from amtrpc.maintenance.models import IPConfiguration, IPField

PROG = "amtrpc"

_IP_FLAG_HELP = {
    IPField.STATIC_IP: "IP address to be assigned to AMT - if not specified, the IP Address of the active OS network interface is used",
    IPField.NETMASK: "Network mask to be assigned to AMT - if not specified, the Network mask of the active OS network interface is used",
    IPField.GATEWAY: "Gateway address to be assigned to AMT",
    IPField.PRIMARY_DNS: "Primary DNS to be assigned to AMT",
    IPField.SECONDARY_DNS: "Secondary DNS to be assigned to AMT",
}


class FlagSet(argparse.ArgumentParser):
    """Argument parser for one sub-command that raises instead of exiting.

    Flags are single-dash long options and accept both
    ``-flag value`` and ``-flag=value``. A flag that takes a value consumes
    the next token verbatim, even one starting with ``-``, so passwords such
    as ``-Secr3t!`` parse. ``-h`` prints help and fails with
    :class:`CommandLineError` like any other parse error.
    """

    def __init__(self, name: str, description: str = ""):
        self._value_flags: set[str] = set()
        super().__init__(prog=f"{PROG} {name}", description=description, allow_abbrev=False)
        self.name = name

    def add_argument(self, *args: Any, **kwargs: Any) -> argparse.Action:
        action = super().add_argument(*args, **kwargs)
        if action.nargs is None:
            self._value_flags.update(action.option_strings)
        return action

    def _attach_values(self, args: Sequence[str]) -> list[str]:
        """Rewrite ``-flag value`` pairs as ``-flag=value``."""
        attached: list[str] = []
        tokens = iter(args)
        for token in tokens:
            if token == "--":
                attached.append(token)
                attached.extend(tokens)
                break
            value = next(tokens, None) if token in self._value_flags else None
            attached.append(token if value is None else f"{token}={value}")
        return attached

    def parse(self, args: Sequence[str], namespace: Any) -> Any:
        try:
            return self.parse_args(self._attach_values(args), namespace)
        except InvalidFlagValueError:
            self.print_usage(sys.stderr)
            raise

    def error(self, message: str) -> NoReturn:
        self.print_usage(sys.stderr)
        raise CommandLineError(f"{self.prog}: {message}")

    def exit(self, status: int = 0, message: str | None = None) -> NoReturn:
        if message:
            self._print_message(message, sys.stderr)
        raise CommandLineError((message or "").strip() or f"{self.prog}: usage requested")


class IPv4FlagAction(argparse.Action):
    """Assign a flag value to one :class:`IPConfiguration` field.

    Validation happens on assignment; a rejected value is reported as
    :class:`InvalidFlagValueError` carrying the offending field.
    """

    def __init__(self, option_strings: list[str], dest: str, ip_field: IPField, target: IPConfiguration, **kwargs: Any):
        self.ip_field = ip_field
        self.target = target
        super().__init__(option_strings, dest, **kwargs)

    def __call__(
        self,
        parser: argparse.ArgumentParser,
        namespace: argparse.Namespace,
        values: str | Sequence[Any] | None,
        option_string: str | None = None,
    ) -> None:
        try:
            setattr(self.target, self.ip_field.attribute, values)
        except ValidationError as e:
            raise InvalidFlagValueError(self.ip_field, str(values)) from e


def add_common_flags(flagset: FlagSet) -> FlagSet:
    """Flags shared by every maintenance sub-command, bound onto the session."""
    flagset.add_argument("-u", dest="url", metavar="URL", help="Websocket address of the remote provisioning server")
    flagset.add_argument("-password", dest="password", metavar="PASSWORD", help="AMT password")
    flagset.add_argument("-local", dest="local", action="store_true", help="Run without a remote provisioning server")
    flagset.add_argument("-json", dest="json_output", action="store_true", help="JSON output")
    return flagset


def add_ip_flags(flagset: FlagSet, target: IPConfiguration) -> FlagSet:
    for ip_field in IPField:
        flagset.add_argument(
            f"-{ip_field.value}",
            dest=f"ip_{ip_field.name.lower()}",
            metavar="IPV4",
            action=IPv4FlagAction,
            ip_field=ip_field,
            target=target,
            default=argparse.SUPPRESS,
            help=_IP_FLAG_HELP[ip_field],
        )
    return flagset


def new_maintenance_flagset(subcommand: str, description: str) -> FlagSet:
    return add_common_flags(FlagSet(f"maintenance {subcommand}", description))
