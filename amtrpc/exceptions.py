"""Return codes and exception hierarchy for the remote provisioning client."""

from __future__ import annotations

from enum import IntEnum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from amtrpc.maintenance.models import IPField


class ReturnCode(IntEnum):
    """Process exit codes. ``SUCCESS`` is zero, everything else is a failure."""

    SUCCESS = 0

    # (20-69) input errors
    MISSING_OR_INCORRECT_URL = 20
    MISSING_OR_INCORRECT_PASSWORD = 24
    MISSING_OR_INCORRECT_STATIC_IP = 28
    INCORRECT_COMMAND_LINE_PARAMETERS = 29
    MISSING_OR_INCORRECT_NETWORK_MASK = 30
    MISSING_OR_INCORRECT_GATEWAY = 31
    MISSING_OR_INCORRECT_PRIMARY_DNS = 32
    MISSING_OR_INCORRECT_SECONDARY_DNS = 33

    # (70-99) connection errors
    AMT_CONNECTION_FAILED = 71
    OS_NETWORK_INTERFACES_LOOKUP_FAILED = 72


class RPCError(Exception):
    """Base exception for all client errors that end an invocation."""

    return_code: ReturnCode = ReturnCode.INCORRECT_COMMAND_LINE_PARAMETERS


class CommandLineError(RPCError):
    """Command line could not be parsed."""

    return_code = ReturnCode.INCORRECT_COMMAND_LINE_PARAMETERS


class InvalidFlagValueError(CommandLineError):
    """An IPv4 flag received a value that is not an IPv4 address."""

    def __init__(self, field: IPField, value: str):
        self.field = field
        self.value = value
        super().__init__(f"invalid value {value!r} for flag -{field.value}: not a valid ip address")

    @property
    def return_code(self) -> ReturnCode:  # type: ignore[override]
        return self.field.return_code


class MissingPasswordError(RPCError):
    """No AMT password was supplied or entered."""

    return_code = ReturnCode.MISSING_OR_INCORRECT_PASSWORD


class MissingURLError(RPCError):
    """Remote provisioning server URL is required but empty."""

    return_code = ReturnCode.MISSING_OR_INCORRECT_URL


class AMTConnectionError(RPCError):
    """Querying the management engine failed."""

    return_code = ReturnCode.AMT_CONNECTION_FAILED


class OSNetworkLookupError(RPCError):
    """Host hostname or network interface lookup failed."""

    return_code = ReturnCode.OS_NETWORK_INTERFACES_LOOKUP_FAILED
