"""Session state for one maintenance invocation."""

from __future__ import annotations

import ipaddress
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator

from amtrpc.exceptions import ReturnCode


class IPField(str, Enum):
    """IPv4 flags accepted by ``syncip``, named as on the command line."""

    STATIC_IP = "staticip"
    NETMASK = "netmask"
    GATEWAY = "gateway"
    PRIMARY_DNS = "primarydns"
    SECONDARY_DNS = "secondarydns"

    @property
    def attribute(self) -> str:
        """Name of the :class:`IPConfiguration` attribute the flag sets."""
        return _IP_FIELD_ATTRIBUTES[self]

    @property
    def return_code(self) -> ReturnCode:
        """Return code reported when the flag value is malformed."""
        return _IP_FIELD_RETURN_CODES[self]


_IP_FIELD_ATTRIBUTES = {
    IPField.STATIC_IP: "ip_address",
    IPField.NETMASK: "netmask",
    IPField.GATEWAY: "gateway",
    IPField.PRIMARY_DNS: "primary_dns",
    IPField.SECONDARY_DNS: "secondary_dns",
}

_IP_FIELD_RETURN_CODES = {
    IPField.STATIC_IP: ReturnCode.MISSING_OR_INCORRECT_STATIC_IP,
    IPField.NETMASK: ReturnCode.MISSING_OR_INCORRECT_NETWORK_MASK,
    IPField.GATEWAY: ReturnCode.MISSING_OR_INCORRECT_GATEWAY,
    IPField.PRIMARY_DNS: ReturnCode.MISSING_OR_INCORRECT_PRIMARY_DNS,
    IPField.SECONDARY_DNS: ReturnCode.MISSING_OR_INCORRECT_SECONDARY_DNS,
}


class IPConfiguration(BaseModel):
    """IPv4 settings for the AMT wired adapter.

    Every field is either empty or a dotted-quad IPv4 address; assignments are
    validated, so a rejected value leaves the field untouched.
    """

    model_config = ConfigDict(validate_assignment=True)

    ip_address: str = ""
    netmask: str = ""
    gateway: str = ""
    primary_dns: str = ""
    secondary_dns: str = ""

    @field_validator("*")
    @classmethod
    def check_ipv4(cls, value: str) -> str:
        if value:
            ipaddress.IPv4Address(value)
        return value


class HostnameInfo(BaseModel):
    hostname: str = ""
    dns_suffix_os: str = ""


class LocalConfig(BaseModel):
    """Settings handed to the local AMT configuration step."""

    password: str = Field(default="", repr=False)


class MaintenanceSession(BaseModel):
    """Mutable state of one maintenance invocation.

    Flag parsing binds values directly onto the session, handlers fill in the
    derived parts. Passwords are never serialised.
    """

    subcommand: str = ""
    password: str = Field(default="", exclude=True, repr=False)
    url: str = ""
    local: bool = False
    json_output: bool = False
    static_password: str = Field(default="", exclude=True, repr=False)
    ip_configuration: IPConfiguration = Field(default_factory=IPConfiguration)
    hostname_info: HostnameInfo = Field(default_factory=HostnameInfo)
    local_config: LocalConfig = Field(default_factory=LocalConfig, exclude=True)
