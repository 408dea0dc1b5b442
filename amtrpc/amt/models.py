"""Data models reported by the management engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Any

EMPTY_MAC = "00:00:00:00:00:00"


class ControlMode(IntEnum):
    """AMT provisioning control mode."""

    PRE_PROVISIONING = 0
    CLIENT = 1
    ADMIN = 2


_CONTROL_MODE_NAMES = {
    ControlMode.PRE_PROVISIONING: "pre-provisioning state",
    ControlMode.CLIENT: "activated in client control mode",
    ControlMode.ADMIN: "activated in admin control mode",
}


def interpret_control_mode(mode: int) -> str:
    """Human readable control mode."""
    try:
        return _CONTROL_MODE_NAMES[ControlMode(mode)]
    except ValueError:
        return "unknown state"


@dataclass
class InterfaceSettings:
    """Management engine view of one LAN adapter."""

    mac_address: str = EMPTY_MAC
    ip_address: str = "0.0.0.0"
    netmask: str = ""
    dhcp_enabled: bool = False
    dhcp_mode: str = ""
    link_status: str = ""
    is_enabled: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "isEnable": self.is_enabled,
            "linkStatus": self.link_status,
            "dhcpEnabled": self.dhcp_enabled,
            "dhcpMode": self.dhcp_mode,
            "ipAddress": self.ip_address,
            "macAddress": self.mac_address,
        }


@dataclass
class RemoteAccessStatus:
    """Remote access (CIRA) connection status."""

    network_status: str = ""
    remote_status: str = ""
    remote_trigger: str = ""
    mps_hostname: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "networkStatus": self.network_status,
            "remoteStatus": self.remote_status,
            "remoteTrigger": self.remote_trigger,
            "mpsHostname": self.mps_hostname,
        }


@dataclass
class VersionEntry:
    description: str
    version: str


@dataclass
class CertHashEntry:
    """A trusted root certificate hash stored in AMT."""

    name: str = ""
    algorithm: str = ""
    hash: str = ""
    is_default: bool = False
    is_active: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "algorithm": self.algorithm,
            "hash": self.hash,
            "isDefault": self.is_default,
            "isActive": self.is_active,
        }
