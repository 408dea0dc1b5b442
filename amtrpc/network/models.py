"""Pydantic models for host network interfaces."""

from __future__ import annotations

import ipaddress

from pydantic import BaseModel


class InterfaceAddress(BaseModel):
    """One address bound to a host interface, in CIDR or address/netmask form."""

    cidr: str

    @property
    def interface(self) -> ipaddress.IPv4Interface | ipaddress.IPv6Interface:
        return ipaddress.ip_interface(self.cidr)

    @property
    def ip(self) -> str:
        return str(self.interface.ip)

    @property
    def netmask(self) -> str:
        return str(self.interface.netmask)

    @property
    def is_ipv4(self) -> bool:
        return self.interface.version == 4

    @property
    def is_loopback(self) -> bool:
        return self.interface.ip.is_loopback


class NetInterface(BaseModel):
    name: str
    index: int = 0
    mac: str = ""
