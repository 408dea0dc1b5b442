"""Correlate the management engine adapter with host interfaces."""

from __future__ import annotations

import socket
from typing import TYPE_CHECKING

from loguru import logger

from amtrpc.network._util import _normalize_mac
from amtrpc.network.enumerator import NetworkEnumerator
from amtrpc.network.exceptions import InterfaceLookupError
from amtrpc.network.models import InterfaceAddress, NetInterface

if TYPE_CHECKING:
    from amtrpc.amt.base import BaseAMTCommand


def find_host_address(enumerator: NetworkEnumerator, mac: str) -> tuple[NetInterface, InterfaceAddress] | None:
    """Return the host interface whose hardware address is ``mac`` and its first usable address.

    Interfaces are scanned in enumeration order and the first one with both a
    matching MAC and an IPv4 non-loopback address wins. Enumeration errors
    propagate; address lookup errors only skip the affected interface.
    """
    wanted = _normalize_mac(mac)
    for iface in enumerator.interfaces():
        if _normalize_mac(iface.mac) != wanted:
            continue
        try:
            addresses = enumerator.interface_addrs(iface)
        except InterfaceLookupError as e:
            logger.warning(f"Skipping {iface.name}: {e}")
            continue
        for address in addresses:
            if address.is_ipv4 and not address.is_loopback:
                return iface, address
    return None


def lookup_os_hostname() -> str:
    """Return the host name reported by the OS."""
    return socket.gethostname()


def get_os_dns_suffix(amt_command: BaseAMTCommand, enumerator: NetworkEnumerator) -> str:
    """Return the DNS suffix of the host address that belongs to the AMT wired adapter.

    The suffix is the reverse-resolved FQDN without its first label, or an
    empty string when the address has no reverse entry.
    """
    settings = amt_command.get_lan_interface_settings(wireless=False)
    match = find_host_address(enumerator, settings.mac_address)
    if match is None:
        return ""
    _, address = match
    try:
        fqdn, _, _ = socket.gethostbyaddr(address.ip)
    except (socket.herror, socket.gaierror) as e:
        logger.debug(f"No reverse DNS entry for {address.ip}: {e}")
        return ""
    _, _, suffix = fqdn.partition(".")
    return suffix.rstrip(".")
