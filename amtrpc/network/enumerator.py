"""Host network interface enumeration."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from typing import Any

from loguru import logger

from amtrpc.network._util import _run_cmd, _validate_interface_name
from amtrpc.network.exceptions import InterfaceLookupError
from amtrpc.network.models import InterfaceAddress, NetInterface


class NetworkEnumerator(ABC):
    """Lists host interfaces and the addresses bound to them.

    Both methods raise :class:`InterfaceLookupError` on failure.
    """

    @abstractmethod
    def interfaces(self) -> list[NetInterface]:
        """Return all host interfaces in kernel order."""

    @abstractmethod
    def interface_addrs(self, iface: NetInterface) -> list[InterfaceAddress]:
        """Return the addresses of ``iface`` in kernel order."""


def _load_json(output: str) -> list[dict[str, Any]]:
    try:
        data = json.loads(output or "[]")
    except json.JSONDecodeError as e:
        raise InterfaceLookupError(f"unparseable ip output: {e}") from e
    if not isinstance(data, list):
        raise InterfaceLookupError("unexpected ip output")
    return data


class IPRouteEnumerator(NetworkEnumerator):
    """Enumerator backed by the iproute2 ``ip -j`` JSON output."""

    def __init__(self, ip_cmd: str = "ip", timeout: int = 10):
        self.ip_cmd = ip_cmd
        self.timeout = timeout

    def interfaces(self) -> list[NetInterface]:
        links = _load_json(_run_cmd([self.ip_cmd, "-j", "link", "show"], timeout=self.timeout))
        result = []
        for link in links:
            name = link.get("ifname", "")
            if not name:
                continue
            result.append(
                NetInterface(
                    name=name,
                    index=link.get("ifindex", 0),
                    mac=link.get("address", ""),
                )
            )
        logger.debug(f"Found {len(result)} host interfaces")
        return result

    def interface_addrs(self, iface: NetInterface) -> list[InterfaceAddress]:
        if not _validate_interface_name(iface.name):
            raise InterfaceLookupError(f"Invalid interface name: {iface.name}")
        entries = _load_json(_run_cmd([self.ip_cmd, "-j", "addr", "show", "dev", iface.name], timeout=self.timeout))
        addresses = []
        for entry in entries:
            for info in entry.get("addr_info", []):
                local = info.get("local")
                if local is None or "prefixlen" not in info:
                    continue
                addresses.append(InterfaceAddress(cidr=f"{local}/{info['prefixlen']}"))
        return addresses
