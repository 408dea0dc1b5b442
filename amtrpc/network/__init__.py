"""Host network interface enumeration and engine adapter matching."""

from amtrpc.network.enumerator import IPRouteEnumerator, NetworkEnumerator
from amtrpc.network.exceptions import InterfaceLookupError
from amtrpc.network.lookup import find_host_address, get_os_dns_suffix, lookup_os_hostname
from amtrpc.network.models import InterfaceAddress, NetInterface

__all__ = [
    "NetworkEnumerator",
    "IPRouteEnumerator",
    "InterfaceLookupError",
    "InterfaceAddress",
    "NetInterface",
    "find_host_address",
    "get_os_dns_suffix",
    "lookup_os_hostname",
]
