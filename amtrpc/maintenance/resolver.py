"""Resolve the IP configuration to push to the AMT wired adapter."""

from __future__ import annotations

from loguru import logger

from amtrpc.amt.base import BaseAMTCommand
from amtrpc.amt.exceptions import AMTError
from amtrpc.exceptions import AMTConnectionError, OSNetworkLookupError
from amtrpc.maintenance.models import IPConfiguration
from amtrpc.network.enumerator import NetworkEnumerator
from amtrpc.network.exceptions import InterfaceLookupError
from amtrpc.network.lookup import find_host_address


class IPConfigurationResolver:
    """Complete a user supplied :class:`IPConfiguration` from the host OS.

    A user supplied static IP is taken as is. Otherwise the address and
    netmask come from the host interface whose MAC matches the AMT wired
    adapter. Gateway and DNS servers are never derived.
    """

    def __init__(self, amt_command: BaseAMTCommand, net_enumerator: NetworkEnumerator):
        self.amt_command = amt_command
        self.net_enumerator = net_enumerator

    def resolve(self, config: IPConfiguration) -> IPConfiguration:
        if config.ip_address:
            return config

        try:
            lan = self.amt_command.get_lan_interface_settings(wireless=False)
        except AMTError as e:
            raise AMTConnectionError(f"unable to read AMT wired adapter settings: {e}") from e

        try:
            match = find_host_address(self.net_enumerator, lan.mac_address)
        except InterfaceLookupError as e:
            raise OSNetworkLookupError(f"unable to list OS network interfaces: {e}") from e

        if match is None:
            raise OSNetworkLookupError("static ip address not found")

        iface, address = match
        logger.info(f"Using {address.cidr} of {iface.name} (AMT adapter {lan.mac_address})")
        config.ip_address = address.ip
        config.netmask = address.netmask
        return config
