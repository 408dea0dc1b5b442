"""Collect management engine facts for the ``amtinfo`` command."""

from __future__ import annotations

from typing import Any, Callable, TypeVar

from loguru import logger

from amtrpc.amt.base import BaseAMTCommand
from amtrpc.amt.exceptions import AMTError
from amtrpc.amt.models import EMPTY_MAC, CertHashEntry, InterfaceSettings, RemoteAccessStatus, interpret_control_mode
from amtrpc.network.enumerator import NetworkEnumerator
from amtrpc.network.lookup import get_os_dns_suffix, lookup_os_hostname

T = TypeVar("T")

# selection flag -> description, in output order
INFO_ITEMS: dict[str, str] = {
    "ver": "BIOS Version",
    "bld": "Build Number",
    "sku": "Product SKU",
    "uuid": "Unique Identifier",
    "mode": "Current Control Mode",
    "dns": "Domain Name Suffix",
    "hostname": "OS Hostname",
    "ras": "Remote Access Status",
    "lan": "LAN Settings",
    "cert": "Certificate Hashes",
}

# only reported when asked for explicitly
OPT_IN_ITEMS = frozenset({"cert"})


class AMTInfoCollector:
    """Query the selected items, logging and skipping any that fail.

    ``collect`` returns the JSON-ready data and the rows for text output.
    """

    def __init__(
        self,
        amt_command: BaseAMTCommand,
        net_enumerator: NetworkEnumerator,
        hostname_lookup: Callable[[], str] = lookup_os_hostname,
        timeout: float | None = None,
    ):
        self.amt_command = amt_command
        self.net_enumerator = net_enumerator
        self.hostname_lookup = hostname_lookup
        self.timeout = timeout

    def _query(self, what: str, func: Callable[[], T], default: T) -> T:
        try:
            return func()
        except (AMTError, OSError) as e:
            logger.error(f"{what}: {e}")
            return default

    def collect(self, selected: set[str]) -> tuple[dict[str, Any], list[list[str]]]:
        data: dict[str, Any] = {}
        rows: list[list[str]] = []

        for flag, key, label, name in (
            ("ver", "amt", "Version", "AMT"),
            ("bld", "buildNumber", "Build Number", "Build Number"),
            ("sku", "sku", "SKU", "Sku"),
        ):
            if flag in selected:
                data[key] = self._query(label, lambda n=name: self.amt_command.get_version_data(n, self.timeout), "")
                rows.append([label, data[key]])

        if "uuid" in selected:
            data["uuid"] = self._query("UUID", self.amt_command.get_uuid, "")
            rows.append(["UUID", data["uuid"]])

        if "mode" in selected:
            mode = self._query("Control Mode", self.amt_command.get_control_mode, -1)
            data["controlMode"] = interpret_control_mode(mode)
            rows.append(["Control Mode", data["controlMode"]])

        if "dns" in selected:
            data["dnsSuffix"] = self._query("DNS Suffix", self.amt_command.get_dns_suffix, "")
            rows.append(["DNS Suffix", data["dnsSuffix"]])
            data["dnsSuffixOS"] = self._query(
                "DNS Suffix (OS)", lambda: get_os_dns_suffix(self.amt_command, self.net_enumerator), ""
            )
            rows.append(["DNS Suffix (OS)", data["dnsSuffixOS"]])

        if "hostname" in selected:
            data["hostnameOS"] = self._query("Hostname (OS)", self.hostname_lookup, "")
            rows.append(["Hostname (OS)", data["hostnameOS"]])

        if "ras" in selected:
            ras = self._query("RAS", self.amt_command.get_remote_access_connection_status, RemoteAccessStatus())
            data["ras"] = ras.to_dict()
            rows.extend(
                [
                    ["RAS Network", ras.network_status],
                    ["RAS Remote Status", ras.remote_status],
                    ["RAS Trigger", ras.remote_trigger],
                    ["RAS MPS Hostname", ras.mps_hostname],
                ]
            )

        if "lan" in selected:
            wired = self._query(
                "Wired Adapter", lambda: self.amt_command.get_lan_interface_settings(False), InterfaceSettings()
            )
            data["wiredAdapter"] = wired.to_dict()
            if wired.mac_address != EMPTY_MAC:
                rows.extend(_adapter_rows("---Wired Adapter---", wired))

            wireless = self._query(
                "Wireless Adapter", lambda: self.amt_command.get_lan_interface_settings(True), InterfaceSettings()
            )
            data["wirelessAdapter"] = wireless.to_dict()
            rows.extend(_adapter_rows("---Wireless Adapter---", wireless))

        if "cert" in selected:
            hashes = self._query("Certificate Hashes", self.amt_command.get_certificate_hashes, [])
            data["certificateHashes"] = {entry.name: entry.to_dict() for entry in hashes}
            rows.append(["Certificate Hashes", ""])
            rows.extend(_cert_hash_rows(entry) for entry in hashes)

        return data, rows


def _adapter_rows(title: str, settings: InterfaceSettings) -> list[list[str]]:
    return [
        [title, ""],
        ["DHCP Enabled", str(settings.dhcp_enabled).lower()],
        ["DHCP Mode", settings.dhcp_mode],
        ["Link Status", settings.link_status],
        ["IP Address", settings.ip_address],
        ["MAC Address", settings.mac_address],
    ]


def _cert_hash_rows(entry: CertHashEntry) -> list[str]:
    state = [label for label, flag in (("Default", entry.is_default), ("Active", entry.is_active)) if flag]
    title = f"{entry.name} ({', '.join(state)})" if state else entry.name
    return [title, f"{entry.algorithm}: {entry.hash}"]
