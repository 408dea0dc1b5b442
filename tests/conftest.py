"""Shared fixtures for the amtrpc test suite."""

from __future__ import annotations

import struct
from unittest.mock import MagicMock

import pytest

from amtrpc.amt.base import BaseAMTCommand
from amtrpc.amt.models import InterfaceSettings
from amtrpc.maintenance.dispatcher import MaintenanceCommandDispatcher
from amtrpc.maintenance.models import MaintenanceSession
from amtrpc.network.enumerator import NetworkEnumerator
from amtrpc.network.models import InterfaceAddress, NetInterface

AMT_MAC = "AA:BB:CC:DD:EE:FF"


class FakeEnumerator(NetworkEnumerator):
    """In-memory enumerator: ``(interface, addresses or exception)`` pairs in order."""

    def __init__(self, entries=None, error: Exception | None = None):
        self.entries = entries or []
        self.error = error
        self.addr_calls: list[str] = []

    def interfaces(self):
        if self.error is not None:
            raise self.error
        return [iface for iface, _ in self.entries]

    def interface_addrs(self, iface):
        self.addr_calls.append(iface.name)
        for candidate, addresses in self.entries:
            if candidate.name == iface.name:
                if isinstance(addresses, Exception):
                    raise addresses
                return [InterfaceAddress(cidr=a) for a in addresses]
        return []


# ── management engine mocks ───────────────────────────────────────────


@pytest.fixture()
def mock_amt_command():
    """MagicMock of BaseAMTCommand reporting a wired adapter with AMT_MAC."""
    amt = MagicMock(spec=BaseAMTCommand)
    amt.get_lan_interface_settings.return_value = InterfaceSettings(mac_address=AMT_MAC, link_status="up")
    return amt


@pytest.fixture()
def pthi_response():
    """Factory building a raw PTHI response frame for a request command."""

    def _make(command: int, payload: bytes = b"", status: int = 0) -> bytes:
        body = struct.pack("<I", status) + payload
        return struct.pack("<BBHII", 1, 1, 0, command | 0x00800000, len(body)) + body

    return _make


@pytest.fixture()
def mock_heci():
    """MagicMock HECI transport usable as a context manager."""
    transport = MagicMock()
    transport.__enter__.return_value = transport
    transport.__exit__.return_value = None
    return transport


# ── host network fixtures ─────────────────────────────────────────────


@pytest.fixture()
def make_enumerator():
    """Factory fixture for FakeEnumerator from ``(name, mac, addresses)`` tuples."""

    def _make(*interfaces, error: Exception | None = None):
        entries = [
            (NetInterface(name=name, index=idx, mac=mac), addresses)
            for idx, (name, mac, addresses) in enumerate(interfaces, start=1)
        ]
        return FakeEnumerator(entries, error=error)

    return _make


@pytest.fixture()
def host_enumerator(make_enumerator):
    """Loopback plus one NIC carrying the AMT MAC at 192.168.1.20/24."""
    return make_enumerator(
        ("lo", "00:00:00:00:00:00", ["127.0.0.1/8", "::1/128"]),
        ("eth0", "aa:bb:cc:dd:ee:ff", ["fe80::aabb:ccff:fedd:eeff/64", "192.168.1.20/255.255.255.0"]),
    )


# ── maintenance fixtures ──────────────────────────────────────────────


@pytest.fixture()
def session():
    return MaintenanceSession()


@pytest.fixture()
def make_dispatcher(mock_amt_command, host_enumerator):
    """Factory fixture returning a dispatcher with injected host lookups."""

    def _make(**overrides):
        kwargs = dict(
            amt_command=mock_amt_command,
            net_enumerator=host_enumerator,
            hostname_lookup=MagicMock(return_value="host01"),
            dns_suffix_lookup=MagicMock(return_value="corp.example.com"),
            password_reader=MagicMock(return_value="Passw0rd!"),
        )
        kwargs.update(overrides)
        return MaintenanceCommandDispatcher(**kwargs)

    return _make
