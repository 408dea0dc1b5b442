"""AMT Host Interface (PTHI) codec and command client.

Every request is a packed little-endian header followed by the command
payload::

    uint8 major | uint8 minor | uint16 reserved | uint32 command | uint32 length

Responses repeat the header with ``command | 0x00800000`` and start their
payload with a ``uint32`` status, zero meaning success.
"""

from __future__ import annotations

import ipaddress
import struct
import uuid
from enum import IntEnum
from typing import Callable

from loguru import logger

from amtrpc.amt.base import BaseAMTCommand
from amtrpc.amt.exceptions import AMTError, PTHIStatusError
from amtrpc.amt.heci import DEFAULT_TIMEOUT, HECITransport
from amtrpc.amt.models import CertHashEntry, InterfaceSettings, RemoteAccessStatus, VersionEntry

HEADER = struct.Struct("<BBHII")
STATUS = struct.Struct("<I")
MAJOR_VERSION = 1
MINOR_VERSION = 1
RESPONSE_BIT = 0x00800000

BIOS_VERSION_LEN = 65
UNICODE_STRING = struct.Struct("<H20s")
LAN_SETTINGS = struct.Struct("<IIIBB6s")
RAS_STATUS = struct.Struct("<III")
CERT_HASH_ENTRY = struct.Struct("<II64sB")
UINT16 = struct.Struct("<H")
UINT32 = struct.Struct("<I")
UUID_LEN = 16

WIRED_INDEX = 0
WIRELESS_INDEX = 1


class PTHICommand(IntEnum):
    CODE_VERSIONS = 0x0400001A
    ENUMERATE_HASH_HANDLES = 0x0400002C
    GET_CERTHASH_ENTRY = 0x0400002D
    GET_DNS_SUFFIX = 0x04000036
    GET_REMOTE_ACCESS_CONNECTION_STATUS = 0x04000046
    GET_LAN_INTERFACE_SETTINGS = 0x04000048
    GET_UUID = 0x0400005C
    GET_CONTROL_MODE = 0x0400006B


_DHCP_MODES = {1: "active", 2: "passive"}
_NETWORK_STATUS = {0: "direct", 1: "vpn", 2: "outside enterprise"}
_REMOTE_STATUS = {0: "not connected", 1: "connecting", 2: "connected"}
_REMOTE_TRIGGER = {0: "user initiated", 1: "alert", 2: "periodic", 3: "provisioning"}
# hash algorithm -> (name, digest length)
_HASH_ALGORITHMS = {0: ("MD5", 16), 1: ("SHA1", 20), 2: ("SHA256", 32), 3: ("SHA512", 64)}


def build_request(command: int, payload: bytes = b"") -> bytes:
    """Frame ``payload`` as a PTHI request."""
    return HEADER.pack(MAJOR_VERSION, MINOR_VERSION, 0, command, len(payload)) + payload


def parse_response(command: int, data: bytes) -> bytes:
    """Validate a PTHI response to ``command`` and return the payload after the status."""
    if len(data) < HEADER.size + STATUS.size:
        raise AMTError(f"PTHI response too short ({len(data)} bytes)")
    _, _, _, response_command, length = HEADER.unpack_from(data)
    if response_command != command | RESPONSE_BIT:
        raise AMTError(f"Unexpected PTHI response 0x{response_command:08x} to command 0x{command:08x}")
    (status,) = STATUS.unpack_from(data, HEADER.size)
    if status != 0:
        raise PTHIStatusError(f"AMT returned status {status} for command 0x{command:08x}", status=status)
    end = HEADER.size + length
    if end > len(data):
        raise AMTError(f"PTHI response truncated: header announces {length} bytes, got {len(data) - HEADER.size}")
    return data[HEADER.size + STATUS.size : end]


def _unpack(layout: struct.Struct, payload: bytes, offset: int = 0) -> tuple:
    if len(payload) < offset + layout.size:
        raise AMTError(f"PTHI payload too short ({len(payload)} bytes, need {offset + layout.size})")
    return layout.unpack_from(payload, offset)


def _read_ansi_string(payload: bytes, offset: int = 0) -> str:
    (length,) = _unpack(UINT16, payload, offset)
    start = offset + UINT16.size
    if len(payload) < start + length:
        raise AMTError(f"PTHI string of {length} bytes exceeds the payload")
    return payload[start : start + length].decode("ascii", errors="replace")


def _read_unicode_string(payload: bytes, offset: int) -> str:
    length, raw = _unpack(UNICODE_STRING, payload, offset)
    return raw[: min(length, len(raw))].decode("ascii", errors="replace").rstrip("\x00")


def parse_code_versions(payload: bytes) -> list[VersionEntry]:
    """Decode the CODE_VERSIONS payload into (description, version) entries."""
    (count,) = _unpack(UINT32, payload, BIOS_VERSION_LEN)
    entry_size = 2 * UNICODE_STRING.size
    offset = BIOS_VERSION_LEN + UINT32.size
    available = (len(payload) - offset) // entry_size
    entries = []
    for _ in range(min(count, available)):
        description = _read_unicode_string(payload, offset)
        version = _read_unicode_string(payload, offset + UNICODE_STRING.size)
        entries.append(VersionEntry(description=description, version=version))
        offset += entry_size
    return entries


def parse_lan_interface_settings(payload: bytes) -> InterfaceSettings:
    enabled, ipv4, dhcp_enabled, dhcp_mode, link_status, mac = _unpack(LAN_SETTINGS, payload)
    return InterfaceSettings(
        mac_address=":".join(f"{b:02x}" for b in mac),
        ip_address=str(ipaddress.IPv4Address(ipv4)),
        dhcp_enabled=dhcp_enabled == 1,
        dhcp_mode=_DHCP_MODES.get(dhcp_mode, "unknown"),
        link_status="up" if link_status == 1 else "down",
        is_enabled=enabled == 1,
    )


def parse_remote_access_status(payload: bytes) -> RemoteAccessStatus:
    network, remote, trigger = _unpack(RAS_STATUS, payload)
    return RemoteAccessStatus(
        network_status=_NETWORK_STATUS.get(network, "unknown"),
        remote_status=_REMOTE_STATUS.get(remote, "unknown"),
        remote_trigger=_REMOTE_TRIGGER.get(trigger, "unknown"),
        mps_hostname=_read_ansi_string(payload, RAS_STATUS.size),
    )


def parse_hash_handles(payload: bytes) -> list[int]:
    (count,) = _unpack(UINT32, payload)
    available = (len(payload) - UINT32.size) // UINT32.size
    return list(struct.unpack_from(f"<{min(count, available)}I", payload, UINT32.size))


def parse_cert_hash_entry(payload: bytes) -> CertHashEntry:
    is_default, is_active, digest, algorithm = _unpack(CERT_HASH_ENTRY, payload)
    algorithm_name, length = _HASH_ALGORITHMS.get(algorithm, ("UNKNOWN", len(digest)))
    return CertHashEntry(
        name=_read_ansi_string(payload, CERT_HASH_ENTRY.size),
        algorithm=algorithm_name,
        hash=digest[:length].hex(),
        is_default=is_default == 1,
        is_active=is_active == 1,
    )


class AMTCommand(BaseAMTCommand):
    """Management engine client speaking PTHI over a HECI transport.

    A fresh transport is connected for every command.
    """

    def __init__(
        self,
        transport_factory: Callable[[], HECITransport] = HECITransport,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.transport_factory = transport_factory
        self.timeout = timeout

    def _call(self, command: PTHICommand, payload: bytes = b"", timeout: float | None = None) -> bytes:
        logger.debug(f"PTHI {command.name}")
        with self.transport_factory() as heci:
            heci.send(build_request(command, payload))
            data = heci.receive(self.timeout if timeout is None else timeout)
        return parse_response(command, data)

    def get_version_data(self, name: str, timeout: float | None = None) -> str:
        for entry in parse_code_versions(self._call(PTHICommand.CODE_VERSIONS, timeout=timeout)):
            if entry.description == name:
                return entry.version
        raise AMTError(f"AMT did not report a version entry named {name!r}")

    def get_uuid(self) -> str:
        payload = self._call(PTHICommand.GET_UUID)
        if len(payload) < UUID_LEN:
            raise AMTError(f"PTHI UUID payload too short ({len(payload)} bytes)")
        return str(uuid.UUID(bytes_le=payload[:UUID_LEN]))

    def get_control_mode(self) -> int:
        (mode,) = _unpack(UINT32, self._call(PTHICommand.GET_CONTROL_MODE))
        return mode

    def get_dns_suffix(self) -> str:
        return _read_ansi_string(self._call(PTHICommand.GET_DNS_SUFFIX))

    def get_lan_interface_settings(self, wireless: bool) -> InterfaceSettings:
        index = WIRELESS_INDEX if wireless else WIRED_INDEX
        payload = self._call(PTHICommand.GET_LAN_INTERFACE_SETTINGS, UINT32.pack(index))
        return parse_lan_interface_settings(payload)

    def get_remote_access_connection_status(self) -> RemoteAccessStatus:
        return parse_remote_access_status(self._call(PTHICommand.GET_REMOTE_ACCESS_CONNECTION_STATUS))

    def get_certificate_hashes(self) -> list[CertHashEntry]:
        handles = parse_hash_handles(self._call(PTHICommand.ENUMERATE_HASH_HANDLES))
        return [
            parse_cert_hash_entry(self._call(PTHICommand.GET_CERTHASH_ENTRY, UINT32.pack(handle)))
            for handle in handles
        ]
