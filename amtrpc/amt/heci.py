"""HECI transport to the management engine over the Linux MEI device."""

from __future__ import annotations

import fcntl
import os
import select
import struct
import uuid
from types import TracebackType
from typing import Self

from loguru import logger

from amtrpc.amt.exceptions import HECIError

MEI_DEVICES = ("/dev/mei0", "/dev/mei")

# AMT host interface client
AMTHI_GUID = uuid.UUID("12f80028-b4b7-4b2d-aca8-46e0ff65814c")

# _IOWR('H', 0x01, struct mei_connect_client_data)
IOCTL_MEI_CONNECT_CLIENT = 0xC0104801

DEFAULT_TIMEOUT = 120.0


class HECITransport:
    """Blocking request/response channel to one MEI client.

    Usage::

        with HECITransport() as heci:
            heci.send(request)
            response = heci.receive()
    """

    def __init__(
        self,
        client_guid: uuid.UUID = AMTHI_GUID,
        devices: tuple[str, ...] = MEI_DEVICES,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        self.client_guid = client_guid
        self.devices = devices
        self.timeout = timeout
        self.max_message_length = 0
        self.protocol_version = 0
        self._fd: int | None = None

    def _open_device(self) -> int:
        last_error: OSError | None = None
        for device in self.devices:
            try:
                return os.open(device, os.O_RDWR)
            except FileNotFoundError as e:
                last_error = e
            except PermissionError as e:
                raise HECIError(f"Access to {device} denied, run as root or with sudo") from e
        raise HECIError(f"No MEI device found ({', '.join(self.devices)})") from last_error

    def connect(self) -> None:
        """Open the MEI device and connect to the client GUID."""
        fd = self._open_device()
        data = bytearray(self.client_guid.bytes_le)
        try:
            fcntl.ioctl(fd, IOCTL_MEI_CONNECT_CLIENT, data, True)
        except OSError as e:
            os.close(fd)
            raise HECIError(f"Unable to connect to MEI client {self.client_guid}: {e}") from e
        self.max_message_length, self.protocol_version = struct.unpack_from("<IB", data)
        self._fd = fd
        logger.debug(f"MEI client connected, max message length {self.max_message_length}")

    def disconnect(self) -> None:
        if self._fd is not None:
            os.close(self._fd)
            self._fd = None

    def is_connected(self) -> bool:
        return self._fd is not None

    def send(self, message: bytes) -> None:
        if self._fd is None:
            raise HECIError("MEI client is not connected")
        try:
            written = os.write(self._fd, message)
        except OSError as e:
            raise HECIError(f"MEI write failed: {e}") from e
        if written != len(message):
            raise HECIError(f"MEI short write: {written} of {len(message)} bytes")

    def receive(self, timeout: float | None = None) -> bytes:
        if self._fd is None:
            raise HECIError("MEI client is not connected")
        wait = self.timeout if timeout is None else timeout
        readable, _, _ = select.select([self._fd], [], [], wait)
        if not readable:
            raise HECIError(f"MEI read timed out after {wait}s")
        try:
            return os.read(self._fd, self.max_message_length or 4096)
        except OSError as e:
            raise HECIError(f"MEI read failed: {e}") from e

    def __enter__(self) -> Self:
        self.connect()
        return self

    def __exit__(
        self, exc_type: type[BaseException] | None, exc_val: BaseException | None, exc_tb: TracebackType | None
    ) -> None:
        self.disconnect()
