"""Abstract management engine command client."""

from __future__ import annotations

from abc import ABC, abstractmethod

from amtrpc.amt.models import CertHashEntry, InterfaceSettings, RemoteAccessStatus


class BaseAMTCommand(ABC):
    """Queries exposed by the management engine.

    Implementations raise :class:`~amtrpc.amt.exceptions.AMTError` when the
    engine cannot be reached or answers with an error status.
    """

    @abstractmethod
    def get_version_data(self, name: str, timeout: float | None = None) -> str:
        """Return the version entry called ``name`` (e.g. "AMT", "Build Number", "Sku")."""

    @abstractmethod
    def get_uuid(self) -> str:
        """Return the platform UUID."""

    @abstractmethod
    def get_control_mode(self) -> int:
        """Return the raw control mode (see :class:`~amtrpc.amt.models.ControlMode`)."""

    @abstractmethod
    def get_dns_suffix(self) -> str:
        """Return the DNS suffix configured in AMT."""

    @abstractmethod
    def get_lan_interface_settings(self, wireless: bool) -> InterfaceSettings:
        """Return the wired (``wireless=False``) or wireless adapter settings."""

    @abstractmethod
    def get_remote_access_connection_status(self) -> RemoteAccessStatus:
        """Return the remote access connection status."""

    @abstractmethod
    def get_certificate_hashes(self) -> list[CertHashEntry]:
        """Return the trusted root certificate hashes stored in AMT."""
