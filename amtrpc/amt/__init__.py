"""Management engine access: PTHI commands over the MEI device."""

from amtrpc.amt.base import BaseAMTCommand
from amtrpc.amt.exceptions import AMTError, HECIError, PTHIStatusError
from amtrpc.amt.models import CertHashEntry, ControlMode, InterfaceSettings, RemoteAccessStatus, interpret_control_mode
from amtrpc.amt.pthi import AMTCommand

__all__ = [
    "AMTCommand",
    "BaseAMTCommand",
    "CertHashEntry",
    "AMTError",
    "HECIError",
    "PTHIStatusError",
    "ControlMode",
    "InterfaceSettings",
    "RemoteAccessStatus",
    "interpret_control_mode",
]
