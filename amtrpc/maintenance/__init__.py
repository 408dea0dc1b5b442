"""AMT maintenance commands: clock, hostname, IP, password and device info sync."""

from amtrpc.maintenance.dispatcher import MaintenanceCommandDispatcher, maintenance_usage
from amtrpc.maintenance.models import HostnameInfo, IPConfiguration, IPField, LocalConfig, MaintenanceSession
from amtrpc.maintenance.pipeline import Step, run_steps
from amtrpc.maintenance.resolver import IPConfigurationResolver

__all__ = [
    "MaintenanceCommandDispatcher",
    "IPConfigurationResolver",
    "maintenance_usage",
    "MaintenanceSession",
    "IPConfiguration",
    "IPField",
    "HostnameInfo",
    "LocalConfig",
    "Step",
    "run_steps",
]
