"""Exceptions for host network lookups."""


class InterfaceLookupError(OSError):
    """Host network interfaces or their addresses could not be listed."""
