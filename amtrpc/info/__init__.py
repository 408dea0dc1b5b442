"""Read-only AMT information query."""

from amtrpc.info.collector import INFO_ITEMS, AMTInfoCollector

__all__ = ["AMTInfoCollector", "INFO_ITEMS"]
