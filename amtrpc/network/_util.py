"""Shared helpers for host network lookups."""

from __future__ import annotations

import re
import subprocess

from loguru import logger

from amtrpc.network.exceptions import InterfaceLookupError


def _run_cmd(cmd: list[str], timeout: int = 30) -> str:
    """Run a subprocess command and return stdout, raising on any failure."""
    try:
        result = subprocess.run(cmd, capture_output=True, text=True, timeout=timeout)
    except (subprocess.TimeoutExpired, FileNotFoundError) as e:
        logger.debug(f"Command {cmd[0]} failed: {e}")
        raise InterfaceLookupError(f"{' '.join(cmd)}: {e}") from e
    if result.returncode != 0:
        raise InterfaceLookupError(f"{' '.join(cmd)} exited with {result.returncode}: {result.stderr.strip()}")
    return result.stdout


def _validate_interface_name(name: str) -> bool:
    """Validate interface name to prevent injection."""
    return bool(re.match(r"^[a-zA-Z0-9._@-]+$", name))


def _normalize_mac(mac: str) -> str:
    return mac.strip().lower().replace("-", ":")
