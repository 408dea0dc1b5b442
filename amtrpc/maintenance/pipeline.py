"""Ordered fail-fast execution of maintenance steps."""

from __future__ import annotations

from typing import Callable, Iterable, NamedTuple

from loguru import logger

from amtrpc.exceptions import ReturnCode, RPCError


class Step(NamedTuple):
    """A named fallible step; ``run`` raises :class:`RPCError` to fail."""

    name: str
    run: Callable[[], None]


def run_steps(steps: Iterable[Step]) -> ReturnCode:
    """Run ``steps`` in order and stop at the first failure.

    The failure is logged once here and its return code is returned.
    """
    for step in steps:
        logger.debug(f"Running step {step.name}")
        try:
            step.run()
        except RPCError as e:
            logger.error(f"{step.name}: {e}")
            return e.return_code
    return ReturnCode.SUCCESS
