"""Shared logging helpers for the facilitator."""

from __future__ import annotations

import logging
from typing import Final

# drivers that log every statement at DEBUG
_NOISY_LOGGERS: Final = ("aiosqlite", "alembic.runtime.migration")


def level_for_verbosity(verbosity: int) -> int:
    """Map a ``-v`` count onto a logging level."""

    if verbosity <= 0:
        return logging.WARNING
    if verbosity == 1:
        return logging.INFO
    return logging.DEBUG


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once with a terse format suitable for CLI output.

    Pass ``force=True`` to reconfigure during tests or specialised entry points.
    Driver loggers are held at WARNING unless DEBUG output was requested.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    driver_level = logging.DEBUG if level <= logging.DEBUG else logging.WARNING
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(driver_level)
