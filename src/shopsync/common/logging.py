"""Logging setup for the shopsync command line."""

from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(*, level: int | str = logging.INFO, force: bool = False) -> None:
    """Configure the root logger for a sync run.

    ``level`` accepts a logging constant or its name as given on the command line.
    ``force=True`` replaces handlers installed by an earlier call.
    """

    logging.basicConfig(level=level, format=LOG_FORMAT, datefmt="%H:%M:%S", force=force)
    # Request lines from httpx drown out per-item progress at INFO.
    logging.getLogger("httpx").setLevel(max(logging.WARNING, logging.getLogger().level))
