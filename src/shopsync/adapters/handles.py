"""Read the list of product handles a run is restricted to."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from shopsync.config.errors import HandlesFileNotFoundError

if TYPE_CHECKING:
    from pathlib import Path

log = getLogger(__name__)


def read_handles(path: Path) -> list[str]:
    """Return one handle per non-blank line, stripped, in file order."""

    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise HandlesFileNotFoundError(path) from exc

    handles = [line.strip() for line in text.splitlines() if line.strip()]
    log.info("Read %d product handle(s) from %s", len(handles), path)
    return handles
