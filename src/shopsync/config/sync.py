"""Settings that shape a sync run independent of the stores involved."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .env import optional_env_var
from .errors import InvalidSettingError

DEFAULT_OWNER_TYPES: tuple[str, ...] = ("PAGE", "PRODUCT", "PRODUCTVARIANT")
DEFAULT_HANDLES_FILE = "products_handle.txt"


@dataclass(frozen=True)
class SyncConfig:
    owner_types: tuple[str, ...] = DEFAULT_OWNER_TYPES
    handles_file: Path = field(default_factory=lambda: Path(DEFAULT_HANDLES_FILE))


def _parse_owner_types(raw: str) -> tuple[str, ...]:
    owner_types = tuple(part.strip().upper() for part in raw.split(",") if part.strip())
    if not owner_types:
        raise InvalidSettingError("SHOPSYNC_OWNER_TYPES", raw, "must name at least one owner type")
    return owner_types


def get_sync_config() -> SyncConfig:
    owner_types = _parse_owner_types(
        optional_env_var("SHOPSYNC_OWNER_TYPES", ",".join(DEFAULT_OWNER_TYPES))
    )
    handles_file = Path(optional_env_var("SHOPSYNC_HANDLES_FILE", DEFAULT_HANDLES_FILE))
    return SyncConfig(owner_types=owner_types, handles_file=handles_file)
