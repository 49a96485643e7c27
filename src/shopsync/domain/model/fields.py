"""Field kinds shared by instance fields and attributes."""

from __future__ import annotations

import json
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from collections.abc import Iterable


class FieldKind(StrEnum):
    """Closed set of value kinds the engine reconciles.

    Any declared type not listed here (``single_line_text_field``, ``boolean``,
    ``json`` ...) is a plain scalar and compares by exact string value.
    """

    SCALAR = "scalar"
    METAOBJECT_REFERENCE = "metaobject_reference"
    LIST_METAOBJECT_REFERENCE = "list.metaobject_reference"
    FILE_REFERENCE = "file_reference"
    LIST_FILE_REFERENCE = "list.file_reference"
    PRODUCT_REFERENCE = "product_reference"
    LIST_PRODUCT_REFERENCE = "list.product_reference"
    COLLECTION_REFERENCE = "collection_reference"
    LIST_COLLECTION_REFERENCE = "list.collection_reference"

    @classmethod
    def of(cls, type_name: str) -> FieldKind:
        try:
            return cls(type_name)
        except ValueError:
            return cls.SCALAR

    @property
    def is_list(self) -> bool:
        return self.value.startswith("list.")


class TypedValue(Protocol):
    """A ``(type, value)`` pair as carried by instance fields and attributes."""

    @property
    def type(self) -> str: ...

    @property
    def value(self) -> str | None: ...


def decode_id_list(value: str | None) -> list[str]:
    """Parse a JSON-encoded list of ids; ``None`` and blank values decode to an empty list."""

    if value is None or not value.strip():
        return []
    decoded = json.loads(value)
    if not isinstance(decoded, list):
        raise ValueError(f"Expected a JSON list of ids, got: {value!r}")
    return [str(item) for item in decoded]


def encode_id_list(ids: Iterable[str]) -> str:
    # Compact separators match the encoding the store returns.
    return json.dumps(list(ids), separators=(",", ":"))
