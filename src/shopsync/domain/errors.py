"""Errors raised while reconciling a source store into a target store."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

type Side = Literal["source", "target"]


class SyncError(RuntimeError):
    """Base class for reconciliation failures of a single item."""


class NotFoundError(SyncError):
    """An entity needed to reconcile an item is missing from one of the stores."""

    def __init__(self, kind: str, key: object, *, side: Side) -> None:
        super().__init__(f"{kind} not found at {side}: {key}")
        self.kind = kind
        self.key = key
        self.side = side


@dataclass(slots=True, frozen=True)
class Rejection:
    message: str
    field: tuple[str, ...] = ()
    code: str | None = None

    def __str__(self) -> str:
        if self.field:
            return f"{'.'.join(self.field)}: {self.message}"
        return self.message


class ValidationConflictError(SyncError):
    """The store rejected a mutation; carries the attempted payload and the reasons."""

    def __init__(
        self,
        operation: str,
        *,
        payload: object,
        reasons: Sequence[Rejection],
    ) -> None:
        summary = "; ".join(str(reason) for reason in reasons) or "no reason given"
        super().__init__(f"{operation} rejected: {summary}")
        self.operation = operation
        self.payload = payload
        self.reasons = tuple(reasons)


class IncompleteDefinitionError(SyncError):
    """A field was held back for a referenced definition that never reached the target."""

    def __init__(self, owner_type: str, field_key: str, referenced_type: str) -> None:
        super().__init__(
            f"Definition {owner_type} is missing field {field_key}: "
            f"referenced definition {referenced_type} was not synced"
        )
        self.owner_type = owner_type
        self.field_key = field_key
        self.referenced_type = referenced_type
