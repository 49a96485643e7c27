"""Typed attributes attached to catalog owners and their definitions."""

from __future__ import annotations

from dataclasses import dataclass

from .fields import FieldKind
from .metaobjects import FieldType, Validation


@dataclass(slots=True, kw_only=True, frozen=True)
class AttributeAccess:
    admin: str | None = None
    storefront: str | None = None
    customer_account: str | None = None


@dataclass(slots=True, kw_only=True, frozen=True)
class AttributeDefinition:
    id: str
    namespace: str
    key: str
    name: str
    owner_type: str
    type: FieldType
    description: str | None = None
    access: AttributeAccess | None = None
    pinned_position: int | None = None
    validations: tuple[Validation, ...] = ()

    @property
    def identity(self) -> str:
        return f"{self.namespace}:{self.key}"


@dataclass(slots=True, kw_only=True, frozen=True)
class Attribute:
    namespace: str
    key: str
    type: str
    value: str | None = None
    id: str | None = None

    @property
    def identity(self) -> str:
        return f"{self.namespace}:{self.key}"

    @property
    def kind(self) -> FieldKind:
        return FieldKind.of(self.type)
