"""Custom-schema definitions and their instances."""

from __future__ import annotations

from dataclasses import dataclass

from .fields import FieldKind

METAOBJECT_DEFINITION_ID = "metaobject_definition_id"


@dataclass(slots=True, kw_only=True, frozen=True)
class FieldType:
    name: str
    category: str | None = None


@dataclass(slots=True, kw_only=True, frozen=True)
class Validation:
    name: str
    value: str | None
    type: str | None = None

    @property
    def references_definition(self) -> bool:
        return self.name == METAOBJECT_DEFINITION_ID


@dataclass(slots=True, kw_only=True, frozen=True)
class FieldDefinition:
    key: str
    name: str
    type: FieldType
    description: str | None = None
    required: bool = False
    validations: tuple[Validation, ...] = ()

    def validation(self, name: str) -> Validation | None:
        return next((item for item in self.validations if item.name == name), None)


@dataclass(slots=True, kw_only=True, frozen=True)
class DefinitionAccess:
    admin: str | None = None
    storefront: str | None = None
    customer_account: str | None = None


@dataclass(slots=True, kw_only=True, frozen=True)
class Definition:
    """Schema for a class of instances, keyed across stores by ``type``."""

    id: str
    type: str
    name: str
    display_name_key: str | None = None
    access: DefinitionAccess | None = None
    field_definitions: tuple[FieldDefinition, ...] = ()

    def field_definition(self, key: str) -> FieldDefinition | None:
        return next((item for item in self.field_definitions if item.key == key), None)


@dataclass(slots=True, kw_only=True, frozen=True)
class InstanceField:
    key: str
    type: str
    value: str | None = None

    @property
    def kind(self) -> FieldKind:
        return FieldKind.of(self.type)


@dataclass(slots=True, kw_only=True, frozen=True)
class Instance:
    """A record conforming to one definition, keyed across stores by ``(type, handle)``."""

    id: str
    type: str
    handle: str
    fields: tuple[InstanceField, ...] = ()

    @property
    def identity(self) -> tuple[str, str]:
        return (self.type, self.handle)

    def field(self, key: str) -> InstanceField | None:
        return next((item for item in self.fields if item.key == key), None)
