"""Domain model for store reconciliation."""

from __future__ import annotations

from .catalog import (
    Collection,
    CustomerAccountPage,
    File,
    Media,
    Menu,
    MenuItem,
    Page,
    Product,
    ProductOption,
    ResourceKind,
    SelectedOption,
    Seo,
    Variant,
    derive_file_name,
)
from .fields import FieldKind, TypedValue, decode_id_list, encode_id_list
from .metafields import Attribute, AttributeAccess, AttributeDefinition
from .metaobjects import (
    METAOBJECT_DEFINITION_ID,
    Definition,
    DefinitionAccess,
    FieldDefinition,
    FieldType,
    Instance,
    InstanceField,
    Validation,
)

__all__ = [
    "METAOBJECT_DEFINITION_ID",
    "Attribute",
    "AttributeAccess",
    "AttributeDefinition",
    "Collection",
    "CustomerAccountPage",
    "Definition",
    "DefinitionAccess",
    "FieldDefinition",
    "FieldKind",
    "FieldType",
    "File",
    "Instance",
    "InstanceField",
    "Media",
    "Menu",
    "MenuItem",
    "Page",
    "Product",
    "ProductOption",
    "ResourceKind",
    "SelectedOption",
    "Seo",
    "TypedValue",
    "Validation",
    "Variant",
    "decode_id_list",
    "derive_file_name",
    "encode_id_list",
]
