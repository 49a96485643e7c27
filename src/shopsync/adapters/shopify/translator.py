"""Translate Shopify payloads into domain entities and domain inputs into GraphQL variables."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic.alias_generators import to_camel

from shopsync.domain.model import (
    Attribute,
    AttributeAccess,
    AttributeDefinition,
    Collection,
    CustomerAccountPage,
    Definition,
    DefinitionAccess,
    FieldDefinition,
    FieldType,
    File,
    Instance,
    InstanceField,
    Media,
    Menu,
    MenuItem,
    Page,
    Product,
    ProductOption,
    SelectedOption,
    Seo,
    Validation,
    Variant,
)
from shopsync.domain.model.inputs import (
    FieldDefinitionCreate,
    FieldDefinitionDelete,
    FieldDefinitionUpdate,
    ValidationInput,
    assigned,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

    from shopsync.domain.model.inputs import (
        AttributeDefinitionCreate,
        AttributeDefinitionUpdate,
        AttributeIdentifier,
        AttributeInput,
        CollectionCreate,
        DefinitionCreate,
        DefinitionUpdate,
        FieldDefinitionOperation,
        FileCreate,
        InstanceCreate,
        InstanceFieldInput,
        InstancePatch,
        MediaInput,
        MenuItemInput,
        PageCreate,
        ProductCreate,
        ProductUpdate,
        VariantInput,
    )

    from .schema import (
        AccessPayload,
        AttributeDefinitionPayload,
        AttributePayload,
        CollectionPayload,
        CustomerAccountPagePayload,
        DefinitionPayload,
        FieldDefinitionPayload,
        FilePayload,
        InstancePayload,
        MenuItemPayload,
        MenuPayload,
        PagePayload,
        ProductPayload,
        ValidationPayload,
        VariantPayload,
    )

type Variables = dict[str, Any]

# Payload -> domain


def _validations(payloads: Iterable[ValidationPayload]) -> tuple[Validation, ...]:
    return tuple(Validation(name=item.name, value=item.value, type=item.type) for item in payloads)


def _attributes(payloads: Iterable[AttributePayload]) -> tuple[Attribute, ...]:
    return tuple(to_attribute(item) for item in payloads)


def _field_definition(payload: FieldDefinitionPayload) -> FieldDefinition:
    return FieldDefinition(
        key=payload.key,
        name=payload.name,
        type=FieldType(name=payload.type.name, category=payload.type.category),
        description=payload.description,
        required=payload.required,
        validations=_validations(payload.validations),
    )


def _definition_access(payload: AccessPayload | None) -> DefinitionAccess | None:
    if payload is None:
        return None
    return DefinitionAccess(
        admin=payload.admin,
        storefront=payload.storefront,
        customer_account=payload.customer_account,
    )


def to_definition(payload: DefinitionPayload) -> Definition:
    return Definition(
        id=payload.id,
        type=payload.type,
        name=payload.name,
        display_name_key=payload.display_name_key,
        access=_definition_access(payload.access),
        field_definitions=tuple(_field_definition(item) for item in payload.field_definitions),
    )


def to_instance(payload: InstancePayload) -> Instance:
    return Instance(
        id=payload.id,
        type=payload.type,
        handle=payload.handle,
        fields=tuple(
            InstanceField(key=item.key, type=item.type, value=item.value) for item in payload.fields
        ),
    )


def to_attribute_definition(payload: AttributeDefinitionPayload) -> AttributeDefinition:
    access = None
    if payload.access is not None:
        access = AttributeAccess(
            admin=payload.access.admin,
            storefront=payload.access.storefront,
            customer_account=payload.access.customer_account,
        )
    return AttributeDefinition(
        id=payload.id,
        namespace=payload.namespace,
        key=payload.key,
        name=payload.name,
        owner_type=payload.owner_type,
        type=FieldType(name=payload.type.name, category=payload.type.category),
        description=payload.description,
        access=access,
        pinned_position=payload.pinned_position,
        validations=_validations(payload.validations),
    )


def to_attribute(payload: AttributePayload) -> Attribute:
    return Attribute(
        id=payload.id,
        namespace=payload.namespace,
        key=payload.key,
        type=payload.type,
        value=payload.value,
    )


def to_file(payload: FilePayload) -> File:
    return File(id=payload.id, url=payload.url, alt=payload.alt)


def to_collection(payload: CollectionPayload) -> Collection:
    return Collection(
        id=payload.id,
        handle=payload.handle,
        title=payload.title,
        description_html=payload.description_html,
        template_suffix=payload.template_suffix,
    )


def to_variant(payload: VariantPayload) -> Variant:
    return Variant(
        id=payload.id,
        title=payload.title,
        price=payload.price,
        compare_at_price=payload.compare_at_price,
        barcode=payload.barcode,
        sku=payload.sku,
        taxable=payload.taxable,
        inventory_policy=payload.inventory_policy,
        selected_options=tuple(
            SelectedOption(name=item.name, value=item.value) for item in payload.selected_options
        ),
        image_url=payload.image.url if payload.image else None,
        attributes=_attributes(payload.metafields.nodes),
    )


def to_product(payload: ProductPayload) -> Product:
    return Product(
        id=payload.id,
        handle=payload.handle,
        title=payload.title,
        description_html=payload.description_html,
        product_type=payload.product_type,
        vendor=payload.vendor,
        status=payload.status,
        tags=tuple(payload.tags),
        template_suffix=payload.template_suffix,
        gift_card_template_suffix=payload.gift_card_template_suffix,
        requires_selling_plan=payload.requires_selling_plan,
        is_gift_card=payload.is_gift_card,
        category_id=payload.category.id if payload.category else None,
        seo=Seo(title=payload.seo.title, description=payload.seo.description),
        options=tuple(
            ProductOption(name=item.name, position=item.position, values=tuple(item.values))
            for item in payload.options
        ),
        collections=tuple(to_collection(item) for item in payload.collections.nodes),
        media=tuple(
            Media(
                id=item.id,
                media_content_type=item.media_content_type,
                url=item.url,
                alt=item.alt,
            )
            for item in payload.media.nodes
        ),
        variants=tuple(to_variant(item) for item in payload.variants.nodes),
        attributes=_attributes(payload.metafields.nodes),
    )


def to_page(payload: PagePayload) -> Page:
    return Page(
        id=payload.id,
        handle=payload.handle,
        title=payload.title,
        body=payload.body,
        is_published=payload.is_published,
        template_suffix=payload.template_suffix,
        attributes=_attributes(payload.metafields.nodes),
    )


def to_customer_account_page(payload: CustomerAccountPagePayload) -> CustomerAccountPage:
    return CustomerAccountPage(id=payload.id, handle=payload.handle, title=payload.title)


def _menu_item(payload: MenuItemPayload) -> MenuItem:
    return MenuItem(
        id=payload.id,
        title=payload.title,
        type=payload.type,
        url=payload.url,
        resource_id=payload.resource_id,
        tags=tuple(payload.tags),
        items=tuple(_menu_item(item) for item in payload.items),
    )


def to_menu(payload: MenuPayload) -> Menu:
    return Menu(
        id=payload.id,
        handle=payload.handle,
        title=payload.title,
        is_default=payload.is_default,
        items=tuple(_menu_item(item) for item in payload.items),
    )


# Domain -> variables


def _camel(values: dict[str, object]) -> Variables:
    return {to_camel(name): value for name, value in values.items()}


def _validation_inputs(validations: Iterable[ValidationInput]) -> list[Variables]:
    return [{"name": item.name, "value": item.value} for item in validations]


def _field_definition_create(payload: FieldDefinitionCreate) -> Variables:
    return {
        "key": payload.key,
        "name": payload.name,
        "type": payload.type,
        "description": payload.description,
        "required": payload.required,
        "validations": _validation_inputs(payload.validations),
    }


def _field_definition_operation(operation: FieldDefinitionOperation) -> Variables:
    match operation:
        case FieldDefinitionCreate():
            return {"create": _field_definition_create(operation)}
        case FieldDefinitionUpdate():
            values = assigned(operation)
            if "validations" in values:
                values["validations"] = _validation_inputs(operation.validations or ())
            return {"update": values}
        case FieldDefinitionDelete():
            return {"delete": {"key": operation.key}}


def definition_create_input(payload: DefinitionCreate) -> Variables:
    variables: Variables = {
        "type": payload.type,
        "name": payload.name,
        "fieldDefinitions": [_field_definition_create(item) for item in payload.field_definitions],
    }
    if payload.display_name_key is not None:
        variables["displayNameKey"] = payload.display_name_key
    if payload.storefront_access is not None:
        variables["access"] = {"storefront": payload.storefront_access}
    return variables


def definition_update_input(payload: DefinitionUpdate) -> Variables:
    values = assigned(
        payload, exclude=("storefront_access", "customer_account_access", "field_definitions")
    )
    variables = _camel(values)
    access = _camel(
        {
            name.removesuffix("_access"): value
            for name, value in assigned(
                payload, exclude=("name", "display_name_key", "field_definitions")
            ).items()
        }
    )
    if access:
        variables["access"] = access
    if payload.field_definitions:
        variables["fieldDefinitions"] = [
            _field_definition_operation(item) for item in payload.field_definitions
        ]
    return variables


def _field_values(fields: Iterable[InstanceFieldInput]) -> list[Variables]:
    # The store clears a field when it receives an empty string.
    return [{"key": item.key, "value": item.value or ""} for item in fields]


def instance_create_input(payload: InstanceCreate) -> Variables:
    return {
        "type": payload.type,
        "handle": payload.handle,
        "fields": _field_values(payload.fields),
    }


def instance_update_input(payload: InstancePatch) -> Variables:
    return {"fields": _field_values(payload.fields)}


def attribute_definition_create_input(payload: AttributeDefinitionCreate) -> Variables:
    variables: Variables = {
        "namespace": payload.namespace,
        "key": payload.key,
        "name": payload.name,
        "ownerType": payload.owner_type,
        "type": payload.type,
        "description": payload.description,
        "pin": payload.pin,
        "validations": _validation_inputs(payload.validations),
    }
    if payload.storefront_access is not None:
        variables["access"] = {"storefront": payload.storefront_access}
    return variables


def attribute_definition_update_input(payload: AttributeDefinitionUpdate) -> Variables:
    variables: Variables = {
        "namespace": payload.namespace,
        "key": payload.key,
        "ownerType": payload.owner_type,
    }
    values = assigned(payload, exclude=("namespace", "key", "owner_type"))
    if "name" in values:
        variables["name"] = values["name"]
    if "validations" in values:
        variables["validations"] = _validation_inputs(payload.validations or ())
    access = _camel(
        {
            name.removesuffix("_access"): value
            for name, value in values.items()
            if name.endswith("_access")
        }
    )
    if access:
        variables["access"] = access
    return variables


def attribute_set_input(payload: AttributeInput) -> Variables:
    return {
        "ownerId": payload.owner_id,
        "namespace": payload.namespace,
        "key": payload.key,
        "type": payload.type,
        "value": payload.value,
    }


def attribute_identifier_input(payload: AttributeIdentifier) -> Variables:
    return {"ownerId": payload.owner_id, "namespace": payload.namespace, "key": payload.key}


def file_create_input(payload: FileCreate) -> Variables:
    return {
        "filename": payload.filename,
        "originalSource": payload.original_source,
        "alt": payload.alt,
        "duplicateResolutionMode": "APPEND_UUID",
    }


def media_input(payload: MediaInput) -> Variables:
    return {
        "originalSource": payload.original_source,
        "mediaContentType": payload.media_content_type,
        "alt": payload.alt,
    }


def _seo(seo: Seo) -> Variables:
    return {"title": seo.title, "description": seo.description}


def product_create_input(payload: ProductCreate) -> Variables:
    variables: Variables = {
        "handle": payload.handle,
        "title": payload.title,
        "descriptionHtml": payload.description_html,
        "productType": payload.product_type,
        "vendor": payload.vendor,
        "status": payload.status,
        "tags": list(payload.tags),
        "templateSuffix": payload.template_suffix,
        "giftCardTemplateSuffix": payload.gift_card_template_suffix,
        "requiresSellingPlan": payload.requires_selling_plan,
        "giftCard": payload.gift_card,
        "seo": _seo(payload.seo),
        "collectionsToJoin": list(payload.collections_to_join),
    }
    if payload.category_id is not None:
        variables["category"] = payload.category_id
    if payload.options:
        variables["productOptions"] = [
            {
                "name": option.name,
                "position": option.position,
                "values": [{"name": value} for value in option.values],
            }
            for option in payload.options
        ]
    return variables


def product_update_input(payload: ProductUpdate) -> Variables:
    values = assigned(payload)
    if "category_id" in values:
        values["category"] = values.pop("category_id")
    for name in ("tags", "collections_to_join", "collections_to_leave"):
        if name in values:
            values[name] = list(values[name])  # type: ignore[call-overload]
    if "seo" in values:
        values["seo"] = _seo(payload.seo)  # type: ignore[arg-type]
    return _camel(values)


def variant_input(payload: VariantInput) -> Variables:
    values = assigned(payload)
    if payload.id is None:
        values.pop("id", None)
    if "sku" in values:
        values["inventory_item"] = {"sku": values.pop("sku")}
    if "option_values" in values:
        values["option_values"] = [
            {"name": option.value, "optionName": option.name}
            for option in payload.option_values or ()
        ]
    return _camel(values)


def collection_create_input(payload: CollectionCreate) -> Variables:
    return {
        "handle": payload.handle,
        "title": payload.title,
        "descriptionHtml": payload.description_html,
        "templateSuffix": payload.template_suffix,
    }


def page_create_input(payload: PageCreate) -> Variables:
    return {
        "handle": payload.handle,
        "title": payload.title,
        "body": payload.body,
        "isPublished": payload.is_published,
        "templateSuffix": payload.template_suffix,
    }


def menu_item_input(payload: MenuItemInput) -> Variables:
    return {
        "title": payload.title,
        "type": payload.type,
        "url": payload.url,
        "resourceId": payload.resource_id,
        "tags": list(payload.tags),
        "items": [menu_item_input(item) for item in payload.items],
    }
