from __future__ import annotations

from shopsync.adapters.shopify.schema import DefinitionPayload, ProductPayload
from shopsync.adapters.shopify.translator import (
    definition_update_input,
    file_create_input,
    instance_update_input,
    menu_item_input,
    product_create_input,
    product_update_input,
    to_definition,
    to_product,
    variant_input,
)
from shopsync.domain.model import FieldKind, ProductOption, SelectedOption, Seo
from shopsync.domain.model.inputs import (
    DefinitionUpdate,
    FieldDefinitionCreate,
    FieldDefinitionDelete,
    FieldDefinitionUpdate,
    FileCreate,
    InstanceFieldInput,
    InstancePatch,
    MenuItemInput,
    ProductCreate,
    ProductUpdate,
    ValidationInput,
    VariantInput,
)


def test_product_payload_translates_to_domain(product_payload: dict[str, object]) -> None:
    product = to_product(ProductPayload.model_validate(product_payload))

    assert product.handle == "enamel-mug"
    assert product.category_id == "gid://shopify/TaxonomyCategory/hg-11-10-4"
    assert product.tags == ("camping", "mug")
    assert product.seo == Seo(title="Enamel Mug")
    assert product.options == (ProductOption(name="Color", position=1, values=("Blue", "Red")),)
    assert [item.handle for item in product.collections] == ["kitchen"]
    assert [item.name for item in product.media] == ["mug-blue.jpg", None]

    blue, red = product.variants
    assert blue.sku == "MUG-BLUE"
    assert blue.selected_options == (SelectedOption(name="Color", value="Blue"),)
    assert blue.image_url is not None
    assert [(item.key, item.value) for item in blue.attributes] == [("glaze", "gloss")]
    assert red.compare_at_price == "15.00"
    assert red.image_url is None
    assert red.attributes == ()

    (author,) = product.attributes
    assert author.value == "gid://shopify/Metaobject/41"


def test_definition_payload_translates_to_domain(definition_payload: dict[str, object]) -> None:
    book = to_definition(DefinitionPayload.model_validate(definition_payload))

    assert book.type == "book"
    assert book.display_name_key == "title"
    assert book.access is not None
    assert book.access.storefront == "PUBLIC_READ"
    assert book.access.customer_account is None
    assert [item.key for item in book.field_definitions] == ["title", "author"]

    author = book.field_definition("author")
    assert author is not None
    assert FieldKind.of(author.type.name) is FieldKind.METAOBJECT_REFERENCE
    validation = author.validation("metaobject_definition_id")
    assert validation is not None
    assert validation.value == "gid://shopify/MetaobjectDefinition/10"


def test_definition_update_carries_only_assigned_values() -> None:
    payload = DefinitionUpdate(
        display_name_key=None,
        storefront_access="PUBLIC_READ",
        field_definitions=(
            FieldDefinitionCreate(key="isbn", name="ISBN", type="single_line_text_field"),
            FieldDefinitionUpdate(
                key="author",
                description="Primary author",
                validations=(ValidationInput(name="metaobject_definition_id", value="gid-10"),),
            ),
            FieldDefinitionDelete(key="legacy"),
        ),
    )

    assert definition_update_input(payload) == {
        "displayNameKey": None,
        "access": {"storefront": "PUBLIC_READ"},
        "fieldDefinitions": [
            {
                "create": {
                    "key": "isbn",
                    "name": "ISBN",
                    "type": "single_line_text_field",
                    "description": None,
                    "required": False,
                    "validations": [],
                }
            },
            {
                "update": {
                    "key": "author",
                    "description": "Primary author",
                    "validations": [{"name": "metaobject_definition_id", "value": "gid-10"}],
                }
            },
            {"delete": {"key": "legacy"}},
        ],
    }


def test_blank_instance_values_clear_the_field() -> None:
    payload = InstancePatch(
        fields=(
            InstanceFieldInput(key="title", value="Engines"),
            InstanceFieldInput(key="subtitle", value=None),
        )
    )

    assert instance_update_input(payload) == {
        "fields": [{"key": "title", "value": "Engines"}, {"key": "subtitle", "value": ""}]
    }


def test_variant_input_nests_sku_and_option_values() -> None:
    created = VariantInput(
        price="12.00",
        sku="MUG-BLUE",
        option_values=(SelectedOption(name="Color", value="Blue"),),
        media_id="gid://shopify/MediaImage/7",
    )
    updated = VariantInput(id="gid://shopify/ProductVariant/1", compare_at_price=None)

    assert variant_input(created) == {
        "price": "12.00",
        "inventoryItem": {"sku": "MUG-BLUE"},
        "optionValues": [{"name": "Blue", "optionName": "Color"}],
        "mediaId": "gid://shopify/MediaImage/7",
    }
    assert variant_input(updated) == {
        "id": "gid://shopify/ProductVariant/1",
        "compareAtPrice": None,
    }


def test_product_update_renames_category_and_lists_collections() -> None:
    payload = ProductUpdate(
        id="gid://shopify/Product/1",
        category_id=None,
        tags=("mug",),
        seo=Seo(title="Mug"),
        collections_to_join=("gid://shopify/Collection/2",),
    )

    assert product_update_input(payload) == {
        "id": "gid://shopify/Product/1",
        "category": None,
        "tags": ["mug"],
        "seo": {"title": "Mug", "description": None},
        "collectionsToJoin": ["gid://shopify/Collection/2"],
    }


def test_product_create_lists_option_values() -> None:
    payload = ProductCreate(
        handle="mug",
        title="Mug",
        options=(ProductOption(name="Color", position=1, values=("Blue", "Red")),),
    )

    variables = product_create_input(payload)

    assert "category" not in variables
    assert variables["productOptions"] == [
        {"name": "Color", "position": 1, "values": [{"name": "Blue"}, {"name": "Red"}]}
    ]


def test_file_creation_appends_a_uuid_on_name_clash() -> None:
    payload = FileCreate(filename="logo.png", original_source="https://cdn.example/logo.png")

    assert file_create_input(payload) == {
        "filename": "logo.png",
        "originalSource": "https://cdn.example/logo.png",
        "alt": None,
        "duplicateResolutionMode": "APPEND_UUID",
    }


def test_menu_items_nest() -> None:
    payload = MenuItemInput(
        title="Shop",
        type="FRONTPAGE",
        items=(MenuItemInput(title="About", type="PAGE", resource_id="gid://shopify/Page/2"),),
    )

    variables = menu_item_input(payload)

    assert variables["resourceId"] is None
    (child,) = variables["items"]
    assert child == {
        "title": "About",
        "type": "PAGE",
        "url": None,
        "resourceId": "gid://shopify/Page/2",
        "tags": [],
        "items": [],
    }
