from __future__ import annotations

from shopsync.domain.model.inputs import (
    UNSET,
    DefinitionUpdate,
    FieldDefinitionDelete,
    FieldDefinitionUpdate,
    ProductUpdate,
    VariantInput,
    assigned,
)


def test_unset_is_falsy_and_distinct_from_none() -> None:
    assert not UNSET
    assert UNSET is not None
    assert repr(UNSET) == "UNSET"


def test_assigned_keeps_explicit_none() -> None:
    update = ProductUpdate(id="gid://shopify/Product/1", template_suffix=None, vendor="Acme")

    assert assigned(update) == {
        "id": "gid://shopify/Product/1",
        "vendor": "Acme",
        "template_suffix": None,
    }
    assert assigned(update, exclude=("id",)) == {"vendor": "Acme", "template_suffix": None}
    assert not update.is_empty
    assert ProductUpdate(id="gid://shopify/Product/1").is_empty


def test_empty_updates() -> None:
    assert DefinitionUpdate().is_empty
    assert not DefinitionUpdate(field_definitions=(FieldDefinitionDelete(key="legacy"),)).is_empty
    assert FieldDefinitionUpdate(key="name").is_empty
    assert not FieldDefinitionUpdate(key="name", description=None).is_empty
    assert VariantInput(id="gid://shopify/ProductVariant/1").is_empty
