from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import pytest

from shopsync.domain.errors import NotFoundError
from shopsync.domain.model import (
    Attribute,
    AttributeAccess,
    AttributeDefinition,
    FieldType,
    Page,
    Validation,
)
from shopsync.domain.model.inputs import (
    AttributeDefinitionUpdate,
    AttributeIdentifier,
    AttributeInput,
    ValidationInput,
)
from shopsync.domain.reconciliation import (
    DefinitionSynchronizer,
    InstanceSynchronizer,
    ItemOutcome,
    SyncOrchestrator,
)
from shopsync.domain.reconciliation.attributes import (
    AttributeDefinitionSynchronizer,
    AttributeSynchronizer,
)
from tests.helpers.builders import TEXT, definition, field_definition, gid, instance, text

if TYPE_CHECKING:
    from shopsync.domain.reconciliation import SyncContext
    from tests.helpers.fake_store import FakeStore

PAGE_ID = gid("Page", "about")


def _attribute(namespace: str, key: str, value: str | None, type_name: str = TEXT) -> Attribute:
    return Attribute(namespace=namespace, key=key, type=type_name, value=value)


def _attribute_definition(
    key: str,
    *,
    namespace: str = "custom",
    owner_type: str = "PRODUCT",
    storefront: str | None = None,
    validations: tuple[Validation, ...] = (),
    definition_id: str | None = None,
) -> AttributeDefinition:
    return AttributeDefinition(
        id=definition_id or gid("MetafieldDefinition", f"{namespace}-{key}"),
        namespace=namespace,
        key=key,
        name=key.title(),
        owner_type=owner_type,
        type=FieldType(name=TEXT),
        access=AttributeAccess(storefront=storefront),
        validations=validations,
    )


def _attributes(context: SyncContext) -> AttributeSynchronizer:
    return AttributeSynchronizer(context, InstanceSynchronizer(context))


def test_owner_attributes_are_set_cleared_and_collected(
    context: SyncContext, target: FakeStore
) -> None:
    current = (
        _attribute("custom", "color", "blue"),
        _attribute("custom", "size", "L"),
        _attribute("custom", "legacy", "x"),
        _attribute("global", "harmonized_system_code", "999"),
    )
    target.pages.append(Page(id=PAGE_ID, handle="about", title="About", attributes=current))
    sources = (
        _attribute("custom", "color", "red"),
        _attribute("custom", "size", None),
        _attribute("global", "harmonized_system_code", "123"),
    )

    outcome = asyncio.run(_attributes(context).sync_owner(PAGE_ID, sources, current))

    assert outcome is ItemOutcome.UPDATED
    assert target.calls_to("set_attributes") == [
        [AttributeInput(owner_id=PAGE_ID, namespace="custom", key="color", type=TEXT, value="red")]
    ]
    assert target.calls_to("delete_attributes") == [
        [
            AttributeIdentifier(owner_id=PAGE_ID, namespace="custom", key="size"),
            AttributeIdentifier(owner_id=PAGE_ID, namespace="custom", key="legacy"),
        ]
    ]
    remaining = target.attributes_of(PAGE_ID)
    assert remaining["custom:color"].value == "red"
    assert remaining["global:harmonized_system_code"].value == "999"
    assert set(remaining) == {"custom:color", "global:harmonized_system_code"}


def test_matching_attributes_issue_no_writes(context: SyncContext, target: FakeStore) -> None:
    current = (_attribute("custom", "color", "red"), _attribute("custom", "extra", "x"))
    sources = (_attribute("custom", "color", "red"),)

    outcome = asyncio.run(
        _attributes(context).sync_owner(PAGE_ID, sources, current, collect_garbage=False)
    )

    assert outcome is ItemOutcome.UNCHANGED
    assert target.mutations == []


def test_reference_attribute_writes_target_instance_id(
    context: SyncContext, source: FakeStore, target: FakeStore
) -> None:
    ada = instance(gid("Metaobject", "ada"), "author", "ada", text("name", "Ada"))
    remote_ada = instance(gid("Metaobject", "remote-ada"), "author", "ada", text("name", "Ada"))
    source.instances.append(ada)
    target.instances.append(remote_ada)
    target.pages.append(Page(id=PAGE_ID, handle="about", title="About"))
    sources = (_attribute("custom", "author", ada.id, "metaobject_reference"),)

    asyncio.run(_attributes(context).sync_owner(PAGE_ID, sources, ()))

    (written,) = target.calls_to("set_attributes")
    assert isinstance(written, list)
    assert written[0].value == remote_ada.id


def test_attribute_definition_is_created_with_mapped_validation(
    context: SyncContext, source: FakeStore, target: FakeStore
) -> None:
    author = definition("author", field_definition("name"))
    source.definitions.append(author)
    remote_author = definition(
        "author", field_definition("name"), definition_id=gid("MetaobjectDefinition", "remote")
    )
    target.definitions.append(remote_author)
    writer = _attribute_definition(
        "writer",
        storefront="PUBLIC_READ",
        validations=(Validation(name="metaobject_definition_id", value=author.id),),
    )

    synchronizer = AttributeDefinitionSynchronizer(context, DefinitionSynchronizer(context))
    result = asyncio.run(synchronizer.sync(writer))

    assert result.outcome is ItemOutcome.CREATED
    (created,) = target.attribute_definitions
    assert created.identity == "custom:writer"
    assert created.access == AttributeAccess(storefront="PUBLIC_READ")
    assert created.validations == (
        Validation(name="metaobject_definition_id", value=remote_author.id),
    )


def test_attribute_definition_diff_only_touches_changed_parts(context: SyncContext) -> None:
    source_definition = _attribute_definition("size", storefront="PUBLIC_READ")
    target_definition = _attribute_definition("size", storefront="NONE", definition_id="other")

    synchronizer = AttributeDefinitionSynchronizer(context, DefinitionSynchronizer(context))
    update = synchronizer.diff(source_definition, target_definition, ())

    assert update == AttributeDefinitionUpdate(
        namespace="custom", key="size", owner_type="PRODUCT", storefront_access="PUBLIC_READ"
    )
    assert synchronizer.diff(source_definition, source_definition, ()) is None
    assert synchronizer.diff(
        source_definition, source_definition, (ValidationInput(name="max", value="3"),)
    ) == AttributeDefinitionUpdate(
        namespace="custom",
        key="size",
        owner_type="PRODUCT",
        validations=(ValidationInput(name="max", value="3"),),
    )


def test_attribute_definition_fails_when_referenced_definition_cannot_exist(
    context: SyncContext, source: FakeStore
) -> None:
    author = definition("author", field_definition("name"))
    source.definitions.append(author)
    context.definitions_in_progress.add("author")
    writer = _attribute_definition(
        "writer", validations=(Validation(name="metaobject_definition_id", value=author.id),)
    )

    synchronizer = AttributeDefinitionSynchronizer(context, DefinitionSynchronizer(context))
    with pytest.raises(NotFoundError, match="Definition not found at target: author"):
        asyncio.run(synchronizer.sync(writer))


def test_reserved_namespaces_are_not_synced(
    context: SyncContext, source: FakeStore, target: FakeStore
) -> None:
    source.attribute_definitions.extend(
        [
            _attribute_definition("size"),
            _attribute_definition("tax", namespace="shopify--discovery"),
            _attribute_definition("size", owner_type="COLLECTION"),
        ]
    )

    report = asyncio.run(SyncOrchestrator(context).sync_attribute_definitions())

    assert [result.key for result in report.results] == ["PRODUCT:custom:size"]
    assert report.outcome_of("PRODUCT:custom:size") is ItemOutcome.CREATED
    assert [item.identity for item in target.attribute_definitions] == ["custom:size"]
