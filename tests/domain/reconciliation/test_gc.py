from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from shopsync.domain.model import AttributeDefinition, Collection, FieldType
from shopsync.domain.model.inputs import DefinitionUpdate, FieldDefinitionDelete
from shopsync.domain.reconciliation import ItemOutcome, SyncOrchestrator
from tests.helpers.builders import definition, field_definition, gid, instance

if TYPE_CHECKING:
    from shopsync.domain.reconciliation import SyncContext
    from tests.helpers.fake_store import FakeStore


def _collections(prefix: str, *handles: str) -> list[Collection]:
    return [
        Collection(id=gid("Collection", f"{prefix}-{handle}"), handle=handle, title=handle.upper())
        for handle in handles
    ]


def test_only_target_only_collections_are_deleted(
    context: SyncContext, source: FakeStore, target: FakeStore
) -> None:
    source.collections.extend(_collections("s", "a", "b"))
    target.collections.extend(_collections("t", "a", "b", "c"))

    report = asyncio.run(SyncOrchestrator(context).gc_collections())

    assert [(result.key, result.outcome) for result in report.results] == [
        ("c", ItemOutcome.DELETED)
    ]
    assert target.calls_to("delete_collection") == [gid("Collection", "t-c")]
    assert [item.handle for item in target.collections] == ["a", "b"]


def test_definition_instances_are_deleted_before_the_definition(
    context: SyncContext, source: FakeStore, target: FakeStore
) -> None:
    source.definitions.append(definition("author"))
    legacy = definition("legacy", definition_id=gid("MetaobjectDefinition", "t-legacy"))
    target.definitions.extend(
        [
            definition("author", definition_id=gid("MetaobjectDefinition", "t-author")),
            legacy,
            definition("shopify--qa-pair", definition_id=gid("MetaobjectDefinition", "t-qa")),
        ]
    )
    target.instances.append(instance(gid("Metaobject", "t-old"), "legacy", "old"))

    report = asyncio.run(SyncOrchestrator(context).gc_definitions())

    assert report.outcome_of("legacy") is ItemOutcome.DELETED
    assert len(report.results) == 1
    assert target.mutations == ["bulk_delete_instances", "delete_definition"]
    assert target.calls_to("bulk_delete_instances") == ["legacy"]
    assert target.calls_to("delete_definition") == [legacy.id]
    assert target.instances == []
    assert sorted(item.type for item in target.definitions) == ["author", "shopify--qa-pair"]


def test_target_only_instances_are_deleted(
    context: SyncContext, source: FakeStore, target: FakeStore
) -> None:
    source.instances.append(instance(gid("Metaobject", "s-ada"), "author", "ada"))
    target.instances.extend(
        [
            instance(gid("Metaobject", "t-ada"), "author", "ada"),
            instance(gid("Metaobject", "t-bob"), "author", "bob"),
            instance(gid("Metaobject", "t-engines"), "book", "engines"),
        ]
    )

    report = asyncio.run(SyncOrchestrator(context).gc_instances_of("author"))

    assert report.outcome_of("author/bob") is ItemOutcome.DELETED
    assert len(report.results) == 1
    assert [item.handle for item in target.instances] == ["ada", "engines"]


def test_target_only_field_definitions_are_deleted(
    context: SyncContext, source: FakeStore, target: FakeStore
) -> None:
    source.definitions.extend(
        [
            definition("author", field_definition("name")),
            definition("book", field_definition("title")),
        ]
    )
    remote = definition(
        "author",
        field_definition("name"),
        field_definition("legacy"),
        definition_id=gid("MetaobjectDefinition", "t-author"),
    )
    target.definitions.append(remote)

    report = asyncio.run(SyncOrchestrator(context).gc_field_definitions())

    assert report.outcome_of("author") is ItemOutcome.DELETED
    assert report.outcome_of("book") is ItemOutcome.UNCHANGED
    assert target.calls_to("update_definition") == [
        DefinitionUpdate(field_definitions=(FieldDefinitionDelete(key="legacy"),))
    ]
    assert [item.key for item in target.definitions[0].field_definitions] == ["name"]


def test_attribute_definitions_outside_reserved_namespaces_are_deleted(
    context: SyncContext, source: FakeStore, target: FakeStore
) -> None:
    def attribute_definition(prefix: str, namespace: str, key: str) -> AttributeDefinition:
        return AttributeDefinition(
            id=gid("MetafieldDefinition", f"{prefix}-{namespace}-{key}"),
            namespace=namespace,
            key=key,
            name=key.title(),
            owner_type="PRODUCT",
            type=FieldType(name="single_line_text_field"),
        )

    source.attribute_definitions.append(attribute_definition("s", "custom", "care"))
    target.attribute_definitions.extend(
        [
            attribute_definition("t", "custom", "care"),
            attribute_definition("t", "custom", "legacy"),
            attribute_definition("t", "shopify", "color-pattern"),
        ]
    )

    report = asyncio.run(SyncOrchestrator(context).gc_attribute_definitions())

    assert [result.key for result in report.results] == ["PRODUCT:custom:legacy"]
    assert target.calls_to("delete_attribute_definition") == [
        gid("MetafieldDefinition", "t-custom-legacy")
    ]
