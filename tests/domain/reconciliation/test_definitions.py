from __future__ import annotations

import asyncio
from dataclasses import replace
from typing import TYPE_CHECKING

from shopsync.adapters.shopify.translator import definition_update_input
from shopsync.domain.model import DefinitionAccess
from shopsync.domain.model.inputs import (
    DefinitionCreate,
    DefinitionUpdate,
    FieldDefinitionCreate,
    FieldDefinitionUpdate,
    assigned,
)
from shopsync.domain.reconciliation import DefinitionSynchronizer, ItemOutcome
from tests.helpers.builders import REFERENCE, definition, field_definition, gid

if TYPE_CHECKING:
    from shopsync.domain.reconciliation import SyncContext
    from tests.helpers.fake_store import FakeStore


def test_self_referencing_definition_is_created_once(
    context: SyncContext, source: FakeStore, target: FakeStore
) -> None:
    author_id = gid("MetaobjectDefinition", "author")
    author = definition(
        "author",
        field_definition("name"),
        field_definition("mentor", REFERENCE, references=author_id),
        definition_id=author_id,
    )
    source.definitions.append(author)

    result = asyncio.run(DefinitionSynchronizer(context).sync(author))

    assert result.outcome is ItemOutcome.CREATED
    assert [item.type for item in target.definitions] == ["author"]
    assert len(target.calls_to("create_definition")) == 1
    assert len(target.calls_to("update_definition")) == 1

    created = target.definitions[0]
    mentor = created.field_definition("mentor")
    assert mentor is not None
    assert mentor.validations[0].value == created.id
    assert result.entity == created


def test_mutually_referencing_definitions_terminate(
    context: SyncContext, source: FakeStore, target: FakeStore
) -> None:
    author_id = gid("MetaobjectDefinition", "author")
    book_id = gid("MetaobjectDefinition", "book")
    author = definition(
        "author",
        field_definition("favourite", REFERENCE, references=book_id),
        definition_id=author_id,
    )
    book = definition(
        "book",
        field_definition("writer", REFERENCE, references=author_id),
        definition_id=book_id,
    )
    source.definitions.extend([author, book])

    synchronizer = DefinitionSynchronizer(context)
    first = asyncio.run(synchronizer.sync(author))
    second = asyncio.run(synchronizer.sync(book))

    assert first.outcome is ItemOutcome.CREATED
    assert second.outcome is ItemOutcome.UNCHANGED
    assert sorted(item.type for item in target.definitions) == ["author", "book"]
    assert len(target.calls_to("create_definition")) == 2

    by_type = {item.type: item for item in target.definitions}
    favourite = by_type["author"].field_definition("favourite")
    writer = by_type["book"].field_definition("writer")
    assert favourite is not None
    assert writer is not None
    assert favourite.validations[0].value == by_type["book"].id
    assert writer.validations[0].value == by_type["author"].id


def test_diff_with_one_changed_required_flag_is_minimal(context: SyncContext) -> None:
    source_definition = definition(
        "author", field_definition("name", required=True), field_definition("bio")
    )
    target_definition = definition(
        "author",
        field_definition("name", required=False),
        field_definition("bio"),
        definition_id=gid("MetaobjectDefinition", "remote"),
    )

    update = asyncio.run(DefinitionSynchronizer(context).diff(source_definition, target_definition))

    assert update is not None
    assert update.field_definitions == (FieldDefinitionUpdate(key="name", required=True),)
    assert assigned(update, exclude=("field_definitions",)) == {}
    assert definition_update_input(update) == {
        "fieldDefinitions": [{"update": {"key": "name", "required": True}}]
    }


def test_diff_leaves_target_only_fields_alone(context: SyncContext) -> None:
    source_definition = definition("author", field_definition("name"))
    target_definition = definition("author", field_definition("name"), field_definition("legacy"))

    update = asyncio.run(DefinitionSynchronizer(context).diff(source_definition, target_definition))

    assert update is None


def test_diff_reports_top_level_changes_and_new_fields(context: SyncContext) -> None:
    source_definition = replace(
        definition("author", field_definition("name"), field_definition("born"), name="Authors"),
        access=DefinitionAccess(storefront="PUBLIC_READ"),
    )
    target_definition = replace(
        definition("author", field_definition("name")),
        access=DefinitionAccess(storefront="NONE"),
    )

    update = asyncio.run(DefinitionSynchronizer(context).diff(source_definition, target_definition))

    assert update == DefinitionUpdate(
        name="Authors",
        storefront_access="PUBLIC_READ",
        field_definitions=(
            FieldDefinitionCreate(key="born", name="Born", type="single_line_text_field"),
        ),
    )
    assert definition_update_input(update)["access"] == {"storefront": "PUBLIC_READ"}


def test_sync_maps_reference_validation_to_existing_target(
    context: SyncContext, source: FakeStore, target: FakeStore
) -> None:
    author_id = gid("MetaobjectDefinition", "author")
    author = definition("author", field_definition("name"), definition_id=author_id)
    book = definition(
        "book",
        field_definition("title"),
        field_definition("writer", REFERENCE, references=author_id),
    )
    source.definitions.extend([author, book])
    remote_author = definition(
        "author", field_definition("name"), definition_id=gid("MetaobjectDefinition", "remote-1")
    )
    remote_book = definition(
        "book", field_definition("title"), definition_id=gid("MetaobjectDefinition", "remote-2")
    )
    target.definitions.extend([remote_author, remote_book])

    result = asyncio.run(DefinitionSynchronizer(context).sync(book))

    assert result.outcome is ItemOutcome.UPDATED
    (update,) = target.calls_to("update_definition")
    assert isinstance(update, DefinitionUpdate)
    (operation,) = update.field_definitions
    assert isinstance(operation, FieldDefinitionCreate)
    assert operation.key == "writer"
    assert operation.validations[0].value == remote_author.id
    assert target.calls_to("create_definition") == []


def test_sync_twice_in_one_run_does_not_write_again(
    context: SyncContext, source: FakeStore, target: FakeStore
) -> None:
    author = definition("author", field_definition("name"))
    source.definitions.append(author)
    synchronizer = DefinitionSynchronizer(context)

    first = asyncio.run(synchronizer.sync(author))
    second = asyncio.run(synchronizer.sync(author))

    assert first.outcome is ItemOutcome.CREATED
    assert second.outcome is ItemOutcome.UNCHANGED
    (payload,) = target.calls_to("create_definition")
    assert isinstance(payload, DefinitionCreate)
    assert [item.key for item in payload.field_definitions] == ["name"]


def test_diff_sets_access_when_target_has_none(context: SyncContext) -> None:
    source_definition = replace(
        definition("author", field_definition("name")),
        access=DefinitionAccess(storefront="PUBLIC_READ"),
    )
    target_definition = definition("author", field_definition("name"))

    update = asyncio.run(DefinitionSynchronizer(context).diff(source_definition, target_definition))

    assert update == DefinitionUpdate(storefront_access="PUBLIC_READ")
