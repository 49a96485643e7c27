from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from shopsync.domain.model import File, InstanceField, Product, encode_id_list
from shopsync.domain.reconciliation import (
    FieldEqualityResolver,
    InstanceSynchronizer,
    ItemOutcome,
    SyncOrchestrator,
)
from tests.helpers.builders import REFERENCE_LIST, gid, instance, reference, text

if TYPE_CHECKING:
    from shopsync.domain.reconciliation import SyncContext
    from tests.helpers.fake_store import FakeStore


def _is_equal(context: SyncContext, source: InstanceField, target: InstanceField) -> bool:
    return asyncio.run(FieldEqualityResolver(context).is_equal(source, target))


def test_scalars_compare_by_exact_value(context: SyncContext) -> None:
    assert _is_equal(context, text("name", "Ada"), text("name", "Ada"))
    assert not _is_equal(context, text("name", "Ada"), text("name", "ada"))
    assert not _is_equal(context, text("name", "Ada"), text("name", None))
    assert _is_equal(context, text("name", None), text("name", None))


def test_reference_equality_looks_into_the_referenced_instance(
    context: SyncContext, source: FakeStore, target: FakeStore
) -> None:
    ada = instance(gid("Metaobject", "ada"), "author", "ada", text("name", "Ada"))
    engines = instance(
        gid("Metaobject", "engines"), "book", "engines", reference("author", ada.id)
    )
    remote_ada = instance(gid("Metaobject", "remote-ada"), "author", "ada", text("name", "Ada L."))
    remote_engines = instance(
        gid("Metaobject", "remote-engines"), "book", "engines", reference("author", remote_ada.id)
    )
    source.instances.extend([ada, engines])
    target.instances.extend([remote_ada, remote_engines])

    synchronizer = InstanceSynchronizer(context)

    # Same ids on both sides, but the referenced author differs.
    assert not asyncio.run(synchronizer.is_in_sync(engines, remote_engines))
    assert target.mutations == []


def test_reference_to_another_instance_does_not_match(
    context: SyncContext, source: FakeStore, target: FakeStore
) -> None:
    ada = instance(gid("Metaobject", "ada"), "author", "ada")
    source.instances.append(ada)
    target.instances.extend(
        [
            instance(gid("Metaobject", "remote-ada"), "author", "ada"),
            instance(gid("Metaobject", "remote-bob"), "author", "bob"),
        ]
    )

    assert _is_equal(
        context, reference("author", ada.id), reference("author", gid("Metaobject", "remote-ada"))
    )
    assert not _is_equal(
        context, reference("author", ada.id), reference("author", gid("Metaobject", "remote-bob"))
    )


def test_reference_lists_ignore_order(
    context: SyncContext, source: FakeStore, target: FakeStore
) -> None:
    ada = instance(gid("Metaobject", "ada"), "author", "ada", text("name", "Ada"))
    bob = instance(gid("Metaobject", "bob"), "author", "bob", text("name", "Bob"))
    remote_ada = instance(gid("Metaobject", "remote-ada"), "author", "ada", text("name", "Ada"))
    remote_bob = instance(gid("Metaobject", "remote-bob"), "author", "bob", text("name", "Bob"))
    source.instances.extend([ada, bob])
    target.instances.extend([remote_ada, remote_bob])

    local = InstanceField(
        key="authors", type=REFERENCE_LIST, value=encode_id_list([ada.id, bob.id])
    )
    reordered = InstanceField(
        key="authors", type=REFERENCE_LIST, value=encode_id_list([remote_bob.id, remote_ada.id])
    )
    shorter = InstanceField(
        key="authors", type=REFERENCE_LIST, value=encode_id_list([remote_ada.id])
    )

    assert _is_equal(context, local, reordered)
    assert not _is_equal(context, local, shorter)


def test_reference_cycle_comparison_terminates(
    context: SyncContext, source: FakeStore, target: FakeStore
) -> None:
    alice_id, bob_id = gid("Metaobject", "alice"), gid("Metaobject", "bob")
    remote_alice_id, remote_bob_id = gid("Metaobject", "r-alice"), gid("Metaobject", "r-bob")
    alice = instance(alice_id, "person", "alice", reference("friend", bob_id))
    source.instances.extend([alice, instance(bob_id, "person", "bob", reference("friend", alice_id))])
    remote_alice = instance(remote_alice_id, "person", "alice", reference("friend", remote_bob_id))
    target.instances.extend(
        [remote_alice, instance(remote_bob_id, "person", "bob", reference("friend", remote_alice_id))]
    )

    assert asyncio.run(InstanceSynchronizer(context).is_in_sync(alice, remote_alice))


def test_files_compare_by_derived_name(
    context: SyncContext, source: FakeStore, target: FakeStore
) -> None:
    source.files.append(
        File(id=gid("MediaImage", "1"), url="https://cdn.example.com/s/files/logo.png?v=1")
    )
    target.files.extend(
        [
            File(
                id=gid("MediaImage", "2"),
                url=(
                    "https://cdn.example.com/t/files/"
                    "logo_0a1b2c3d-1111-2222-3333-444455556666.png?v=7"
                ),
            ),
            File(id=gid("MediaImage", "3"), url="https://cdn.example.com/t/files/icon.png"),
        ]
    )

    local = InstanceField(key="logo", type="file_reference", value=gid("MediaImage", "1"))

    assert _is_equal(
        context, local, InstanceField(key="logo", type="file_reference", value=gid("MediaImage", "2"))
    )
    assert not _is_equal(
        context, local, InstanceField(key="logo", type="file_reference", value=gid("MediaImage", "3"))
    )


def test_products_compare_by_handle(
    context: SyncContext, source: FakeStore, target: FakeStore
) -> None:
    source.products.append(Product(id=gid("Product", "1"), handle="mug", title="Mug"))
    target.products.append(Product(id=gid("Product", "9"), handle="mug", title="Mug"))

    assert _is_equal(
        context,
        InstanceField(key="item", type="product_reference", value=gid("Product", "1")),
        InstanceField(key="item", type="product_reference", value=gid("Product", "9")),
    )


def test_check_reports_drift_without_writing(
    context: SyncContext, source: FakeStore, target: FakeStore
) -> None:
    ada = instance(gid("Metaobject", "ada"), "author", "ada", text("name", "Ada"))
    bob = instance(gid("Metaobject", "bob"), "author", "bob", text("name", "Bob"))
    cy = instance(gid("Metaobject", "cy"), "author", "cy", text("name", "Cy"))
    source.instances.extend([ada, bob, cy])
    target.instances.extend(
        [
            instance(gid("Metaobject", "remote-ada"), "author", "ada", text("name", "Ada")),
            instance(gid("Metaobject", "remote-bob"), "author", "bob", text("name", "Robert")),
        ]
    )

    report = asyncio.run(SyncOrchestrator(context).check_instances_of("author"))

    assert report.outcome_of("author/ada") is ItemOutcome.UNCHANGED
    assert report.outcome_of("author/bob") is ItemOutcome.DRIFTED
    assert report.outcome_of("author/cy") is ItemOutcome.DRIFTED
    assert target.mutations == []
