"""Delete target entities whose cross-system key has no source counterpart."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from shopsync.domain.model.inputs import DefinitionUpdate, FieldDefinitionDelete

from .mapper import unmatched
from .report import ItemOutcome, Synced

if TYPE_CHECKING:
    from shopsync.domain.model import AttributeDefinition, Collection, Definition, Instance

    from .context import SyncContext

log = getLogger(__name__)


class GarbageCollector:
    """Plan and issue deletions; planning only reads, deleting is done per item."""

    def __init__(self, context: SyncContext) -> None:
        self.context = context

    # Definitions

    async def orphan_definitions(self) -> list[Definition]:
        sources = await self.context.source.definitions()
        targets = await self.context.target.definitions()
        policy = self.context.policy
        return [
            item
            for item in unmatched(sources.keys(), targets)
            if not policy.is_reserved_definition(item.type)
        ]

    async def delete_definition(self, target: Definition) -> Synced[Definition]:
        store = self.context.target.store
        # Instances go first; the bulk job runs on the store and is not awaited.
        job = await store.bulk_delete_instances(target.type)
        log.info("Requested deletion of all %s instances at target (job %s)", target.type, job)
        deleted = await store.delete_definition(target.id)
        (await self.context.target.definitions()).discard(target.type)
        log.info("Deleted definition %s at target: %s", target.type, deleted)
        return Synced(ItemOutcome.DELETED, target)

    # Instances

    async def orphan_instances(self, definition_type: str) -> list[Instance]:
        sources = await self.context.source.instances_of(definition_type)
        targets = await self.context.target.instances_of(definition_type)
        return unmatched(sources.keys(), targets)

    async def delete_instance(self, target: Instance) -> Synced[Instance]:
        deleted = await self.context.target.store.delete_instance(target.id)
        self.context.target.forget_instance(target)
        log.info("Deleted instance %s/%s at target: %s", *target.identity, deleted)
        return Synced(ItemOutcome.DELETED, target)

    # Attribute definitions

    async def orphan_attribute_definitions(self, owner_type: str) -> list[AttributeDefinition]:
        sources = await self.context.source.attribute_definitions(owner_type)
        targets = await self.context.target.attribute_definitions(owner_type)
        policy = self.context.policy
        return [
            item
            for item in unmatched(sources.keys(), targets)
            if not policy.is_reserved_namespace(item.namespace)
        ]

    async def delete_attribute_definition(
        self, target: AttributeDefinition
    ) -> Synced[AttributeDefinition]:
        deleted = await self.context.target.store.delete_attribute_definition(target.id)
        (await self.context.target.attribute_definitions(target.owner_type)).discard(
            target.identity
        )
        log.info(
            "Deleted attribute definition %s (%s) at target: %s",
            target.identity,
            target.owner_type,
            deleted,
        )
        return Synced(ItemOutcome.DELETED, target)

    # Collections

    async def orphan_collections(self) -> list[Collection]:
        sources = await self.context.source.collections()
        targets = await self.context.target.collections()
        return unmatched(sources.keys(), targets)

    async def delete_collection(self, target: Collection) -> Synced[Collection]:
        deleted = await self.context.target.store.delete_collection(target.id)
        (await self.context.target.collections()).discard(target.handle)
        log.info("Deleted collection %s at target: %s", target.handle, deleted)
        return Synced(ItemOutcome.DELETED, target)

    # Field definitions

    async def field_deletions(
        self, source: Definition
    ) -> tuple[Definition, DefinitionUpdate] | None:
        """Return the target of ``source`` with the update that drops its target-only fields."""

        target = (await self.context.target.definitions()).get(source.type)
        if target is None:
            return None
        source_keys = {item.key for item in source.field_definitions}
        operations = tuple(
            FieldDefinitionDelete(key=item.key)
            for item in target.field_definitions
            if item.key not in source_keys
        )
        if not operations:
            return None
        return target, DefinitionUpdate(field_definitions=operations)

    async def delete_fields(
        self, target: Definition, update: DefinitionUpdate
    ) -> Synced[Definition]:
        updated = await self.context.target.store.update_definition(target.id, update)
        (await self.context.target.definitions()).add(updated)
        log.info(
            "Deleted fields %s of definition %s at target",
            ", ".join(item.key for item in update.field_definitions),
            target.type,
        )
        return Synced(ItemOutcome.DELETED, updated)
