"""Sync a single instance: diff against its target counterpart, then create or patch."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from shopsync.domain.errors import NotFoundError
from shopsync.domain.model.inputs import InstanceCreate, InstanceFieldInput, InstancePatch

from .equality import FieldEqualityResolver
from .references import ReferenceSynchronizer
from .report import ItemOutcome, Synced

if TYPE_CHECKING:
    from shopsync.domain.model import Instance

    from .context import SyncContext

log = getLogger(__name__)


class InstanceSynchronizer:
    """Create, patch or leave alone the target counterpart of a source instance.

    Referenced instances are synced first, depth first. When a reference points
    back at an instance whose sync is still on the stack, the field is written
    empty and the referring instance is patched again once the outermost sync
    returns, so reference cycles settle within one run.
    """

    def __init__(self, context: SyncContext) -> None:
        self.context = context
        self.references = ReferenceSynchronizer(context, sync_instance=self._sync_reference)
        self.equality = FieldEqualityResolver(context)
        self._stack: list[Instance] = []
        self._incomplete: dict[tuple[str, str], Instance] = {}

    async def sync_by_id(self, source_id: str) -> Synced[Instance]:
        source = await self.context.source.instance(source_id)
        if source is None:
            raise NotFoundError("Instance", source_id, side="source")
        return await self.sync(source)

    async def sync(self, source: Instance) -> Synced[Instance]:
        key = source.identity
        done = self.context.synced_instances.get(key)
        if done is not None:
            return Synced(ItemOutcome.UNCHANGED, done)
        if key in self.context.instances_in_progress:
            current = await self.context.target.instance_by_handle(*key)
            log.debug("Instance %s/%s is already being synced, reusing %s", *key, current)
            return Synced(ItemOutcome.SKIPPED, current)

        self.context.instances_in_progress.add(key)
        self._stack.append(source)
        try:
            result = await self._sync(source)
        except Exception:
            self.context.instances_in_progress.discard(key)
            raise
        finally:
            self._stack.pop()
        if result.entity is not None:
            self.context.synced_instances[key] = result.entity
        if not self._stack and self._incomplete:
            await self._complete_cycles()
        return result

    async def diff(self, source: Instance, target: Instance) -> InstancePatch | None:
        """Return the fields whose target encoding differs, or ``None`` when in sync."""

        changes: list[InstanceFieldInput] = []
        for source_field in source.fields:
            value = await self.references.materialize(source_field)
            target_field = target.field(source_field.key)
            if target_field is not None and (target_field.value or None) == value:
                continue
            changes.append(InstanceFieldInput(key=source_field.key, value=value))
        if not changes:
            return None
        return InstancePatch(fields=tuple(changes))

    async def is_in_sync(self, source: Instance, target: Instance) -> bool:
        return await self.equality.instances_match(source, target)

    async def _sync(self, source: Instance) -> Synced[Instance]:
        log.debug("Sync instance %s/%s (%s)", source.type, source.handle, source.id)
        target = await self.context.target.instance_by_handle(*source.identity)

        if target is not None and target.type != source.type:
            log.info(
                "Target instance %s has definition %s, expected %s; recreating",
                target.id,
                target.type,
                source.type,
            )
            await self.context.target.store.delete_instance(target.id)
            self.context.target.forget_instance(target)
            target = None

        if target is None:
            created = await self._create(source)
            log.info("Created instance %s/%s at target: %s", *source.identity, created.id)
            return Synced(ItemOutcome.CREATED, created)

        patch = await self.diff(source, target)
        if patch is None:
            log.debug("Instance %s/%s in sync", *source.identity)
            return Synced(ItemOutcome.UNCHANGED, target)

        updated = await self.context.target.store.update_instance(target.id, patch)
        self.context.target.remember_instance(updated)
        log.info(
            "Updated instance %s/%s at target: %s",
            *source.identity,
            ", ".join(item.key for item in patch.fields),
        )
        return Synced(ItemOutcome.UPDATED, updated)

    async def _create(self, source: Instance) -> Instance:
        fields = [
            InstanceFieldInput(key=item.key, value=await self.references.materialize(item))
            for item in source.fields
        ]
        payload = InstanceCreate(type=source.type, handle=source.handle, fields=tuple(fields))
        created = await self.context.target.store.create_instance(payload)
        self.context.target.remember_instance(created)
        return created

    async def _sync_reference(self, referenced: Instance) -> Instance | None:
        result = await self.sync(referenced)
        if result.entity is None and self._stack:
            requester = self._stack[-1]
            self._incomplete[requester.identity] = requester
        return result.entity

    async def _complete_cycles(self) -> None:
        pending = list(self._incomplete.values())
        self._incomplete.clear()
        for source in pending:
            target = await self.context.target.instance_by_handle(*source.identity)
            if target is None:
                continue
            self._stack.append(source)
            try:
                patch = await self.diff(source, target)
            finally:
                self._stack.pop()
            if patch is None:
                continue
            updated = await self.context.target.store.update_instance(target.id, patch)
            self.context.target.remember_instance(updated)
            self.context.synced_instances[source.identity] = updated
            log.info("Completed cyclic references of %s/%s", *source.identity)
