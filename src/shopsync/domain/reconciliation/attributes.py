"""Sync attribute definitions and the attribute values of catalog owners."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from shopsync.domain.errors import NotFoundError
from shopsync.domain.model import AttributeAccess
from shopsync.domain.model.inputs import (
    UNSET,
    AttributeDefinitionCreate,
    AttributeDefinitionUpdate,
    AttributeIdentifier,
    AttributeInput,
    Maybe,
    ValidationInput,
)

from .report import ItemOutcome, Synced

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shopsync.domain.model import Attribute, AttributeDefinition

    from .context import SyncContext
    from .definitions import DefinitionSynchronizer
    from .instances import InstanceSynchronizer

log = getLogger(__name__)


class AttributeDefinitionSynchronizer:
    """Pair attribute definitions by ``namespace:key`` within an owner type."""

    def __init__(self, context: SyncContext, definitions: DefinitionSynchronizer) -> None:
        self.context = context
        self.definitions = definitions

    async def sync(self, source: AttributeDefinition) -> Synced[AttributeDefinition]:
        targets = await self.context.target.attribute_definitions(source.owner_type)
        target = targets.get(source.identity)
        validations = await self._validations(source)

        if target is None:
            payload = AttributeDefinitionCreate(
                namespace=source.namespace,
                key=source.key,
                name=source.name,
                owner_type=source.owner_type,
                type=source.type.name,
                description=source.description,
                pin=source.pinned_position is not None,
                storefront_access=source.access.storefront if source.access else None,
                validations=validations,
            )
            created = await self.context.target.store.create_attribute_definition(payload)
            targets.add(created)
            log.info(
                "Created attribute definition %s (%s) at target: %s",
                source.identity,
                source.owner_type,
                created.id,
            )
            return Synced(ItemOutcome.CREATED, created)

        update = self.diff(source, target, validations)
        if update is None:
            return Synced(ItemOutcome.UNCHANGED, target)
        updated = await self.context.target.store.update_attribute_definition(update)
        targets.add(updated)
        log.info("Updated attribute definition %s (%s)", source.identity, source.owner_type)
        return Synced(ItemOutcome.UPDATED, updated)

    def diff(
        self,
        source: AttributeDefinition,
        target: AttributeDefinition,
        validations: tuple[ValidationInput, ...],
    ) -> AttributeDefinitionUpdate | None:
        source_access = source.access or AttributeAccess()
        target_access = target.access or AttributeAccess()
        storefront_access: Maybe[str | None] = UNSET
        customer_account_access: Maybe[str | None] = UNSET
        if source_access.storefront != target_access.storefront:
            storefront_access = source_access.storefront
        if source_access.customer_account != target_access.customer_account:
            customer_account_access = source_access.customer_account

        changed_validations: Maybe[tuple[ValidationInput, ...]] = UNSET
        if {item.name: item.value for item in validations} != {
            item.name: item.value for item in target.validations
        }:
            changed_validations = validations

        update = AttributeDefinitionUpdate(
            namespace=source.namespace,
            key=source.key,
            owner_type=source.owner_type,
            name=source.name if source.name != target.name else UNSET,
            storefront_access=storefront_access,
            customer_account_access=customer_account_access,
            validations=changed_validations,
        )
        return None if update.is_empty else update

    async def _validations(self, source: AttributeDefinition) -> tuple[ValidationInput, ...]:
        validations, waiting_on = await self.definitions.resolve_validations(source.validations)
        if waiting_on is not None:
            raise NotFoundError("Definition", waiting_on, side="target")
        return validations


class AttributeSynchronizer:
    """Bring the attributes of one target owner in line with a source owner."""

    def __init__(self, context: SyncContext, instances: InstanceSynchronizer) -> None:
        self.context = context
        self.references = instances.references

    async def sync_owner(
        self,
        owner_id: str,
        sources: Sequence[Attribute],
        targets: Sequence[Attribute],
        *,
        collect_garbage: bool = True,
    ) -> ItemOutcome:
        """Set changed attributes, clear emptied ones and, optionally, delete target-only ones."""

        policy = self.context.policy
        existing = {item.identity: item for item in targets}
        writes: list[AttributeInput] = []
        deletions: list[AttributeIdentifier] = []

        for source in sources:
            if policy.is_skipped_attribute(source.namespace, source.key):
                continue
            value = await self.references.materialize(source)
            current = existing.get(source.identity)
            current_value = (current.value or None) if current is not None else None
            if current_value == value:
                continue
            if value is None:
                # The store rejects blank values; clearing means deleting.
                deletions.append(_identifier(owner_id, source))
                continue
            writes.append(
                AttributeInput(
                    owner_id=owner_id,
                    namespace=source.namespace,
                    key=source.key,
                    type=source.type,
                    value=value,
                )
            )

        if collect_garbage:
            source_keys = {item.identity for item in sources}
            deletions.extend(
                _identifier(owner_id, item)
                for item in targets
                if item.identity not in source_keys
                and not policy.is_skipped_attribute(item.namespace, item.key)
            )

        store = self.context.target.store
        if writes:
            await store.set_attributes(writes)
            log.info(
                "Set %d attribute(s) on %s: %s",
                len(writes),
                owner_id,
                ", ".join(f"{item.namespace}:{item.key}" for item in writes),
            )
        if deletions:
            await store.delete_attributes(deletions)
            log.info(
                "Deleted %d attribute(s) on %s: %s",
                len(deletions),
                owner_id,
                ", ".join(f"{item.namespace}:{item.key}" for item in deletions),
            )
        return ItemOutcome.UPDATED if writes or deletions else ItemOutcome.UNCHANGED


def _identifier(owner_id: str, attribute: Attribute) -> AttributeIdentifier:
    return AttributeIdentifier(owner_id=owner_id, namespace=attribute.namespace, key=attribute.key)
