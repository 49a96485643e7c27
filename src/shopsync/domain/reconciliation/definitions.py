"""Sync custom-schema definitions, including definitions that reference each other.

A definition's field may be constrained to instances of another definition
(``metaobject_definition_id``), so syncing one definition can require syncing
another first. Recursion is cut by the run's in-progress set: a definition
that is already being synced resolves to whatever target definition exists
right now. When that target does not exist yet (a self reference, or a cycle
through a definition that is still being created) the field is held back and
added with a follow-up update as soon as the referenced definition is created.
"""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from shopsync.domain.errors import IncompleteDefinitionError
from shopsync.domain.model import DefinitionAccess
from shopsync.domain.model.inputs import (
    UNSET,
    DefinitionCreate,
    DefinitionUpdate,
    FieldDefinitionCreate,
    FieldDefinitionOperation,
    FieldDefinitionUpdate,
    Maybe,
    ValidationInput,
)

from .context import DeferredField
from .report import ItemOutcome, Synced

if TYPE_CHECKING:
    from collections.abc import Iterable

    from shopsync.domain.model import Definition, FieldDefinition, Validation

    from .context import SyncContext

log = getLogger(__name__)

type _Resolved = tuple[tuple[ValidationInput, ...], str | None]


class DefinitionSynchronizer:
    def __init__(self, context: SyncContext) -> None:
        self.context = context

    async def sync(self, source: Definition) -> Synced[Definition]:
        key = source.type
        targets = await self.context.target.definitions()

        finished = self.context.synced_definitions.get(key)
        if finished is not None:
            return Synced(ItemOutcome.UNCHANGED, finished)
        if key in self.context.definitions_in_progress:
            current = targets.get(key)
            log.debug(
                "Definition %s is already being synced, reusing %s",
                key,
                current.id if current else "nothing yet",
            )
            return Synced(ItemOutcome.SKIPPED, current)

        self.context.definitions_in_progress.add(key)
        log.debug("Sync definition %s (%s)", key, source.id)
        try:
            result = await self._sync(source, targets.get(key))
        except Exception:
            self.context.definitions_in_progress.discard(key)
            self.context.withdraw_deferred(key)
            raise

        if result.entity is not None:
            self.context.synced_definitions[key] = result.entity
        return result

    async def _sync(self, source: Definition, target: Definition | None) -> Synced[Definition]:
        if target is None:
            return await self._create(source)
        update = await self.diff(source, target)
        if update is None:
            log.debug("Definition %s in sync", source.type)
            return Synced(ItemOutcome.UNCHANGED, target)
        updated = await self.context.target.store.update_definition(target.id, update)
        (await self.context.target.definitions()).add(updated)
        log.info("Updated definition %s at target: %s", source.type, updated.id)
        return Synced(ItemOutcome.UPDATED, updated)

    def unreleased(self) -> list[IncompleteDefinitionError]:
        """Fields still held back for a referenced definition that never reached the target."""

        return [
            IncompleteDefinitionError(item.owner_type, item.field_definition.key, referenced_type)
            for referenced_type, pending in self.context.deferred_fields.items()
            for item in pending
        ]

    async def diff(self, source: Definition, target: Definition) -> DefinitionUpdate | None:
        """Return the partial update that brings ``target`` in line, or ``None``.

        Field definitions only present at target are left alone; removing them
        is the job of the explicit field-definition collection pass.
        """

        operations: list[FieldDefinitionOperation] = []
        for field_definition in source.field_definitions:
            target_field = target.field_definition(field_definition.key)
            if target_field is None:
                validations, waiting_on = await self.resolve_validations(
                    field_definition.validations
                )
                if waiting_on is not None:
                    self.context.defer(waiting_on, DeferredField(source.type, field_definition))
                    continue
                operations.append(_field_create(field_definition, validations))
                continue
            update = await self._field_update(source.type, field_definition, target_field)
            if update is not None:
                operations.append(update)

        source_access = source.access or DefinitionAccess()
        storefront_access: Maybe[str | None] = UNSET
        customer_account_access: Maybe[str | None] = UNSET
        target_access = target.access or DefinitionAccess()
        if source_access.storefront != target_access.storefront:
            storefront_access = source_access.storefront
        if source_access.customer_account != target_access.customer_account:
            customer_account_access = source_access.customer_account

        update = DefinitionUpdate(
            name=source.name if source.name != target.name else UNSET,
            display_name_key=(
                source.display_name_key
                if source.display_name_key != target.display_name_key
                else UNSET
            ),
            storefront_access=storefront_access,
            customer_account_access=customer_account_access,
            field_definitions=tuple(operations),
        )
        return None if update.is_empty else update

    async def _field_update(
        self,
        owner_type: str,
        source: FieldDefinition,
        target: FieldDefinition,
    ) -> FieldDefinitionUpdate | None:
        if source.type != target.type:
            log.warning(
                "Field %s.%s is %s at source but %s at target; field types cannot be patched",
                owner_type,
                source.key,
                source.type.name,
                target.type.name,
            )

        validations, waiting_on = await self.resolve_validations(source.validations)
        changed_validations: Maybe[tuple[ValidationInput, ...]] = UNSET
        if waiting_on is None:
            target_values = {item.name: item.value for item in target.validations}
            if {item.name: item.value for item in validations} != target_values:
                changed_validations = validations

        update = FieldDefinitionUpdate(
            key=source.key,
            name=source.name if source.name != target.name else UNSET,
            description=source.description if source.description != target.description else UNSET,
            required=source.required if source.required != target.required else UNSET,
            validations=changed_validations,
        )
        return None if update.is_empty else update

    async def resolve_validations(self, validations: Iterable[Validation]) -> _Resolved:
        """Map validations to target values.

        Returns the mapped validations and, when a referenced definition has no
        target yet, the type of that definition.
        """

        resolved: list[ValidationInput] = []
        for validation in validations:
            if not validation.references_definition or validation.value is None:
                resolved.append(ValidationInput(name=validation.name, value=validation.value))
                continue
            sources = await self.context.source.definitions()
            referenced = sources.resolve_by_id(validation.value)
            synced = await self.sync(referenced)
            if synced.entity is None:
                return tuple(resolved), referenced.type
            resolved.append(ValidationInput(name=validation.name, value=synced.entity.id))
        return tuple(resolved), None

    async def _create(self, source: Definition) -> Synced[Definition]:
        creates: list[FieldDefinitionCreate] = []
        held_back: set[str] = set()
        for field_definition in source.field_definitions:
            validations, waiting_on = await self.resolve_validations(field_definition.validations)
            if waiting_on is not None:
                self.context.defer(waiting_on, DeferredField(source.type, field_definition))
                held_back.add(field_definition.key)
                continue
            creates.append(_field_create(field_definition, validations))

        display_name_key = source.display_name_key
        if display_name_key in held_back:
            display_name_key = None
        payload = DefinitionCreate(
            type=source.type,
            name=source.name,
            display_name_key=display_name_key,
            storefront_access=source.access.storefront if source.access else None,
            field_definitions=tuple(creates),
        )
        created = await self.context.target.store.create_definition(payload)
        (await self.context.target.definitions()).add(created)
        log.info("Created definition %s at target: %s", source.type, created.id)

        await self._release_deferred(source.type)
        current = (await self.context.target.definitions()).get(source.type) or created
        return Synced(ItemOutcome.CREATED, current)

    async def _release_deferred(self, created_type: str) -> None:
        """Add the field definitions that were waiting for ``created_type`` to exist."""

        pending = self.context.take_deferred(created_type)
        if not pending:
            return
        sources = await self.context.source.definitions()
        targets = await self.context.target.definitions()

        by_owner: dict[str, list[FieldDefinition]] = {}
        for item in pending:
            by_owner.setdefault(item.owner_type, []).append(item.field_definition)

        for owner_type, field_definitions in by_owner.items():
            owner = targets.get(owner_type)
            if owner is None:
                for field_definition in field_definitions:
                    self.context.defer(created_type, DeferredField(owner_type, field_definition))
                continue
            operations: list[FieldDefinitionOperation] = []
            for field_definition in field_definitions:
                validations, waiting_on = await self.resolve_validations(
                    field_definition.validations
                )
                if waiting_on is not None:
                    self.context.defer(waiting_on, DeferredField(owner_type, field_definition))
                    continue
                operations.append(_field_create(field_definition, validations))
            if not operations:
                continue

            source_owner = sources.get(owner_type)
            added = {operation.key for operation in operations}
            display_name_key: Maybe[str | None] = UNSET
            if source_owner is not None and source_owner.display_name_key in added:
                display_name_key = source_owner.display_name_key

            update = DefinitionUpdate(
                display_name_key=display_name_key, field_definitions=tuple(operations)
            )
            updated = await self.context.target.store.update_definition(owner.id, update)
            targets.add(updated)
            if owner_type in self.context.synced_definitions:
                self.context.synced_definitions[owner_type] = updated
            log.info(
                "Added fields %s to definition %s once %s existed",
                ", ".join(sorted(added)),
                owner_type,
                created_type,
            )


def _field_create(
    field_definition: FieldDefinition, validations: tuple[ValidationInput, ...]
) -> FieldDefinitionCreate:
    return FieldDefinitionCreate(
        key=field_definition.key,
        name=field_definition.name,
        type=field_definition.type.name,
        description=field_definition.description,
        required=field_definition.required,
        validations=validations,
    )
