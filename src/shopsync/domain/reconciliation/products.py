"""Sync products by handle: the product itself, its variants and their attributes."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING

from shopsync.domain.errors import NotFoundError, ValidationConflictError
from shopsync.domain.model import derive_file_name
from shopsync.domain.model.inputs import (
    UNSET,
    Maybe,
    MediaInput,
    ProductCreate,
    ProductUpdate,
    VariantInput,
)

from .report import ItemOutcome, Synced

if TYPE_CHECKING:
    from collections.abc import Sequence

    from shopsync.domain.model import Product, Variant

    from .attributes import AttributeSynchronizer
    from .context import SyncContext

log = getLogger(__name__)

VARIANT_LIMIT_MESSAGE = "Exceeded maximum number of variants allowed"


class ProductSynchronizer:
    def __init__(self, context: SyncContext, attributes: AttributeSynchronizer) -> None:
        self.context = context
        self.attributes = attributes

    async def sync(self, handle: str) -> Synced[Product]:
        source = await self._source(handle)
        target = await self.context.target.product_by_handle(handle)
        if target is None:
            log.debug("Product %s not found at target", handle)
            return await self._create(source)

        outcome = ItemOutcome.UNCHANGED
        update = await self.diff(source, target)
        if update is not None:
            target = await self.context.target.store.update_product(update)
            self.context.target.remember_product(target)
            log.info("Updated product %s at target: %s", handle, target.id)
            outcome = ItemOutcome.UPDATED

        creates, updates = await self.variant_changes(source, target)
        variants_written = False
        if creates:
            created = await self._create_variants(target.id, creates)
            if created:
                log.info("Created %d variant(s) of product %s", len(created), handle)
                variants_written = True
        if updates:
            await self.context.target.store.bulk_update_variants(target.id, updates)
            log.info("Updated %d variant(s) of product %s", len(updates), handle)
            variants_written = True
        if variants_written:
            target = await self._reload(target)
            outcome = ItemOutcome.UPDATED
        return Synced(outcome, target)

    async def sync_attributes(self, handle: str) -> ItemOutcome:
        """Sync product and variant attributes; the product must exist on both sides."""

        source = await self._source(handle)
        target = await self.context.target.product_by_handle(handle)
        if target is None:
            raise NotFoundError("Product", handle, side="target")

        log.debug("Sync attributes of product %s (%s -> %s)", handle, source.id, target.id)
        outcomes = [
            await self.attributes.sync_owner(target.id, source.attributes, target.attributes)
        ]
        for source_variant in source.variants:
            target_variant = target.variant(source_variant.title)
            if target_variant is None:
                log.warning(
                    "Variant %s of product %s not found at target", source_variant.title, handle
                )
                continue
            outcomes.append(
                await self.attributes.sync_owner(
                    target_variant.id, source_variant.attributes, target_variant.attributes
                )
            )
        for target_variant in target.variants:
            if source.variant(target_variant.title) is None:
                log.warning(
                    "Variant %s of product %s exists only at target", target_variant.title, handle
                )

        if ItemOutcome.UPDATED in outcomes:
            return ItemOutcome.UPDATED
        return ItemOutcome.UNCHANGED

    async def diff(self, source: Product, target: Product) -> ProductUpdate | None:
        for media in source.media:
            if media.name not in {item.name for item in target.media}:
                log.warning("Media %s of product %s not found at target", media.name, source.handle)

        wanted = await self._target_collection_ids(source)
        current = [item.id for item in target.collections]
        to_join = tuple(item for item in wanted if item not in current)
        to_leave = tuple(item for item in current if item not in wanted)

        update = ProductUpdate(
            id=target.id,
            title=_changed(source.title, target.title),
            description_html=_changed(source.description_html, target.description_html),
            category_id=_changed(source.category_id, target.category_id),
            product_type=_changed(source.product_type, target.product_type),
            vendor=_changed(source.vendor, target.vendor),
            status=_changed(source.status, target.status),
            tags=source.tags if set(source.tags) != set(target.tags) else UNSET,
            template_suffix=_changed(source.template_suffix, target.template_suffix),
            gift_card_template_suffix=_changed(
                source.gift_card_template_suffix, target.gift_card_template_suffix
            ),
            requires_selling_plan=_changed(
                source.requires_selling_plan, target.requires_selling_plan
            ),
            seo=_changed(source.seo, target.seo),
            collections_to_join=to_join or UNSET,
            collections_to_leave=to_leave or UNSET,
        )
        return None if update.is_empty else update

    async def variant_changes(
        self, source: Product, target: Product
    ) -> tuple[list[VariantInput], list[VariantInput]]:
        """Split variant changes into creates (no target by title) and partial updates."""

        creates: list[VariantInput] = []
        updates: list[VariantInput] = []
        for source_variant in source.variants:
            target_variant = target.variant(source_variant.title)
            if target_variant is None:
                creates.append(await self._variant_create(source_variant))
                continue
            update = _variant_update(source_variant, target_variant)
            if not update.is_empty:
                updates.append(update)
        return creates, updates

    async def _source(self, handle: str) -> Product:
        source = await self.context.source.product_by_handle(handle)
        if source is None:
            raise NotFoundError("Product", handle, side="source")
        return source

    async def _create(self, source: Product) -> Synced[Product]:
        payload = ProductCreate(
            handle=source.handle,
            title=source.title,
            description_html=source.description_html,
            product_type=source.product_type,
            vendor=source.vendor,
            status=source.status,
            tags=source.tags,
            template_suffix=source.template_suffix,
            gift_card_template_suffix=source.gift_card_template_suffix,
            requires_selling_plan=source.requires_selling_plan,
            gift_card=source.is_gift_card,
            category_id=source.category_id,
            seo=source.seo,
            options=source.options,
            collections_to_join=tuple(await self._target_collection_ids(source)),
        )
        created = await self.context.target.store.create_product(
            payload, await self._media_inputs(source)
        )
        self.context.target.remember_product(created)
        log.info("Created product %s at target: %s", source.handle, created.id)

        variants = [await self._variant_create(item) for item in source.variants]
        if variants and await self._create_variants(created.id, variants):
            created = await self._reload(created)
        return Synced(ItemOutcome.CREATED, created)

    async def _reload(self, product: Product) -> Product:
        self.context.target.forget_product(product)
        return await self.context.target.product_by_handle(product.handle) or product

    async def _create_variants(
        self, product_id: str, payload: Sequence[VariantInput]
    ) -> list[Variant]:
        try:
            return await self.context.target.store.bulk_create_variants(product_id, payload)
        except ValidationConflictError as error:
            if any(VARIANT_LIMIT_MESSAGE in reason.message for reason in error.reasons):
                log.warning("Product %s has reached the variant limit: %s", product_id, error)
                return []
            raise

    async def _target_collection_ids(self, source: Product) -> list[str]:
        targets = await self.context.target.collections()
        ids: list[str] = []
        for collection in source.collections:
            target = targets.get(collection.handle)
            if target is None:
                raise NotFoundError("Collection", collection.handle, side="target")
            ids.append(target.id)
        return ids

    async def _media_inputs(self, source: Product) -> list[MediaInput]:
        media: list[MediaInput] = []
        for item in source.media:
            target_file = await self.context.target.file_by_name(item.name) if item.name else None
            if target_file is None or not target_file.url:
                log.warning("Media %s of product %s not found at target", item.name, source.handle)
                continue
            media.append(
                MediaInput(
                    original_source=target_file.url,
                    media_content_type=item.media_content_type,
                    alt=item.alt,
                )
            )
        return media

    async def _variant_create(self, source: Variant) -> VariantInput:
        media_id = None
        if source.image_url:
            image = await self.context.target.file_by_name(derive_file_name(source.image_url))
            if image is None:
                log.warning("Image of variant %s not found at target", source.title)
            else:
                media_id = image.id
        return VariantInput(
            price=source.price,
            compare_at_price=source.compare_at_price,
            barcode=source.barcode,
            sku=source.sku,
            taxable=source.taxable,
            inventory_policy=source.inventory_policy,
            option_values=source.selected_options,
            media_id=media_id,
        )


def _changed[T](source: T, target: T) -> Maybe[T]:
    return source if source != target else UNSET


def _variant_update(source: Variant, target: Variant) -> VariantInput:
    return VariantInput(
        id=target.id,
        price=_changed(source.price, target.price),
        compare_at_price=_changed(source.compare_at_price, target.compare_at_price),
        barcode=_changed(source.barcode, target.barcode),
        taxable=_changed(source.taxable, target.taxable),
        inventory_policy=_changed(source.inventory_policy, target.inventory_policy),
        option_values=(
            source.selected_options
            if set(source.selected_options) != set(target.selected_options)
            else UNSET
        ),
    )
