"""Pair entities across stores by their cross-system key."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Protocol

from shopsync.domain.errors import NotFoundError

if TYPE_CHECKING:
    from collections.abc import Callable, Hashable, Iterable, Iterator

    from shopsync.domain.errors import Side

log = getLogger(__name__)


class Identified(Protocol):
    @property
    def id(self) -> str: ...


class KeyIndex[K: Hashable, T: Identified]:
    """In-memory index of one store's collection, keyed by cross-system key.

    Lookups are pure. ``add`` registers freshly created entities so later
    lookups within the same run see them without a re-fetch.
    """

    def __init__(
        self,
        items: Iterable[T],
        *,
        key: Callable[[T], K],
        kind: str,
        side: Side,
    ) -> None:
        self.kind = kind
        self.side = side
        self._key = key
        self._by_key: dict[K, T] = {}
        self._by_id: dict[str, T] = {}
        for item in items:
            item_key = key(item)
            if item_key in self._by_key:
                log.warning(
                    "Duplicate %s key %s at %s; keeping %s, ignoring %s",
                    kind,
                    item_key,
                    side,
                    self._by_key[item_key].id,
                    item.id,
                )
                continue
            self._by_key[item_key] = item
            self._by_id[item.id] = item

    def __len__(self) -> int:
        return len(self._by_key)

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._by_key.values()))

    def __contains__(self, key: object) -> bool:
        return key in self._by_key

    def keys(self) -> set[K]:
        return set(self._by_key)

    def key_of(self, item: T) -> K:
        return self._key(item)

    def get(self, key: K) -> T | None:
        return self._by_key.get(key)

    def get_by_id(self, item_id: str) -> T | None:
        return self._by_id.get(item_id)

    def resolve(self, key: K) -> T:
        item = self._by_key.get(key)
        if item is None:
            raise NotFoundError(self.kind, key, side=self.side)
        return item

    def resolve_by_id(self, item_id: str) -> T:
        item = self._by_id.get(item_id)
        if item is None:
            raise NotFoundError(self.kind, item_id, side=self.side)
        return item

    def add(self, item: T) -> None:
        item_key = self._key(item)
        previous = self._by_key.get(item_key)
        if previous is not None:
            self._by_id.pop(previous.id, None)
        self._by_key[item_key] = item
        self._by_id[item.id] = item

    def discard(self, key: K) -> None:
        item = self._by_key.pop(key, None)
        if item is not None:
            self._by_id.pop(item.id, None)


def pair[K: Hashable, T: Identified](
    sources: Iterable[T], targets: KeyIndex[K, T]
) -> Iterator[tuple[T, T | None]]:
    """Yield each source item with its target counterpart, if any."""

    for source in sources:
        yield source, targets.get(targets.key_of(source))


def unmatched[K: Hashable, T: Identified](
    source_keys: set[K], targets: KeyIndex[K, T]
) -> list[T]:
    """Return target items whose key has no source counterpart, in target order."""

    return [item for item in targets if targets.key_of(item) not in source_keys]
