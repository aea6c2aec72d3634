from __future__ import annotations

from typing import Any, Dict, Generic, Iterator, List, Mapping, Optional, Sequence, Type, TypeVar, Union

import logging

from oktasdk.exceptions import EmptyCollection
from oktasdk.exceptions import MultipleItemsInCollection
from oktasdk.resource.base import Resource
from oktasdk.resource.base import StringProperty
from oktasdk.utils.imports import importstr

log = logging.getLogger(__name__)

T = TypeVar('T', bound=Resource)

ITEMS = 'items'


class Page(Generic[T]):

    def __init__(self, items: Sequence[T]):
        self._items = tuple(items)

    @property
    def items(self) -> Sequence[T]:
        return self._items

    def __iter__(self) -> Iterator[T]:
        return iter(self._items)

    def __len__(self):
        return len(self._items)


class CollectionResource(Resource, Generic[T]):
    """Paginated list of resources.

    Iterating is restartable and forward-only. Every new iteration fetches
    the first page again, except the very first one of a freshly constructed
    collection, which already holds the first page.
    """
    item_type: Union[str, Type[T]] = None

    constructor_arities = (1, 2, 3)

    next_page = StringProperty('nextPage')

    def __init__(
        self,
        data_store=None,
        properties: Optional[Mapping[str, Any]] = None,
        query: Optional[Mapping[str, Any]] = None,
    ):
        super().__init__(data_store, properties)
        self.query: Dict[str, Any] = dict(query) if query else {}
        self._first_page_query_required = False

    @classmethod
    def is_collection(cls) -> bool:
        return True

    def _materialize_query(self) -> Optional[Dict[str, Any]]:
        return self.query or None

    @classmethod
    def get_item_type(cls) -> Type[T]:
        if isinstance(cls.item_type, str):
            cls.item_type = importstr(cls.item_type)
        return cls.item_type

    def current_page(self) -> Page[T]:
        items: List[T] = []
        value = self.get_property(ITEMS)
        if value:
            item_type = self.get_item_type()
            values = list(value)
            if not isinstance(values[0], item_type):
                items = [self._to_resource(item_type, v) for v in values]
                # Swap in converted items, this is not a modification.
                self.set_property(ITEMS, items, dirty=False)
            else:
                items = values
        return Page(items)

    def _to_resource(self, item_type: Type[T], data: Mapping[str, Any]) -> T:
        return self.data_store.instantiate(item_type, dict(data))

    def __iter__(self) -> PaginatedIterator[T]:
        first_page_query_required = self._first_page_query_required
        self._first_page_query_required = True
        return PaginatedIterator(self, first_page_query_required)

    def stream(self) -> PaginatedIterator[T]:
        return iter(self)

    def single(self) -> T:
        iterator = iter(self)
        if not iterator.has_next():
            raise EmptyCollection(self)
        item = next(iterator)
        if iterator.has_next():
            raise MultipleItemsInCollection(self)
        return item


class PaginatedIterator(Iterator[T]):

    def __init__(self, collection: CollectionResource[T], first_page_query_required: bool):
        if first_page_query_required:
            # A fresh copy, so iterators never share page state.
            collection = collection.data_store.get_resource(
                collection.href,
                type(collection),
                collection.query,
            )
        self.collection = collection
        self.page = collection.current_page()
        self._items = iter(self.page)
        self._next_href = collection.next_page
        self._lookahead: List[T] = []

    def __iter__(self):
        return self

    def has_next(self) -> bool:
        if self._lookahead:
            return True
        item = next(self._items, _END)
        if item is not _END:
            self._lookahead.append(item)
            return True
        if self._next_href:
            # A page may be full while no more items exist on the server,
            # only the next page can tell.
            log.debug("Fetching next page %r.", self._next_href)
            collection = self.collection.data_store.get_resource(
                self._next_href,
                type(self.collection),
            )
            page = collection.current_page()
            self._next_href = collection.next_page
            items = iter(page)
            item = next(items, _END)
            if item is not _END:
                self.collection = collection
                self.page = page
                self._items = items
                self._lookahead.append(item)
                return True
            self._next_href = None
        return False

    def __next__(self) -> T:
        if not self.has_next():
            raise StopIteration
        return self._lookahead.pop()


_END = object()
