from __future__ import annotations

from typing import Callable, Sequence, TYPE_CHECKING

import logging

from oktasdk.ds.components import ResourceDataRequest
from oktasdk.ds.components import ResourceDataResult

if TYPE_CHECKING:
    from oktasdk.ds.cache import ResourceCacheStrategy

log = logging.getLogger(__name__)

Handler = Callable[[ResourceDataRequest], ResourceDataResult]


class FilterChain:
    """Ordered request filters wrapped around a terminal handler.

    A chain is immutable, each `filter()` call walks it from the first
    filter, so one chain can serve concurrent requests.
    """

    def __init__(self, filters: Sequence[Filter], handler: Handler):
        self.filters = tuple(filters)
        self.handler = handler

    def filter(self, request: ResourceDataRequest) -> ResourceDataResult:
        return _Link(self.filters, 0, self.handler).filter(request)


class _Link:

    def __init__(self, filters, index: int, handler: Handler):
        self.filters = filters
        self.index = index
        self.handler = handler

    def filter(self, request: ResourceDataRequest) -> ResourceDataResult:
        if self.index == len(self.filters):
            log.debug("Filter chain completed, executing %s request.", request.action.value)
            return self.handler(request)
        current = self.filters[self.index]
        return current.filter(request, _Link(self.filters, self.index + 1, self.handler))


class Filter:

    def filter(self, request: ResourceDataRequest, chain) -> ResourceDataResult:
        raise NotImplementedError


class ReadCacheFilter(Filter):

    def __init__(self, strategy: ResourceCacheStrategy):
        self.strategy = strategy

    def filter(self, request, chain):
        result = self.strategy.read_from_cache(request)
        if result is not None:
            return result
        return chain.filter(request)


class WriteCacheFilter(Filter):

    def __init__(self, strategy: ResourceCacheStrategy):
        self.strategy = strategy

    def filter(self, request, chain):
        result = chain.filter(request)
        self.strategy.cache(request, result)
        return result
