from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Type, TYPE_CHECKING

import copy
import logging
import threading

from oktasdk.cache.components import Cache
from oktasdk.cache.components import CacheManager
from oktasdk.core.enums import ResourceAction
from oktasdk.ds.components import ResourceDataRequest
from oktasdk.ds.components import ResourceDataResult
from oktasdk.ds.factory import to_interface_path
from oktasdk.resource.collection import CollectionResource
from oktasdk.utils.imports import class_path
from oktasdk.utils.url import ancestor_paths
from oktasdk.utils.url import cache_key

if TYPE_CHECKING:
    from oktasdk.ds.discriminator import DiscriminatorRegistry
    from oktasdk.resource.base import Resource

log = logging.getLogger(__name__)

CacheMapInitializer = Callable[[Type['Resource'], Dict[str, Any]], Dict[str, Any]]


class HalResourceHrefResolver:
    """Resolves a resource's own href from its raw data.

    The HAL `_links.self.href` link is used when present, otherwise the
    resource class gets a chance to build the href from other links.
    """

    def __init__(self, base_url: Optional[str] = None):
        self.base_url = base_url

    def resolve_href(
        self,
        data: Dict[str, Any],
        resource_class: Type[Resource],
    ) -> Optional[str]:
        if not data:
            return None
        links = data.get('_links')
        if isinstance(links, dict):
            self_link = links.get('self')
            if isinstance(self_link, dict) and self_link.get('href'):
                return self_link['href']
        fallback = getattr(resource_class, 'resolve_self_href', None)
        if fallback is not None:
            return fallback(data, self.base_url)
        return None


class CacheRegionNameResolver:

    def __init__(self, registry: Optional[DiscriminatorRegistry] = None):
        self.registry = registry

    def get_region_name(self, resource_class: Type[Resource]) -> str:
        klass = resource_class
        if self.registry is not None:
            base = self.registry.get_base_class(resource_class)
            if base is not None:
                klass = base
        return to_interface_path(class_path(klass)).replace(':', '.')


class CacheResolver:
    """Maps resource classes to cache regions.

    Remembers every region it has handed out, so an href can be invalidated
    in all of them.
    """

    def __init__(
        self,
        manager: CacheManager,
        region_names: Optional[CacheRegionNameResolver] = None,
    ):
        self.manager = manager
        self.region_names = region_names or CacheRegionNameResolver()
        self._regions: Dict[str, Cache] = {}
        self._lock = threading.Lock()

    def get_cache(self, resource_class: Type[Resource]) -> Cache:
        name = self.region_names.get_region_name(resource_class)
        with self._lock:
            if name not in self._regions:
                self._regions[name] = self.manager.get_cache(name)
            return self._regions[name]

    def get_caches(self) -> List[Cache]:
        with self._lock:
            return list(self._regions.values())


def _empty_cache_map(resource_class, data):
    return {}


class ResourceCacheStrategy:

    def __init__(
        self,
        href_resolver: HalResourceHrefResolver,
        cache_resolver: CacheResolver,
        initializer: CacheMapInitializer = _empty_cache_map,
    ):
        self.href_resolver = href_resolver
        self.cache_resolver = cache_resolver
        self.initializer = initializer

    def cache(self, request: ResourceDataRequest, result: ResourceDataResult):
        if request.action.mutating:
            self._invalidate_lineage(request)

        if request.action is ResourceAction.DELETE:
            self._uncache(self._request_key(request), request.resource_class)
        elif _is_expanded(request):
            log.debug("Not caching expanded representation of %r.", result.uri.absolute_path)
        elif self._is_cacheable(result):
            self._cache(result.resource_class, result.data)
        elif request.parent_uri is not None:
            self._uncache(
                cache_key(request.parent_uri.absolute_path),
                request.parent_class or request.resource_class,
            )
        else:
            log.debug(
                "Cannot cache action: %r, href: %r, class: %r.",
                result.action.value,
                result.uri.absolute_path,
                result.resource_class.__name__,
            )

    def read_from_cache(self, request: ResourceDataRequest) -> Optional[ResourceDataResult]:
        if not self._is_retrieval_enabled(request):
            return None

        key = self._request_key(request)
        if _is_expanded(request) ^ ('expand=' in key):
            return None

        data = self._get_cached_value(key, request.resource_class)
        if not data:
            return None
        return ResourceDataResult(
            action=request.action,
            uri=request.uri,
            resource_class=request.resource_class,
            data=copy.deepcopy(data),
        )

    def _cache(self, resource_class: Type[Resource], data: Dict[str, Any]):
        href = self.href_resolver.resolve_href(data, resource_class)
        value = self.initializer(resource_class, data)
        # Entries must not share nested maps with resources built from them.
        value.update(copy.deepcopy(data))
        if self._is_directly_cacheable(resource_class, value):
            cache = self.cache_resolver.get_cache(resource_class)
            key = cache_key(href)
            previous = cache.put(key, value)
            log.debug(
                "Caching object for key %r, class: %r, updated %s.",
                key,
                resource_class.__name__,
                previous is not None,
            )

    def _uncache(self, key: str, resource_class: Type[Resource]):
        cache = self.cache_resolver.get_cache(resource_class)
        cache.remove(key)
        log.debug("Removing cache for key %r, class: %r.", key, resource_class.__name__)

    def _invalidate_lineage(self, request: ResourceDataRequest):
        path = request.uri.absolute_path
        keys = [cache_key(path)] + ancestor_paths(path)
        for cache in self.cache_resolver.get_caches():
            for key in keys:
                if cache.remove(key) is not None:
                    log.debug("Invalidated %r in %s cache.", key, cache.name)

    def _is_cacheable(self, result: ResourceDataResult) -> bool:
        if not result.data:
            return False
        materialized = self._is_materialized(result.data, result.resource_class)
        if not materialized:
            log.debug("Class: %s, is not cacheable.", result.resource_class.__name__)
        return materialized

    def _is_directly_cacheable(self, resource_class: Type[Resource], data) -> bool:
        return (
            self._is_materialized(data, resource_class) and
            not _is_collection(resource_class)
        )

    def _is_retrieval_enabled(self, request: ResourceDataRequest) -> bool:
        return (
            request.action is ResourceAction.READ and
            not _is_collection(request.resource_class)
        )

    def _is_materialized(self, data, resource_class) -> bool:
        return self.href_resolver.resolve_href(data, resource_class) is not None

    def _get_cached_value(self, key: str, resource_class: Type[Resource]):
        cache = self.cache_resolver.get_cache(resource_class)
        value = cache.get(key)
        if value is not None:
            log.debug("Cache hit for key %r, class: %r.", key, resource_class.__name__)
        return value

    def _request_key(self, request: ResourceDataRequest) -> str:
        return cache_key(request.uri.absolute_path)


def _is_expanded(request: ResourceDataRequest) -> bool:
    return request.uri.has_query and 'expand' in request.uri.query


def _is_collection(resource_class) -> bool:
    return isinstance(resource_class, type) and issubclass(resource_class, CollectionResource)
