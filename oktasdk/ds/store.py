from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Type, TypeVar, Union

import logging

from oktasdk.cache.components import CacheManager
from oktasdk.cache.components import DisabledCacheManager
from oktasdk.core.enums import HttpMethod
from oktasdk.core.enums import ResourceAction
from oktasdk.ds.cache import CacheRegionNameResolver
from oktasdk.ds.cache import CacheResolver
from oktasdk.ds.cache import HalResourceHrefResolver
from oktasdk.ds.cache import ResourceCacheStrategy
from oktasdk.ds.components import ResourceDataRequest
from oktasdk.ds.components import ResourceDataResult
from oktasdk.ds.converter import ResourceConverter
from oktasdk.ds.discriminator import DiscriminatorRegistry
from oktasdk.ds.factory import ResourceFactory
from oktasdk.ds.factory import ResourceFactoryConfig
from oktasdk.ds.filters import Filter
from oktasdk.ds.filters import FilterChain
from oktasdk.ds.filters import ReadCacheFilter
from oktasdk.ds.filters import WriteCacheFilter
from oktasdk.ds.marshaller import JsonMapMarshaller
from oktasdk.exceptions import CollectionNotPersistable
from oktasdk.exceptions import EmptyResponseBody
from oktasdk.exceptions import HrefRequired
from oktasdk.exceptions import InvalidArgument
from oktasdk.exceptions import MarshalingError
from oktasdk.exceptions import ResourceError
from oktasdk.http.components import APPLICATION_JSON
from oktasdk.http.components import HttpHeaders
from oktasdk.http.components import Request
from oktasdk.http.components import Response
from oktasdk.http.executor import RequestExecutor
from oktasdk.http.headers import OKTA_AGENT
from oktasdk.http.headers import OKTA_CLIENT_REQUEST_ID
from oktasdk.http.headers import get_runtime_headers
from oktasdk.http.headers import get_user_agent
from oktasdk.resource.base import Resource
from oktasdk.resource.base import VoidResource
from oktasdk.resource.error import Error
from oktasdk.utils.url import CanonicalUri
from oktasdk.utils.url import ensure_fully_qualified
from oktasdk.utils.url import is_fully_qualified
from oktasdk.utils.url import qualify

log = logging.getLogger(__name__)
request_log = logging.getLogger(__name__ + '.request')

R = TypeVar('R', bound=Resource)

Headers = Union[HttpHeaders, Mapping[str, str], None]

# Statuses of mutating calls that may legitimately come without a body.
NO_CONTENT_STATUSES = (200, 202, 204)


class DataStore:
    """Turns resource operations into HTTP requests.

    Every operation builds a `ResourceDataRequest` and drives it through the
    filter chain (cache filters when caching is enabled, then any extra
    filters), ending in a handler that executes the HTTP call.
    """

    def __init__(
        self,
        executor: RequestExecutor,
        base_url: str,
        cache_manager: Optional[CacheManager] = None,
        registry: Optional[DiscriminatorRegistry] = None,
        factory_configs: Iterable[ResourceFactoryConfig] = (),
        user_agent: str = '',
        marshaller: Optional[JsonMapMarshaller] = None,
        filters: Iterable[Filter] = (),
    ):
        self.executor = executor
        self.base_url = base_url.rstrip('/')
        self.cache_manager = cache_manager or DisabledCacheManager()
        self.registry = registry
        self.factory = ResourceFactory(self, registry, factory_configs)
        self.converter = ResourceConverter()
        self.marshaller = marshaller or JsonMapMarshaller(converter=self.converter)
        self.user_agent = get_user_agent(user_agent)
        self.cache_resolver = CacheResolver(
            self.cache_manager,
            CacheRegionNameResolver(registry),
        )
        chain: List[Filter] = []
        if self.is_caching_enabled():
            strategy = ResourceCacheStrategy(
                HalResourceHrefResolver(self.base_url),
                self.cache_resolver,
            )
            chain += [ReadCacheFilter(strategy), WriteCacheFilter(strategy)]
        chain += list(filters)
        self.filters = tuple(chain)

    def __repr__(self):
        return f'<{type(self).__name__} {self.base_url}>'

    def is_caching_enabled(self) -> bool:
        return not isinstance(self.cache_manager, DisabledCacheManager)

    def close(self):
        close = getattr(self.executor, 'close', None)
        if close is not None:
            close()

    def instantiate(
        self,
        klass: Type[R],
        properties: Optional[Mapping[str, Any]] = None,
        query: Optional[Mapping[str, Any]] = None,
    ) -> R:
        if query is not None:
            return self.factory.instantiate(klass, properties or {}, query)
        if properties is not None:
            return self.factory.instantiate(klass, properties)
        return self.factory.instantiate(klass)

    def get_resource(
        self,
        href: str,
        klass: Type[R],
        query: Optional[Mapping[str, Any]] = None,
        headers: Headers = None,
    ) -> R:
        href = self.ensure_fully_qualified(href)
        uri = self.canonicalize(href, query)
        request = ResourceDataRequest(
            action=ResourceAction.READ,
            uri=uri,
            resource_class=klass,
            headers=_headers(headers),
        )
        result = FilterChain(self.filters, self._read).filter(request)
        if not result.data:
            raise EmptyResponseBody(source=" or from cache")
        if klass.is_collection():
            resource = self.instantiate(klass, result.data, result.uri.query)
        else:
            resource = self.instantiate(klass, result.data)
        resource.href = href
        return resource

    def create(
        self,
        parent_href: str,
        resource: R,
        parent: Optional[Resource] = None,
        return_type: Optional[Type[Resource]] = None,
        query: Optional[Mapping[str, Any]] = None,
        headers: Headers = None,
    ) -> Resource:
        return self._save(
            parent_href,
            resource,
            parent=parent,
            return_type=return_type or type(resource),
            query=query,
            headers=headers,
            create=True,
        )

    def save(
        self,
        resource: R,
        href: Optional[str] = None,
        parent: Optional[Resource] = None,
        partial: bool = False,
        query: Optional[Mapping[str, Any]] = None,
        headers: Headers = None,
    ) -> R:
        href = href or resource.href
        if not href:
            raise HrefRequired(resource, operation='save')
        return self._save(
            href,
            resource,
            parent=parent,
            return_type=type(resource),
            query=query,
            headers=headers,
            create=False,
            partial=partial,
        )

    def delete(
        self,
        target: Union[str, Resource],
        property_name: Optional[str] = None,
        query: Optional[Mapping[str, Any]] = None,
        headers: Headers = None,
    ):
        if isinstance(target, Resource):
            href = target.href
            klass = type(target)
            if not href:
                raise HrefRequired(target, operation='delete')
        else:
            href = target
            klass = VoidResource
        uri = self.canonicalize(self.ensure_fully_qualified(href), query)
        path = uri.absolute_path
        if property_name:
            path = f'{path}/{property_name}'

        def handler(req: ResourceDataRequest) -> ResourceDataResult:
            self.execute(Request(
                HttpMethod.DELETE,
                path,
                req.uri.query,
                req.headers,
            ))
            return ResourceDataResult(
                action=ResourceAction.DELETE,
                uri=req.uri,
                resource_class=klass,
                data={},
            )

        request = ResourceDataRequest(
            action=ResourceAction.DELETE,
            uri=uri,
            resource_class=klass,
            headers=_headers(headers),
        )
        FilterChain(self.filters, handler).filter(request)

    def _save(
        self,
        href: str,
        resource: Resource,
        *,
        parent: Optional[Resource],
        return_type: Type[Resource],
        query: Optional[Mapping[str, Any]],
        headers: Headers,
        create: bool,
        partial: bool = False,
    ) -> Resource:
        if not isinstance(resource, Resource):
            raise InvalidArgument(reason=(
                f"{type(resource).__name__} is not a resource"
            ))
        if resource.is_collection():
            raise CollectionNotPersistable(resource)

        data = self.converter.convert(resource, dirty_only=partial)
        body = None
        if not isinstance(resource, VoidResource):
            body = self.marshaller.marshal(data)

        if create:
            action = ResourceAction.CREATE
            method = HttpMethod.POST
        elif partial:
            action = ResourceAction.UPDATE
            method = HttpMethod.POST
        else:
            action = ResourceAction.UPDATE
            method = HttpMethod.PUT

        parent_uri = None
        parent_class = None
        if parent is not None and parent.href:
            parent_uri = self.canonicalize(self.ensure_fully_qualified(parent.href))
            parent_class = type(parent)

        def handler(req: ResourceDataRequest) -> ResourceDataResult:
            response = self.execute(Request(
                method,
                req.uri.absolute_path,
                req.uri.query,
                req.headers,
                body,
            ))
            result = self._get_body(response)
            if result is None:
                if response.status not in NO_CONTENT_STATUSES:
                    raise EmptyResponseBody(source='')
                result = {}
            return ResourceDataResult(
                action=_resolve_action(req, response),
                uri=req.uri,
                resource_class=return_type,
                data=result,
            )

        request = ResourceDataRequest(
            action=action,
            uri=self.canonicalize(self.ensure_fully_qualified(href), query),
            resource_class=return_type,
            data=data,
            parent_uri=parent_uri,
            parent_class=parent_class,
            headers=_headers(headers),
        )
        result = FilterChain(self.filters, handler).filter(request)

        if isinstance(resource, return_type):
            resource.set_internal_properties(result.data)
        return self.instantiate(return_type, result.data)

    def _read(self, req: ResourceDataRequest) -> ResourceDataResult:
        response = self.execute(Request(
            HttpMethod.GET,
            req.uri.absolute_path,
            req.uri.query,
            req.headers,
        ))
        return ResourceDataResult(
            action=req.action,
            uri=req.uri,
            resource_class=req.resource_class,
            data=self._get_body(response) or {},
        )

    def execute(self, request: Request) -> Response:
        self._apply_default_headers(request)
        request_log.debug(
            "Executing request: method: %s, url: %s",
            request.method.value,
            request.resource_url,
        )
        response = self.executor.execute(request)
        if response.is_error:
            raise self._to_error(response)
        return response

    def _apply_default_headers(self, request: Request):
        headers = request.headers
        runtime = get_runtime_headers()
        headers.accept = [APPLICATION_JSON]
        agents = runtime.get(OKTA_AGENT, [])
        headers.set('User-Agent', ' '.join([*agents, self.user_agent]))
        if request.body is not None and not headers.content_type:
            headers.content_type = APPLICATION_JSON
        request_ids = runtime.get(OKTA_CLIENT_REQUEST_ID.lower())
        if request_ids:
            headers.set(OKTA_CLIENT_REQUEST_ID, request_ids[0])
        for name, values in runtime.items():
            if name == OKTA_AGENT or name in headers:
                continue
            headers.put(name, values)

    def _get_body(self, response: Response) -> Optional[Dict[str, Any]]:
        if not response.has_body:
            return None
        return self.marshaller.unmarshal(response.body, response.headers.link_map)

    def _to_error(self, response: Response) -> ResourceError:
        data: Dict[str, Any] = {}
        if response.has_body:
            try:
                data = self.marshaller.unmarshal(response.body)
            except MarshalingError:
                log.debug("Unable to parse error response body.", exc_info=True)
        error = Error(data)
        if response.headers.request_id:
            error.set_id(response.headers.request_id)
        error.set_headers(response.headers.x_headers)
        error.set_status(response.status)
        return ResourceError(error)

    def is_fully_qualified(self, href: Optional[str]) -> bool:
        return is_fully_qualified(href)

    def qualify(self, href: str) -> str:
        return qualify(self.base_url, href)

    def ensure_fully_qualified(self, href: str) -> str:
        return ensure_fully_qualified(self.base_url, href)

    def canonicalize(
        self,
        href: str,
        query: Optional[Mapping[str, Any]] = None,
    ) -> CanonicalUri:
        return CanonicalUri.create(href, query)


def _headers(headers: Headers) -> HttpHeaders:
    result = HttpHeaders()
    result.update(headers)
    return result


def _resolve_action(request: ResourceDataRequest, response: Response) -> ResourceAction:
    # Some endpoints answer a create with 200, or an update with 201.
    if response.status == 201:
        return ResourceAction.CREATE
    if response.status == 200:
        return ResourceAction.READ
    return request.action
