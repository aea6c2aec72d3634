from __future__ import annotations

from typing import Any, Dict, Iterable, Mapping, Optional, Type, TypeVar, Union, TYPE_CHECKING

from oktasdk.http.components import HttpHeaders
from oktasdk.resource.base import Resource
from oktasdk.resource.base import VoidResource

if TYPE_CHECKING:
    from oktasdk.ds.store import DataStore

R = TypeVar('R', bound=Resource)


class RequestBuilder:
    """Ad-hoc request against any endpoint, still going through the data store.

    Query parameters, headers and body are collected first and used by the
    final `get`, `post`, `put` or `delete` call, so caching and error
    handling work the same way as for the typed client methods.

        client.http().add_query_parameter('limit', 5).get('/api/v1/users', UserList)

    """

    def __init__(self, data_store: DataStore):
        self.data_store = data_store
        self.body: Resource = data_store.instantiate(VoidResource)
        self.query: Dict[str, Any] = {}
        self.headers = HttpHeaders()

    def __repr__(self):
        return f'<{type(self).__name__} query={self.query!r} headers={self.headers!r}>'

    def set_body(self, resource: Resource) -> RequestBuilder:
        self.body = resource
        return self

    def add_query_parameter(self, name: str, value: Any) -> RequestBuilder:
        self.query[name] = value
        return self

    def set_query_parameters(self, query: Optional[Mapping[str, Any]]) -> RequestBuilder:
        self.query = dict(query or {})
        return self

    def add_header_parameter(self, name: str, value: Union[str, Iterable[str]]) -> RequestBuilder:
        if isinstance(value, str):
            self.headers.add(name, value)
        else:
            self.headers.put(name, value)
        return self

    def set_header_parameters(
        self,
        headers: Optional[Mapping[str, Union[str, Iterable[str]]]],
    ) -> RequestBuilder:
        self.headers = HttpHeaders()
        for name, value in (headers or {}).items():
            self.add_header_parameter(name, value)
        return self

    def get(self, href: str, klass: Type[R]) -> R:
        return self.data_store.get_resource(href, klass, self._query(), self.headers)

    def post(self, href: str, klass: Type[R] = VoidResource) -> R:
        return self.data_store.create(
            href,
            self.body,
            return_type=klass,
            query=self._query(),
            headers=self.headers,
        )

    def put(self, href: str):
        self.data_store.save(self.body, href=href, query=self._query(), headers=self.headers)

    def delete(self, href: str):
        self.data_store.delete(href, query=self._query(), headers=self.headers)

    def _query(self) -> Optional[Dict[str, Any]]:
        return dict(self.query) or None
