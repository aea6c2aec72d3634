from __future__ import annotations

from typing import Dict, Iterable, Iterator, List, Mapping, Optional, Tuple, Union

import dataclasses

from oktasdk.core.enums import HttpMethod
from oktasdk.utils.url import QueryString
from oktasdk.utils.url import build_href
from oktasdk.utils.url import parse_link_header

APPLICATION_JSON = 'application/json'

OKTA_REQUEST_ID = 'X-Okta-Request-Id'


class HttpHeaders:
    """Case-insensitive, multi-valued HTTP header map.

    Header names keep the casing they were first set with.
    """

    def __init__(
        self,
        headers: Union[
            Mapping[str, Union[str, Iterable[str]]],
            Iterable[Tuple[str, str]],
            None,
        ] = None,
    ):
        self._headers: Dict[str, Tuple[str, List[str]]] = {}
        if headers:
            items = headers.items() if isinstance(headers, Mapping) else headers
            for name, value in items:
                if isinstance(value, str):
                    self.add(name, value)
                else:
                    for v in value:
                        self.add(name, v)

    def __contains__(self, name: str) -> bool:
        return name.lower() in self._headers

    def __iter__(self) -> Iterator[str]:
        return (name for name, _ in self._headers.values())

    def __len__(self):
        return len(self._headers)

    def __repr__(self):
        return f'{type(self).__name__}({self.to_dict()!r})'

    def __eq__(self, other):
        if isinstance(other, HttpHeaders):
            return {
                k: v for k, (_, v) in self._headers.items()
            } == {
                k: v for k, (_, v) in other._headers.items()
            }
        return NotImplemented

    def get(self, name: str, default: Optional[str] = None) -> Optional[str]:
        values = self.get_all(name)
        return values[0] if values else default

    def get_all(self, name: str) -> List[str]:
        _, values = self._headers.get(name.lower(), (name, []))
        return list(values)

    def set(self, name: str, value: str):
        self._headers[name.lower()] = (name, [value])

    def put(self, name: str, values: Iterable[str]):
        self._headers[name.lower()] = (name, list(values))

    def add(self, name: str, value: str):
        key = name.lower()
        if key in self._headers:
            self._headers[key][1].append(value)
        else:
            self._headers[key] = (name, [value])

    def remove(self, name: str):
        self._headers.pop(name.lower(), None)

    def items(self) -> Iterator[Tuple[str, str]]:
        for name, values in self._headers.values():
            yield name, ', '.join(values)

    def to_dict(self) -> Dict[str, str]:
        return dict(self.items())

    def update(self, other: Union[HttpHeaders, Mapping[str, str], None]):
        if not other:
            return
        if isinstance(other, HttpHeaders):
            for name, values in other._headers.values():
                self.put(name, values)
        else:
            for name, value in other.items():
                self.set(name, value)

    @property
    def content_type(self) -> Optional[str]:
        return self.get('Content-Type')

    @content_type.setter
    def content_type(self, value: str):
        self.set('Content-Type', value)

    @property
    def accept(self) -> List[str]:
        return self.get_all('Accept')

    @accept.setter
    def accept(self, values: Iterable[str]):
        self.set('Accept', ', '.join(values))

    @property
    def request_id(self) -> Optional[str]:
        return self.get(OKTA_REQUEST_ID)

    @property
    def link_map(self) -> Dict[str, str]:
        return parse_link_header(self.get_all('Link'))

    @property
    def x_headers(self) -> Dict[str, List[str]]:
        return {
            name: list(values)
            for name, values in self._headers.values()
            if name.lower().startswith('x-')
        }


@dataclasses.dataclass
class Request:
    method: HttpMethod
    url: str
    query: QueryString = dataclasses.field(default_factory=QueryString)
    headers: HttpHeaders = dataclasses.field(default_factory=HttpHeaders)
    body: Optional[bytes] = None

    @property
    def resource_url(self) -> str:
        return build_href(self.url, self.query)

    @property
    def content_length(self) -> int:
        return len(self.body) if self.body is not None else 0


@dataclasses.dataclass
class Response:
    status: int
    headers: HttpHeaders = dataclasses.field(default_factory=HttpHeaders)
    body: Optional[bytes] = None

    @property
    def has_body(self) -> bool:
        return bool(self.body)

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status < 500

    @property
    def is_server_error(self) -> bool:
        return self.status >= 500

    @property
    def is_error(self) -> bool:
        return self.is_client_error or self.is_server_error
