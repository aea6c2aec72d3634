from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import dataclasses
import re
import urllib.parse

from oktasdk.exceptions import UriParseError


class QueryString(dict):
    """Query parameters kept in sorted key order.

    Values are stored as strings, `None` values are dropped, so two query
    strings holding the same parameters always render identically.
    """

    def __init__(self, source: Optional[Mapping[str, Any]] = None):
        super().__init__()
        if source:
            for key, value in source.items():
                self[key] = value

    def __setitem__(self, key: str, value: Any):
        if value is None:
            return
        if isinstance(value, bool):
            value = 'true' if value else 'false'
        super().__setitem__(key, str(value))

    def update(self, other: Mapping[str, Any] = (), **kwargs):
        for key, value in dict(other, **kwargs).items():
            self[key] = value

    def items(self):
        return sorted(super().items())

    def keys(self):
        return [k for k, v in self.items()]

    def __iter__(self):
        return iter(self.keys())

    def __str__(self):
        return self.encode()

    def encode(self, canonical: bool = False) -> str:
        return '&'.join(
            f'{encode_url(k, canonical=canonical)}='
            f'{encode_url(v, canonical=canonical)}'
            for k, v in self.items()
        )

    @classmethod
    def parse(cls, query: Optional[str]) -> Optional[QueryString]:
        if not query:
            return None
        qs = cls()
        for token in query.split('&'):
            if not token:
                continue
            if '=' in token:
                key, value = token.split('=', 1)
            else:
                key, value = token, ''
            qs[urllib.parse.unquote_plus(key)] = urllib.parse.unquote_plus(value)
        return qs


def encode_url(value: Optional[str], path: bool = False, canonical: bool = False) -> str:
    if not value:
        return ''
    encoded = urllib.parse.quote_plus(value, safe='*')
    if canonical:
        encoded = encoded.replace('+', '%20').replace('*', '%2A')
        if path:
            encoded = encoded.replace('%2F', '/')
    return encoded


def build_href(href: str, qs: Optional[QueryString]) -> str:
    query = str(qs) if qs else ''
    if query:
        return f'{href}?{query}'
    return href


@dataclasses.dataclass(frozen=True)
class CanonicalUri:
    absolute_path: str
    query: QueryString = dataclasses.field(default_factory=QueryString)

    def __str__(self):
        return build_href(self.absolute_path, self.query)

    @property
    def has_query(self) -> bool:
        return bool(self.query)

    @classmethod
    def create(
        cls,
        href: str,
        query: Optional[Mapping[str, Any]] = None,
    ) -> CanonicalUri:
        path, embedded = _split_query(href)
        qs = QueryString(query)
        if embedded:
            # Query values embedded in href are explicit, so they win.
            qs.update(embedded)
        return cls(path, qs)


def cache_key(href: str, query: Optional[Mapping[str, Any]] = None) -> str:
    return str(CanonicalUri.create(href, query))


def _split_query(href: str):
    if not href:
        raise UriParseError(uri=href, reason="href must not be empty")
    if '?' not in href:
        return href, None
    path, query = href.rsplit('?', 1)
    return path, QueryString.parse(query)


def is_fully_qualified(href: Optional[str]) -> bool:
    return bool(href) and len(href) >= 5 and href[:4].lower() == 'http'


def qualify(base_url: str, href: str) -> str:
    if href.startswith('/'):
        return base_url + href
    return base_url + '/' + href


def ensure_fully_qualified(base_url: str, href: str) -> str:
    if is_fully_qualified(href):
        return href
    return qualify(base_url, href)


def ancestor_paths(href: str) -> List[str]:
    """Return every ancestor path of href, closest first.

    Only paths below the `/api/vN` prefix are returned, so an org root is
    never treated as an ancestor of a resource.
    """
    path, _ = _split_query(href)
    parsed = urllib.parse.urlsplit(path)
    parts = [p for p in parsed.path.split('/') if p]
    prefix = 0
    if len(parts) >= 2 and parts[0] == 'api':
        prefix = 2
    result = []
    for i in range(len(parts) - 1, prefix, -1):
        ancestor = '/' + '/'.join(parts[:i])
        result.append(urllib.parse.urlunsplit(
            (parsed.scheme, parsed.netloc, ancestor, '', '')
        ))
    return result


_link_re = re.compile(r'<(?P<url>[^>]*)>\s*(?P<params>(?:;[^,]*)*)')
_rel_re = re.compile(r'rel\s*=\s*"?(?P<rel>[^";]+)"?')


def parse_link_header(values: Union[str, Iterable[str], None]) -> Dict[str, str]:
    """Parse HTTP Link headers into a `{rel: url}` mapping.

        >>> parse_link_header('<https://x/api/v1/users?after=1>; rel="next"')
        {'next': 'https://x/api/v1/users?after=1'}

    """
    if not values:
        return {}
    if isinstance(values, str):
        values = [values]
    links = {}
    for value in values:
        for match in _link_re.finditer(value):
            rel = _rel_re.search(match.group('params'))
            if rel:
                for name in rel.group('rel').split():
                    links[name] = match.group('url').strip()
    return links


def get_after_cursor(next_href: Optional[str]) -> Optional[str]:
    if not next_href:
        return None
    parsed = urllib.parse.urlsplit(next_href)
    if not parsed.scheme or not parsed.netloc:
        return None
    query = QueryString.parse(parsed.query)
    if not query:
        return None
    return query.get('after')


def extract_path_params(template: str, href: str) -> Dict[str, str]:
    """Extract `{name}` placeholders of a path template from href.

        >>> extract_path_params('/api/v1/apps/{appId}/users/{userId}',
        ...                     'https://x/api/v1/apps/a1/users/u1')
        {'appId': 'a1', 'userId': 'u1'}

    """
    path = urllib.parse.urlsplit(href).path if is_fully_qualified(href) else href
    path = path.split('?', 1)[0].rstrip('/')
    pattern = ''
    pos = 0
    for match in re.finditer(r'\{(\w+)\}', template):
        pattern += re.escape(template[pos:match.start()])
        pattern += f'(?P<{match.group(1)}>[^/]+)'
        pos = match.end()
    pattern += re.escape(template[pos:].rstrip('/'))
    match = re.fullmatch(pattern, path)
    if match is None:
        raise UriParseError(
            uri=href,
            reason=f"path does not match {template!r} template",
        )
    return {
        k: urllib.parse.unquote(v)
        for k, v in match.groupdict().items()
    }
