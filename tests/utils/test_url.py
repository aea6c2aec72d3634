import pytest

from oktasdk.exceptions import UriParseError
from oktasdk.utils.url import CanonicalUri
from oktasdk.utils.url import QueryString
from oktasdk.utils.url import ancestor_paths
from oktasdk.utils.url import cache_key
from oktasdk.utils.url import ensure_fully_qualified
from oktasdk.utils.url import extract_path_params
from oktasdk.utils.url import get_after_cursor
from oktasdk.utils.url import is_fully_qualified
from oktasdk.utils.url import parse_link_header

BASE = 'https://test.okta.com'


def test_query_string_sorted():
    qs = QueryString({'limit': 20, 'after': 'abc', 'q': None, 'activate': False})
    assert str(qs) == 'activate=false&after=abc&limit=20'


def test_query_string_parse():
    assert QueryString.parse('filter=status+eq+%22ACTIVE%22&limit=2') == {
        'filter': 'status eq "ACTIVE"',
        'limit': '2',
    }
    assert QueryString.parse('') is None


def test_query_string_canonical_encoding():
    qs = QueryString({'search': 'a b*'})
    assert qs.encode() == 'search=a+b*'
    assert qs.encode(canonical=True) == 'search=a%20b%2A'


def test_canonical_uri_embedded_query_wins():
    uri = CanonicalUri.create(f'{BASE}/api/v1/users?limit=5', {'limit': 10, 'q': 'bob'})
    assert uri.absolute_path == f'{BASE}/api/v1/users'
    assert uri.query == {'limit': '5', 'q': 'bob'}
    assert str(uri) == f'{BASE}/api/v1/users?limit=5&q=bob'
    assert uri.has_query


def test_canonical_uri_without_query():
    uri = CanonicalUri.create(f'{BASE}/api/v1/users/1')
    assert not uri.has_query
    assert str(uri) == f'{BASE}/api/v1/users/1'


def test_cache_key_is_order_independent():
    assert (
        cache_key(f'{BASE}/api/v1/apps?b=2&a=1') ==
        cache_key(f'{BASE}/api/v1/apps', {'a': 1, 'b': 2}) ==
        f'{BASE}/api/v1/apps?a=1&b=2'
    )


def test_empty_href():
    with pytest.raises(UriParseError):
        CanonicalUri.create('')


@pytest.mark.parametrize('href, result', [
    ('https://test.okta.com', True),
    ('HTTP://test.okta.com', True),
    ('/api/v1/users', False),
    ('http', False),
    ('', False),
    (None, False),
])
def test_is_fully_qualified(href, result):
    assert is_fully_qualified(href) is result


def test_ensure_fully_qualified():
    assert ensure_fully_qualified(BASE, '/api/v1/users') == f'{BASE}/api/v1/users'
    assert ensure_fully_qualified(BASE, 'api/v1/users') == f'{BASE}/api/v1/users'
    assert ensure_fully_qualified(BASE, f'{BASE}/api/v1/users') == f'{BASE}/api/v1/users'


def test_ancestor_paths():
    assert ancestor_paths(f'{BASE}/api/v1/apps/123/lifecycle/deactivate') == [
        f'{BASE}/api/v1/apps/123/lifecycle',
        f'{BASE}/api/v1/apps/123',
        f'{BASE}/api/v1/apps',
    ]
    assert ancestor_paths(f'{BASE}/api/v1/apps') == []


def test_parse_link_header():
    assert parse_link_header([
        f'<{BASE}/api/v1/users?limit=2>; rel="self"',
        f'<{BASE}/api/v1/users?after=00u2&limit=2>; rel="next"',
    ]) == {
        'self': f'{BASE}/api/v1/users?limit=2',
        'next': f'{BASE}/api/v1/users?after=00u2&limit=2',
    }
    assert parse_link_header(None) == {}


@pytest.mark.parametrize('href, cursor', [
    (f'{BASE}/api/v1/users?after=00u2&limit=2', '00u2'),
    (f'{BASE}/api/v1/users?limit=2', None),
    (f'{BASE}/api/v1/users', None),
    ('not a url', None),
    (None, None),
])
def test_get_after_cursor(href, cursor):
    assert get_after_cursor(href) == cursor


def test_extract_path_params():
    assert extract_path_params(
        '/api/v1/apps/{appId}/users/{userId}',
        f'{BASE}/api/v1/apps/0oa1/users/00u1',
    ) == {'appId': '0oa1', 'userId': '00u1'}


def test_extract_path_params_mismatch():
    with pytest.raises(UriParseError):
        extract_path_params('/api/v1/apps/{appId}', f'{BASE}/api/v1/users/00u1')
