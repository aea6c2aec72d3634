import json

from oktasdk.ds.builder import RequestBuilder
from oktasdk.resource.base import VoidResource
from oktasdk.resources.users import User
from oktasdk.resources.users import UserList
from oktasdk.testing.executor import BASE_URL

USERS = f'{BASE_URL}/api/v1/users'
USER = f'{USERS}/00u1'


def _user(**kwargs):
    return {
        'id': '00u1',
        'status': 'ACTIVE',
        'profile': {'login': 'ada@example.com'},
        '_links': {'self': {'href': USER}},
        **kwargs,
    }


def test_http_returns_builder(client):
    builder = client.http()
    assert isinstance(builder, RequestBuilder)
    assert builder is not client.http()
    assert type(builder.body) is VoidResource


def test_get(client, executor):
    executor.add('GET', USERS, json=[_user()])
    users = (
        client.http().
        add_query_parameter('limit', 1).
        add_header_parameter('X-Trace', 'a').
        get('/api/v1/users', UserList)
    )
    assert [u.id for u in users] == ['00u1']
    assert executor.calls == [('GET', f'{USERS}?limit=1')]
    assert executor.requests[0].headers.get('X-Trace') == 'a'


def test_get_is_cached(client, executor):
    executor.add('GET', USER, json=_user())
    client.http().get(USER, User)
    user = client.http().get(USER, User)
    assert user.id == '00u1'
    assert executor.count('GET', USER) == 1


def test_post_with_body(client, executor):
    executor.add('POST', USERS, json=_user(), status=201)
    user = client.instantiate(User, {'profile': {'login': 'ada@example.com'}})
    created = (
        client.http().
        set_body(user).
        add_query_parameter('activate', 'false').
        post('/api/v1/users', User)
    )
    assert type(created) is User
    assert created.id == '00u1'
    assert user.href == USER
    request = executor.requests[0]
    assert request.resource_url == f'{USERS}?activate=false'
    assert json.loads(request.body) == {'profile': {'login': 'ada@example.com'}}


def test_post_without_body(client, executor):
    executor.add('POST', f'{USER}/lifecycle/suspend', json={})
    result = client.http().post(f'{USER}/lifecycle/suspend')
    assert type(result) is VoidResource
    assert executor.calls == [('POST', f'{USER}/lifecycle/suspend')]
    assert executor.requests[0].body is None


def test_put(client, executor):
    executor.add('PUT', USER, json=_user(status='SUSPENDED'))
    user = client.instantiate(User, _user())
    user.set_property('status', 'SUSPENDED')
    client.http().set_body(user).put(USER)
    assert executor.calls == [('PUT', USER)]
    assert json.loads(executor.requests[0].body)['status'] == 'SUSPENDED'
    assert not user.dirty


def test_delete(client, executor):
    executor.add('DELETE', USER, status=204)
    (
        client.http().
        add_query_parameter('sendEmail', 'false').
        add_header_parameter('X-Trace', ['a', 'b']).
        delete(USER)
    )
    assert executor.calls == [('DELETE', f'{USER}?sendEmail=false')]
    assert executor.requests[0].headers.get_all('X-Trace') == ['a', 'b']


def test_delete_invalidates_cache(client, executor):
    executor.add('GET', USER, json=_user())
    executor.add('DELETE', USER, status=204)
    client.http().get(USER, User)
    client.http().delete(USER)
    client.http().get(USER, User)
    assert executor.count('GET', USER) == 2


def test_set_parameters_replace(store):
    builder = (
        RequestBuilder(store).
        add_query_parameter('limit', 1).
        add_header_parameter('X-Trace', 'a').
        set_query_parameters({'q': 'ada'}).
        set_header_parameters({'X-Other': 'b', 'X-Many': ['c', 'd']})
    )
    assert builder.query == {'q': 'ada'}
    assert 'X-Trace' not in builder.headers
    assert builder.headers.get('X-Other') == 'b'
    assert builder.headers.get_all('X-Many') == ['c', 'd']
    builder.set_query_parameters(None).set_header_parameters(None)
    assert builder.query == {}
    assert len(builder.headers) == 0
