import json

import pytest

from oktasdk.cache.components import DefaultCacheManager
from oktasdk.config import CONFIG
from oktasdk.core.enums import HttpMethod
from oktasdk.core.enums import ResourceAction
from oktasdk.ds.discriminator import DiscriminatorRegistry
from oktasdk.ds.filters import Filter
from oktasdk.ds.store import DataStore
from oktasdk.exceptions import CollectionNotPersistable
from oktasdk.exceptions import EmptyResponseBody
from oktasdk.exceptions import HrefRequired
from oktasdk.exceptions import ResourceError
from oktasdk.http.headers import runtime_headers
from oktasdk.resources import RESOURCE_FACTORY_CONFIG
from oktasdk.resources.applications import Application
from oktasdk.resources.applications import ApplicationList
from oktasdk.resources.applications import BookmarkApplication
from oktasdk.resources.applications import OpenIdConnectApplication
from oktasdk.resources.users import User
from oktasdk.resources.users import UserList
from oktasdk.testing.executor import BASE_URL

USER = f'{BASE_URL}/api/v1/users/00u1'
APP = f'{BASE_URL}/api/v1/apps/123'


def _user(**kwargs):
    return {
        'id': '00u1',
        'status': 'ACTIVE',
        'profile': {'login': 'ada@example.com'},
        '_links': {'self': {'href': USER}},
        **kwargs,
    }


def _app(**kwargs):
    return {
        'id': '123',
        'label': 'Portal',
        'signOnMode': 'OPENID_CONNECT',
        '_links': {'self': {'href': APP}},
        **kwargs,
    }


class ResultRecorder(Filter):

    def __init__(self):
        self.results = []

    def filter(self, request, chain):
        result = chain.filter(request)
        self.results.append(result)
        return result


@pytest.fixture()
def recorder():
    return ResultRecorder()


@pytest.fixture()
def recording_store(executor, recorder):
    return DataStore(
        executor,
        BASE_URL,
        cache_manager=DefaultCacheManager(),
        registry=DiscriminatorRegistry(CONFIG['discriminators']),
        factory_configs=[RESOURCE_FACTORY_CONFIG],
        filters=[recorder],
    )


def test_get_resource(store, executor):
    executor.add('GET', '/api/v1/users/00u1', json=_user())
    user = store.get_resource('/api/v1/users/00u1', User)
    assert type(user) is User
    assert user.href == USER
    assert user.id == '00u1'
    assert user.profile.login == 'ada@example.com'
    assert not user.dirty


def test_get_resource_is_cached(store, executor):
    executor.add('GET', '/api/v1/users/00u1', json=_user())
    store.get_resource(USER, User)
    user = store.get_resource(USER, User)
    assert user.id == '00u1'
    assert executor.count('GET', USER) == 1


def test_cached_nested_maps_are_not_shared(store, executor):
    executor.add('GET', '/api/v1/apps/123', json=_app(settings={'app': {'url': 'https://a'}}))
    app = store.get_resource(APP, Application)
    app.settings['app']['url'] = 'https://unsaved'
    app = store.get_resource(APP, Application)
    assert app.settings == {'app': {'url': 'https://a'}}
    assert executor.count('GET', APP) == 1


def test_get_resource_without_cache(executor):
    store = DataStore(executor, BASE_URL)
    executor.add('GET', '/api/v1/users/00u1', json=_user())
    store.get_resource(USER, User)
    store.get_resource(USER, User)
    assert not store.is_caching_enabled()
    assert executor.count('GET', USER) == 2


def test_get_resource_discriminated(store, executor):
    executor.add('GET', '/api/v1/apps/123', json=_app(signOnMode='BOOKMARK'))
    app = store.get_resource('/api/v1/apps/123', Application)
    assert type(app) is BookmarkApplication


def test_get_resource_with_query(store, executor):
    executor.add('GET', '/api/v1/apps/123', json=_app())
    store.get_resource(f'{APP}?expand=user%2F00u1', Application, {'limit': 1})
    assert executor.calls == [
        ('GET', f'{APP}?expand=user%2F00u1&limit=1'),
    ]


def test_get_resource_empty_body(store, executor):
    executor.add('GET', '/api/v1/users/00u1', status=200)
    with pytest.raises(EmptyResponseBody) as e:
        store.get_resource(USER, User)
    assert "Unable to obtain resource data from the API server or from cache." in str(e.value)


def test_get_collection(store, executor):
    executor.add(
        'GET', '/api/v1/apps',
        json=[_app(), _app(id='124', signOnMode='BOOKMARK')],
    )
    apps = store.get_resource('/api/v1/apps', ApplicationList, {'limit': 2})
    assert apps.query == {'limit': '2'}
    assert apps.href == f'{BASE_URL}/api/v1/apps'
    assert [type(a) for a in apps] == [OpenIdConnectApplication, BookmarkApplication]


def test_create_resolves_subtype_and_read_action(recording_store, executor, recorder):
    executor.add('POST', '/api/v1/apps', status=200, json=_app())
    app = recording_store.instantiate(Application, {
        'signOnMode': 'OPENID_CONNECT',
        'label': 'Portal',
    })
    created = recording_store.create('/api/v1/apps', app)
    assert type(created) is OpenIdConnectApplication
    assert created.id == '123'
    assert recorder.results[0].action is ResourceAction.READ
    request = executor.requests[0]
    assert request.method is HttpMethod.POST
    assert json.loads(request.body) == {
        'signOnMode': 'OPENID_CONNECT',
        'label': 'Portal',
        'name': 'oidc_client',
    }


def test_create_201_is_create_action(recording_store, executor, recorder):
    executor.add('POST', '/api/v1/users', status=201, json=_user())
    user = recording_store.instantiate(User)
    user.profile.login = 'ada@example.com'
    recording_store.create('/api/v1/users', user, query={'activate': False})
    assert recorder.results[0].action is ResourceAction.CREATE
    assert executor.calls == [('POST', f'{BASE_URL}/api/v1/users?activate=false')]


def test_create_updates_caller_resource(store, executor):
    executor.add('POST', '/api/v1/users', status=201, json=_user())
    user = store.instantiate(User)
    user.profile.login = 'ada@example.com'
    created = store.create('/api/v1/users', user)
    assert user.href == USER
    assert user.id == '00u1'
    assert not user.dirty
    assert user.updated_property_names == []
    assert created is not user
    assert created.href == USER


def test_created_resource_is_cached(store, executor):
    executor.add('POST', '/api/v1/users', status=201, json=_user())
    store.create('/api/v1/users', store.instantiate(User, {'profile': {}}))
    assert store.get_resource(USER, User).id == '00u1'
    assert executor.count('GET', USER) == 0


def test_create_empty_body(store, executor):
    executor.add('POST', '/api/v1/users', status=201)
    with pytest.raises(EmptyResponseBody):
        store.create('/api/v1/users', store.instantiate(User, {'profile': {}}))


@pytest.mark.parametrize('status', [200, 202, 204])
def test_create_no_content(store, executor, status):
    executor.add('POST', '/api/v1/users/00u1/lifecycle/unlock', status=status)
    user = store.instantiate(User, _user())
    user.unlock()
    assert executor.calls == [('POST', f'{USER}/lifecycle/unlock')]
    assert executor.requests[0].body is None


def test_save_full_update(store, executor):
    executor.add('PUT', '/api/v1/users/00u1', json=_user(status='SUSPENDED'))
    user = store.instantiate(User, _user())
    user.set_property('status', 'SUSPENDED')
    user.save()
    request = executor.requests[0]
    assert request.method is HttpMethod.PUT
    assert json.loads(request.body) == _user(status='SUSPENDED')
    assert user.status.value == 'SUSPENDED'
    assert not user.dirty


def test_save_partial_update(store, executor):
    executor.add('POST', '/api/v1/users/00u1', json=_user(status='SUSPENDED'))
    user = store.instantiate(User, _user())
    user.set_property('status', 'SUSPENDED')
    user.save(partial=True)
    request = executor.requests[0]
    assert request.method is HttpMethod.POST
    assert json.loads(request.body) == {'status': 'SUSPENDED'}


def test_save_invalidates_cache(store, executor):
    executor.add('GET', '/api/v1/users/00u1', json=_user())
    executor.add('PUT', '/api/v1/users/00u1', status=204)
    user = store.get_resource(USER, User)
    user.save()
    store.get_resource(USER, User)
    assert executor.count('GET', USER) == 2


def test_save_collection(store):
    users = store.instantiate(UserList, {'items': [], 'href': f'{BASE_URL}/api/v1/users'})
    with pytest.raises(CollectionNotPersistable):
        store.save(users)


def test_save_new_resource(store):
    with pytest.raises(HrefRequired):
        store.instantiate(User).save()


def test_delete_lifecycle_path(recording_store, executor, recorder):
    href = '/api/v1/apps/123/lifecycle/deactivate'
    executor.add('DELETE', href, status=204)
    recording_store.delete(href)
    assert executor.calls == [('DELETE', f'{BASE_URL}{href}')]
    result = recorder.results[0]
    assert result.data == {}
    assert result.uri.absolute_path == f'{BASE_URL}{href}'


def test_delete_resource_property(store, executor):
    executor.add('DELETE', '/api/v1/users/00u1/factors', status=204)
    store.delete(store.instantiate(User, _user()), 'factors')
    assert executor.calls == [('DELETE', f'{USER}/factors')]


def test_delete_invalidates_cache(store, executor):
    executor.add('GET', '/api/v1/users/00u1', json=_user())
    executor.add('DELETE', '/api/v1/users/00u1', status=204)
    user = store.get_resource(USER, User)
    user.delete()
    store.get_resource(USER, User)
    assert executor.count('GET', USER) == 2


def test_lifecycle_action_invalidates_cache(store, executor):
    executor.add('GET', '/api/v1/apps/123', json=_app())
    executor.add('POST', '/api/v1/apps/123/lifecycle/deactivate', status=200, json={})
    app = store.get_resource(APP, Application)
    app.deactivate()
    store.get_resource(APP, Application)
    assert executor.count('GET', APP) == 2


def test_error_response(store, executor):
    executor.add(
        'GET', '/api/v1/users/missing',
        status=404,
        json={
            'errorCode': 'E0000007',
            'errorSummary': 'Not found: Resource not found: missing (User)',
            'errorCauses': [],
        },
        headers={
            'X-Okta-Request-Id': 'req-1',
            'X-Rate-Limit-Remaining': '599',
            'Content-Type': 'application/json',
        },
    )
    with pytest.raises(ResourceError) as e:
        store.get_resource('/api/v1/users/missing', User)
    assert e.value.status == 404
    assert e.value.code == 'E0000007'
    assert e.value.request_id == 'req-1'
    assert e.value.headers == {
        'X-Okta-Request-Id': ['req-1'],
        'X-Rate-Limit-Remaining': ['599'],
    }


def test_error_response_invalid_body(store, executor):
    executor.add('GET', '/api/v1/users/00u1', status=502, body=b'<html>Bad gateway</html>')
    with pytest.raises(ResourceError) as e:
        store.get_resource(USER, User)
    assert e.value.status == 502
    assert e.value.code is None


def test_default_headers(store, executor):
    executor.add('POST', '/api/v1/users', status=201, json=_user())
    executor.add('GET', '/api/v1/users/00u2', json=_user(id='00u2', _links={}))
    with runtime_headers(agents=['terraform/1.2'], request_id='client-1'):
        store.create('/api/v1/users', store.instantiate(User, {'profile': {}}))
    store.get_resource('/api/v1/users/00u2', User)

    post, get = executor.requests
    assert post.headers.get('Accept') == 'application/json'
    assert post.headers.content_type == 'application/json'
    assert post.headers.get('User-Agent').startswith('terraform/1.2 okta-sdk-python/')
    assert post.headers.get('X-Okta-Client-Request-Id') == 'client-1'

    assert get.headers.content_type is None
    assert get.headers.get('User-Agent').startswith('okta-sdk-python/')
    assert 'X-Okta-Client-Request-Id' not in get.headers


def test_custom_headers(store, executor):
    executor.add('GET', '/api/v1/users/00u1', json=_user())
    store.get_resource(USER, User, headers={'X-Custom': 'yes'})
    assert executor.requests[0].headers.get('X-Custom') == 'yes'
