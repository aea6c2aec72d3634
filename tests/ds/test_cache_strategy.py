import pytest

from oktasdk.cache.components import DefaultCacheManager
from oktasdk.config import CONFIG
from oktasdk.core.enums import ResourceAction
from oktasdk.ds.cache import CacheRegionNameResolver
from oktasdk.ds.cache import CacheResolver
from oktasdk.ds.cache import HalResourceHrefResolver
from oktasdk.ds.cache import ResourceCacheStrategy
from oktasdk.ds.components import ResourceDataRequest
from oktasdk.ds.components import ResourceDataResult
from oktasdk.ds.discriminator import DiscriminatorRegistry
from oktasdk.resource.base import VoidResource
from oktasdk.resources.applications import AppUser
from oktasdk.resources.applications import Application
from oktasdk.resources.applications import OpenIdConnectApplication
from oktasdk.resources.groups import Group
from oktasdk.resources.groups import GroupRule
from oktasdk.resources.users import User
from oktasdk.resources.users import UserList
from oktasdk.utils.url import CanonicalUri

BASE = 'https://test.okta.com'
USER = f'{BASE}/api/v1/users/00u1'
APP = f'{BASE}/api/v1/apps/0oa1'


def _data(href, **kwargs):
    return {'id': href.rsplit('/', 1)[-1], '_links': {'self': {'href': href}}, **kwargs}


def _request(action, href, klass=User, query=None, **kwargs):
    return ResourceDataRequest(
        action=action,
        uri=CanonicalUri.create(href, query),
        resource_class=klass,
        **kwargs,
    )


def _result(request, data, action=None):
    return ResourceDataResult(
        action=action or request.action,
        uri=request.uri,
        resource_class=request.resource_class,
        data=data,
    )


@pytest.fixture()
def manager():
    return DefaultCacheManager(default_ttl=300, default_tti=300)


@pytest.fixture()
def strategy(manager):
    registry = DiscriminatorRegistry(CONFIG['discriminators'])
    return ResourceCacheStrategy(
        HalResourceHrefResolver(BASE),
        CacheResolver(manager, CacheRegionNameResolver(registry)),
    )


def _write(strategy, action, href, data, klass=User, **kwargs):
    request = _request(action, href, klass, **kwargs)
    strategy.cache(request, _result(request, data))


def _read(strategy, href, klass=User, query=None):
    result = strategy.read_from_cache(_request(ResourceAction.READ, href, klass, query))
    return result.data if result else None


def test_round_trip(strategy):
    _write(strategy, ResourceAction.UPDATE, USER, _data(USER, status='ACTIVE'))
    assert _read(strategy, USER) == _data(USER, status='ACTIVE')


def test_read_result_is_a_copy(strategy):
    _write(strategy, ResourceAction.READ, USER, _data(USER))
    _read(strategy, USER)['status'] = 'CHANGED'
    assert 'status' not in _read(strategy, USER)


def test_nested_maps_are_not_shared(strategy):
    data = _data(USER, profile={'login': 'a@example.com'})
    _write(strategy, ResourceAction.READ, USER, data)
    data['profile']['login'] = 'written@example.com'
    _read(strategy, USER)['profile']['login'] = 'read@example.com'
    assert _read(strategy, USER)['profile'] == {'login': 'a@example.com'}


def test_read_miss(strategy):
    assert _read(strategy, USER) is None


def test_not_cached_without_self_href(strategy):
    _write(strategy, ResourceAction.READ, USER, {'id': '00u1'})
    assert _read(strategy, USER) is None


def test_cached_under_self_href(strategy):
    data = {'id': '00u1', '_links': {'self': {'href': USER}}}
    _write(strategy, ResourceAction.READ, f'{USER}?x=1', data)
    assert _read(strategy, USER) == data


def test_expand_bypass(strategy):
    _write(strategy, ResourceAction.READ, APP, _data(APP), Application)
    assert _read(strategy, APP, Application) == _data(APP)
    assert _read(strategy, APP, Application, {'expand': 'user/00u1'}) is None


def test_expanded_result_is_not_cached(strategy):
    _write(
        strategy, ResourceAction.READ, APP,
        _data(APP, _embedded={'user': {}}), Application,
        query={'expand': 'user/00u1'},
    )
    assert _read(strategy, APP, Application) is None
    assert _read(strategy, APP, Application, {'expand': 'user/00u1'}) is None


def test_delete_removes_entry(strategy):
    _write(strategy, ResourceAction.READ, USER, _data(USER))
    _write(strategy, ResourceAction.DELETE, USER, {})
    assert _read(strategy, USER) is None


def test_lifecycle_action_invalidates_resource(strategy):
    _write(strategy, ResourceAction.READ, APP, _data(APP), Application)
    _write(strategy, ResourceAction.CREATE, f'{APP}/lifecycle/deactivate', {}, VoidResource)
    assert _read(strategy, APP, Application) is None


def test_sub_resource_delete_invalidates_resource(strategy):
    _write(strategy, ResourceAction.READ, APP, _data(APP), Application)
    _write(strategy, ResourceAction.DELETE, f'{APP}/users/00u1', {}, VoidResource)
    assert _read(strategy, APP, Application) is None


def test_unrelated_resource_is_kept(strategy):
    other = f'{BASE}/api/v1/apps/0oa2'
    _write(strategy, ResourceAction.READ, APP, _data(APP), Application)
    _write(strategy, ResourceAction.DELETE, other, {}, Application)
    assert _read(strategy, APP, Application) == _data(APP)


def test_parent_is_invalidated(strategy):
    group = f'{BASE}/api/v1/groups/00g1'
    _write(strategy, ResourceAction.READ, group, _data(group), Group)
    request = _request(
        ResourceAction.UPDATE,
        f'{BASE}/api/v1/other/00u1',
        VoidResource,
        parent_uri=CanonicalUri.create(group),
        parent_class=Group,
    )
    strategy.cache(request, _result(request, {}))
    assert _read(strategy, group, Group) is None


def test_collections_are_not_cached(strategy):
    href = f'{BASE}/api/v1/users'
    data = {'items': [], 'href': 'local', '_links': {'self': {'href': href}}}
    _write(strategy, ResourceAction.READ, href, data, UserList)
    assert _read(strategy, href, UserList) is None
    assert _read(strategy, href, User) is None


def test_subtype_shares_region(strategy, manager):
    data = _data(APP, signOnMode='OPENID_CONNECT')
    _write(strategy, ResourceAction.CREATE, f'{BASE}/api/v1/apps', data, OpenIdConnectApplication)
    assert _read(strategy, APP, Application) == data
    assert 'oktasdk.resources.applications.Application' in manager.caches


def test_initializer(manager):
    strategy = ResourceCacheStrategy(
        HalResourceHrefResolver(BASE),
        CacheResolver(manager),
        initializer=lambda klass, data: {'cachedBy': klass.__name__},
    )
    _write(strategy, ResourceAction.READ, USER, _data(USER))
    assert _read(strategy, USER) == {'cachedBy': 'User', **_data(USER)}


@pytest.mark.parametrize('klass, data, href', [
    (Group, {'id': '00g1'}, f'{BASE}/api/v1/groups/00g1'),
    (GroupRule, {'id': '0pr1'}, f'{BASE}/api/v1/groups/rules/0pr1'),
    (
        AppUser,
        {'id': '00u1', '_links': {'app': {'href': APP}}},
        f'{APP}/users/00u1',
    ),
    (
        Application,
        {'id': '0oa1', '_links': {'users': {'href': f'{APP}/users'}}},
        APP,
    ),
    (
        OpenIdConnectApplication,
        {'id': '0oa1', '_links': {'users': {'href': f'{APP}/users'}}},
        APP,
    ),
    (User, {'id': '00u1'}, None),
])
def test_href_resolver_fallbacks(klass, data, href):
    assert HalResourceHrefResolver(BASE).resolve_href(data, klass) == href


def test_region_names():
    registry = DiscriminatorRegistry(CONFIG['discriminators'])
    names = CacheRegionNameResolver(registry)
    assert names.get_region_name(OpenIdConnectApplication) == 'oktasdk.resources.applications.Application'
    assert names.get_region_name(User) == 'oktasdk.resources.users.User'
