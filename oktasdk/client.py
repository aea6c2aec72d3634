from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Type, TypeVar

import logging

from oktasdk.cache.components import CacheManager
from oktasdk.cache.components import DisabledCacheManager
from oktasdk.core.config import RawConfig
from oktasdk.core.config import nested
from oktasdk.core.config import read_config
from oktasdk.ds.builder import RequestBuilder
from oktasdk.ds.discriminator import DiscriminatorRegistry
from oktasdk.ds.factory import load_factory_configs
from oktasdk.ds.store import DataStore
from oktasdk.http.executor import RequestExecutor
from oktasdk.resource.base import Reference
from oktasdk.resource.base import Resource
from oktasdk.resources.applications import AppUser
from oktasdk.resources.applications import Application
from oktasdk.resources.applications import ApplicationList
from oktasdk.resources.factors import UserFactor
from oktasdk.resources.groups import Group
from oktasdk.resources.groups import GroupList
from oktasdk.resources.groups import GroupRule
from oktasdk.resources.groups import GroupRuleList
from oktasdk.resources.policies import Policy
from oktasdk.resources.policies import PolicyList
from oktasdk.resources.users import User
from oktasdk.resources.users import UserList
from oktasdk.utils.imports import importstr

log = logging.getLogger(__name__)

R = TypeVar('R', bound=Resource)

API = '/api/v1'


class Client:
    """Entry point for working with org resources.

    Thin layer over `DataStore`, mapping endpoints to resource classes.
    """

    def __init__(self, data_store: DataStore):
        self.data_store = data_store

    def __repr__(self):
        return f'<{type(self).__name__} {self.data_store.base_url}>'

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()

    def close(self):
        self.data_store.close()

    def instantiate(self, klass: Type[R], properties: Optional[Mapping[str, Any]] = None) -> R:
        return self.data_store.instantiate(klass, properties)

    def reference(self, href: str, klass: Type[R]) -> Reference:
        return Reference(self.data_store, self.data_store.ensure_fully_qualified(href), klass)

    def get(self, href: str, klass: Type[R], **query) -> R:
        return self.data_store.get_resource(href, klass, query or None)

    def http(self) -> RequestBuilder:
        return RequestBuilder(self.data_store)

    # Users

    def get_user(self, user_id: str) -> User:
        return self.data_store.get_resource(f'{API}/users/{user_id}', User)

    def list_users(self, **query) -> UserList:
        return self.data_store.get_resource(f'{API}/users', UserList, query or None)

    def create_user(self, user: User, activate: Optional[bool] = None, **query) -> User:
        query['activate'] = activate
        return self.data_store.create(f'{API}/users', user, query=query)

    # Groups

    def get_group(self, group_id: str) -> Group:
        return self.data_store.get_resource(f'{API}/groups/{group_id}', Group)

    def list_groups(self, **query) -> GroupList:
        return self.data_store.get_resource(f'{API}/groups', GroupList, query or None)

    def create_group(self, group: Group) -> Group:
        return self.data_store.create(f'{API}/groups', group)

    def get_group_rule(self, rule_id: str) -> GroupRule:
        return self.data_store.get_resource(f'{API}/groups/rules/{rule_id}', GroupRule)

    def list_group_rules(self, **query) -> GroupRuleList:
        return self.data_store.get_resource(f'{API}/groups/rules', GroupRuleList, query or None)

    def create_group_rule(self, rule: GroupRule) -> GroupRule:
        return self.data_store.create(f'{API}/groups/rules', rule)

    # Applications

    def get_application(self, app_id: str, **query) -> Application:
        return self.data_store.get_resource(f'{API}/apps/{app_id}', Application, query or None)

    def list_applications(self, **query) -> ApplicationList:
        return self.data_store.get_resource(f'{API}/apps', ApplicationList, query or None)

    def create_application(self, app: Application, activate: Optional[bool] = None) -> Application:
        return self.data_store.create(
            f'{API}/apps',
            app,
            return_type=Application,
            query={'activate': activate},
        )

    def get_app_user(self, app_id: str, user_id: str) -> AppUser:
        return self.data_store.get_resource(f'{API}/apps/{app_id}/users/{user_id}', AppUser)

    # Policies

    def get_policy(self, policy_id: str, **query) -> Policy:
        return self.data_store.get_resource(f'{API}/policies/{policy_id}', Policy, query or None)

    def list_policies(self, type: str, **query) -> PolicyList:
        query['type'] = type
        return self.data_store.get_resource(f'{API}/policies', PolicyList, query)

    def create_policy(self, policy: Policy, activate: Optional[bool] = None) -> Policy:
        return self.data_store.create(
            f'{API}/policies',
            policy,
            return_type=Policy,
            query={'activate': activate},
        )

    # Factors

    def get_user_factor(self, user_id: str, factor_id: str) -> UserFactor:
        return self.data_store.get_resource(
            f'{API}/users/{user_id}/factors/{factor_id}',
            UserFactor,
        )


def create_cache_manager(rc: RawConfig) -> CacheManager:
    if not rc.get('client', 'cache', 'enabled', default=True, cast=bool):
        return DisabledCacheManager()
    Manager = rc.get('client', 'cache', 'manager', cast=importstr)
    return Manager(
        default_ttl=rc.get('client', 'cache', 'default_ttl'),
        default_tti=rc.get('client', 'cache', 'default_tti'),
        max_size=rc.get('client', 'cache', 'max_size', cast=int),
        caches=nested(rc, 'client', 'cache', 'caches'),
    )


def create_executor(rc: RawConfig) -> RequestExecutor:
    Executor = rc.get('client', 'executor', cast=importstr)
    return Executor(
        token=rc.get('client', 'token'),
        timeout=rc.get('client', 'connection_timeout', cast=float),
    )


def create_client(
    rc: Optional[RawConfig] = None,
    executor: Optional[RequestExecutor] = None,
    **overrides: Dict[str, Any],
) -> Client:
    """Build a client from layered configuration.

    Keyword overrides are applied on top of configuration, for example:

        create_client(client={'org_url': 'https://dev-1.okta.com'})

    """
    rc = rc or read_config()
    if overrides:
        rc = rc.fork(overrides)
    org_url = rc.get('client', 'org_url', required=True)
    log.debug("Creating client for %s.", org_url)
    data_store = DataStore(
        executor or create_executor(rc),
        org_url,
        cache_manager=create_cache_manager(rc),
        registry=DiscriminatorRegistry.from_config(rc),
        factory_configs=load_factory_configs(rc),
        user_agent=rc.get('user_agent', default=''),
    )
    return Client(data_store)
