from __future__ import annotations

from typing import Any, Mapping, Optional, TYPE_CHECKING

import enum

from oktasdk.resource.base import DateTimeProperty
from oktasdk.resource.base import EnumProperty
from oktasdk.resource.base import InstanceResource
from oktasdk.resource.base import ListProperty
from oktasdk.resource.base import MapProperty
from oktasdk.resource.base import Resource
from oktasdk.resource.base import ResourceReference
from oktasdk.resource.base import StringProperty
from oktasdk.resource.base import VoidResource
from oktasdk.resource.collection import CollectionResource
from oktasdk.resources import set_default

if TYPE_CHECKING:
    from oktasdk.resources.users import UserList


class GroupType(str, enum.Enum):
    OKTA_GROUP = 'OKTA_GROUP'
    APP_GROUP = 'APP_GROUP'
    BUILT_IN = 'BUILT_IN'


class GroupProfile(Resource):
    name = StringProperty('name')
    description = StringProperty('description', nullable=True)


class Group(InstanceResource):
    id = StringProperty('id')
    type = EnumProperty('type', GroupType)
    created = DateTimeProperty('created')
    last_updated = DateTimeProperty('lastUpdated')
    last_membership_updated = DateTimeProperty('lastMembershipUpdated')
    object_class = ListProperty('objectClass')
    profile = ResourceReference('profile', GroupProfile, create_on_access=True)

    @classmethod
    def resolve_self_href(cls, data: Mapping[str, Any], base_url: Optional[str]) -> Optional[str]:
        if base_url and data.get('id'):
            return f"{base_url}/api/v1/groups/{data['id']}"
        return None

    def list_users(self) -> UserList:
        from oktasdk.resources.users import UserList
        return self.data_store.get_resource(f'{self.href}/users', UserList)

    def add_user(self, user_id: str):
        self.data_store.save(
            VoidResource(self.data_store),
            href=f'{self.href}/users/{user_id}',
            parent=self,
        )

    def remove_user(self, user_id: str):
        self.data_store.delete(f'{self.href}/users/{user_id}')


class GroupList(CollectionResource[Group]):
    item_type = Group


class GroupRuleStatus(str, enum.Enum):
    ACTIVE = 'ACTIVE'
    INACTIVE = 'INACTIVE'
    INVALID = 'INVALID'


class GroupRule(InstanceResource):
    id = StringProperty('id')
    name = StringProperty('name')
    type = StringProperty('type')
    status = EnumProperty('status', GroupRuleStatus)
    created = DateTimeProperty('created')
    last_updated = DateTimeProperty('lastUpdated')
    conditions = MapProperty('conditions')
    actions = MapProperty('actions')

    def __init__(self, data_store=None, properties=None):
        super().__init__(data_store, properties)
        set_default(self, 'type', 'group_rule')

    @classmethod
    def resolve_self_href(cls, data: Mapping[str, Any], base_url: Optional[str]) -> Optional[str]:
        if base_url and data.get('id'):
            return f"{base_url}/api/v1/groups/rules/{data['id']}"
        return None

    def activate(self):
        self._lifecycle('activate')

    def deactivate(self):
        self._lifecycle('deactivate')


class GroupRuleList(CollectionResource[GroupRule]):
    item_type = GroupRule
