from __future__ import annotations

from typing import Optional

import enum

from oktasdk.resource.base import DateTimeProperty
from oktasdk.resource.base import EnumProperty
from oktasdk.resource.base import InstanceResource
from oktasdk.resource.base import MapProperty
from oktasdk.resource.base import Resource
from oktasdk.resource.base import ResourceReference
from oktasdk.resource.base import StringProperty
from oktasdk.resource.collection import CollectionResource
from oktasdk.resources.factors import UserFactor
from oktasdk.resources.factors import UserFactorList
from oktasdk.resources.groups import GroupList


class UserStatus(str, enum.Enum):
    STAGED = 'STAGED'
    PROVISIONED = 'PROVISIONED'
    ACTIVE = 'ACTIVE'
    RECOVERY = 'RECOVERY'
    PASSWORD_EXPIRED = 'PASSWORD_EXPIRED'
    LOCKED_OUT = 'LOCKED_OUT'
    SUSPENDED = 'SUSPENDED'
    DEPROVISIONED = 'DEPROVISIONED'


class UserProfile(Resource):
    login = StringProperty('login')
    email = StringProperty('email')
    second_email = StringProperty('secondEmail', nullable=True)
    first_name = StringProperty('firstName')
    last_name = StringProperty('lastName')
    mobile_phone = StringProperty('mobilePhone', nullable=True)


class User(InstanceResource):
    id = StringProperty('id')
    status = EnumProperty('status', UserStatus)
    transitioning_to_status = StringProperty('transitioningToStatus')
    created = DateTimeProperty('created')
    activated = DateTimeProperty('activated')
    status_changed = DateTimeProperty('statusChanged')
    last_login = DateTimeProperty('lastLogin')
    last_updated = DateTimeProperty('lastUpdated')
    password_changed = DateTimeProperty('passwordChanged')
    profile = ResourceReference('profile', UserProfile, create_on_access=True)
    credentials = MapProperty('credentials')
    type = MapProperty('type')

    def is_printable_property(self, name: str) -> bool:
        return name != 'credentials'

    def activate(self, send_email: bool = True):
        self._lifecycle('activate', sendEmail=send_email)

    def deactivate(self, send_email: Optional[bool] = None):
        self._lifecycle('deactivate', sendEmail=send_email)

    def suspend(self):
        self._lifecycle('suspend')

    def unsuspend(self):
        self._lifecycle('unsuspend')

    def unlock(self):
        self._lifecycle('unlock')

    def list_groups(self) -> GroupList:
        return self.data_store.get_resource(f'{self.href}/groups', GroupList)

    def list_factors(self) -> UserFactorList:
        return self.data_store.get_resource(f'{self.href}/factors', UserFactorList)

    def get_factor(self, factor_id: str) -> UserFactor:
        return self.data_store.get_resource(f'{self.href}/factors/{factor_id}', UserFactor)

    def enroll_factor(self, factor: UserFactor, **query) -> UserFactor:
        return self.data_store.create(
            f'{self.href}/factors',
            factor,
            parent=self,
            return_type=UserFactor,
            query=query or None,
        )


class UserList(CollectionResource[User]):
    item_type = User
