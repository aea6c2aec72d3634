from __future__ import annotations

from typing import Optional

import enum

from oktasdk.resource.base import BooleanProperty
from oktasdk.resource.base import DateTimeProperty
from oktasdk.resource.base import EnumProperty
from oktasdk.resource.base import InstanceResource
from oktasdk.resource.base import IntegerProperty
from oktasdk.resource.base import MapProperty
from oktasdk.resource.base import StringProperty
from oktasdk.resource.collection import CollectionResource
from oktasdk.resources import set_default


class PolicyType(str, enum.Enum):
    ACCESS_POLICY = 'ACCESS_POLICY'
    IDP_DISCOVERY = 'IDP_DISCOVERY'
    MFA_ENROLL = 'MFA_ENROLL'
    OKTA_SIGN_ON = 'OKTA_SIGN_ON'
    PASSWORD = 'PASSWORD'
    PROFILE_ENROLLMENT = 'PROFILE_ENROLLMENT'


class PolicyRuleType(str, enum.Enum):
    ACCESS_POLICY = 'ACCESS_POLICY'
    IDP_DISCOVERY = 'IDP_DISCOVERY'
    PASSWORD = 'PASSWORD'
    PROFILE_ENROLLMENT = 'PROFILE_ENROLLMENT'
    SIGN_ON = 'SIGN_ON'


class LifecycleStatus(str, enum.Enum):
    ACTIVE = 'ACTIVE'
    INACTIVE = 'INACTIVE'


class Policy(InstanceResource):
    type_default: Optional[PolicyType] = None

    id = StringProperty('id')
    name = StringProperty('name')
    description = StringProperty('description', nullable=True)
    type = EnumProperty('type', PolicyType)
    status = EnumProperty('status', LifecycleStatus)
    priority = IntegerProperty('priority')
    system = BooleanProperty('system')
    created = DateTimeProperty('created')
    last_updated = DateTimeProperty('lastUpdated')
    conditions = MapProperty('conditions')
    settings = MapProperty('settings')

    def __init__(self, data_store=None, properties=None):
        super().__init__(data_store, properties)
        set_default(self, 'type', self.type_default.value if self.type_default else None)

    def activate(self):
        self._lifecycle('activate')

    def deactivate(self):
        self._lifecycle('deactivate')

    def list_rules(self) -> PolicyRuleList:
        return self.data_store.get_resource(f'{self.href}/rules', PolicyRuleList)

    def get_rule(self, rule_id: str) -> PolicyRule:
        return self.data_store.get_resource(f'{self.href}/rules/{rule_id}', PolicyRule)

    def create_rule(self, rule: PolicyRule, **query) -> PolicyRule:
        return self.data_store.create(
            f'{self.href}/rules',
            rule,
            parent=self,
            return_type=PolicyRule,
            query=query or None,
        )


class AccessPolicy(Policy):
    type_default = PolicyType.ACCESS_POLICY


class IdentityProviderPolicy(Policy):
    type_default = PolicyType.IDP_DISCOVERY


class MultifactorEnrollmentPolicy(Policy):
    type_default = PolicyType.MFA_ENROLL


class OktaSignOnPolicy(Policy):
    type_default = PolicyType.OKTA_SIGN_ON


class PasswordPolicy(Policy):
    type_default = PolicyType.PASSWORD


class ProfileEnrollmentPolicy(Policy):
    type_default = PolicyType.PROFILE_ENROLLMENT


class PolicyList(CollectionResource[Policy]):
    item_type = Policy


class PolicyRule(InstanceResource):
    type_default: Optional[PolicyRuleType] = None

    id = StringProperty('id')
    name = StringProperty('name')
    type = EnumProperty('type', PolicyRuleType)
    status = EnumProperty('status', LifecycleStatus)
    priority = IntegerProperty('priority')
    system = BooleanProperty('system')
    created = DateTimeProperty('created')
    last_updated = DateTimeProperty('lastUpdated')
    conditions = MapProperty('conditions', nullable=True)
    actions = MapProperty('actions')

    def __init__(self, data_store=None, properties=None):
        super().__init__(data_store, properties)
        set_default(self, 'type', self.type_default.value if self.type_default else None)

    def activate(self):
        self._lifecycle('activate')

    def deactivate(self):
        self._lifecycle('deactivate')


class AccessPolicyRule(PolicyRule):
    type_default = PolicyRuleType.ACCESS_POLICY


class AuthorizationServerPolicyRule(PolicyRule):
    type_default = PolicyRuleType.IDP_DISCOVERY


class PasswordPolicyRule(PolicyRule):
    type_default = PolicyRuleType.PASSWORD


class ProfileEnrollmentPolicyRule(PolicyRule):
    type_default = PolicyRuleType.PROFILE_ENROLLMENT


class OktaSignOnPolicyRule(PolicyRule):
    type_default = PolicyRuleType.SIGN_ON


class PolicyRuleList(CollectionResource[PolicyRule]):
    item_type = PolicyRule
