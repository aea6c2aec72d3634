from __future__ import annotations

from typing import Optional

import enum

from oktasdk.resource.base import DateTimeProperty
from oktasdk.resource.base import EnumProperty
from oktasdk.resource.base import InstanceResource
from oktasdk.resource.base import MapProperty
from oktasdk.resource.base import StringProperty
from oktasdk.resource.collection import CollectionResource
from oktasdk.resources import set_default


class FactorType(str, enum.Enum):
    CALL = 'call'
    EMAIL = 'email'
    PUSH = 'push'
    SMS = 'sms'
    QUESTION = 'question'
    TOKEN = 'token'
    TOKEN_HARDWARE = 'token:hardware'
    TOKEN_HOTP = 'token:hotp'
    TOKEN_SOFTWARE_TOTP = 'token:software:totp'
    U2F = 'u2f'
    WEB = 'web'
    WEBAUTHN = 'webauthn'


class FactorProvider(str, enum.Enum):
    OKTA = 'OKTA'
    RSA = 'RSA'
    FIDO = 'FIDO'
    GOOGLE = 'GOOGLE'
    SYMANTEC = 'SYMANTEC'
    DUO = 'DUO'
    YUBICO = 'YUBICO'
    CUSTOM = 'CUSTOM'


class FactorStatus(str, enum.Enum):
    PENDING_ACTIVATION = 'PENDING_ACTIVATION'
    ACTIVE = 'ACTIVE'
    INACTIVE = 'INACTIVE'
    NOT_SETUP = 'NOT_SETUP'
    ENROLLED = 'ENROLLED'
    DISABLED = 'DISABLED'
    EXPIRED = 'EXPIRED'


class UserFactor(InstanceResource):
    """Factor enrolled by a user, sub-typed by `factorType`."""

    factor_type_default: Optional[FactorType] = None

    id = StringProperty('id')
    factor_type = EnumProperty('factorType', FactorType)
    provider = EnumProperty('provider', FactorProvider)
    status = EnumProperty('status', FactorStatus)
    created = DateTimeProperty('created')
    last_updated = DateTimeProperty('lastUpdated')
    profile = MapProperty('profile')
    verify = MapProperty('verify')
    embedded = MapProperty('_embedded')

    def __init__(self, data_store=None, properties=None):
        super().__init__(data_store, properties)
        default = self.factor_type_default
        set_default(self, 'factorType', default.value if default else None)

    def activate(self):
        self._lifecycle('activate')


class CallUserFactor(UserFactor):
    factor_type_default = FactorType.CALL


class EmailUserFactor(UserFactor):
    factor_type_default = FactorType.EMAIL


class PushUserFactor(UserFactor):
    factor_type_default = FactorType.PUSH


class SmsUserFactor(UserFactor):
    factor_type_default = FactorType.SMS


class SecurityQuestionUserFactor(UserFactor):
    factor_type_default = FactorType.QUESTION

    def is_printable_property(self, name: str) -> bool:
        # Profile holds the answer.
        return name != 'profile'


class TokenUserFactor(UserFactor):
    factor_type_default = FactorType.TOKEN


class HardwareUserFactor(UserFactor):
    factor_type_default = FactorType.TOKEN_HARDWARE


class CustomHotpUserFactor(UserFactor):
    factor_type_default = FactorType.TOKEN_HOTP


class TotpUserFactor(UserFactor):
    factor_type_default = FactorType.TOKEN_SOFTWARE_TOTP


class U2fUserFactor(UserFactor):
    factor_type_default = FactorType.U2F


class WebUserFactor(UserFactor):
    factor_type_default = FactorType.WEB


class WebAuthnUserFactor(UserFactor):
    factor_type_default = FactorType.WEBAUTHN


class UserFactorList(CollectionResource[UserFactor]):
    item_type = UserFactor
