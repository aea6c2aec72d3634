from __future__ import annotations

from typing import Any, Mapping, Optional

import enum

from oktasdk.resource.base import DateTimeProperty
from oktasdk.resource.base import EnumProperty
from oktasdk.resource.base import InstanceResource
from oktasdk.resource.base import ListProperty
from oktasdk.resource.base import MapProperty
from oktasdk.resource.base import StringProperty
from oktasdk.resource.collection import CollectionResource
from oktasdk.resources import get_link_href
from oktasdk.resources import set_default


class ApplicationSignOnMode(str, enum.Enum):
    AUTO_LOGIN = 'AUTO_LOGIN'
    BASIC_AUTH = 'BASIC_AUTH'
    BOOKMARK = 'BOOKMARK'
    BROWSER_PLUGIN = 'BROWSER_PLUGIN'
    OPENID_CONNECT = 'OPENID_CONNECT'
    SAML_1_1 = 'SAML_1_1'
    SAML_2_0 = 'SAML_2_0'
    SECURE_PASSWORD_STORE = 'SECURE_PASSWORD_STORE'
    WS_FEDERATION = 'WS_FEDERATION'


class ApplicationStatus(str, enum.Enum):
    ACTIVE = 'ACTIVE'
    INACTIVE = 'INACTIVE'


class Application(InstanceResource):
    """Application integration.

    The concrete class is picked by `signOnMode`, new instances of a
    sub-type get their sign-on mode (and app name, where the sub-type has
    a fixed one) set.
    """
    sign_on_mode_default: Optional[ApplicationSignOnMode] = None
    name_default: Optional[str] = None

    id = StringProperty('id')
    name = StringProperty('name')
    label = StringProperty('label')
    status = EnumProperty('status', ApplicationStatus)
    sign_on_mode = EnumProperty('signOnMode', ApplicationSignOnMode)
    created = DateTimeProperty('created')
    last_updated = DateTimeProperty('lastUpdated')
    features = ListProperty('features')
    accessibility = MapProperty('accessibility')
    visibility = MapProperty('visibility')
    credentials = MapProperty('credentials')
    settings = MapProperty('settings')
    licensing = MapProperty('licensing')

    def __init__(self, data_store=None, properties=None):
        super().__init__(data_store, properties)
        mode = self.sign_on_mode_default
        set_default(self, 'signOnMode', mode.value if mode else None)
        set_default(self, 'name', self.name_default)

    @classmethod
    def resolve_self_href(cls, data: Mapping[str, Any], base_url: Optional[str]) -> Optional[str]:
        # Application data links to its users, own href is the prefix.
        href = get_link_href(data, 'users')
        if href and '/users' in href:
            return href[:href.rindex('/users')]
        return None

    def is_printable_property(self, name: str) -> bool:
        return name != 'credentials'

    def activate(self):
        self._lifecycle('activate')

    def deactivate(self):
        self._lifecycle('deactivate')

    def list_app_users(self, **query) -> AppUserList:
        return self.data_store.get_resource(f'{self.href}/users', AppUserList, query or None)

    def get_app_user(self, user_id: str) -> AppUser:
        return self.data_store.get_resource(f'{self.href}/users/{user_id}', AppUser)

    def assign_user(self, app_user: AppUser) -> AppUser:
        return self.data_store.create(
            f'{self.href}/users',
            app_user,
            parent=self,
            return_type=AppUser,
        )


class AutoLoginApplication(Application):
    sign_on_mode_default = ApplicationSignOnMode.AUTO_LOGIN


class BasicAuthApplication(Application):
    sign_on_mode_default = ApplicationSignOnMode.BASIC_AUTH
    name_default = 'template_basic_auth'


class BookmarkApplication(Application):
    sign_on_mode_default = ApplicationSignOnMode.BOOKMARK
    name_default = 'bookmark'


class BrowserPluginApplication(Application):
    sign_on_mode_default = ApplicationSignOnMode.BROWSER_PLUGIN


class OpenIdConnectApplication(Application):
    sign_on_mode_default = ApplicationSignOnMode.OPENID_CONNECT
    name_default = 'oidc_client'


class SamlApplication(Application):
    sign_on_mode_default = ApplicationSignOnMode.SAML_2_0


class SecurePasswordStoreApplication(Application):
    sign_on_mode_default = ApplicationSignOnMode.SECURE_PASSWORD_STORE
    name_default = 'template_sps'


class WsFederationApplication(Application):
    sign_on_mode_default = ApplicationSignOnMode.WS_FEDERATION
    name_default = 'template_wsfed'


class ApplicationList(CollectionResource[Application]):
    item_type = Application


class AppUser(InstanceResource):
    """User assigned to an application."""

    id = StringProperty('id')
    external_id = StringProperty('externalId')
    scope = StringProperty('scope')
    status = StringProperty('status')
    sync_state = StringProperty('syncState')
    created = DateTimeProperty('created')
    last_updated = DateTimeProperty('lastUpdated')
    status_changed = DateTimeProperty('statusChanged')
    credentials = MapProperty('credentials')
    profile = MapProperty('profile')

    @classmethod
    def resolve_self_href(cls, data: Mapping[str, Any], base_url: Optional[str]) -> Optional[str]:
        # App users have no self link, only a link to their application.
        href = get_link_href(data, 'app')
        if href and data.get('id'):
            return f"{href}/users/{data['id']}"
        return None

    def is_printable_property(self, name: str) -> bool:
        return name != 'credentials'


class AppUserList(CollectionResource[AppUser]):
    item_type = AppUser
