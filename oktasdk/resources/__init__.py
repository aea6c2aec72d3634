from typing import Any, Mapping, Optional

from oktasdk.ds.factory import ResourceFactoryConfig
from oktasdk.resource.base import Resource

RESOURCE_FACTORY_CONFIG = ResourceFactoryConfig(
    supported_packages=('oktasdk.resources',),
)


def get_link_href(data: Optional[Mapping[str, Any]], rel: str) -> Optional[str]:
    """Return `_links.<rel>.href` of raw resource data."""
    links = (data or {}).get('_links')
    if not isinstance(links, Mapping):
        return None
    link = links.get(rel)
    if isinstance(link, Mapping):
        return link.get('href')
    return None


def set_default(resource: Resource, name: str, value: Any):
    # Only new resources get defaults. Server data always has an id, even
    # collection items without a self link.
    if value is None or not resource.is_new or resource.has_property('id'):
        return
    if not resource.has_property(name):
        resource.set_property(name, value)
