from __future__ import annotations

from typing import Any, Dict, Optional, Type, TYPE_CHECKING

import dataclasses

from oktasdk.core.enums import ResourceAction
from oktasdk.http.components import HttpHeaders
from oktasdk.utils.url import CanonicalUri

if TYPE_CHECKING:
    from oktasdk.resource.base import Resource


@dataclasses.dataclass
class ResourceDataRequest:
    action: ResourceAction
    uri: CanonicalUri
    resource_class: Type[Resource]
    data: Dict[str, Any] = dataclasses.field(default_factory=dict)
    parent_uri: Optional[CanonicalUri] = None
    parent_class: Optional[Type[Resource]] = None
    headers: HttpHeaders = dataclasses.field(default_factory=HttpHeaders)


@dataclasses.dataclass
class ResourceDataResult:
    action: ResourceAction
    uri: CanonicalUri
    resource_class: Type[Resource]
    data: Dict[str, Any] = dataclasses.field(default_factory=dict)
