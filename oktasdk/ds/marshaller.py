from typing import Any, Dict, Mapping, Optional, Union

import datetime
import enum
import json

from oktasdk.ds.converter import ResourceConverter
from oktasdk.exceptions import MarshalingError
from oktasdk.resource.base import Resource

LOCAL_HREF = 'local'


class JsonMapMarshaller:
    """JSON boundary of the data store.

    A top-level JSON list is wrapped into a collection map: `items`, the
    `next` link as `nextPage` and a placeholder `href`.
    """

    def __init__(self, pretty_print: bool = False, converter: ResourceConverter = None):
        self.pretty_print = pretty_print
        self.converter = converter or ResourceConverter()

    def marshal(self, data: Mapping[str, Any]) -> bytes:
        try:
            return json.dumps(
                data,
                default=self._default,
                indent=2 if self.pretty_print else None,
                ensure_ascii=False,
            ).encode('utf-8')
        except (TypeError, ValueError) as e:
            raise MarshalingError(source='dict', target='JSON', error=str(e)) from e

    def unmarshal(
        self,
        body: Union[bytes, str],
        link_map: Optional[Mapping[str, str]] = None,
    ) -> Dict[str, Any]:
        try:
            value = json.loads(body)
        except ValueError as e:
            raise MarshalingError(source='JSON', target='dict', error=str(e)) from e
        if isinstance(value, dict):
            return value
        if isinstance(value, list):
            return {
                'items': value,
                'nextPage': (link_map or {}).get('next'),
                'href': LOCAL_HREF,
            }
        raise MarshalingError(source=type(value).__name__, target='dict')

    def _default(self, value: Any) -> Any:
        if isinstance(value, Resource):
            return self.converter.convert(value, False)
        if isinstance(value, enum.Enum):
            return value.value
        if isinstance(value, (datetime.datetime, datetime.date)):
            return value.isoformat()
        if isinstance(value, (set, frozenset)):
            return sorted(value)
        if isinstance(value, Mapping):
            return dict(value)
        raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
