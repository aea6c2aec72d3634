from typing import Any, Dict, List, Mapping, Optional

from oktasdk.resource.base import IntegerProperty
from oktasdk.resource.base import ListProperty
from oktasdk.resource.base import MapProperty
from oktasdk.resource.base import Resource
from oktasdk.resource.base import StringProperty


class ErrorCause(Resource):
    summary = StringProperty('errorSummary')


class Error(Resource):
    """Structured error body returned by the API server."""

    status = IntegerProperty('status')
    code = StringProperty('errorCode')
    message = StringProperty('errorSummary')
    link = StringProperty('errorLink')
    id = StringProperty('errorId')
    raw_causes = ListProperty('errorCauses')
    headers = MapProperty('errorHeaders')

    def __init__(self, properties: Optional[Mapping[str, Any]] = None):
        super().__init__(None, properties)

    @property
    def causes(self) -> List[ErrorCause]:
        return [
            ErrorCause(None, cause)
            for cause in self.raw_causes or []
            if isinstance(cause, Mapping)
        ]

    def set_status(self, status: int) -> 'Error':
        self.set_property('status', status)
        return self

    def set_id(self, request_id: str) -> 'Error':
        self.set_property('errorId', request_id)
        return self

    def set_headers(self, headers: Dict[str, List[str]]) -> 'Error':
        self.set_property('errorHeaders', headers)
        return self
