from typing import Optional

import logging

import requests

from oktasdk.http.components import HttpHeaders
from oktasdk.http.components import Request
from oktasdk.http.components import Response

log = logging.getLogger(__name__)


class RequestExecutor:
    """Executes a single HTTP request.

    Timeouts, retries and authentication are the executor's concern, the
    data store only hands over a fully built `Request`.
    """

    def execute(self, request: Request) -> Response:
        raise NotImplementedError


class RequestsExecutor(RequestExecutor):
    session: requests.Session

    def __init__(
        self,
        token: Optional[str] = None,
        timeout: Optional[float] = 30,
        session: Optional[requests.Session] = None,
    ):
        self.token = token
        self.timeout = timeout
        self.session = session or requests.Session()

    def execute(self, request: Request) -> Response:
        headers = request.headers.to_dict()
        if self.token and 'Authorization' not in request.headers:
            headers['Authorization'] = f'SSWS {self.token}'
        resp = self.session.request(
            request.method.value,
            request.url,
            params=list(request.query.items()) or None,
            headers=headers,
            data=request.body,
            timeout=self.timeout,
        )
        log.debug("%s %s -> %s", request.method.value, resp.url, resp.status_code)
        return Response(
            status=resp.status_code,
            headers=HttpHeaders(
                (name, value)
                for name, value in _raw_header_items(resp)
            ),
            body=resp.content or None,
        )

    def close(self):
        self.session.close()


def _raw_header_items(resp: requests.Response):
    raw = getattr(resp.raw, 'headers', None)
    if raw is not None and hasattr(raw, 'getlist'):
        for name in raw.keys():
            for value in raw.getlist(name):
                yield name, value
    else:
        yield from resp.headers.items()
