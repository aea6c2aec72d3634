from typing import Dict, Iterable, List, Optional, Union

import contextlib
import platform
import threading

OKTA_AGENT = 'okta-agent'
OKTA_CLIENT_REQUEST_ID = 'X-Okta-Client-Request-Id'

_holder = threading.local()


def get_runtime_headers() -> Dict[str, List[str]]:
    """Return runtime headers set for the current thread.

    Header names are lower-cased.
    """
    return getattr(_holder, 'headers', None) or {}


def set_runtime_headers(headers: Optional[Dict[str, Union[str, Iterable[str]]]]):
    if headers is None:
        _holder.headers = None
        return
    _holder.headers = {
        name.lower(): [value] if isinstance(value, str) else list(value)
        for name, value in headers.items()
    }


@contextlib.contextmanager
def runtime_headers(
    agents: Iterable[str] = (),
    request_id: Optional[str] = None,
    **headers: Union[str, Iterable[str]],
):
    """Set runtime headers for requests made by the current thread.

        with runtime_headers(agents=['terraform/1.0'], request_id='abc'):
            client.get_user('00u1')

    Previous runtime headers are restored on exit.
    """
    previous = getattr(_holder, 'headers', None)
    values = dict(headers)
    agents = list(agents)
    if agents:
        values[OKTA_AGENT] = agents
    if request_id:
        values[OKTA_CLIENT_REQUEST_ID] = request_id
    set_runtime_headers(values)
    try:
        yield
    finally:
        _holder.headers = previous


def get_user_agent(extra: str = '') -> str:
    from oktasdk import __version__
    agent = (
        f'okta-sdk-python/{__version__} '
        f'python/{platform.python_version()} '
        f'{platform.system()}/{platform.release()}'
    )
    if extra:
        agent = f'{extra} {agent}'
    return agent
