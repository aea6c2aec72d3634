from __future__ import annotations

from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Tuple

import logging
import os
import pathlib

from ruamel.yaml import YAML

from oktasdk.exceptions import ConfigLocked
from oktasdk.exceptions import InvalidArgument
from oktasdk.exceptions import RequiredConfigParam
from oktasdk.utils.imports import importstr

log = logging.getLogger(__name__)

Key = Tuple[str, ...]

ENV_PREFIX = 'OKTA_'
ENV_SEPARATOR = '__'

TRUE_VALUES = {'1', 'true', 'yes', 'on'}

DEFAULTS = 'oktasdk.config:CONFIG'

yaml = YAML(typ='safe')


class _Unset:

    def __repr__(self):
        return '<unset>'

    def __bool__(self):
        return False


UNSET = _Unset()


def read_config(envfile=None, environ=None, home=None) -> RawConfig:
    """Read configuration from all standard locations.

    From lowest to highest precedence: package defaults,
    `~/.okta/okta.yaml`, `./okta.yaml`, `.env` file and environment
    variables.
    """
    home = pathlib.Path(home) if home else pathlib.Path.home()
    sources: List[ConfigSource] = [Path('defaults', DEFAULTS)]
    for path in (home / '.okta' / 'okta.yaml', pathlib.Path('okta.yaml')):
        if path.exists():
            sources.append(Path(str(path), str(path)))
    sources.append(EnvFile('envfile', envfile or '.env'))
    sources.append(EnvVars('envvars', os.environ if environ is None else environ))
    rc = RawConfig()
    rc.read(sources)
    return rc


class ConfigSource:
    """Single layer of configuration.

    Before `read()`, `config` holds whatever the source was given (a dict,
    a path, an environment mapping). After `read()` it is a flat mapping of
    key tuples to values.
    """
    name: str = None

    def __init__(self, name: Optional[str] = None, config: Any = None):
        self.name = name or self.name or type(self).__name__
        self.config = config

    def __str__(self):
        return self.name

    def __repr__(self):
        return f'{type(self).__name__}({self.name!r})'

    def read(self):
        flat: Dict[Key, Any] = {}
        for key, value in (self.config or {}).items():
            key = key if isinstance(key, tuple) else (key,)
            flat.update(flatten(value, key))
        self.config = flat

    def keys(self) -> Iterator[Key]:
        return iter(self.config)

    def get(self, key: Key) -> Any:
        return self.config.get(key, UNSET)


class PyDict(ConfigSource):
    """Python dict, top level keys may be dotted paths (`client.org_url`)."""

    def read(self):
        self.config = {
            tuple(key.split('.')): value
            for key, value in (self.config or {}).items()
        }
        super().read()


class Path(PyDict):
    """YAML file path or `module:NAME` path of a python dict."""

    def read(self):
        if self.config.endswith(('.yml', '.yaml')):
            self.config = yaml.load(pathlib.Path(self.config).read_text()) or {}
        else:
            self.config = dict(importstr(self.config))
        super().read()


class EnvVars(ConfigSource):
    """Environment variables, `OKTA_CLIENT__ORG_URL` becomes `client.org_url`."""
    name = 'envvars'

    def read(self):
        self.config = {
            _env_key(name): value
            for name, value in (self.config or {}).items()
            if name.startswith(ENV_PREFIX)
        }
        super().read()


class EnvFile(EnvVars):
    """`.env` file with `NAME=value` lines, a missing file is empty."""
    name = 'envfile'

    def read(self):
        path = pathlib.Path(self.config)
        self.config = dict(_read_env_file(path)) if path.exists() else {}
        super().read()


def _env_key(name: str) -> Key:
    return tuple(name[len(ENV_PREFIX):].lower().split(ENV_SEPARATOR))


def _read_env_file(path: pathlib.Path) -> Iterator[Tuple[str, str]]:
    with path.open() as f:
        for line in f:
            line = line.strip()
            if not line or line.startswith('#') or '=' not in line:
                continue
            name, value = line.split('=', 1)
            yield name.strip(), value.strip()


class RawConfig:
    """Layered configuration.

    Holds an ordered list of sources, a key is looked up from the last
    source to the first. Keys are tuples of names, `rc.get('client',
    'org_url')` reads `client.org_url`.
    """

    def __init__(self, sources: Optional[List[ConfigSource]] = None):
        self.sources: List[ConfigSource] = list(sources or [])
        self._locked = False
        self._children: Dict[Key, List[str]] = _index(self.sources)

    def __repr__(self):
        return f"<{type(self).__name__} {', '.join(self.get_source_names())}>"

    def read(self, sources: List[ConfigSource], after: Optional[str] = None):
        if self._locked:
            raise ConfigLocked()
        for source in sources:
            log.debug("Reading config from %s.", source.name)
            source.read()
        if after is None:
            self.sources.extend(sources)
        else:
            names = self.get_source_names()
            if after not in names:
                raise InvalidArgument(reason=f"there is no {after!r} config source")
            pos = names.index(after) + 1
            self.sources[pos:pos] = sources
        self._children = _index(self.sources)

    def add(self, name: str, params: Mapping[str, Any]) -> RawConfig:
        self.read([PyDict(name, params)])
        return self

    def fork(self, sources=None, after: Optional[str] = None) -> RawConfig:
        """Return an unlocked copy with extra sources on top."""
        rc = RawConfig(self.sources)
        if isinstance(sources, Mapping):
            rc.add('fork', sources)
        elif sources:
            rc.read(sources, after)
        return rc

    def lock(self):
        self._locked = True

    def get_source_names(self) -> List[str]:
        return [source.name for source in self.sources]

    def has(self, *key: str) -> bool:
        return self._lookup(key)[0] is not UNSET

    def get(
        self,
        *key: str,
        default: Any = None,
        cast=None,
        required: bool = False,
        origin: bool = False,
    ) -> Any:
        value, source = self._lookup(key)
        if value is UNSET:
            value = default
        elif cast is not None and value is not None:
            value = _cast(value, cast)
        if required and value is None:
            raise RequiredConfigParam(name='.'.join(key))
        if origin:
            return value, source.name if source else ''
        return value

    def keys(self, *key: str, origin: bool = False):
        names = list(self._children.get(key, []))
        if not origin:
            return names
        source = next((
            s.name
            for s in reversed(self.sources)
            if any(k[:len(key)] == key for k in s.keys())
        ), '')
        return names, source

    def getall(self, *key: str, origin: bool = False) -> Iterator[tuple]:
        """Yield `(key, value)` (plus source name) for every leaf under key."""
        children = self.keys(*key)
        if not children:
            found = self.get(*key, origin=origin)
            yield (key,) + (found if origin else (found,))
            return
        for name in children:
            yield from self.getall(*key, name, origin=origin)

    def to_dict(self, *key: str) -> Dict[str, Any]:
        return {
            '.'.join(leaf[len(key):]): value
            for leaf, value in self.getall(*key)
        }

    def _lookup(self, key: Key) -> Tuple[Any, Optional[ConfigSource]]:
        for source in reversed(self.sources):
            value = source.get(key)
            if value is not UNSET:
                return value, source
        return UNSET, None


def _cast(value: Any, cast) -> Any:
    if isinstance(value, str):
        if cast is bool:
            return value.strip().lower() in TRUE_VALUES
        if cast is list:
            return [v.strip() for v in value.split(',') if v.strip()]
    elif not isinstance(cast, type):
        # Loaders like `importstr` only apply to strings, overrides may
        # already hold the loaded object.
        return value
    return cast(value)


def flatten(value: Any, prefix: Key = ()) -> Iterator[Tuple[Key, Any]]:
    """Flatten nested dicts into `(key, value)` pairs.

        >>> dict(flatten({'cache': {'enabled': True}}, ('client',)))
        {('client', 'cache', 'enabled'): True}

    """
    if isinstance(value, Mapping):
        for name, nested_value in value.items():
            yield from flatten(nested_value, prefix + (name,))
    else:
        yield prefix, value


def _index(sources: Iterable[ConfigSource]) -> Dict[Key, List[str]]:
    # Maps every key prefix to its child names, in first-seen order, so
    # `rc.keys('client')` lists the keys nested under `client`.
    children: Dict[Key, List[str]] = {}
    for source in sources:
        for key in source.keys():
            for i, name in enumerate(key):
                names = children.setdefault(key[:i], [])
                if name not in names:
                    names.append(name)
    return children


def nested(rc: RawConfig, *key: str) -> Dict[str, Any]:
    """Read a config subtree back into nested dicts."""
    result = {}
    for name in rc.keys(*key):
        if rc.keys(*key, name):
            result[name] = nested(rc, *key, name)
        else:
            result[name] = rc.get(*key, name)
    return result
