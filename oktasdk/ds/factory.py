from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Sequence, Type, TypeVar, TYPE_CHECKING

import dataclasses
import importlib.metadata
import inspect
import logging
import threading

from oktasdk.core.config import RawConfig
from oktasdk.ds.discriminator import DiscriminatorRegistry
from oktasdk.exceptions import NoMatchingConstructor
from oktasdk.utils.imports import class_path
from oktasdk.utils.imports import full_class_name
from oktasdk.utils.imports import importstr

if TYPE_CHECKING:
    from oktasdk.ds.store import DataStore
    from oktasdk.resource.base import Resource

log = logging.getLogger(__name__)

R = TypeVar('R', bound='Resource')

ENTRY_POINT_GROUP = 'oktasdk.resource_factory'

IMPL_PACKAGE = 'impl'
IMPL_PREFIX = 'Default'


@dataclasses.dataclass(frozen=True)
class ResourceFactoryConfig:
    """Tells the resource factory where resource implementations live.

    `implementations` maps requested classes to the classes that should be
    instantiated instead, both as `module:Name` strings. Abstract classes
    from `supported_packages` without an explicit implementation are
    mapped by convention: `pkg.users:User` to `pkg.impl.users:DefaultUser`.
    """
    supported_packages: Sequence[str] = ()
    implementations: Mapping[str, str] = dataclasses.field(default_factory=dict)


def load_factory_configs(rc: Optional[RawConfig] = None) -> List[ResourceFactoryConfig]:
    configs = []
    for ep in importlib.metadata.entry_points(group=ENTRY_POINT_GROUP):
        log.debug("Loading resource factory config from %s entry point.", ep.name)
        configs.append(ep.load())
    if rc is not None:
        for path in rc.get('resource_factory', 'configs', cast=list, default=[]):
            config = importstr(path)
            if config not in configs:
                configs.append(config)
    return configs


class ResourceFactory:

    def __init__(
        self,
        data_store: DataStore,
        registry: Optional[DiscriminatorRegistry] = None,
        configs: Iterable[ResourceFactoryConfig] = (),
    ):
        self.data_store = data_store
        self.registry = registry
        self.configs = list(configs)
        self._implementations: Dict[str, str] = {}
        self._packages: List[str] = []
        for config in self.configs:
            self._implementations.update(config.implementations)
            self._packages.extend(config.supported_packages)
        self._resolved: Dict[type, type] = {}
        self._lock = threading.Lock()

    def instantiate(self, klass: Type[R], *args: Any) -> R:
        """Create a resource of klass, or of a more specific class.

        Positional args follow the data store: property map, then query
        parameters (collections only).
        """
        if args and isinstance(args[0], Mapping) and self.registry is not None:
            klass = self.registry.resolve(klass, args[0])
        impl = self.get_implementation(klass)
        arity = len(args) + 1
        arities = getattr(impl, 'constructor_arities', ())
        if arity not in arities:
            raise NoMatchingConstructor(resource=impl.__name__, count=arity)
        return impl(self.data_store, *args)

    def get_implementation(self, klass: type) -> type:
        with self._lock:
            if klass in self._resolved:
                return self._resolved[klass]
        impl = self._find_implementation(klass)
        if impl is not klass:
            log.debug("Using %s for %s.", full_class_name(impl), full_class_name(klass))
        with self._lock:
            self._resolved[klass] = impl
        return impl

    def _find_implementation(self, klass: type) -> type:
        path = class_path(klass)
        if path in self._implementations:
            return importstr(self._implementations[path])
        if inspect.isabstract(klass) and self._is_supported(klass):
            return importstr(to_implementation_path(path))
        return klass

    def _is_supported(self, klass: type) -> bool:
        module = klass.__module__
        return any(
            module == pkg or module.startswith(pkg + '.')
            for pkg in self._packages
        )


def to_implementation_path(path: str) -> str:
    """Convert an interface path to its conventional implementation path.

        >>> to_implementation_path('acme.resources.users:User')
        'acme.resources.impl.users:DefaultUser'

    """
    module, name = path.split(':', 1)
    package, _, leaf = module.rpartition('.')
    if package:
        module = f'{package}.{IMPL_PACKAGE}.{leaf}'
    else:
        module = f'{IMPL_PACKAGE}.{leaf}'
    return f'{module}:{IMPL_PREFIX}{name}'


def to_interface_path(path: str) -> str:
    """Reverse of `to_implementation_path`."""
    module, name = path.split(':', 1)
    parts = module.split('.')
    if IMPL_PACKAGE not in parts:
        return path
    parts.remove(IMPL_PACKAGE)
    if name.startswith(IMPL_PREFIX):
        name = name[len(IMPL_PREFIX):]
    return f"{'.'.join(parts)}:{name}"
