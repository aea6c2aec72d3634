from __future__ import annotations

from typing import Any, Dict, Mapping, Optional, Type

import dataclasses
import logging
import threading

from oktasdk.core.config import RawConfig
from oktasdk.core.config import nested
from oktasdk.exceptions import InvalidDiscriminatorConfig
from oktasdk.utils.imports import class_path
from oktasdk.utils.imports import importstr

log = logging.getLogger(__name__)


@dataclasses.dataclass
class Discriminator:
    """Picks a concrete sub-type of `type` by the value of `field`.

    Class references are `module:Name` strings, imported on first use.
    """
    name: str
    type: str
    field: str
    values: Dict[str, str]

    def __post_init__(self):
        self._classes: Dict[str, type] = {}
        self._lock = threading.Lock()

    def resolve(self, requested: type, data: Mapping[str, Any]) -> type:
        if not data or self.field not in data:
            return requested
        value = data[self.field]
        if not isinstance(value, str) or value not in self.values:
            return requested
        return self.load(self.values[value])

    def load(self, path: str) -> type:
        with self._lock:
            if path not in self._classes:
                self._classes[path] = importstr(path)
            return self._classes[path]


class DiscriminatorRegistry:
    """Resolves polymorphic resource classes from response data.

    The table is validated once, when the registry is built. Resolution
    never fails on unknown discriminator values, the requested class is
    returned instead.
    """

    def __init__(self, discriminators: Mapping[str, Mapping[str, Any]]):
        self._by_type: Dict[str, Discriminator] = {}
        for name, params in discriminators.items():
            disc = _load_discriminator(name, params)
            if disc.type in self._by_type:
                raise InvalidDiscriminatorConfig(
                    name=name,
                    reason=f"{disc.type} is already registered",
                )
            self._by_type[disc.type] = disc

    @classmethod
    def from_config(cls, rc: RawConfig) -> DiscriminatorRegistry:
        return cls(nested(rc, 'discriminators'))

    def __len__(self):
        return len(self._by_type)

    def __iter__(self):
        return iter(self._by_type.values())

    def supported_class(self, klass: type) -> bool:
        return class_path(klass) in self._by_type

    def get(self, klass: type) -> Optional[Discriminator]:
        return self._by_type.get(class_path(klass))

    def resolve(self, requested: type, data: Optional[Mapping[str, Any]]) -> type:
        disc = self.get(requested)
        if disc is None:
            return requested
        resolved = disc.resolve(requested, data or {})
        if resolved is not requested:
            log.debug(
                "Resolved %s to %s by %s=%r.",
                requested.__name__,
                resolved.__name__,
                disc.field,
                data.get(disc.field),
            )
        return resolved

    def get_base_class(self, klass: type) -> Optional[Type]:
        """Return the top-most registered base class of klass, if any."""
        for base in reversed(klass.__mro__):
            if class_path(base) in self._by_type:
                return base
        return None


def _load_discriminator(name: str, params: Mapping[str, Any]) -> Discriminator:
    if not isinstance(params, Mapping):
        raise InvalidDiscriminatorConfig(name=name, reason="entry must be a mapping")
    for key in ('type', 'field'):
        value = params.get(key)
        if not value or not isinstance(value, str):
            raise InvalidDiscriminatorConfig(name=name, reason=f"{key!r} is required")
    if ':' not in params['type']:
        raise InvalidDiscriminatorConfig(
            name=name,
            reason="'type' must be given in 'module:Name' form",
        )
    values = params.get('values')
    if not values or not isinstance(values, Mapping):
        raise InvalidDiscriminatorConfig(name=name, reason="'values' must not be empty")
    for value, path in values.items():
        if not isinstance(path, str) or ':' not in path:
            raise InvalidDiscriminatorConfig(
                name=name,
                reason=f"class for {value!r} must be given in 'module:Name' form",
            )
    return Discriminator(
        name=name,
        type=params['type'],
        field=params['field'],
        values=dict(values),
    )

